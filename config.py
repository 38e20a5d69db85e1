# Configuration constants

CONFIG = {
    "data_dir": "./data",
    "storage_path": "./data/local_storage.json",
    "storage_key": "employment_plan_pro_data",
    "export_dir": "./data/exports",
    "openai_model": "gpt-4o",
    "openai_parameters": {"max_tokens": 1024, "temperature": 0.2},
    "save_status_delay_seconds": 0.6,
    "signature": {
        "width": 400,
        "height": 150,
        "stroke_width": 2,
        "stroke_color": (0, 0, 0, 255),
    },
    "document": {
        "template_path": "./data/plan_assets/plan_template.html",
        "css_path": "./data/plan_assets/plan_styles.css",
        "app_title": "Employment Plan Builder",
        "layout": {
            "margin": "1in",
            "page_titles": ["My Folder", "Employment Considerations", "My Future Employment"]
        }
    }
}

# --------------------------------------------------------------------------
# Employment Plan Prompts
# --------------------------------------------------------------------------

SUGGESTION_SYSTEM_PROMPT = (
    "You are a career advisor helping a student fill in an employment plan. "
    "Answer with realistic, entry-level friendly suggestions. "
    "Your output must be a structured JSON object that conforms to the `EmploymentSuggestions` model."
)

SUGGESTION_PROMPT = (
    "Provide 3 specific job titles, a typical hiring company website URL, "
    "and 5 key requirements for a person interested in: {interest}."
)

MISSING_INTEREST_NOTICE = "Please enter a field of interest first (e.g., Software Engineering)"
SUGGESTION_FAILED_NOTICE = "AI was unable to generate suggestions."
