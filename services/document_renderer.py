"""
Document rendering service - turns a PlanRecord into the three-page printable plan
"""

import os
from typing import Any, Dict, Optional
from jinja2 import Environment, FileSystemLoader, select_autoescape

# Local imports
from models import PlanRecord
from utils import ensure_directory_exists, join_requirements, sanitize_for_path
from services.signature_pad import decode_data_url

BLANKS = {
    "selected_job_option": "___________",
    "field": "_____________",
    "location": "_____________",
    "company": "______________________",
    "reason": "____________________",
}


def document_filename(record: PlanRecord) -> str:
    """Base name used for the exported document, e.g. Employment_Plan_Joel_Smith."""
    first = sanitize_for_path(record.first_name, max_len=30)
    last = sanitize_for_path(record.last_name, max_len=30)
    return f"Employment_Plan_{first}_{last}"


def build_document_context(record: PlanRecord, document_config: dict) -> Dict[str, Any]:
    """
    Computes everything the document template prints. Empty answers on the final
    page print as blank lines so the printed form can still be filled in by hand.
    """
    future = {}
    for name, blank in BLANKS.items():
        value = getattr(record, name)
        text = "" if value is None else str(value)
        future[name] = text if text.strip() else blank

    layout = document_config.get("layout", {})
    return {
        "plan": record,
        "app_title": document_config.get("app_title", "Employment Plan Builder"),
        "page_titles": layout.get("page_titles", ["My Folder", "Employment Considerations", "My Future Employment"]),
        "margin": layout.get("margin", "1in"),
        "full_name": record.full_name,
        "document_name": document_filename(record),
        "folder_label": f"Google Doc Task[{record.first_name}_{record.last_name}]",
        "seek_sentence": f"I would like to seek employment as a {record.selected_job_option} in the {record.field} field.",
        "requirements_text": join_requirements(record.requirements or []),
        "future": future,
        "signature_src": _usable_signature(record.signature_data),
        "date": record.date,
    }


def render_document_html(record: PlanRecord, document_config: dict, inline_css: bool = True) -> str:
    """Renders the document template; the stylesheet is inlined unless the caller applies it."""
    template_dir = os.path.dirname(document_config["template_path"])
    template_name = os.path.basename(document_config["template_path"])

    env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))
    template = env.get_template(template_name)

    context = build_document_context(record, document_config)
    context["stylesheet"] = _read_stylesheet(document_config) if inline_css else None
    return template.render(**context)


def generate_pdf(record: PlanRecord, output_dir: str, document_config: dict) -> str:
    """
    Renders the plan and writes both the HTML and the PDF into `output_dir`.
    Returns the PDF path.
    """
    print("\n=== Exporting Employment Plan ===")
    ensure_directory_exists(output_dir)

    html_content = render_document_html(record, document_config, inline_css=False)
    base_name = document_filename(record)

    html_output_path = os.path.join(output_dir, f"{base_name}.html")
    with open(html_output_path, "w", encoding="utf-8") as f:
        f.write(html_content)

    pdf_output_path = os.path.join(output_dir, f"{base_name}.pdf")
    _create_pdf_from_html(html_content, pdf_output_path, document_config)

    print(f"📄 PDF generated successfully: {pdf_output_path}")
    return pdf_output_path


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _usable_signature(signature_data: Optional[str]) -> Optional[str]:
    if not signature_data:
        return None
    try:
        decode_data_url(signature_data)
    except ValueError:
        print("⚠️ Stored signature is not a valid image, printing the blank signature line instead.")
        return None
    return signature_data


def _read_stylesheet(document_config: dict) -> str:
    css_path = document_config.get("css_path")
    if not css_path or not os.path.exists(css_path):
        return ""
    with open(css_path, "r", encoding="utf-8") as f:
        return f.read()


def _create_pdf_from_html(html_content: str, pdf_output_path: str, document_config: dict) -> None:
    # WeasyPrint needs native Pango libraries; only load it when a PDF is requested.
    from weasyprint import HTML as WeasyHTML, CSS as WeasyCSS

    try:
        template_dir = os.path.dirname(document_config["template_path"])
        html_doc = WeasyHTML(string=html_content, base_url=template_dir)
        css_doc = WeasyCSS(filename=document_config["css_path"])
        html_doc.write_pdf(pdf_output_path, stylesheets=[css_doc])
    except Exception as e:
        error_msg = f"❌ Error creating PDF: {str(e)}"
        print(error_msg)
        raise ValueError(error_msg) from e
