"""
Suggestion service - auto-fills job titles, a company URL and requirements from a field of interest
"""

from dataclasses import dataclass
from typing import Optional
from openai import OpenAI

# Local imports
from models import EmploymentSuggestions
from config import (
    SUGGESTION_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    MISSING_INTEREST_NOTICE,
    SUGGESTION_FAILED_NOTICE,
)


class SuggestionError(Exception):
    """The suggestion service could not produce usable suggestions."""


@dataclass
class SuggestionOutcome:
    applied: bool
    notice: Optional[str] = None


def generate_employment_suggestions(interest: str, client: OpenAI, model_name: str, api_parameters: Optional[dict] = None) -> EmploymentSuggestions:
    """
    Asks the model for 3 job titles, a hiring company URL and 5 requirements.
    `client` must be instructor-patched so `response_model` is honoured.
    """
    try:
        print(f"🤖 Generating employment suggestions for: {interest}")

        response = client.chat.completions.create(
            model=model_name,
            response_model=EmploymentSuggestions,
            messages=[
                {
                    "role": "system",
                    "content": SUGGESTION_SYSTEM_PROMPT
                },
                {
                    "role": "user",
                    "content": SUGGESTION_PROMPT.format(interest=interest)
                }
            ],
            **(api_parameters or {})
        )

    except Exception as e:
        print(f"❌ Error during suggestion generation: {str(e)}")
        raise SuggestionError(str(e)) from e

    if not isinstance(response, EmploymentSuggestions):
        raise SuggestionError(f"Unexpected response type: {type(response).__name__}")

    print("✅ Suggestions generated successfully.")
    return response


def auto_fill_suggestions(store, client: OpenAI, model_name: str, api_parameters: Optional[dict] = None) -> SuggestionOutcome:
    """
    Fills job options, the selected job, company URL and requirements on `store`
    from its current field of interest. Nothing on the record changes unless the
    whole suggestion arrived.
    """
    interest = (store.record.field or "").strip()
    if not interest:
        return SuggestionOutcome(applied=False, notice=MISSING_INTEREST_NOTICE)

    try:
        suggestions = generate_employment_suggestions(interest, client, model_name, api_parameters)
    except SuggestionError:
        return SuggestionOutcome(applied=False, notice=SUGGESTION_FAILED_NOTICE)

    store.set_fields({
        "job_options": list(suggestions.job_titles),
        "selected_job_option": suggestions.job_titles[0],
        "company_url": suggestions.company_url,
        "requirements": list(suggestions.requirements),
    })
    return SuggestionOutcome(applied=True)
