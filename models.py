# Standard library imports
from typing import List, Literal, Optional

# Third-party imports
from pydantic import BaseModel, ConfigDict, Field

# Local imports
from utils import format_plan_date

SaveStatus = Literal["idle", "saving", "saved"]

# --------------------------------------------------------------------------
# Employment Plan Data Models
# --------------------------------------------------------------------------

DEFAULT_REQUIREMENTS = [
    "Degree in procurement or supply chain management",
    "Experience with supplier management",
    "Compliance knowledge",
    "Strong reporting skills",
]

DEFAULT_JOB_OPTIONS = ["Procurement Officer", "Supply Chain Analyst", "Logistics Coordinator"]


class PlanRecord(BaseModel):
    """Everything the planner form edits and the printed document shows."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field("Joel", alias="firstName")
    last_name: str = Field("[YourLastname]", alias="lastName")
    field: str = "Supply chain and logistics"
    position: str = "Procurement Officer"
    company: str = "Startup Lions"
    company_url: str = Field("https://startuplions.org", alias="companyUrl")
    requirements: List[str] = Field(default_factory=lambda: list(DEFAULT_REQUIREMENTS))
    location: str = "Nairobi, Kenya"
    reason: str = "they focus on sustainable development and innovation, which aligns with my career goals"
    job_options: List[str] = Field(default_factory=lambda: list(DEFAULT_JOB_OPTIONS), alias="jobOptions")
    selected_job_option: str = Field("Procurement Officer", alias="selectedJobOption")
    signature_data: Optional[str] = Field(None, alias="signatureData")
    date: str = Field(default_factory=format_plan_date)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def job_option_choices(self) -> List[str]:
        """Options for the job title dropdown; falls back to the current selection."""
        if self.job_options:
            return list(self.job_options)
        return [self.selected_job_option]


class EmploymentSuggestions(BaseModel):
    """Auto-fill content generated from a single field of interest."""
    model_config = ConfigDict(populate_by_name=True)

    job_titles: List[str] = Field(..., alias="jobTitles", min_length=1, description="List of 3 job titles.")
    company_url: str = Field(..., alias="companyUrl", description="A valid website URL of a company in this field.")
    requirements: List[str] = Field(..., description="List of 5 requirements.")
