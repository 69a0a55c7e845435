"""
Job data model - a posting owned by the employer
"""

from typing import Optional
from pydantic import BaseModel, Field


class SalaryRange(BaseModel):
    """Advertised salary band"""
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"

    @property
    def sort_value(self) -> float:
        """Value used for salary ordering: max, else min, else 0"""
        if self.max is not None:
            return self.max
        if self.min is not None:
            return self.min
        return 0.0


class Job(BaseModel):
    """
    Represents a job posting. Created and destroyed by the job-management
    side of the product; the pipeline only reads it.
    """
    id: str = Field(..., description="Job ID")
    title: str = Field(default="", description="Job title")
    company_id: Optional[str] = Field(default=None, description="Owning company")
    company_name: str = Field(default="", description="Owning company display name")
    location: str = ""
    salary: Optional[SalaryRange] = None

    # Denormalized counter maintained by the backend
    application_count: int = 0

    def __str__(self) -> str:
        return f"{self.title} ({self.id})"

    def __repr__(self) -> str:
        return f"Job(id='{self.id}', title='{self.title}')"

    @property
    def salary_value(self) -> float:
        return self.salary.sort_value if self.salary else 0.0
