"""
Application data model - a candidate's submission against a job
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from src.core.applicant import Applicant
from src.core.job import Job


class ApplicationStatus(str, Enum):
    """Status of an application in the hiring pipeline"""
    PENDING = "pending"
    INTERVIEWED = "interviewed"    # set by the backend, never by the pipeline
    HIRED = "hired"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value) -> "ApplicationStatus":
        """Accept a member or a case-insensitive value"""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class Application(BaseModel):
    """
    Represents one application, linking an Applicant to a Job.

    ``job`` is the denormalized job object the backend embeds; it can be
    missing from refresh payloads, in which case the reconciliation step
    restores it from what was already known locally.
    """
    # Identifiers
    id: str = Field(..., description="Application ID")
    job_id: Optional[str] = Field(default=None, description="Reference to Job")

    # Job details (denormalized)
    job: Optional[Job] = None

    applicant: Applicant = Field(default_factory=Applicant)
    cover_letter: str = ""

    # Status
    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING)

    # Timestamps
    created_at: Optional[datetime] = None
    applied_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        use_enum_values = True

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return ApplicationStatus.PENDING
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("cover_letter", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> str:
        return "" if value is None else value

    @property
    def applicant_id(self) -> Optional[str]:
        return self.applicant.id

    @property
    def effective_job_id(self) -> Optional[str]:
        """Job id from the explicit reference, else from the embedded job"""
        if self.job_id:
            return self.job_id
        if self.job is not None:
            return self.job.id
        return None

    @property
    def job_title(self) -> str:
        return self.job.title if self.job else ""

    @property
    def company_name(self) -> str:
        return self.job.company_name if self.job else ""

    @property
    def recency(self) -> Optional[datetime]:
        """Timestamp used for recency ordering"""
        return self.applied_at or self.created_at or self.updated_at

    def with_status(self, status: ApplicationStatus | str) -> "Application":
        """Return a copy carrying ``status``; the original is left untouched"""
        return self.model_copy(update={"status": ApplicationStatus.parse(status).value})

    def to_summary(self) -> dict:
        """Return a summary for tables and logs"""
        return {
            "id": self.id,
            "job_title": self.job_title,
            "applicant": self.applicant.name,
            "email": self.applicant.email,
            "status": self.status,
        }

    def __str__(self) -> str:
        return f"Application {self.id} by {self.applicant.name or 'unknown'} [{self.status}]"
