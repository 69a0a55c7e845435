"""
Interview data model - a meeting tied to one (job, applicant) pair
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class InterviewStatus(str, Enum):
    """Lifecycle of an interview record"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Interview(BaseModel):
    """
    Represents an interview. Cancellation is a soft delete: the record stays
    with ``status == cancelled`` and can be reactivated by a reschedule.
    """
    id: str = Field(..., description="Interview ID")
    job_id: str = Field(..., description="Reference to Job")
    applicant_id: str = Field(..., description="Reference to Applicant")
    application_id: Optional[str] = None

    date: datetime
    notes: str = ""
    status: InterviewStatus = Field(default=InterviewStatus.SCHEDULED)
    is_reschedule: bool = False
    shared_link: Optional[str] = None

    class Config:
        use_enum_values = True

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return InterviewStatus.SCHEDULED
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> str:
        return "" if value is None else value

    @property
    def is_active(self) -> bool:
        """Anything not cancelled counts as active"""
        return self.status != InterviewStatus.CANCELLED.value

    @property
    def pair(self) -> tuple[str, str]:
        return (self.job_id, self.applicant_id)

    def __str__(self) -> str:
        return f"Interview {self.id} on {self.date:%Y-%m-%d %H:%M} [{self.status}]"
