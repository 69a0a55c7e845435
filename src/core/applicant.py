"""
Applicant data model - the candidate behind an application
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class Applicant(BaseModel):
    """
    Candidate profile as embedded in an application payload.

    Skills arrive either as plain strings or as ``{"name": ...}`` records;
    both shapes are normalized to a list of names on construction so every
    consumer sees one form.
    """
    id: Optional[str] = Field(default=None, description="Applicant (user) ID")
    name: str = ""
    email: str = ""
    phone: str = ""
    title: str = ""
    location: str = ""
    skills: list[str] = Field(default_factory=list)
    resume: Optional[str] = Field(default=None, description="Resume path or URL")

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (str, dict)):
            value = [value]
        names = []
        for item in value:
            if isinstance(item, dict):
                name = item.get("name")
            else:
                name = item
            if name:
                names.append(str(name).strip())
        return [n for n in names if n]

    @field_validator("name", "email", "phone", "title", "location", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def skills_text(self) -> str:
        """Skills joined the way exports show them"""
        return "; ".join(self.skills)

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>" if self.email else self.name
