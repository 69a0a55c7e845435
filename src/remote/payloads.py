"""
Payload parsing - converts backend JSON documents into core models.

The backend sends references either as bare ids or as embedded documents
(``jobId`` and ``userId`` are populated on some endpoints and not on others),
and uses ``_id`` for identifiers. Everything is normalized here.
"""

from typing import Any, Optional

from src.core.applicant import Applicant
from src.core.application import Application
from src.core.interview import Interview
from src.core.job import Job, SalaryRange


def ref_id(value: Any) -> Optional[str]:
    """Id of a reference that may be a bare id or an embedded document"""
    if value is None:
        return None
    if isinstance(value, dict):
        inner = value.get("_id") or value.get("id")
        return str(inner) if inner else None
    text = str(value).strip()
    return text or None


def parse_job(raw: Any) -> Optional[Job]:
    """Build a Job from an embedded job document; bare ids yield ``None``"""
    if not isinstance(raw, dict):
        return None
    job_id = ref_id(raw)
    if not job_id:
        return None

    salary = raw.get("salary")
    company = raw.get("companyId") or raw.get("company")
    company_name = raw.get("companyName") or ""
    if isinstance(company, dict):
        company_name = company_name or company.get("name") or company.get("companyName") or ""

    return Job(
        id=job_id,
        title=raw.get("jobTitle") or raw.get("title") or "",
        company_id=ref_id(company),
        company_name=company_name,
        location=raw.get("location") or "",
        salary=SalaryRange(**{k: salary.get(k) for k in ("min", "max") if salary.get(k) is not None})
        if isinstance(salary, dict) else None,
        application_count=raw.get("applicationCount") or 0,
    )


def parse_applicant(raw: Any) -> Applicant:
    if not isinstance(raw, dict):
        return Applicant(id=ref_id(raw))
    return Applicant(
        id=ref_id(raw),
        name=raw.get("name"),
        email=raw.get("email"),
        phone=raw.get("phone"),
        title=raw.get("title"),
        location=raw.get("location"),
        skills=raw.get("skills"),
        resume=raw.get("resume"),
    )


def parse_application(raw: dict) -> Application:
    applicant = parse_applicant(raw.get("userId") or raw.get("user"))
    # resume can live on the application instead of the profile
    if not applicant.resume and raw.get("resume"):
        applicant = applicant.model_copy(update={"resume": raw["resume"]})

    return Application(
        id=ref_id(raw),
        job_id=ref_id(raw.get("jobId")),
        job=parse_job(raw.get("jobId")),
        applicant=applicant,
        cover_letter=raw.get("coverLetter"),
        status=raw.get("status"),
        created_at=raw.get("createdAt"),
        applied_at=raw.get("appliedAt"),
        updated_at=raw.get("updatedAt"),
    )


def parse_interview(raw: dict) -> Interview:
    return Interview(
        id=ref_id(raw),
        job_id=ref_id(raw.get("jobId")),
        applicant_id=ref_id(raw.get("userId")),
        application_id=ref_id(raw.get("applicationId")),
        date=raw.get("date"),
        notes=raw.get("notes"),
        status=raw.get("status"),
        is_reschedule=bool(raw.get("isReschedule")),
        shared_link=raw.get("sharedLink"),
    )


def error_message(body: Any) -> str:
    """Server-provided message from an error body, if any"""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return ""
