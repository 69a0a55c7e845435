"""
CSV export - flattens applications (with job and applicant context) into a
spreadsheet-safe text file.
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from src.core.application import Application
from src.core.job import Job
from src.utils.logger import logger

# Column order for the output CSV
COLUMNS = [
    "Name",
    "Email",
    "Phone",
    "Title",
    "Location",
    "Skills",
    "Cover Letter",
    "Resume Link",
    "Status",
    "Applied Date",
    "Job Title",
]

MISSING = "N/A"
# leading apostrophe makes spreadsheet tools keep long digit strings as text
PHONE_TEXT_MARKER = "'"
# rows end in CRLF; a bare CR or LF inside a field forces quoting
ROW_END = "\r\n"


def _cell(value: Any) -> str:
    if value is None or value == "":
        return MISSING
    return str(value)


def resume_link(resume: Optional[str], origin: str = "") -> Optional[str]:
    """Absolute resume URL; root-relative paths are joined to ``origin``"""
    if not resume:
        return None
    if resume.startswith(("http://", "https://")):
        return resume
    if resume.startswith("/") and origin:
        return origin.rstrip("/") + resume
    return resume


def application_to_row(
    application: Application,
    origin: str = "",
    jobs: Optional[Mapping[str, Job]] = None,
) -> list[str]:
    applicant = application.applicant
    job_title = application.job_title
    if not job_title and jobs:
        job = jobs.get(application.effective_job_id or "")
        job_title = job.title if job else ""
    applied = application.created_at or application.applied_at
    return [
        _cell(applicant.name),
        _cell(applicant.email),
        PHONE_TEXT_MARKER + applicant.phone if applicant.phone else MISSING,
        _cell(applicant.title),
        _cell(applicant.location),
        _cell(applicant.skills_text),
        _cell(application.cover_letter),
        _cell(resume_link(applicant.resume, origin)),
        _cell(application.status or "pending"),
        _cell(applied.date().isoformat() if applied else None),
        _cell(job_title),
    ]


def to_delimited_text(
    applications: Iterable[Application],
    origin: str = "",
    jobs: Optional[Mapping[str, Job]] = None,
) -> str:
    """
    Render applications as CSV text. Fields holding a comma, a quote, a
    carriage return or a line feed are quoted with inner quotes doubled;
    everything else is written as-is. Output depends only on the input.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=ROW_END)
    writer.writerow(COLUMNS)
    for application in applications:
        writer.writerow(application_to_row(application, origin, jobs))
    return buffer.getvalue()[:-len(ROW_END)]


def export_filename(scope: Optional[str] = None, today: Optional[date] = None) -> str:
    """``applications_<scope>_<YYYY-MM-DD>.csv``; scope is ``all`` or a job id"""
    today = today or date.today()
    return f"applications_{scope or 'all'}_{today.isoformat()}.csv"


def write_export(
    applications: list[Application],
    directory: str | Path,
    scope: Optional[str] = None,
    origin: str = "",
    jobs: Optional[Mapping[str, Job]] = None,
    today: Optional[date] = None,
) -> Path:
    """Write the CSV export and return its path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / export_filename(scope, today)
    with open(out, "w", newline="", encoding="utf-8") as f:
        f.write(to_delimited_text(applications, origin, jobs))
        f.write(ROW_END)
    logger.info(f"Wrote {len(applications)} applications to {out}")
    return out
