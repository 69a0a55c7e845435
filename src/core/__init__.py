"""
Core models package
"""

from src.core.job import Job, SalaryRange
from src.core.applicant import Applicant
from src.core.application import Application, ApplicationStatus
from src.core.interview import Interview, InterviewStatus
from src.core.results import BulkOutcome, BulkResult, ErrorKind, OperationResult

__all__ = [
    "Job",
    "SalaryRange",
    "Applicant",
    "Application",
    "ApplicationStatus",
    "Interview",
    "InterviewStatus",
    "BulkOutcome",
    "BulkResult",
    "ErrorKind",
    "OperationResult",
]
