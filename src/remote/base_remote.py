"""
Base remote class - abstract interface to the hiring backend
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.core.application import Application
from src.core.interview import Interview


class RemoteError(Exception):
    """
    Raised by a remote when a call fails at the transport or server level.
    ``message`` is the server-provided text when one was returned.
    """

    def __init__(self, message: str = "", status_code: Optional[int] = None):
        super().__init__(message or "remote call failed")
        self.message = message
        self.status_code = status_code


class ScheduleRequest(BaseModel):
    """Payload for creating or rescheduling an interview"""
    job_id: str
    applicant_id: str
    application_id: str
    date: datetime
    notes: str = ""
    company_id: Optional[str] = None
    request_shared_link: bool = True


class ScheduleReceipt(BaseModel):
    """What the backend reports after scheduling"""
    shared_link: Optional[str] = None
    location: Optional[str] = None
    is_reschedule: bool = False
    interview_id: Optional[str] = None


class BaseRemote(ABC):
    """
    Abstract base class for the backend boundary.
    Concrete remotes raise ``RemoteError`` on any failure.
    """

    SERVICE_NAME = "Base"

    @abstractmethod
    async def list_applications(self, job_id: Optional[str] = None) -> list[Application]:
        """
        List applications.

        Args:
            job_id: Restrict to one job; ``None`` returns the whole pipeline

        Returns:
            List of Application objects
        """
        pass

    @abstractmethod
    async def list_interviews(self, job_id: str) -> list[Interview]:
        """List every interview record (cancelled included) for a job"""
        pass

    @abstractmethod
    async def set_application_status(self, application_id: str, status: str) -> None:
        pass

    @abstractmethod
    async def schedule_interview(self, request: ScheduleRequest) -> ScheduleReceipt:
        """
        Create an interview, or update the pair's existing record in place.
        The backend allocates the shared meeting link and sends notifications.
        """
        pass

    @abstractmethod
    async def cancel_interview(self, interview_id: str) -> None:
        pass

    async def close(self) -> None:
        """Release any underlying connections"""
        pass
