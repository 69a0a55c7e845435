"""
Interview scheduler - schedule, reschedule and cancel interviews.

Per (job, applicant) pair the lifecycle is::

    NONE -> SCHEDULED -> COMPLETED
                      -> CANCELLED -> SCHEDULED (reschedule, same record)

Nothing here mutates the store optimistically. Local validation runs
before any remote call, and the store only changes after the server has
confirmed and the affected buckets have been reloaded.
"""

import asyncio
import inspect
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel

from src.core.application import Application
from src.core.job import Job
from src.core.results import ErrorKind, OperationResult
from src.notifier.base_notifier import BaseNotifier, NullNotifier
from src.pipeline.indexer import Indexer
from src.pipeline.loader import PipelineLoader
from src.pipeline.store import SnapshotStore
from src.remote.base_remote import BaseRemote, RemoteError, ScheduleReceipt, ScheduleRequest
from src.utils.config import get_settings
from src.utils.logger import logger

CANCEL_FAILED_MESSAGE = "Failed to cancel interview. Please try again."
SCHEDULE_FAILED_MESSAGE = "An error occurred"

MISSING_FIELD_MESSAGES = {
    "applicant_id": "Invalid user data - User ID is missing",
    "job_id": "Invalid job data - Job ID is missing",
    "application_id": "Invalid application data - Application ID is missing",
}

ClipboardSink = Callable[[str], Union[None, Awaitable[None]]]


class ScheduleDraft(BaseModel):
    """Editable state of the schedule form"""
    application_id: Optional[str] = None
    job_id: Optional[str] = None
    applicant_id: Optional[str] = None
    company_id: Optional[str] = None
    date: datetime
    notes: str = ""
    is_reschedule: bool = False
    interview_id: Optional[str] = None


@dataclass
class ScheduleConfirmation:
    """Success payload of ``confirm_schedule``"""
    receipt: ScheduleReceipt
    message: str
    link_copied: bool = False
    close_handle: Optional[asyncio.TimerHandle] = None


def _aware(value: datetime) -> datetime:
    """Naive datetimes are read as local time"""
    return value if value.tzinfo is not None else value.astimezone()


class InterviewScheduler:
    def __init__(
        self,
        remote: BaseRemote,
        store: SnapshotStore,
        indexer: Indexer,
        loader: PipelineLoader,
        notifier: BaseNotifier = None,
        clipboard: Optional[ClipboardSink] = None,
        on_close: Optional[Callable[[], Any]] = None,
    ):
        settings = get_settings()
        self.remote = remote
        self.store = store
        self.indexer = indexer
        self.loader = loader
        self.notifier = notifier or NullNotifier()
        self.clipboard = clipboard
        self.on_close = on_close
        self.notes_max_length = settings.pipeline.notes_max_length
        self.close_grace = settings.pipeline.schedule_close_grace

    def open_schedule(self, application: Application, job_id: Union[str, Job, None]) -> OperationResult:
        """
        Build a draft for the schedule form. An active interview for the
        pair seeds the draft and turns it into a reschedule.
        """
        if isinstance(job_id, Job):
            job_id = job_id.id
        applicant_id = application.applicant_id if application is not None else None

        if application is None or not job_id:
            return OperationResult.failure(
                ErrorKind.INVALID_REFERENCE, "Cannot schedule: Invalid application or job data"
            )
        if not applicant_id:
            return OperationResult.failure(
                ErrorKind.INVALID_REFERENCE, "Cannot schedule: Invalid user data"
            )

        job = self.store.get_job(job_id) or application.job
        draft = ScheduleDraft(
            application_id=application.id,
            job_id=job_id,
            applicant_id=applicant_id,
            company_id=job.company_id if job else None,
            date=datetime.now(),
        )

        existing = self.indexer.interview_for_pair(job_id, applicant_id)
        if existing is not None:
            draft.date = existing.date
            draft.notes = existing.notes
            draft.is_reschedule = True
            draft.interview_id = existing.id
        else:
            previous = self.indexer.latest_for_pair(job_id, applicant_id)
            if previous is not None:
                # cancelled record: the backend reactivates it in place
                draft.is_reschedule = True
                draft.interview_id = previous.id

        logger.info(
            f"Opened {'reschedule' if draft.is_reschedule else 'schedule'} draft "
            f"for applicant {applicant_id} on job {job_id}"
        )
        return OperationResult.success(data=draft)

    def validate(self, draft: ScheduleDraft, now: Optional[datetime] = None) -> Optional[OperationResult]:
        """Local checks; returns the failure result or ``None`` when valid"""
        now = now or datetime.now(timezone.utc)
        if _aware(draft.date) <= _aware(now):
            return OperationResult.failure(
                ErrorKind.INVALID_DATE, "Please select a date and time in the future", field="date"
            )

        if len(draft.notes or "") > self.notes_max_length:
            return OperationResult.failure(
                ErrorKind.SCHEDULE_FAILED,
                f"Notes must be {self.notes_max_length} characters or fewer "
                f"(currently {len(draft.notes)})",
                field="notes",
            )

        for field_name in ("applicant_id", "job_id", "application_id"):
            if not getattr(draft, field_name):
                return OperationResult.failure(
                    ErrorKind.MISSING_IDENTIFIERS, MISSING_FIELD_MESSAGES[field_name], field=field_name
                )
        return None

    async def _copy_link(self, link: str) -> bool:
        if self.clipboard is None:
            return False
        try:
            outcome = self.clipboard(link)
            if inspect.isawaitable(outcome):
                await outcome
            return True
        except Exception as e:
            logger.warning(f"Could not copy shared link: {e}")
            return False

    async def _reconcile(self, job_id: str) -> None:
        await self.loader.refresh_interviews(job_id)
        await self.loader.reconcile_all()

    def _schedule_close(self) -> Optional[asyncio.TimerHandle]:
        if self.on_close is None:
            return None
        loop = asyncio.get_running_loop()
        return loop.call_later(self.close_grace, self.on_close)

    async def confirm_schedule(self, draft: ScheduleDraft, now: Optional[datetime] = None) -> OperationResult:
        """Validate and persist a draft, then reload the job's interviews"""
        invalid = self.validate(draft, now)
        if invalid is not None:
            logger.warning(f"Schedule rejected locally: {invalid.message}")
            return invalid

        verb = "reschedule" if draft.is_reschedule else "schedule"
        request = ScheduleRequest(
            job_id=draft.job_id,
            applicant_id=draft.applicant_id,
            application_id=draft.application_id,
            date=draft.date,
            notes=draft.notes or "",
            company_id=draft.company_id,
            request_shared_link=True,
        )

        try:
            receipt = await self.remote.schedule_interview(request)
        except RemoteError as e:
            message = f"Failed to {verb} interview: {e.message or SCHEDULE_FAILED_MESSAGE}"
            logger.error(message)
            await self.notifier.notify_error(message)
            return OperationResult.failure(ErrorKind.SCHEDULE_FAILED, message)

        link = receipt.shared_link or receipt.location
        copied = False
        if link:
            copied = await self._copy_link(link)
            if copied:
                message = "Interview scheduled. Shared link copied to clipboard."
            else:
                message = "Interview scheduled. Shared link available in email."
        elif receipt.is_reschedule or draft.is_reschedule:
            message = "Interview rescheduled successfully."
        else:
            message = "Interview scheduled successfully."

        logger.info(f"Interview {verb}d for applicant {draft.applicant_id} on job {draft.job_id}")
        await self._reconcile(draft.job_id)
        await self.notifier.notify_success(message)

        return OperationResult.success(
            message,
            data=ScheduleConfirmation(
                receipt=receipt,
                message=message,
                link_copied=copied,
                close_handle=self._schedule_close(),
            ),
        )

    async def cancel_interview(self, interview_id: str, job_id: str) -> OperationResult:
        """
        Cancel an interview. The caller is responsible for having asked the
        user to confirm; the store is untouched until the server agrees.
        """
        if not interview_id:
            return OperationResult.failure(
                ErrorKind.MISSING_IDENTIFIERS, "Missing interview id", field="interview_id"
            )
        if not job_id:
            return OperationResult.failure(
                ErrorKind.MISSING_IDENTIFIERS, "Missing job id", field="job_id"
            )

        try:
            await self.remote.cancel_interview(interview_id)
        except RemoteError as e:
            message = e.message or CANCEL_FAILED_MESSAGE
            logger.error(f"Cancel of interview {interview_id} failed: {message}")
            await self.notifier.notify_error(message)
            return OperationResult.failure(ErrorKind.CANCEL_FAILED, message)

        logger.info(f"Interview {interview_id} cancelled")
        await self._reconcile(job_id)
        message = "Interview cancelled successfully."
        await self.notifier.notify_success(message)
        return OperationResult.success(message)
