"""
Status transition engine - single and bulk application status changes.

Single updates are optimistic: the store shows the new status before the
server answers, and the whole job bucket is restored if the server refuses.
Bulk updates are deliberately lighter: items are persisted concurrently,
already-persisted items are never rolled back, and the outcome of each id
is reported so partial failures are visible.
"""

import asyncio
from typing import Optional, Union

from src.core.application import ApplicationStatus
from src.core.job import Job
from src.core.results import BulkOutcome, BulkResult, ErrorKind, OperationResult
from src.notifier.base_notifier import BaseNotifier, NullNotifier
from src.pipeline.loader import PipelineLoader
from src.pipeline.selection import SelectionSets
from src.pipeline.store import SnapshotStore
from src.remote.base_remote import BaseRemote, RemoteError
from src.utils.logger import logger

UPDATE_FAILED_MESSAGE = "Failed to update application status. Please try again."
BULK_FAILED_MESSAGE = "Failed to bulk update statuses."

JobHint = Union[str, Job, None]


def _label(status: str) -> str:
    return status[:1].upper() + status[1:]


def _hint_id(hint: JobHint) -> Optional[str]:
    if isinstance(hint, Job):
        return hint.id
    return str(hint) if hint else None


class StatusTransitionEngine:
    def __init__(
        self,
        remote: BaseRemote,
        store: SnapshotStore,
        loader: PipelineLoader,
        selections: SelectionSets,
        notifier: BaseNotifier = None,
    ):
        self.remote = remote
        self.store = store
        self.loader = loader
        self.selections = selections
        self.notifier = notifier or NullNotifier()

    async def update_status(
        self,
        application_id: str,
        new_status: Union[ApplicationStatus, str],
        job_id_hint: JobHint = None,
    ) -> OperationResult:
        """
        Optimistically set one application's status and persist it.

        On a server failure the application's job bucket is restored to its
        exact pre-call contents and ``UpdateFailed`` is returned. Any other
        exception, cancellation included, restores the bucket and propagates.
        """
        status = ApplicationStatus.parse(new_status).value

        job_key, original = self.store.find_application(application_id)
        if original is None:
            message = f"Application {application_id} not found."
            logger.warning(message)
            await self.notifier.notify_error(message)
            return OperationResult.failure(ErrorKind.NOT_FOUND, message)

        snapshot = self.store.bucket_snapshot(job_key)
        self.store.put_application(job_key, original.with_status(status))
        logger.info(f"Optimistic status {original.status} -> {status} for application {application_id}")

        job_id = _hint_id(job_id_hint) or original.effective_job_id
        fallback_job = job_id_hint if isinstance(job_id_hint, Job) else self.loader.known_job(job_id, original)

        try:
            await self.remote.set_application_status(application_id, status)
        except RemoteError as e:
            self.store.restore_bucket(job_key, snapshot)
            message = e.message or UPDATE_FAILED_MESSAGE
            logger.error(f"Status update failed for {application_id}, rolled back: {message}")
            await self.notifier.notify_error(message)
            return OperationResult.failure(ErrorKind.UPDATE_FAILED, message)
        except BaseException as e:
            # unconfirmed writes never outlive the call, cancellation included
            self.store.restore_bucket(job_key, snapshot)
            logger.error(f"Status update for {application_id} aborted ({type(e).__name__}), rolled back")
            raise

        if not job_id:
            # persisted, but there is no bucket to reconcile against
            message = f"Status saved for application {application_id} but its job is unknown; view not refreshed."
            logger.warning(message)
            await self.notifier.notify_error(message)
            return OperationResult.failure(
                ErrorKind.MISSING_JOB_CONTEXT,
                message,
                data=self.store.find_application(application_id)[1],
            )

        try:
            await self.loader.refresh_applications(job_id, fallback_job)
        except RemoteError as e:
            logger.warning(f"Status saved but refresh of job {job_id} failed: {e}")

        success_message = f"Application status updated to {_label(status)}."
        await self.notifier.notify_success(success_message)

        _, current = self.store.find_application(application_id)
        return OperationResult.success(success_message, data=current)

    async def _persist_one(self, application_id: str, status: str) -> Optional[str]:
        """Returns the failure message, or None when the server accepted it"""
        try:
            await self.remote.set_application_status(application_id, status)
            return None
        except RemoteError as e:
            logger.warning(f"Bulk item {application_id} failed: {e}")
            return e.message or BULK_FAILED_MESSAGE

    async def bulk_update_status(
        self,
        job_id: str,
        application_ids: list[str],
        new_status: Union[ApplicationStatus, str],
    ) -> BulkResult:
        """
        Persist ``new_status`` for every id concurrently, in no particular
        order. Succeeded items stay persisted even when others fail; there
        is no rollback on this path.
        """
        status = ApplicationStatus.parse(new_status).value
        result = BulkResult(job_id=job_id, status=status)
        ids = list(dict.fromkeys(application_ids))
        if not ids:
            return result

        outcomes = await asyncio.gather(*(self._persist_one(i, status) for i in ids))
        for application_id, failure in zip(ids, outcomes):
            if failure is None:
                result.succeeded.append(application_id)
            else:
                result.failed[application_id] = failure

        try:
            await self.loader.refresh_applications(job_id)
        except RemoteError as e:
            logger.warning(f"Bulk update refresh of job {job_id} failed: {e}")
        self.selections.clear(job_id)

        outcome = result.outcome
        if outcome == BulkOutcome.COMPLETE:
            result.message = f"Bulk updated {len(ids)} applications to {_label(status)}."
            await self.notifier.notify_success(result.message)
        elif outcome == BulkOutcome.PARTIAL:
            result.message = (
                f"Bulk updated {len(result.succeeded)} of {len(ids)} applications to "
                f"{_label(status)}; {len(result.failed)} failed."
            )
            await self.notifier.notify_error(result.message)
        else:
            result.message = BULK_FAILED_MESSAGE
            await self.notifier.notify_error(result.message)

        logger.info(f"Bulk {status} on job {job_id}: {outcome.value} "
                    f"({len(result.succeeded)} ok, {len(result.failed)} failed)")
        return result
