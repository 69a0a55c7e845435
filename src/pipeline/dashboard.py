"""
Pipeline dashboard - the employer-side hiring pipeline in one object.

Ties everything together:
1. Loads jobs, applications and interviews into the snapshot store
2. Keeps the indexer in step with the store
3. Drives status changes and interview scheduling
4. Produces the visible window and CSV exports
"""

from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional

from src.core.application import Application
from src.core.results import BulkResult, OperationResult
from src.export.csv_export import write_export
from src.notifier.base_notifier import BaseNotifier, StatusBoard
from src.pipeline.indexer import Indexer
from src.pipeline.loader import PipelineLoader
from src.pipeline.scheduler import ClipboardSink, InterviewScheduler, ScheduleDraft
from src.pipeline.selection import SelectionSets
from src.pipeline.status_engine import JobHint, StatusTransitionEngine
from src.pipeline.store import SnapshotStore
from src.pipeline.views import DisplayWindow, ViewCriteria, visible
from src.remote.base_remote import BaseRemote
from src.utils.config import get_settings
from src.utils.logger import logger


class PipelineDashboard:
    """
    Owns the store and every engine. Consumers read through it and never
    mutate the store or the selection sets directly.
    """

    def __init__(
        self,
        remote: BaseRemote,
        notifier: Optional[BaseNotifier] = None,
        clipboard: Optional[ClipboardSink] = None,
        on_schedule_close: Optional[Callable[[], Any]] = None,
    ):
        self.settings = get_settings()
        pipeline = self.settings.pipeline

        self.remote = remote
        self.notifier = notifier or StatusBoard(ttl=pipeline.status_message_ttl)
        self.store = SnapshotStore()
        self.indexer = Indexer(self.store)
        self.selections = SelectionSets()
        self.loader = PipelineLoader(remote, self.store)
        self.status_engine = StatusTransitionEngine(
            remote, self.store, self.loader, self.selections, self.notifier
        )
        self.scheduler = InterviewScheduler(
            remote, self.store, self.indexer, self.loader, self.notifier,
            clipboard=clipboard, on_close=on_schedule_close,
        )
        self.window = DisplayWindow(base=pipeline.display_base, batch=pipeline.display_batch)
        self.criteria = ViewCriteria()
        self.window.update(self.criteria)

    async def load(self) -> None:
        await self.loader.load_all()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def update_status(self, application_id: str, status: str, job_id: JobHint = None) -> OperationResult:
        return await self.status_engine.update_status(application_id, status, job_id)

    async def bulk_update_status(self, job_id: str, status: str) -> BulkResult:
        """Apply ``status`` to the job's current selection"""
        return await self.status_engine.bulk_update_status(
            job_id, self.selections.selected(job_id), status
        )

    def open_schedule(self, application: Application, job_id: JobHint) -> OperationResult:
        return self.scheduler.open_schedule(application, job_id)

    async def confirm_schedule(self, draft: ScheduleDraft) -> OperationResult:
        return await self.scheduler.confirm_schedule(draft)

    async def cancel_interview(self, interview_id: str, job_id: str) -> OperationResult:
        return await self.scheduler.cancel_interview(interview_id, job_id)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def set_criteria(self, criteria: ViewCriteria) -> None:
        if self.window.update(criteria):
            self.criteria = criteria
            self.selections.clear_all()

    def filtered(self) -> list[Application]:
        return visible(
            self.store.all_applications(),
            self.criteria,
            self.indexer.interviewed_application_ids,
        )

    def visible_applications(self) -> list[Application]:
        return self.window.apply(self.filtered())

    @property
    def can_grow(self) -> bool:
        return self.window.can_grow(len(self.filtered()))

    def grow(self) -> int:
        return self.window.grow(len(self.filtered()))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_scope(self, job_id: Optional[str] = None) -> list[Application]:
        if job_id in (None, "all"):
            return self.store.all_applications()
        return list(self.store.applications.get(job_id, []))

    def export(
        self,
        job_id: Optional[str] = None,
        directory: Optional[str | Path] = None,
        today: Optional[date] = None,
    ) -> Optional[Path]:
        """Write the CSV export; nothing is written for an empty scope"""
        applications = self.export_scope(job_id)
        if not applications:
            logger.info(f"Nothing to export for {job_id or 'all'}")
            return None
        return write_export(
            applications,
            directory or self.settings.get_export_dir(),
            scope=job_id if job_id not in (None, "all") else "all",
            origin=self.settings.public_origin,
            jobs=self.store.jobs,
            today=today,
        )

    def summary(self) -> list[dict]:
        """Per-job counts by status plus active interviews"""
        rows = []
        for job_id, bucket in sorted(self.indexer.applications_by_job.items()):
            job = self.store.get_job(job_id)
            counts = {status: 0 for status in ("pending", "interviewed", "hired", "rejected")}
            for application in bucket:
                counts[application.status] = counts.get(application.status, 0) + 1
            rows.append({
                "job_id": job_id,
                "title": job.title if job else "",
                "total": len(bucket),
                **counts,
                "interviews": len(self.indexer.active_interviews(job_id)),
            })
        return rows
