"""
Snapshot store - last known server truth for jobs, applications and interviews
"""

from typing import Callable, Iterable, Optional

from src.core.application import Application
from src.core.interview import Interview
from src.core.job import Job

Listener = Callable[["SnapshotStore"], None]


class SnapshotStore:
    """
    Typed in-memory container. Applications and interviews are kept in
    per-job buckets; every mutation notifies subscribers synchronously.

    Buckets are replaced, never edited in place, so a list handed out by
    ``bucket_snapshot`` stays valid as a rollback point.
    """

    def __init__(self):
        self.jobs: dict[str, Job] = {}
        self.applications: dict[str, list[Application]] = {}
        self.interviews: dict[str, list[Interview]] = {}
        self.version = 0
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        self.version += 1
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def replace_all(
        self,
        jobs: Iterable[Job],
        applications_by_job: dict[str, list[Application]],
        interviews_by_job: dict[str, list[Interview]],
    ) -> None:
        self.jobs = {job.id: job for job in jobs}
        self.applications = {k: list(v) for k, v in applications_by_job.items()}
        self.interviews = {k: list(v) for k, v in interviews_by_job.items()}
        self._changed()

    def patch_jobs(self, jobs: Iterable[Job]) -> None:
        """Replace the job list while keeping both buckets"""
        self.jobs = {job.id: job for job in jobs}
        self._changed()

    def patch_applications(self, job_id: str, applications: Iterable[Application]) -> None:
        self.applications[job_id] = list(applications)
        self._changed()

    def patch_all_applications(self, applications_by_job: dict[str, list[Application]]) -> None:
        self.applications = {k: list(v) for k, v in applications_by_job.items()}
        self._changed()

    def patch_interviews(self, job_id: str, interviews: Iterable[Interview]) -> None:
        self.interviews[job_id] = list(interviews)
        self._changed()

    def put_application(self, job_key: str, application: Application) -> None:
        """Swap one application inside its bucket for an updated copy"""
        bucket = self.applications.get(job_key, [])
        self.applications[job_key] = [
            application if a.id == application.id else a for a in bucket
        ]
        self._changed()

    def restore_bucket(self, job_key: str, snapshot: Optional[list[Application]]) -> None:
        if snapshot is None:
            self.applications.pop(job_key, None)
        else:
            self.applications[job_key] = list(snapshot)
        self._changed()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def bucket_snapshot(self, job_key: str) -> Optional[list[Application]]:
        bucket = self.applications.get(job_key)
        return list(bucket) if bucket is not None else None

    def find_application(self, application_id: str) -> tuple[Optional[str], Optional[Application]]:
        """Return ``(bucket key, application)`` or ``(None, None)``"""
        for job_key, bucket in self.applications.items():
            for application in bucket:
                if application.id == application_id:
                    return job_key, application
        return None, None

    def get_job(self, job_id: Optional[str]) -> Optional[Job]:
        if not job_id:
            return None
        return self.jobs.get(job_id)

    def all_applications(self) -> list[Application]:
        return [a for bucket in self.applications.values() for a in bucket]

    def all_interviews(self) -> list[Interview]:
        return [i for bucket in self.interviews.values() for i in bucket]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.applications.values())
