"""
Indexer - lookup structures derived from the snapshot store
"""

from datetime import datetime, timezone
from typing import Optional

from src.core.application import Application
from src.core.interview import Interview
from src.core.job import Job
from src.pipeline.store import SnapshotStore


def _date_key(value: datetime) -> float:
    # naive datetimes are taken as UTC so mixed payloads still order
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


class Indexer:
    """
    Recomputes its maps synchronously whenever the store changes.
    One pass over the interview list per change.
    """

    def __init__(self, store: SnapshotStore):
        self.store = store
        self.applications_by_job: dict[str, list[Application]] = {}
        self.interviews_by_job: dict[str, list[Interview]] = {}
        self.jobs: list[Job] = []
        self.interviewed_application_ids: frozenset[str] = frozenset()
        self._active_by_pair: dict[tuple[str, str], Interview] = {}
        self._latest_by_pair: dict[tuple[str, str], Interview] = {}
        self.version = -1

        store.subscribe(self._on_change)
        self.recompute()

    def _on_change(self, store: SnapshotStore) -> None:
        self.recompute()

    def recompute(self) -> None:
        store = self.store
        self.applications_by_job = {k: list(v) for k, v in store.applications.items()}
        self.interviews_by_job = {k: list(v) for k, v in store.interviews.items()}
        self.jobs = list(store.jobs.values())

        active: dict[tuple[str, str], Interview] = {}
        latest: dict[tuple[str, str], Interview] = {}
        interviewed: set[str] = set()

        for interview in store.all_interviews():
            if interview.application_id:
                interviewed.add(interview.application_id)

            pair = interview.pair
            current = latest.get(pair)
            if current is None or _date_key(interview.date) >= _date_key(current.date):
                latest[pair] = interview

            if not interview.is_active:
                continue
            current = active.get(pair)
            if current is None or _date_key(interview.date) > _date_key(current.date):
                active[pair] = interview

        self._active_by_pair = active
        self._latest_by_pair = latest
        self.interviewed_application_ids = frozenset(interviewed)
        self.version = store.version

    def interview_for_pair(self, job_id: str, applicant_id: str) -> Optional[Interview]:
        """
        Most recently dated non-cancelled interview for the pair.
        Duplicates should not exist, but when they do the newest wins.
        """
        if not job_id or not applicant_id:
            return None
        return self._active_by_pair.get((str(job_id), str(applicant_id)))

    def latest_for_pair(self, job_id: str, applicant_id: str) -> Optional[Interview]:
        """Most recently dated record for the pair, cancelled ones included"""
        if not job_id or not applicant_id:
            return None
        return self._latest_by_pair.get((str(job_id), str(applicant_id)))

    def active_interviews(self, job_id: Optional[str] = None) -> list[Interview]:
        return [
            i for i in self._active_by_pair.values()
            if job_id is None or i.job_id == job_id
        ]

    def has_interview(self, application_id: str) -> bool:
        return application_id in self.interviewed_application_ids

    def as_dict(self) -> dict:
        """Plain view of everything derived, for comparisons and debugging"""
        return {
            "jobs": sorted(j.id for j in self.jobs),
            "applications_by_job": {
                k: [a.model_dump() for a in v] for k, v in sorted(self.applications_by_job.items())
            },
            "active_by_pair": {
                f"{k[0]}:{k[1]}": v.model_dump() for k, v in sorted(self._active_by_pair.items())
            },
            "interviewed": sorted(self.interviewed_application_ids),
        }
