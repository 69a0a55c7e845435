"""
Pipeline loader - fetches from the remote and reconciles into the store.

Reconciliation always replaces whole buckets with the authoritative copy,
after repairing the job linkage the backend sometimes leaves out of
refresh payloads.
"""

import asyncio
from typing import Iterable, Optional

from src.core.application import Application
from src.core.interview import Interview
from src.core.job import Job
from src.pipeline.store import SnapshotStore
from src.remote.base_remote import BaseRemote, RemoteError
from src.utils.logger import logger


def repair_job_links(
    applications: Iterable[Application],
    job_id: str,
    fallback_job: Optional[Job],
) -> list[Application]:
    """
    Fill in job references missing from a refreshed bucket.
    Known job context is never erased by a refresh.
    """
    repaired = []
    for application in applications:
        update = {}
        if not application.job_id:
            update["job_id"] = job_id
        if fallback_job is not None:
            if application.job is None:
                update["job"] = fallback_job
            elif not application.job.title and fallback_job.title:
                update["job"] = application.job.model_copy(update={"title": fallback_job.title})
        if update:
            application = application.model_copy(update=update)
        repaired.append(application)
    return repaired


class PipelineLoader:
    """
    Owns every read from the remote. Engines call into it after a
    successful mutation to bring the store back in line with the server.
    """

    def __init__(self, remote: BaseRemote, store: SnapshotStore):
        self.remote = remote
        self.store = store

    def known_job(self, job_id: str, previous: Optional[Application] = None) -> Optional[Job]:
        """Best local knowledge of a job: the application's own copy, then the job list"""
        if previous is not None and previous.job is not None:
            return previous.job
        return self.store.get_job(job_id)

    def _group(self, applications: list[Application]) -> tuple[list[Job], dict[str, list[Application]]]:
        by_job: dict[str, list[Application]] = {}
        jobs: dict[str, Job] = {}

        for application in applications:
            job_id = application.effective_job_id
            if not job_id:
                # fall back to wherever the store last saw it
                job_id, _ = self.store.find_application(application.id)
            if not job_id:
                logger.warning(f"Application {application.id} has no job reference; skipped")
                continue

            known = application.job or self.store.get_job(job_id)
            by_job.setdefault(job_id, []).append(application)
            if known is not None and job_id not in jobs:
                jobs[job_id] = known

        for job_id, bucket in by_job.items():
            by_job[job_id] = repair_job_links(bucket, job_id, jobs.get(job_id))
        return list(jobs.values()), by_job

    async def _interviews_or_empty(self, job_id: str) -> list[Interview]:
        try:
            return await self.remote.list_interviews(job_id)
        except RemoteError as e:
            logger.warning(f"Could not load interviews for job {job_id}: {e}")
            return []

    async def load_all(self) -> None:
        """Initial bulk fetch of the whole pipeline"""
        applications = await self.remote.list_applications()
        jobs, by_job = self._group(applications)

        job_ids = list(by_job)
        results = await asyncio.gather(*(self._interviews_or_empty(j) for j in job_ids))
        interviews = dict(zip(job_ids, results))

        self.store.replace_all(jobs, by_job, interviews)
        logger.info(
            f"Loaded {len(applications)} applications across {len(job_ids)} jobs "
            f"({sum(len(v) for v in interviews.values())} interviews)"
        )

    async def refresh_applications(self, job_id: str, fallback_job: Optional[Job] = None) -> list[Application]:
        """Replace one job's bucket with the server copy. Raises RemoteError."""
        fallback_job = fallback_job or self.store.get_job(job_id)
        fresh = await self.remote.list_applications(job_id)
        missing = sum(1 for a in fresh if a.job is None or not a.job_id)
        if missing:
            logger.info(f"Repairing job link on {missing} refreshed applications for job {job_id}")
        repaired = repair_job_links(fresh, job_id, fallback_job)
        self.store.patch_applications(job_id, repaired)
        return repaired

    async def refresh_interviews(self, job_id: str) -> list[Interview]:
        """Replace one job's interview bucket; a failed fetch leaves it empty"""
        interviews = await self._interviews_or_empty(job_id)
        self.store.patch_interviews(job_id, interviews)
        return interviews

    async def refresh_job(self, job_id: str) -> None:
        """Reload both buckets for one job concurrently"""
        await asyncio.gather(
            self.refresh_applications(job_id),
            self.refresh_interviews(job_id),
        )

    async def reconcile_all(self) -> bool:
        """
        Re-fetch every application and regroup by job. Failures are logged
        and reported as ``False``; the store keeps its current state.
        """
        try:
            applications = await self.remote.list_applications()
        except RemoteError as e:
            logger.warning(f"Failed refreshing all applications: {e}")
            return False

        jobs, by_job = self._group(applications)
        merged_jobs = dict(self.store.jobs)
        merged_jobs.update({job.id: job for job in jobs})
        self.store.patch_all_applications(by_job)
        self.store.patch_jobs(merged_jobs.values())
        return True
