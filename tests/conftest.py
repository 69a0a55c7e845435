"""
Shared fixtures: an in-memory backend standing in for the hiring API.
"""

import itertools
from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.core.applicant import Applicant
from src.core.application import Application
from src.core.interview import Interview
from src.core.job import Job, SalaryRange
from src.notifier.base_notifier import StatusBoard
from src.pipeline.indexer import Indexer
from src.pipeline.loader import PipelineLoader
from src.pipeline.scheduler import InterviewScheduler
from src.pipeline.selection import SelectionSets
from src.pipeline.status_engine import StatusTransitionEngine
from src.pipeline.store import SnapshotStore
from src.remote.base_remote import BaseRemote, RemoteError, ScheduleReceipt, ScheduleRequest


def make_job(job_id="j1", title="Backend Engineer", company="Acme", salary=None, **kwargs) -> Job:
    return Job(
        id=job_id,
        title=title,
        company_id=f"c-{company.lower()}",
        company_name=company,
        salary=SalaryRange(**salary) if salary else None,
        **kwargs,
    )


def make_application(
    app_id="a1",
    job: Optional[Job] = None,
    applicant_id="u1",
    status="pending",
    name="Ada Lovelace",
    email="ada@example.com",
    created_at: Optional[datetime] = None,
    **kwargs,
) -> Application:
    job = job or make_job()
    profile = kwargs.pop("applicant", {})
    return Application(
        id=app_id,
        job_id=job.id,
        job=job,
        applicant=Applicant(id=applicant_id, name=name, email=email, **profile),
        status=status,
        created_at=created_at or datetime(2026, 1, 10, 9, 0),
        **kwargs,
    )


def make_interview(
    interview_id="i1",
    job_id="j1",
    applicant_id="u1",
    application_id="a1",
    status="scheduled",
    date: Optional[datetime] = None,
    notes="",
) -> Interview:
    return Interview(
        id=interview_id,
        job_id=job_id,
        applicant_id=applicant_id,
        application_id=application_id,
        date=date or datetime.now() + timedelta(days=3),
        status=status,
        notes=notes,
    )


class FakeRemote(BaseRemote):
    """
    Authoritative in-memory backend. Interviews are upserted per
    (job, applicant) pair the way the real API does.
    """

    SERVICE_NAME = "fake"

    def __init__(self, applications=(), interviews=()):
        self.applications: dict[str, Application] = {a.id: a for a in applications}
        self.interviews: dict[str, Interview] = {i.id: i for i in interviews}
        self.calls: list[tuple] = []
        self.fail_status: dict[str, str] = {}     # application id -> server message
        self.fail_all_status: Optional[str] = None
        self.fail_schedule: Optional[str] = None
        self.fail_cancel: Optional[str] = None
        self.fail_list: bool = False
        self.fail_interviews: set[str] = set()
        self.drop_job_links = False
        self.shared_link: Optional[str] = None
        self.status_hook = None
        self._ids = itertools.count(100)

    async def list_applications(self, job_id=None):
        self.calls.append(("list_applications", job_id))
        if self.fail_list:
            raise RemoteError("list unavailable", status_code=503)
        result = []
        for application in self.applications.values():
            if job_id is not None and application.job_id != job_id:
                continue
            copy = application.model_copy(deep=True)
            if job_id is not None and self.drop_job_links:
                copy = copy.model_copy(update={"job": None, "job_id": None})
            result.append(copy)
        return result

    async def list_interviews(self, job_id):
        self.calls.append(("list_interviews", job_id))
        if job_id in self.fail_interviews:
            raise RemoteError("interviews unavailable", status_code=500)
        return [i.model_copy() for i in self.interviews.values() if i.job_id == job_id]

    async def set_application_status(self, application_id, status):
        self.calls.append(("set_application_status", application_id, status))
        if self.status_hook is not None:
            await self.status_hook(application_id, status)
        message = self.fail_status.get(application_id, self.fail_all_status)
        if message is not None:
            raise RemoteError(message, status_code=400)
        current = self.applications[application_id]
        self.applications[application_id] = current.model_copy(update={"status": status})

    async def schedule_interview(self, request: ScheduleRequest):
        self.calls.append(("schedule_interview", request))
        if self.fail_schedule is not None:
            raise RemoteError(self.fail_schedule, status_code=400)

        for interview_id, interview in self.interviews.items():
            if interview.pair == (request.job_id, request.applicant_id):
                self.interviews[interview_id] = interview.model_copy(update={
                    "date": request.date,
                    "notes": request.notes,
                    "status": "scheduled",
                    "is_reschedule": True,
                })
                return ScheduleReceipt(shared_link=self.shared_link, is_reschedule=True,
                                       interview_id=interview_id)

        interview_id = f"i{next(self._ids)}"
        self.interviews[interview_id] = Interview(
            id=interview_id,
            job_id=request.job_id,
            applicant_id=request.applicant_id,
            application_id=request.application_id,
            date=request.date,
            notes=request.notes,
        )
        return ScheduleReceipt(shared_link=self.shared_link, interview_id=interview_id)

    async def cancel_interview(self, interview_id):
        self.calls.append(("cancel_interview", interview_id))
        if self.fail_cancel is not None:
            raise RemoteError(self.fail_cancel, status_code=400)
        current = self.interviews[interview_id]
        self.interviews[interview_id] = current.model_copy(update={"status": "cancelled"})

    def calls_named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def job():
    return make_job()


@pytest.fixture
def remote(job):
    return FakeRemote(
        applications=[
            make_application("a1", job, "u1", name="Ada Lovelace", email="ada@example.com"),
            make_application("a2", job, "u2", name="Grace Hopper", email="grace@example.com"),
            make_application("a3", job, "u3", name="Alan Turing", email="alan@example.com"),
        ]
    )


class Pipeline:
    """Store, indexer and engines wired around one remote"""

    def __init__(self, remote: BaseRemote):
        self.remote = remote
        self.store = SnapshotStore()
        self.indexer = Indexer(self.store)
        self.selections = SelectionSets()
        self.loader = PipelineLoader(remote, self.store)
        self.board = StatusBoard(ttl=60)
        self.status_engine = StatusTransitionEngine(
            remote, self.store, self.loader, self.selections, self.board
        )
        self.closed = []
        self.copied = []
        self.scheduler = InterviewScheduler(
            remote, self.store, self.indexer, self.loader, self.board,
            clipboard=self.copied.append,
            on_close=lambda: self.closed.append(True),
        )


@pytest.fixture
async def pipeline(remote):
    p = Pipeline(remote)
    await p.loader.load_all()
    return p
