"""
Filter, sort and window - pure narrowing of the visible application list
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional, TypeVar

from src.core.application import Application

ALL_TAB = "All"
INTERVIEWED_TAB = "Interviewed"
STATUS_TABS = [ALL_TAB, "Pending", INTERVIEWED_TAB, "Hired", "Rejected"]

T = TypeVar("T")


class SortKey(str, Enum):
    RECENT = "recent"
    OLDEST = "oldest"
    COMPANY = "company"
    TITLE = "title"
    APPLICANT = "applicant"
    SALARY_HIGH = "salary-high"
    SALARY_LOW = "salary-low"


@dataclass(frozen=True)
class ViewCriteria:
    """Everything that decides which applications are visible"""
    status_tab: str = ALL_TAB
    search_term: str = ""
    sort_key: Optional[SortKey] = None
    job_id: Optional[str] = None    # None shows every job


def _timestamp(value: Optional[datetime]) -> float:
    if value is None:
        return float("-inf")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _salary(application: Application) -> float:
    return application.job.salary_value if application.job else 0.0


def matches_tab(application: Application, status_tab: str, interviewed_ids: frozenset) -> bool:
    """
    The Interviewed tab looks at interview records, not at the status
    field; the two are independent signals.
    """
    if not status_tab or status_tab == ALL_TAB:
        return True
    if status_tab == INTERVIEWED_TAB:
        return application.id in interviewed_ids
    return (application.status or "").lower() == status_tab.lower()


def matches_search(application: Application, search_term: str) -> bool:
    term = (search_term or "").strip().lower()
    if not term:
        return True
    fields = (application.job_title, application.applicant.name, application.applicant.email)
    return any(term in (value or "").lower() for value in fields)


def sort_applications(applications: list[Application], sort_key: Optional[SortKey]) -> list[Application]:
    if sort_key is None:
        return list(applications)
    key = SortKey(sort_key)

    if key == SortKey.RECENT:
        return sorted(applications, key=lambda a: _timestamp(a.recency), reverse=True)
    if key == SortKey.OLDEST:
        return sorted(applications, key=lambda a: _timestamp(a.recency))
    if key == SortKey.COMPANY:
        return sorted(applications, key=lambda a: a.company_name.casefold())
    if key == SortKey.TITLE:
        return sorted(applications, key=lambda a: a.job_title.casefold())
    if key == SortKey.APPLICANT:
        return sorted(applications, key=lambda a: a.applicant.name.casefold())
    if key == SortKey.SALARY_HIGH:
        return sorted(applications, key=_salary, reverse=True)
    return sorted(applications, key=_salary)


def visible(
    applications: Iterable[Application],
    criteria: ViewCriteria,
    interviewed_ids: Iterable[str] = frozenset(),
) -> list[Application]:
    """
    Narrow by job scope, tab and search term, then sort.

    ``interviewed_ids`` is the set of application ids that have any
    interview record across every job (see ``Indexer``).
    """
    interviewed_ids = frozenset(interviewed_ids)
    result = [
        a for a in applications
        if (criteria.job_id is None or a.effective_job_id == criteria.job_id)
        and matches_tab(a, criteria.status_tab, interviewed_ids)
        and matches_search(a, criteria.search_term)
    ]
    return sort_applications(result, criteria.sort_key)


class DisplayWindow:
    """
    Incremental reveal over an already fetched list. The cursor only grows,
    except that any change of criteria puts it back to ``base``.
    """

    def __init__(self, base: int = 20, batch: int = 50):
        self.base = base
        self.batch = batch
        self.count = base
        self.criteria: Optional[ViewCriteria] = None

    def update(self, criteria: ViewCriteria) -> bool:
        """Returns True when the criteria changed and the cursor was reset"""
        if criteria == self.criteria:
            return False
        self.criteria = criteria
        self.count = self.base
        return True

    def exposed(self, total: int) -> int:
        return min(self.count, total)

    def can_grow(self, total: int) -> bool:
        return self.count < total

    def grow(self, total: int) -> int:
        if self.can_grow(total):
            self.count = min(self.count + self.batch, total)
        return self.exposed(total)

    def apply(self, items: list[T]) -> list[T]:
        return items[:self.exposed(len(items))]
