"""
Per-job selection sets used by bulk actions
"""

from typing import Iterable


class SelectionSets:
    """Client-only sets of selected application ids, one per job"""

    def __init__(self):
        self._selected: dict[str, set[str]] = {}

    def selected(self, job_id: str) -> list[str]:
        return sorted(self._selected.get(job_id, set()))

    def is_selected(self, job_id: str, application_id: str) -> bool:
        return application_id in self._selected.get(job_id, set())

    def toggle(self, job_id: str, application_id: str) -> bool:
        """Flip one id; returns whether it is now selected"""
        current = self._selected.setdefault(job_id, set())
        if application_id in current:
            current.discard(application_id)
            return False
        current.add(application_id)
        return True

    def select_all(self, job_id: str, application_ids: Iterable[str]) -> list[str]:
        """Select every id, or clear the set when all are already selected"""
        ids = set(application_ids)
        if ids and self._selected.get(job_id) == ids:
            self._selected[job_id] = set()
        else:
            self._selected[job_id] = ids
        return self.selected(job_id)

    def clear(self, job_id: str) -> None:
        self._selected.pop(job_id, None)

    def clear_all(self) -> None:
        self._selected.clear()

    def __len__(self) -> int:
        return sum(len(s) for s in self._selected.values())
