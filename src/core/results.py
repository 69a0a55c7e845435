"""
Operation results returned by the pipeline engines
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Expected failure modes of pipeline operations"""
    NOT_FOUND = "NotFound"
    MISSING_JOB_CONTEXT = "MissingJobContext"
    MISSING_IDENTIFIERS = "MissingIdentifiers"
    INVALID_DATE = "InvalidDate"
    INVALID_REFERENCE = "InvalidReference"
    UPDATE_FAILED = "UpdateFailed"
    SCHEDULE_FAILED = "ScheduleFailed"
    CANCEL_FAILED = "CancelFailed"


@dataclass
class OperationResult:
    """
    Outcome of a single engine operation.

    ``field`` is set for ``MissingIdentifiers`` to name the identifier that
    was absent; ``data`` carries the operation's payload on success.
    """
    ok: bool
    message: str = ""
    error: Optional[ErrorKind] = None
    field: Optional[str] = None
    data: Any = None

    @classmethod
    def success(cls, message: str = "", data: Any = None) -> "OperationResult":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(
        cls,
        error: ErrorKind,
        message: str,
        field: Optional[str] = None,
        data: Any = None,
    ) -> "OperationResult":
        return cls(ok=False, message=message, error=error, field=field, data=data)

    def __bool__(self) -> bool:
        return self.ok


class BulkOutcome(str, Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"
    EMPTY = "empty"


@dataclass
class BulkResult:
    """Per-item outcome of a bulk status update"""
    job_id: str
    status: str
    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    message: str = ""

    @property
    def outcome(self) -> BulkOutcome:
        if not self.succeeded and not self.failed:
            return BulkOutcome.EMPTY
        if not self.failed:
            return BulkOutcome.COMPLETE
        if not self.succeeded:
            return BulkOutcome.FAILED
        return BulkOutcome.PARTIAL

    @property
    def ok(self) -> bool:
        return self.outcome in (BulkOutcome.COMPLETE, BulkOutcome.EMPTY)

    @property
    def error(self) -> Optional[ErrorKind]:
        return None if self.ok else ErrorKind.UPDATE_FAILED

    def __bool__(self) -> bool:
        return self.ok
