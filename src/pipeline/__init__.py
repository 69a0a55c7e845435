"""
Pipeline package - store, indexer and engines
"""

from src.pipeline.store import SnapshotStore
from src.pipeline.indexer import Indexer
from src.pipeline.selection import SelectionSets
from src.pipeline.loader import PipelineLoader, repair_job_links
from src.pipeline.status_engine import StatusTransitionEngine
from src.pipeline.scheduler import InterviewScheduler, ScheduleConfirmation, ScheduleDraft
from src.pipeline.views import DisplayWindow, SortKey, ViewCriteria, visible
from src.pipeline.dashboard import PipelineDashboard

__all__ = [
    "SnapshotStore",
    "Indexer",
    "SelectionSets",
    "PipelineLoader",
    "repair_job_links",
    "StatusTransitionEngine",
    "InterviewScheduler",
    "ScheduleConfirmation",
    "ScheduleDraft",
    "DisplayWindow",
    "SortKey",
    "ViewCriteria",
    "visible",
    "PipelineDashboard",
]
