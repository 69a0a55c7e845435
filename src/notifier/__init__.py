"""
Notifier package - status message observers
"""

from src.notifier.base_notifier import (
    BaseNotifier,
    MessageKind,
    NullNotifier,
    StatusBoard,
    StatusMessage,
)

__all__ = [
    "BaseNotifier",
    "MessageKind",
    "NullNotifier",
    "StatusBoard",
    "StatusMessage",
]
