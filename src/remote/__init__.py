"""
Remote boundary package
"""

from src.remote.base_remote import BaseRemote, RemoteError, ScheduleReceipt, ScheduleRequest
from src.remote.http_remote import HttpRemote

__all__ = [
    "BaseRemote",
    "RemoteError",
    "ScheduleReceipt",
    "ScheduleRequest",
    "HttpRemote",
]
