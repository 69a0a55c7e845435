"""
Base notifier class - transient status messages for the dashboard
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class MessageKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class StatusMessage:
    """Short user-facing feedback line"""
    text: str
    kind: MessageKind = MessageKind.SUCCESS
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.kind == MessageKind.ERROR


class BaseNotifier(ABC):
    """Abstract base class for status message observers"""

    SERVICE_NAME = "Base"

    @abstractmethod
    async def send(self, message: StatusMessage) -> bool:
        """
        Publish a status message.

        Returns:
            True if the message was accepted
        """
        pass

    async def notify_success(self, text: str) -> bool:
        return await self.send(StatusMessage(text=text, kind=MessageKind.SUCCESS))

    async def notify_error(self, text: str) -> bool:
        return await self.send(StatusMessage(text=text, kind=MessageKind.ERROR))


class NullNotifier(BaseNotifier):
    """Discards everything; used by headless callers"""

    SERVICE_NAME = "null"

    async def send(self, message: StatusMessage) -> bool:
        return True


class StatusBoard(BaseNotifier):
    """
    Holds the latest status message and clears it after ``ttl`` seconds.
    A newer message replaces the current one and restarts the timer.
    """

    SERVICE_NAME = "board"

    def __init__(self, ttl: float = 3.0):
        self.ttl = ttl
        self.current: Optional[StatusMessage] = None
        self.history: list[StatusMessage] = []
        self._expiry: Optional[asyncio.TimerHandle] = None

    async def send(self, message: StatusMessage) -> bool:
        self.current = message
        self.history.append(message)

        if self._expiry is not None:
            self._expiry.cancel()
        loop = asyncio.get_running_loop()
        self._expiry = loop.call_later(self.ttl, self._expire, message)
        return True

    def _expire(self, message: StatusMessage) -> None:
        if self.current is message:
            self.current = None
        self._expiry = None
