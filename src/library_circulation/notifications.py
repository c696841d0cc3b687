"""
Notification fan-out for circulation events.

A ``NotificationPublisher`` holds an ordered list of sinks and delivers each
message to every sink in attachment order. A sink is any object exposing
``render(message)``; delivery is synchronous. The shipped sinks simulate
transmission by logging, so nothing ever leaves the process.
"""

import logging
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NotificationSink(Protocol[T]):
    """Anything that can receive a notification."""

    def render(self, message: T) -> None: ...


class NotificationPublisher(Generic[T]):
    """
    Subject side of the observer pattern.

    Sinks may be attached more than once and then receive the message once per
    attachment. A sink that raises is logged and skipped; the remaining sinks
    still receive the message.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._sinks: list[NotificationSink[T]] = []
        self._logger = logger or logging.getLogger(__name__)

    @property
    def sinks(self) -> list[NotificationSink[T]]:
        """Attached sinks in delivery order (a copy)."""
        return list(self._sinks)

    def attach(self, sink: NotificationSink[T]) -> None:
        self._sinks.append(sink)

    def detach(self, sink: NotificationSink[T]) -> bool:
        """
        Remove the first attached sink equal to ``sink``.

        Returns:
            True if a sink was removed, False if none matched
        """
        for index, attached in enumerate(self._sinks):
            if attached == sink:
                del self._sinks[index]
                return True
        return False

    def broadcast(self, message: T) -> int:
        """
        Deliver ``message`` to every attached sink.

        Returns:
            Number of sinks that accepted the message without raising
        """
        delivered = 0
        for sink in list(self._sinks):
            try:
                sink.render(message)
            except Exception:
                self._logger.exception("Notification sink %r failed", sink)
                continue
            delivered += 1
        return delivered


class EmailNotificationSink(BaseModel):
    """Simulated e-mail delivery."""

    email: EmailStr = Field(..., description="Recipient address")

    model_config = ConfigDict(frozen=True)

    def render(self, message: str) -> None:
        logger.info("Sending email to %s: %s", self.email, message)


class SmsNotificationSink(BaseModel):
    """Simulated SMS delivery."""

    phone_number: str = Field(
        ...,
        description="Recipient phone number",
        pattern=r"^\+?[\d\s\-\(\)]+$",
    )

    model_config = ConfigDict(frozen=True)

    def render(self, message: str) -> None:
        logger.info("Sending SMS to %s: %s", self.phone_number, message)


class RecordingSink(BaseModel):
    """Keeps every delivered message in memory, oldest first."""

    name: str = Field(default="recorder", description="Label used in logs")
    messages: list[str] = Field(default_factory=list)

    def render(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()
