from __future__ import annotations

from abc import ABC, abstractmethod

from bundle_notifier.models import Notification


class DeliveryError(RuntimeError):
    """Raised when a message could not be handed to the messaging platform."""


class Notifier(ABC):
    @abstractmethod
    async def post(self, notification: Notification) -> None:
        """Send a bundle notification to the broadcast destination."""

    @abstractmethod
    async def post_text(self, message: str) -> None:
        """Send a plain-text message (alerts) to the broadcast destination."""
