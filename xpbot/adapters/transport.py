"""Chat transport interface consumed by the scoring engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from xpbot.models.event import DisplayIdentity


class TransportError(RuntimeError):
    """Raised when the chat platform rejects or fails a call."""


class ChatTransport(ABC):
    @abstractmethod
    async def send_message(self, chat_id: int, text: str, silent: bool = True) -> None:
        """Send an HTML-formatted message."""

    @abstractmethod
    async def send_mention(self, chat_id: int, user: DisplayIdentity, text: str) -> None:
        """Send text prefixed with the user's display name."""

    @abstractmethod
    async def delete_message(self, chat_id: int, message_id: int) -> None:
        """Remove a message from the chat."""

    @abstractmethod
    async def resolve_member(self, chat_id: int, user_id: int) -> Optional[DisplayIdentity]:
        """Return the member's display identity, or None if it cannot be resolved."""
