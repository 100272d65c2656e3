"""Inbound chat event contract.

Telegram updates are normalized into ChatEvent before they reach the
scoring engine, so the engine never touches python-telegram-bot types.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatKind(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


class EventKind(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    STICKER = "sticker"
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    COMMAND = "command"


class DisplayIdentity(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_id: int
    first_name: str = ""


GHOST = DisplayIdentity(user_id=0, first_name="A ghost")
UNKNOWN_RIVAL = DisplayIdentity(user_id=0, first_name="???")


class ChatEvent(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    message_id: int
    chat_id: int
    chat_kind: ChatKind
    sender: DisplayIdentity
    kind: EventKind
    text: Optional[str] = None
    entity_types: list[str] = Field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return self.chat_kind in (ChatKind.GROUP, ChatKind.SUPERGROUP)

    @property
    def is_private(self) -> bool:
        return self.chat_kind == ChatKind.PRIVATE

    def has_entity(self, types: frozenset[str] | set[str]) -> bool:
        return any(t in types for t in self.entity_types)
