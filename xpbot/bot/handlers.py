"""Telegram update handlers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from telegram import Message, Update
from telegram.ext import ContextTypes

from xpbot.adapters.transport import TransportError
from xpbot.core.router import EventRouter
from xpbot.core.store import StoreError
from xpbot.models.event import ChatEvent, ChatKind, DisplayIdentity, EventKind

LOGGER = logging.getLogger(__name__)


def _enum_value(raw: Any) -> str:
    if isinstance(raw, Enum):
        return str(raw.value)
    return str(raw)


def _message_kind(message: Message) -> Optional[EventKind]:
    if message.voice is not None:
        return EventKind.VOICE
    if message.sticker is not None:
        return EventKind.STICKER
    if message.photo:
        return EventKind.PHOTO
    if message.video is not None:
        return EventKind.VIDEO
    if message.document is not None:
        return EventKind.DOCUMENT
    if message.text is not None:
        return EventKind.TEXT
    return None


def _chat_kind(raw: Any) -> Optional[ChatKind]:
    try:
        return ChatKind(_enum_value(raw))
    except ValueError:
        return None


def event_from_update(update: Update, kind: Optional[EventKind] = None) -> Optional[ChatEvent]:
    """Normalize a Telegram update. Returns None for updates the bot does not score."""
    message = update.effective_message
    chat = update.effective_chat
    user = update.effective_user
    if message is None or chat is None or user is None:
        return None

    chat_kind = _chat_kind(chat.type)
    event_kind = kind or _message_kind(message)
    if chat_kind is None or event_kind is None:
        return None

    entities = list(message.entities or ()) + list(message.caption_entities or ())
    return ChatEvent(
        message_id=int(message.message_id),
        chat_id=int(chat.id),
        chat_kind=chat_kind,
        sender=DisplayIdentity(user_id=int(user.id), first_name=user.first_name or ""),
        kind=event_kind,
        text=message.text,
        entity_types=[_enum_value(e.type) for e in entities],
    )


class TelegramHandlers:
    def __init__(self, router: EventRouter) -> None:
        self.router = router

    async def _dispatch(
        self,
        update: Update,
        action: Callable[[ChatEvent], Awaitable[Any]],
        kind: Optional[EventKind] = None,
    ) -> None:
        event = event_from_update(update, kind=kind)
        if event is None:
            return
        try:
            await action(event)
        except (StoreError, TransportError) as exc:
            # Drop this event only; state is left as the last successful step wrote it.
            LOGGER.warning(
                "event dropped chat_id=%s user_id=%s kind=%s: %s",
                event.chat_id,
                event.sender.user_id,
                event.kind.value,
                exc,
            )

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._dispatch(update, self.router.handle_start, kind=EventKind.COMMAND)

    async def xp(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._dispatch(update, self.router.handle_xp, kind=EventKind.COMMAND)

    async def ranks(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._dispatch(update, self.router.handle_ranks, kind=EventKind.COMMAND)

    async def activity(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._dispatch(update, self.router.handle_activity)

    async def content(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._dispatch(update, self.router.handle_content)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    LOGGER.error("unhandled error while processing update=%r", update, exc_info=context.error)
