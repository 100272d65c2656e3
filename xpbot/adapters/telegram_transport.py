"""python-telegram-bot implementation of ChatTransport."""

from __future__ import annotations

import html
import logging
from typing import Optional

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError

from xpbot.adapters.transport import ChatTransport, TransportError
from xpbot.models.event import DisplayIdentity

LOGGER = logging.getLogger(__name__)


def display_name(user: DisplayIdentity) -> str:
    return html.escape(user.first_name or "")


class TelegramTransport(ChatTransport):
    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def send_message(self, chat_id: int, text: str, silent: bool = True) -> None:
        try:
            await self._bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
                disable_notification=silent,
                disable_web_page_preview=True,
            )
        except BadRequest:
            # Fall back to plain text when the HTML cannot be parsed.
            try:
                await self._bot.send_message(chat_id=chat_id, text=text, disable_notification=silent)
            except TelegramError as exc:
                raise TransportError(f"send_message failed chat_id={chat_id}: {exc}") from exc
        except TelegramError as exc:
            raise TransportError(f"send_message failed chat_id={chat_id}: {exc}") from exc

    async def send_mention(self, chat_id: int, user: DisplayIdentity, text: str) -> None:
        await self.send_message(chat_id, display_name(user) + text, silent=True)

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        try:
            await self._bot.delete_message(chat_id=chat_id, message_id=message_id)
        except TelegramError as exc:
            raise TransportError(f"delete_message failed chat_id={chat_id} message_id={message_id}: {exc}") from exc

    async def resolve_member(self, chat_id: int, user_id: int) -> Optional[DisplayIdentity]:
        try:
            member = await self._bot.get_chat_member(chat_id=chat_id, user_id=user_id)
        except BadRequest as exc:
            LOGGER.info("member not resolvable chat_id=%s user_id=%s: %s", chat_id, user_id, exc)
            return None
        except TelegramError as exc:
            raise TransportError(f"get_chat_member failed chat_id={chat_id} user_id={user_id}: {exc}") from exc

        user = getattr(member, "user", None)
        if user is None:
            return None
        return DisplayIdentity(user_id=int(user.id), first_name=user.first_name or "")
