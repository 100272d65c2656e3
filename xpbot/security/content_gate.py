"""Minimum-XP gate for photos, videos, documents and link-bearing messages."""

from __future__ import annotations

import logging
from typing import Optional

from xpbot.adapters.transport import ChatTransport, TransportError
from xpbot.audit.audit_logger import ModerationAuditLogger
from xpbot.core.ledger import LedgerFactory
from xpbot.models.event import ChatEvent

LOGGER = logging.getLogger(__name__)


def meets_threshold(score: Optional[int], min_xp: int) -> bool:
    # Unranked users never pass, whatever min_xp is.
    if score is None:
        return False
    return score >= min_xp


class ContentGate:
    def __init__(
        self,
        ledger_for: LedgerFactory,
        transport: ChatTransport,
        min_xp: int,
        rejection_text: str,
        audit: Optional[ModerationAuditLogger] = None,
    ) -> None:
        self._ledger_for = ledger_for
        self._transport = transport
        self.min_xp = min_xp
        self._rejection_text = rejection_text
        self._audit = audit

    async def check_and_enforce(self, event: ChatEvent) -> bool:
        if not event.is_group:
            return True

        ledger = self._ledger_for(event.chat_id)
        score = await ledger.get_score(event.sender.user_id)
        if meets_threshold(score, self.min_xp):
            return True

        LOGGER.info(
            "content rejected chat_id=%s user_id=%s kind=%s score=%s min_xp=%s",
            event.chat_id,
            event.sender.user_id,
            event.kind.value,
            score,
            self.min_xp,
        )
        try:
            await self._transport.delete_message(event.chat_id, event.message_id)
        except TransportError as exc:
            LOGGER.warning("delete failed chat_id=%s message_id=%s: %s", event.chat_id, event.message_id, exc)
        try:
            await self._transport.send_mention(event.chat_id, event.sender, self._rejection_text)
        except TransportError as exc:
            LOGGER.warning("rejection notice failed chat_id=%s: %s", event.chat_id, exc)

        await ledger.reset(event.sender.user_id)

        if self._audit is not None:
            self._audit.append(
                group_id=event.chat_id,
                event_type="CONTENT_REMOVED",
                payload={
                    "user_id": event.sender.user_id,
                    "message_id": event.message_id,
                    "kind": event.kind.value,
                    "score": score,
                    "min_xp": self.min_xp,
                },
            )
        return False
