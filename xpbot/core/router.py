"""Routes normalized chat events to the scoring components."""

from __future__ import annotations

import logging
import re

from xpbot.adapters.transport import ChatTransport
from xpbot.bot.templates import podium_text, rank_summary_text, start_text
from xpbot.config.settings import Settings
from xpbot.core.ledger import LedgerFactory
from xpbot.core.ranking import RankingPresenter, RankSummaryKind
from xpbot.models.event import ChatEvent
from xpbot.security.content_gate import ContentGate
from xpbot.security.rate_limit import RateLimiter

LOGGER = logging.getLogger(__name__)

XP_COMMAND = re.compile(r"^/xp(?:@\w+)?(?:\s|$)", re.IGNORECASE)


def is_xp_command(text: str | None) -> bool:
    return bool(text) and XP_COMMAND.match(text.strip()) is not None


class EventRouter:
    def __init__(
        self,
        ledger_for: LedgerFactory,
        rate_limiter: RateLimiter,
        gate: ContentGate,
        presenter: RankingPresenter,
        transport: ChatTransport,
        settings: Settings,
    ) -> None:
        self._ledger_for = ledger_for
        self._rate_limiter = rate_limiter
        self._gate = gate
        self._presenter = presenter
        self._transport = transport
        self._settings = settings
        self._link_types = frozenset(settings.moderation.link_entity_types)
        self.lang = settings.ui.language

    async def handle_activity(self, event: ChatEvent) -> bool:
        """Award one XP for qualifying activity. Return True if XP was awarded."""
        if not event.is_group:
            return False
        if is_xp_command(event.text):
            return False

        if event.has_entity(self._link_types):
            if not await self._gate.check_and_enforce(event):
                return False

        cooldown = self._settings.xp.rate_limit_seconds
        if not await self._rate_limiter.should_count_activity(event.sender.user_id, cooldown):
            return False

        score = await self._ledger_for(event.chat_id).increment(event.sender.user_id)
        LOGGER.debug("xp awarded chat_id=%s user_id=%s score=%s", event.chat_id, event.sender.user_id, score)
        return True

    async def handle_content(self, event: ChatEvent) -> bool:
        return await self._gate.check_and_enforce(event)

    async def handle_start(self, event: ChatEvent) -> None:
        if not event.is_private:
            return
        await self._transport.send_message(event.chat_id, start_text(self.lang))

    async def handle_xp(self, event: ChatEvent) -> None:
        summary = await self._presenter.build_rank_summary(event)
        text = rank_summary_text(summary, self.lang)
        if summary.kind == RankSummaryKind.PRIVATE_CHAT:
            await self._transport.send_message(event.chat_id, text)
            return
        await self._transport.send_mention(event.chat_id, event.sender, text)

    async def handle_ranks(self, event: ChatEvent) -> None:
        podium = await self._presenter.build_top_ranks(event)
        if podium is None:
            return
        await self._transport.send_message(event.chat_id, podium_text(podium, self.lang), silent=True)
