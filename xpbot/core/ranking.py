"""Rank summary and podium computation.

Results are plain data; xpbot.bot.templates turns them into text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from xpbot.adapters.transport import ChatTransport
from xpbot.core.ledger import LedgerFactory
from xpbot.models.event import GHOST, UNKNOWN_RIVAL, ChatEvent, DisplayIdentity

PODIUM_SIZE = 3


class RankSummaryKind(str, Enum):
    PRIVATE_CHAT = "PRIVATE_CHAT"
    NOT_RANKED = "NOT_RANKED"
    TOP_OF_LEADERBOARD = "TOP_OF_LEADERBOARD"
    CHASING_RIVAL = "CHASING_RIVAL"
    RANK_ONLY = "RANK_ONLY"


@dataclass(frozen=True)
class RankSummary:
    kind: RankSummaryKind
    score: Optional[int] = None
    rank: Optional[int] = None
    total: Optional[int] = None
    gap: Optional[int] = None
    rival: Optional[DisplayIdentity] = None


@dataclass(frozen=True)
class PodiumEntry:
    position: int
    user: DisplayIdentity
    score: int


@dataclass(frozen=True)
class Podium:
    entries: list[PodiumEntry] = field(default_factory=list)
    private_chat: bool = False


class RankingPresenter:
    def __init__(self, ledger_for: LedgerFactory, transport: ChatTransport, min_xp: int) -> None:
        self._ledger_for = ledger_for
        self._transport = transport
        self.min_xp = min_xp

    async def build_rank_summary(self, event: ChatEvent) -> RankSummary:
        user = event.sender
        if event.is_private:
            return RankSummary(kind=RankSummaryKind.PRIVATE_CHAT)

        ledger = self._ledger_for(event.chat_id)
        score = await ledger.get_score(user.user_id)
        rank = await ledger.get_rank(user.user_id) if score is not None else None
        # a reset can land between the two reads
        if score is None or rank is None:
            return RankSummary(kind=RankSummaryKind.NOT_RANKED)
        total = await ledger.get_total_ranked()

        if score < self.min_xp:
            return RankSummary(kind=RankSummaryKind.RANK_ONLY, rank=rank, total=total)

        rival_entry = await ledger.get_next_threshold(score)
        if rival_entry is None:
            return RankSummary(
                kind=RankSummaryKind.TOP_OF_LEADERBOARD,
                score=score,
                rank=rank,
                total=total,
            )

        rival = await self._transport.resolve_member(event.chat_id, rival_entry.user_id)
        return RankSummary(
            kind=RankSummaryKind.CHASING_RIVAL,
            score=score,
            rank=rank,
            total=total,
            gap=rival_entry.score - score,
            rival=rival or UNKNOWN_RIVAL,
        )

    async def build_top_ranks(self, event: ChatEvent) -> Optional[Podium]:
        if event.is_private:
            return Podium(private_chat=True)

        ledger = self._ledger_for(event.chat_id)
        if await ledger.get_total_ranked() < PODIUM_SIZE:
            return None

        top = await ledger.get_top_k(PODIUM_SIZE)
        if len(top) < PODIUM_SIZE:
            return None

        entries: list[PodiumEntry] = []
        for position, row in enumerate(top, start=1):
            member = await self._transport.resolve_member(event.chat_id, row.user_id)
            entries.append(PodiumEntry(position=position, user=member or GHOST, score=row.score))
        return Podium(entries=entries)
