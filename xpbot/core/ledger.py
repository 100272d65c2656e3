"""Per-group XP scoreboard over the ranked store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from xpbot.core.store import RankedStore

# Rival must lead by at least this much to be worth showing.
RIVAL_MIN_LEAD = 2


@dataclass(frozen=True)
class ScoreEntry:
    user_id: int
    score: int


class ScoreLedger:
    """Group-scoped view of one sorted set.

    Scores are Optional[int]: None means the user has never been ranked in
    this group, which is different from a recorded score of zero.
    """

    def __init__(self, store: RankedStore, group_id: int, prefix: str) -> None:
        self._store = store
        self.group_id = group_id
        self.key = f"{prefix}{group_id}"

    async def increment(self, user_id: int, delta: int = 1) -> int:
        return await self._store.zincrby(self.key, delta, str(user_id))

    async def get_score(self, user_id: int) -> Optional[int]:
        return await self._store.zscore(self.key, str(user_id))

    async def get_rank(self, user_id: int) -> Optional[int]:
        rank = await self._store.zrevrank(self.key, str(user_id))
        if rank is None:
            return None
        return rank + 1

    async def get_total_ranked(self) -> int:
        return await self._store.zcard(self.key)

    async def get_next_threshold(self, score: int) -> Optional[ScoreEntry]:
        row = await self._store.zrangebyscore_first(self.key, score + RIVAL_MIN_LEAD)
        if row is None:
            return None
        member, rival_score = row
        return ScoreEntry(user_id=int(member), score=rival_score)

    async def get_top_k(self, k: int) -> list[ScoreEntry]:
        if k <= 0:
            return []
        rows = await self._store.zrevrange(self.key, 0, k - 1)
        return [ScoreEntry(user_id=int(member), score=score) for member, score in rows[:k]]

    async def reset(self, user_id: int) -> None:
        await self._store.zrem(self.key, str(user_id))


LedgerFactory = Callable[[int], ScoreLedger]


def ledger_factory(store: RankedStore, prefix: str) -> LedgerFactory:
    def _for_group(group_id: int) -> ScoreLedger:
        return ScoreLedger(store=store, group_id=group_id, prefix=prefix)

    return _for_group
