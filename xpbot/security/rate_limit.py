"""Per-user XP cooldown backed by store-side tickets."""

from __future__ import annotations

from typing import Optional

from xpbot.core.store import RankedStore


class RateLimiter:
    def __init__(self, store: RankedStore, prefix: str) -> None:
        self._store = store
        self._prefix = prefix

    def ticket_key(self, user_id: int) -> str:
        return f"{self._prefix}_USER_{user_id}"

    async def should_count_activity(self, user_id: int, cooldown_seconds: Optional[int]) -> bool:
        if not cooldown_seconds:
            return True
        # SET NX EX: one pass per window even with concurrent handlers.
        return await self._store.set_if_absent(self.ticket_key(user_id), cooldown_seconds)
