import asyncio

from xpbot.core.ledger import ScoreEntry, ScoreLedger


def _ledger(store, group_id: int = -100) -> ScoreLedger:
    return ScoreLedger(store=store, group_id=group_id, prefix="TELEGRAM_XP_")


def _seed(ledger: ScoreLedger, scores: dict[int, int]) -> None:
    async def _run() -> None:
        for user_id, score in scores.items():
            await ledger.increment(user_id, score)

    asyncio.run(_run())


def test_unknown_user_is_absent_not_zero(memory_store) -> None:
    ledger = _ledger(memory_store)
    assert asyncio.run(ledger.get_score(42)) is None
    assert asyncio.run(ledger.get_rank(42)) is None


def test_n_increments_yield_score_n(memory_store) -> None:
    ledger = _ledger(memory_store)

    async def _run() -> int | None:
        for _ in range(7):
            await ledger.increment(5)
        return await ledger.get_score(5)

    assert asyncio.run(_run()) == 7


def test_key_uses_prefix_and_group(memory_store) -> None:
    ledger = _ledger(memory_store, group_id=-1001)
    asyncio.run(ledger.increment(1))
    assert "TELEGRAM_XP_-1001" in memory_store.sets


def test_ranks_and_total(memory_store) -> None:
    ledger = _ledger(memory_store)
    _seed(ledger, {1: 50, 2: 30, 3: 10})
    assert asyncio.run(ledger.get_rank(1)) == 1
    assert asyncio.run(ledger.get_rank(2)) == 2
    assert asyncio.run(ledger.get_rank(3)) == 3
    assert asyncio.run(ledger.get_total_ranked()) == 3


def test_next_threshold_picks_closest_rival(memory_store) -> None:
    ledger = _ledger(memory_store)
    _seed(ledger, {1: 20, 2: 25, 3: 40})
    assert asyncio.run(ledger.get_next_threshold(20)) == ScoreEntry(user_id=2, score=25)


def test_next_threshold_requires_lead_of_two(memory_store) -> None:
    ledger = _ledger(memory_store)
    _seed(ledger, {1: 20, 2: 21})
    assert asyncio.run(ledger.get_next_threshold(20)) is None
    asyncio.run(ledger.increment(2))
    assert asyncio.run(ledger.get_next_threshold(20)) == ScoreEntry(user_id=2, score=22)


def test_top_k_is_exact_and_descending(memory_store) -> None:
    ledger = _ledger(memory_store)
    _seed(ledger, {1: 5, 2: 40, 3: 15, 4: 30})
    top = asyncio.run(ledger.get_top_k(3))
    assert [e.user_id for e in top] == [2, 4, 3]
    assert [e.score for e in top] == [40, 30, 15]
    assert asyncio.run(ledger.get_top_k(0)) == []


def test_empty_group_queries_do_not_fail(memory_store) -> None:
    ledger = _ledger(memory_store)
    assert asyncio.run(ledger.get_total_ranked()) == 0
    assert asyncio.run(ledger.get_top_k(3)) == []
    assert asyncio.run(ledger.get_next_threshold(0)) is None


def test_reset_is_idempotent(memory_store) -> None:
    ledger = _ledger(memory_store)
    _seed(ledger, {1: 3})
    asyncio.run(ledger.reset(1))
    asyncio.run(ledger.reset(1))
    assert asyncio.run(ledger.get_score(1)) is None


def test_groups_are_isolated(memory_store) -> None:
    a = _ledger(memory_store, group_id=-1)
    b = _ledger(memory_store, group_id=-2)
    asyncio.run(a.increment(1))
    assert asyncio.run(b.get_score(1)) is None
