from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest
import yaml

from xpbot.adapters.transport import ChatTransport, TransportError
from xpbot.core.store import RankedStore, StoreError
from xpbot.models.event import ChatEvent, ChatKind, DisplayIdentity, EventKind

DEFAULT_SETTINGS = Path(__file__).resolve().parents[1] / "config" / "xpbot.yaml"


class MemoryRankedStore(RankedStore):
    """Sorted sets and TTL keys held in dicts, ordered the way Redis orders them."""

    def __init__(self) -> None:
        self.sets: dict[str, dict[str, int]] = {}
        self.tickets: dict[str, float] = {}
        self.now = 0.0
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StoreError("store unavailable")

    def _desc(self, key: str) -> list[tuple[str, int]]:
        rows = self.sets.get(key, {})
        return sorted(rows.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)

    async def zincrby(self, key: str, delta: int, member: str) -> int:
        self._check()
        rows = self.sets.setdefault(key, {})
        rows[member] = rows.get(member, 0) + delta
        return rows[member]

    async def zscore(self, key: str, member: str) -> Optional[int]:
        self._check()
        return self.sets.get(key, {}).get(member)

    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        self._check()
        for index, (name, _score) in enumerate(self._desc(key)):
            if name == member:
                return index
        return None

    async def zcard(self, key: str) -> int:
        self._check()
        return len(self.sets.get(key, {}))

    async def zrangebyscore_first(self, key: str, min_score: int) -> Optional[tuple[str, int]]:
        self._check()
        rows = sorted(self.sets.get(key, {}).items(), key=lambda kv: (kv[1], kv[0]))
        for name, score in rows:
            if score >= min_score:
                return name, score
        return None

    async def zrevrange(self, key: str, start: int, stop: int) -> list[tuple[str, int]]:
        self._check()
        return self._desc(key)[start : stop + 1]

    async def zrem(self, key: str, member: str) -> None:
        self._check()
        rows = self.sets.get(key, {})
        rows.pop(member, None)
        if not rows:
            self.sets.pop(key, None)

    async def set_if_absent(self, key: str, ttl_seconds: int) -> bool:
        self._check()
        expires_at = self.tickets.get(key)
        if expires_at is not None and expires_at > self.now:
            return False
        self.tickets[key] = self.now + ttl_seconds
        return True


class RecordingTransport(ChatTransport):
    def __init__(self) -> None:
        self.messages: list[tuple[int, str]] = []
        self.mentions: list[tuple[int, int, str]] = []
        self.deleted: list[tuple[int, int]] = []
        self.members: dict[int, DisplayIdentity] = {}
        self.fail_delete = False

    async def send_message(self, chat_id: int, text: str, silent: bool = True) -> None:
        self.messages.append((chat_id, text))

    async def send_mention(self, chat_id: int, user: DisplayIdentity, text: str) -> None:
        self.mentions.append((chat_id, user.user_id, text))

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        if self.fail_delete:
            raise TransportError("not enough rights to delete")
        self.deleted.append((chat_id, message_id))

    async def resolve_member(self, chat_id: int, user_id: int) -> Optional[DisplayIdentity]:
        return self.members.get(user_id)


def make_event(
    user_id: int = 1,
    chat_id: int = -100,
    kind: EventKind = EventKind.TEXT,
    chat_kind: ChatKind = ChatKind.SUPERGROUP,
    text: Optional[str] = "hello",
    entity_types: Optional[list[str]] = None,
    message_id: int = 10,
    first_name: str = "Alice",
) -> ChatEvent:
    return ChatEvent(
        message_id=message_id,
        chat_id=chat_id,
        chat_kind=chat_kind,
        sender=DisplayIdentity(user_id=user_id, first_name=first_name),
        kind=kind,
        text=text,
        entity_types=entity_types or [],
    )


def write_settings(path: Path, **sections: dict) -> Path:
    data = yaml.safe_load(DEFAULT_SETTINGS.read_text(encoding="utf-8"))
    for key, value in sections.items():
        data.setdefault(key, {}).update(value)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def memory_store() -> MemoryRankedStore:
    return MemoryRankedStore()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def settings_file(tmp_path: Path):
    def _write(**sections: dict) -> Path:
        return write_settings(tmp_path / "xpbot.yaml", **sections)

    return _write
