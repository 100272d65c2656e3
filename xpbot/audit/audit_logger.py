"""JSONL moderation audit log with hash-chain."""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEvent:
    ts: str
    event_id: str
    group_id: int
    event_type: str
    payload: dict[str, Any]
    prev_hash: str
    event_hash: str


class ModerationAuditLogger:
    def __init__(self, out_dir: Path) -> None:
        self._out_dir = out_dir
        self._out_dir.mkdir(parents=True, exist_ok=True)
        # group_id -> event_hash of the last line written; seeded from disk once
        self._heads: dict[int, str] = {}

    def jsonl_path_for(self, group_id: int) -> Path:
        return self._out_dir / f"{group_id}.jsonl"

    def append(self, group_id: int, event_type: str, payload: dict[str, Any]) -> AuditEvent:
        path = self.jsonl_path_for(group_id)
        prev_hash = self.last_hash_for(group_id)
        ts = datetime.now(timezone.utc).isoformat()
        event_id = f"evt_{uuid.uuid4().hex}"

        canonical = {
            "ts": ts,
            "event_id": event_id,
            "group_id": group_id,
            "event_type": event_type,
            "payload": payload,
            "prev_hash": prev_hash,
        }
        event_hash = hashlib.sha256(
            json.dumps(canonical, sort_keys=True, ensure_ascii=True).encode("utf-8")
        ).hexdigest()

        event = AuditEvent(
            ts=ts,
            event_id=event_id,
            group_id=group_id,
            event_type=event_type,
            payload=payload,
            prev_hash=prev_hash,
            event_hash=event_hash,
        )

        line = dict(canonical, event_hash=event_hash)
        with path.open("a", encoding="utf-8") as fp:
            fp.write(json.dumps(line, ensure_ascii=True) + "\n")
        self._heads[group_id] = event_hash
        return event

    def last_hash_for(self, group_id: int) -> str:
        head = self._heads.get(group_id)
        if head is None:
            head = self._last_hash(self.jsonl_path_for(group_id))
            self._heads[group_id] = head
        return head

    @staticmethod
    def _last_hash(path: Path) -> str:
        if not path.exists():
            return "GENESIS"
        last: Optional[str] = None
        with path.open("r", encoding="utf-8") as fp:
            for line in fp:
                row = json.loads(line)
                last = row.get("event_hash")
        return last or "GENESIS"
