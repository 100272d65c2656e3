"""Application runtime wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from xpbot.adapters.transport import ChatTransport
from xpbot.audit.audit_logger import ModerationAuditLogger
from xpbot.bot.templates import not_enough_xp_text
from xpbot.config.secrets import load_runtime_secrets
from xpbot.config.settings import Settings, apply_env_overrides, ensure_storage_dirs, load_settings
from xpbot.core.ledger import ledger_factory
from xpbot.core.ranking import RankingPresenter
from xpbot.core.router import EventRouter
from xpbot.core.store import RankedStore, RedisRankedStore
from xpbot.security.content_gate import ContentGate
from xpbot.security.rate_limit import RateLimiter


class AppRuntime:
    def __init__(
        self,
        workspace_root: Path,
        settings_path: Path,
        store: Optional[RankedStore] = None,
        telegram_bot_token: Optional[str] = None,
    ) -> None:
        self.workspace_root = workspace_root.resolve()
        self.settings: Settings = apply_env_overrides(load_settings(settings_path))
        ensure_storage_dirs(self.workspace_root, self.settings)

        if telegram_bot_token is None:
            secrets = load_runtime_secrets(
                backend=self.settings.secrets.backend,
                service_name=self.settings.secrets.service_name,
            )
            telegram_bot_token = secrets.telegram_bot_token
        self.telegram_bot_token = telegram_bot_token

        self.store: RankedStore = store or RedisRankedStore.from_url(self.settings.store.url)
        self.ledger_for = ledger_factory(self.store, self.settings.store.prefix)
        self.rate_limiter = RateLimiter(self.store, self.settings.store.prefix)
        self.audit: Optional[ModerationAuditLogger] = None
        if self.settings.audit.enabled:
            self.audit = ModerationAuditLogger(self.workspace_root / self.settings.audit.jsonl_dir)

    def build_router(self, transport: ChatTransport) -> EventRouter:
        min_xp = self.settings.xp.min_xp
        gate = ContentGate(
            ledger_for=self.ledger_for,
            transport=transport,
            min_xp=min_xp,
            rejection_text=not_enough_xp_text(self.settings.ui.language),
            audit=self.audit,
        )
        presenter = RankingPresenter(ledger_for=self.ledger_for, transport=transport, min_xp=min_xp)
        return EventRouter(
            ledger_for=self.ledger_for,
            rate_limiter=self.rate_limiter,
            gate=gate,
            presenter=presenter,
            transport=transport,
            settings=self.settings,
        )

    async def close(self) -> None:
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()
