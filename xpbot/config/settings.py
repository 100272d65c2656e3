"""Settings loader for XP Bot."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

DEFAULT_MIN_XP = 15
DEFAULT_RATE_LIMIT_SECONDS = 15
DEFAULT_PREFIX = "TELEGRAM_XP_"


@dataclass(frozen=True)
class XpConfig:
    min_xp: int
    rate_limit_seconds: int


@dataclass(frozen=True)
class StoreConfig:
    url: str
    prefix: str


@dataclass(frozen=True)
class ModerationConfig:
    link_entity_types: list[str]


@dataclass(frozen=True)
class AuditConfig:
    enabled: bool
    jsonl_dir: str


@dataclass(frozen=True)
class TelegramConfig:
    concurrent_updates: bool
    drop_pending_updates: bool


@dataclass(frozen=True)
class UiConfig:
    language: str


@dataclass(frozen=True)
class SecretsConfig:
    backend: str
    service_name: str


@dataclass(frozen=True)
class Settings:
    version: str
    xp: XpConfig
    store: StoreConfig
    moderation: ModerationConfig
    audit: AuditConfig
    telegram: TelegramConfig
    ui: UiConfig
    secrets: SecretsConfig


class SettingsLoadError(RuntimeError):
    """Raised when settings cannot be loaded."""


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise SettingsLoadError(f"missing required settings key: {key}")
    return data[key]


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SettingsLoadError(f"{key} must be an object")
    return value


def _non_negative_int(value: Any, name: str) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError) as exc:
        raise SettingsLoadError(f"{name} must be an integer: {value!r}") from exc
    if out < 0:
        raise SettingsLoadError(f"{name} must be >= 0")
    return out


def load_settings(path: Path) -> Settings:
    if not path.exists():
        raise SettingsLoadError(f"settings file not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SettingsLoadError("settings root must be an object")

    xp_raw = _section(raw, "xp")
    store_raw = _section(raw, "store")
    moderation_raw = _section(raw, "moderation")
    audit_raw = _section(raw, "audit")
    telegram_raw = _section(raw, "telegram")
    ui_raw = _section(raw, "ui")
    secrets_raw = _section(raw, "secrets")

    url = str(store_raw.get("url", "redis://localhost:6379/0")).strip()
    if not url:
        raise SettingsLoadError("store.url must not be empty")
    prefix = str(store_raw.get("prefix", DEFAULT_PREFIX))

    link_types = moderation_raw.get("link_entity_types", ["text_link"])
    if not isinstance(link_types, list):
        raise SettingsLoadError("moderation.link_entity_types must be a list")

    language = str(ui_raw.get("language", "en")).strip().lower()
    if language not in {"en", "ja"}:
        raise SettingsLoadError(f"invalid ui.language: {language}")

    backend = str(secrets_raw.get("backend", "env")).strip().lower()
    if backend not in {"env", "keyring"}:
        raise SettingsLoadError(f"invalid secrets.backend: {backend}")
    service_name = str(secrets_raw.get("service_name", "xpbot")).strip()
    if not service_name:
        raise SettingsLoadError("secrets.service_name must not be empty")

    jsonl_dir = str(audit_raw.get("jsonl_dir", "data/audit")).strip()
    if not jsonl_dir:
        raise SettingsLoadError("audit.jsonl_dir must not be empty")

    return Settings(
        version=str(_require(raw, "version")),
        xp=XpConfig(
            min_xp=_non_negative_int(xp_raw.get("min_xp", DEFAULT_MIN_XP), "xp.min_xp"),
            rate_limit_seconds=_non_negative_int(
                xp_raw.get("rate_limit_seconds", DEFAULT_RATE_LIMIT_SECONDS),
                "xp.rate_limit_seconds",
            ),
        ),
        store=StoreConfig(url=url, prefix=prefix),
        moderation=ModerationConfig(link_entity_types=[str(x) for x in link_types]),
        audit=AuditConfig(enabled=bool(audit_raw.get("enabled", True)), jsonl_dir=jsonl_dir),
        telegram=TelegramConfig(
            concurrent_updates=bool(telegram_raw.get("concurrent_updates", False)),
            drop_pending_updates=bool(telegram_raw.get("drop_pending_updates", True)),
        ),
        ui=UiConfig(language=language),
        secrets=SecretsConfig(backend=backend, service_name=service_name),
    )


def apply_env_overrides(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Apply REDIS_URL, REDIS_PREFIX, MIN_XP and RATE_LIMIT when set and non-empty."""
    env = os.environ if environ is None else environ

    def _get(name: str) -> Optional[str]:
        value = (env.get(name) or "").strip()
        return value or None

    store = settings.store
    xp = settings.xp
    if _get("REDIS_URL"):
        store = replace(store, url=_get("REDIS_URL"))
    if _get("REDIS_PREFIX"):
        store = replace(store, prefix=_get("REDIS_PREFIX"))
    if _get("MIN_XP"):
        xp = replace(xp, min_xp=_non_negative_int(_get("MIN_XP"), "MIN_XP"))
    if _get("RATE_LIMIT"):
        xp = replace(xp, rate_limit_seconds=_non_negative_int(_get("RATE_LIMIT"), "RATE_LIMIT"))
    return replace(settings, store=store, xp=xp)


def ensure_storage_dirs(root: Path, settings: Settings) -> None:
    if settings.audit.enabled:
        (root / settings.audit.jsonl_dir).mkdir(parents=True, exist_ok=True)
