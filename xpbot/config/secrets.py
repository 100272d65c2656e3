"""Secret accessor facade.

Accounts:
- telegram_bot_token
"""

from __future__ import annotations

from dataclasses import dataclass

from xpbot.secrets.base import TELEGRAM_TOKEN_ACCOUNT, SecretStoreError
from xpbot.secrets.factory import create_secret_store


@dataclass(frozen=True)
class RuntimeSecrets:
    telegram_bot_token: str


def load_runtime_secrets(backend: str = "env", service_name: str = "xpbot") -> RuntimeSecrets:
    store = create_secret_store(backend=backend, service_name=service_name)
    return RuntimeSecrets(telegram_bot_token=store.require(TELEGRAM_TOKEN_ACCOUNT))


__all__ = ["RuntimeSecrets", "load_runtime_secrets", "SecretStoreError"]
