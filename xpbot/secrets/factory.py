"""Secret store factory based on settings."""

from __future__ import annotations

from xpbot.secrets.base import SecretStore, SecretStoreError
from xpbot.secrets.env_store import EnvSecretStore
from xpbot.secrets.keyring_store import KeyringSecretStore


def create_secret_store(backend: str = "env", service_name: str = "xpbot") -> SecretStore:
    kind = (backend or "").strip().lower()
    if kind == "env":
        return EnvSecretStore()
    if kind == "keyring":
        return KeyringSecretStore(service_name=service_name)
    raise SecretStoreError(f"unsupported secret backend: {backend} (supported: env, keyring)")
