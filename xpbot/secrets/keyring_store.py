"""OS credential store adapter (macOS Keychain, Windows Credential Manager, Secret Service)."""

from __future__ import annotations

import importlib
from typing import Optional

from xpbot.secrets.base import SecretStore, SecretStoreError


class KeyringSecretStore(SecretStore):
    def __init__(self, service_name: str) -> None:
        self._service_name = service_name
        try:
            self._keyring = importlib.import_module("keyring")
        except ImportError as exc:  # pragma: no cover - import guarded at runtime
            raise SecretStoreError("keyring package is required for credential store access") from exc

    def get_secret(self, account: str) -> Optional[str]:
        try:
            return self._keyring.get_password(self._service_name, account)
        except Exception as exc:
            raise SecretStoreError(f"failed to read credential store secret '{account}'") from exc

    def describe(self, account: str) -> str:
        return f"credential store service={self._service_name}"
