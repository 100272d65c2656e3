"""Secret store interface for the bot token."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

TELEGRAM_TOKEN_ACCOUNT = "telegram_bot_token"


class SecretStoreError(RuntimeError):
    """Raised when a required secret is missing or its backend fails."""


class SecretStore(ABC):
    @abstractmethod
    def get_secret(self, account: str) -> Optional[str]:
        """Return the stored value, or None when the account has no value."""

    @abstractmethod
    def describe(self, account: str) -> str:
        """Where the account is looked up, for error messages."""

    def require(self, account: str) -> str:
        value = (self.get_secret(account) or "").strip()
        if not value:
            raise SecretStoreError(f"{account} is not set ({self.describe(account)})")
        return value
