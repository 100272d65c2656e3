"""Environment variable secret adapter."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from xpbot.secrets.base import TELEGRAM_TOKEN_ACCOUNT, SecretStore, SecretStoreError

ACCOUNT_ENV_VARS = {
    TELEGRAM_TOKEN_ACCOUNT: "TELEGRAM_TOKEN",
}


def _env_var(account: str) -> str:
    var = ACCOUNT_ENV_VARS.get(account)
    if var is None:
        raise SecretStoreError(f"no environment variable mapped for secret '{account}'")
    return var


class EnvSecretStore(SecretStore):
    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get_secret(self, account: str) -> Optional[str]:
        return self._environ.get(_env_var(account))

    def describe(self, account: str) -> str:
        return f"${_env_var(account)}"
