"""XP Bot Telegram entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from telegram import BotCommand
from telegram.ext import Application, ApplicationBuilder, CommandHandler, MessageHandler, filters

from xpbot.adapters.telegram_transport import TelegramTransport
from xpbot.bot.handlers import TelegramHandlers, on_error
from xpbot.config.settings import SettingsLoadError
from xpbot.core.runtime import AppRuntime
from xpbot.secrets.base import SecretStoreError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("telegram").setLevel(logging.WARNING)

# Commands are also seen by the activity handlers in this group.
ACTIVITY_GROUP = 1


def _commands_for_lang(lang: str) -> list[BotCommand]:
    if lang == "ja":
        return [
            BotCommand("xp", "自分のXPと順位を表示"),
            BotCommand("ranks", "上位3名を表示"),
            BotCommand("start", "使い方を表示"),
        ]
    return [
        BotCommand("xp", "Show your XP and rank"),
        BotCommand("ranks", "Show the top 3"),
        BotCommand("start", "Show help"),
    ]


def _build_post_init(lang: str):
    async def _post_init(application: Application) -> None:
        """Register command menu shown in Telegram chat UI."""
        await application.bot.set_my_commands(commands=_commands_for_lang(lang))

    return _post_init


def _build_post_shutdown(runtime: AppRuntime):
    async def _post_shutdown(application: Application) -> None:
        await runtime.close()

    return _post_shutdown


def register_handlers(app: Application, handlers: TelegramHandlers) -> None:
    app.add_handler(CommandHandler("start", handlers.start))
    app.add_handler(CommandHandler("xp", handlers.xp))
    app.add_handler(CommandHandler("ranks", handlers.ranks))
    app.add_handler(
        MessageHandler(
            filters.UpdateType.MESSAGE & (filters.TEXT | filters.VOICE | filters.Sticker.ALL),
            handlers.activity,
        ),
        group=ACTIVITY_GROUP,
    )
    app.add_handler(
        MessageHandler(
            filters.UpdateType.MESSAGE & (filters.PHOTO | filters.VIDEO | filters.Document.ALL),
            handlers.content,
        ),
        group=ACTIVITY_GROUP,
    )
    app.add_error_handler(on_error)


def main() -> int:
    parser = argparse.ArgumentParser(description="XP Bot Telegram runner")
    parser.add_argument("--config", help="Settings YAML path (default: config/xpbot.yaml)")
    args = parser.parse_args()

    workspace_root = Path(os.getenv("XPBOT_WORKSPACE_ROOT", Path(__file__).resolve().parents[1]))
    config_raw = (args.config or os.getenv("XPBOT_CONFIG_PATH", "")).strip()
    settings_path = Path(config_raw) if config_raw else workspace_root / "config" / "xpbot.yaml"
    logging.info("starting settings=%s", settings_path)

    try:
        runtime = AppRuntime(workspace_root=workspace_root, settings_path=settings_path)
    except SecretStoreError as exc:
        logging.error("startup blocked by missing secret: %s", exc)
        print(
            "Startup failed: Telegram bot token is missing.\n"
            f"- detail: {exc}\n"
            "Set $TELEGRAM_TOKEN, or store telegram_bot_token in the OS credential store "
            "and set secrets.backend: keyring."
        )
        return 2
    except SettingsLoadError as exc:
        logging.error("startup blocked by invalid settings: %s", exc)
        print(
            "Startup failed: settings are invalid.\n"
            f"- settings: {settings_path}\n"
            f"- detail: {exc}"
        )
        return 2

    settings = runtime.settings
    logging.info(
        "settings loaded min_xp=%s rate_limit_seconds=%s prefix=%s",
        settings.xp.min_xp,
        settings.xp.rate_limit_seconds,
        settings.store.prefix,
    )

    app = (
        ApplicationBuilder()
        .token(runtime.telegram_bot_token)
        .concurrent_updates(settings.telegram.concurrent_updates)
        .post_init(_build_post_init(settings.ui.language))
        .post_shutdown(_build_post_shutdown(runtime))
        .build()
    )
    router = runtime.build_router(TelegramTransport(app.bot))
    register_handlers(app, TelegramHandlers(router))

    app.run_polling(drop_pending_updates=settings.telegram.drop_pending_updates)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
