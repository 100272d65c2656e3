import asyncio
from types import SimpleNamespace

from telegram.constants import ChatType, MessageEntityType
from telegram.ext import ApplicationBuilder

from xpbot.bot.handlers import TelegramHandlers, event_from_update
from xpbot.core.store import StoreError
from xpbot.main import ACTIVITY_GROUP, register_handlers
from xpbot.models.event import ChatKind, EventKind


def _update(chat_type=ChatType.SUPERGROUP, text="hi", **message_fields) -> SimpleNamespace:
    fields = {
        "message_id": 5,
        "text": text,
        "voice": None,
        "sticker": None,
        "photo": (),
        "video": None,
        "document": None,
        "entities": (),
        "caption_entities": (),
    }
    fields.update(message_fields)
    return SimpleNamespace(
        effective_message=SimpleNamespace(**fields),
        effective_chat=SimpleNamespace(id=-100, type=chat_type),
        effective_user=SimpleNamespace(id=7, first_name="Alice"),
    )


def test_text_update_becomes_text_event() -> None:
    event = event_from_update(_update())
    assert event is not None
    assert event.kind == EventKind.TEXT
    assert event.chat_kind == ChatKind.SUPERGROUP
    assert event.sender.user_id == 7


def test_photo_caption_links_are_collected() -> None:
    entity = SimpleNamespace(type=MessageEntityType.TEXT_LINK)
    event = event_from_update(_update(text=None, photo=(object(),), caption_entities=(entity,)))
    assert event is not None
    assert event.kind == EventKind.PHOTO
    assert event.entity_types == ["text_link"]


def test_private_chat_kind() -> None:
    event = event_from_update(_update(chat_type=ChatType.PRIVATE))
    assert event is not None and event.is_private


def test_update_without_user_is_skipped() -> None:
    update = _update()
    update.effective_user = None
    assert event_from_update(update) is None


def test_store_failure_is_isolated_to_one_event() -> None:
    calls = []

    class _Router:
        async def handle_activity(self, event):
            calls.append(event.message_id)
            raise StoreError("redis down")

    handlers = TelegramHandlers(_Router())  # type: ignore[arg-type]
    asyncio.run(handlers.activity(_update(), context=None))  # type: ignore[arg-type]
    asyncio.run(handlers.activity(_update(message_id=6), context=None))  # type: ignore[arg-type]
    assert calls == [5, 6]


def test_commands_and_activity_use_separate_groups() -> None:
    app = ApplicationBuilder().token("123456:TEST-TOKEN").build()
    register_handlers(app, TelegramHandlers(object()))  # type: ignore[arg-type]
    assert len(app.handlers[0]) == 3
    assert len(app.handlers[ACTIVITY_GROUP]) == 2


def test_message_kind_follows_attached_media() -> None:
    voice = event_from_update(_update(text=None, voice=SimpleNamespace(file_id="v")))
    sticker = event_from_update(_update(text=None, sticker=SimpleNamespace(file_id="s")))
    document = event_from_update(_update(text=None, document=SimpleNamespace(file_id="d")))
    assert (voice.kind, sticker.kind, document.kind) == (EventKind.VOICE, EventKind.STICKER, EventKind.DOCUMENT)
    assert event_from_update(_update(text=None)) is None
