import pytest

from xpbot.models.event import ChatEvent, ChatKind, DisplayIdentity, EventKind


def _payload(**overrides) -> dict:
    payload = {
        "message_id": 1,
        "chat_id": -100,
        "chat_kind": "group",
        "sender": {"user_id": 7, "first_name": "Alice"},
        "kind": "text",
        "text": "hi",
        "entity_types": ["url"],
    }
    payload.update(overrides)
    return payload


def test_group_and_supergroup_are_groups() -> None:
    assert ChatEvent.model_validate(_payload()).is_group
    assert ChatEvent.model_validate(_payload(chat_kind="supergroup")).is_group
    assert not ChatEvent.model_validate(_payload(chat_kind="private")).is_group


def test_has_entity_matches_configured_types() -> None:
    event = ChatEvent.model_validate(_payload())
    assert event.has_entity(frozenset({"url", "text_link"}))
    assert not event.has_entity(frozenset({"text_link"}))


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(Exception):
        ChatEvent.model_validate(_payload(extra_field=True))


def test_enum_fields_are_parsed() -> None:
    event = ChatEvent.model_validate(_payload(kind="photo"))
    assert event.kind == EventKind.PHOTO
    assert event.chat_kind == ChatKind.GROUP
    assert event.sender == DisplayIdentity(user_id=7, first_name="Alice")
