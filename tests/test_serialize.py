"""Tests for messages/serialize.py - message normalization and actions."""

import pytest

from fakes import BOT_ID, GROUP_JID, USER_JID, FakeTransport, make_raw
from kachina.messages import ContentType, serialize


def test_direct_chat_fields(transport):
    m = serialize(make_raw(text="hello", push_name="Ann"), transport)

    assert m.chat_id == USER_JID
    assert m.sender_id == USER_JID
    assert m.is_group_chat is False
    assert m.display_name == "Ann"
    assert m.id == "ABC123"
    assert m.from_self is False
    assert m.content_type is ContentType.TEXT
    assert m.raw_type == "conversation"
    assert m.text == "hello"
    assert m.quoted is None


def test_group_sender_is_participant(transport):
    raw = make_raw(text="!ping", chat=GROUP_JID, participant=USER_JID)
    m = serialize(raw, transport)

    assert m.is_group_chat is True
    assert m.chat_id == GROUP_JID
    assert m.sender_id == USER_JID


def test_media_fields(transport):
    raw = make_raw(
        {
            "imageMessage": {
                "caption": "look",
                "mimetype": "image/jpeg",
                "fileLength": "2048",
                "contextInfo": {"mentionedJid": [USER_JID]},
            }
        }
    )
    m = serialize(raw, transport)

    assert m.content_type is ContentType.IMAGE
    assert m.text == "look"
    assert m.caption == "look"
    assert m.mime_type == "image/jpeg"
    assert m.file_size_bytes == 2048
    assert m.mentioned_ids == (USER_JID,)


def test_quoted_message_is_normalized_one_level(transport):
    quoted_payload = {
        "extendedTextMessage": {
            "text": "inner",
            "contextInfo": {"quotedMessage": {"conversation": "deeper"}},
        }
    }
    raw = make_raw(
        {
            "extendedTextMessage": {
                "text": "outer",
                "contextInfo": {
                    "stanzaId": "QUOTED1",
                    "participant": "6281111111111@s.whatsapp.net",
                    "quotedMessage": quoted_payload,
                },
            }
        },
        chat=GROUP_JID,
        participant=USER_JID,
    )
    m = serialize(raw, transport)

    assert m.text == "outer"
    assert m.quoted is not None
    assert m.quoted.text == "inner"
    assert m.quoted.id == "QUOTED1"
    assert m.quoted.chat_id == GROUP_JID
    assert m.quoted.sender_id == "6281111111111@s.whatsapp.net"
    assert m.quoted.from_self is True
    assert m.quoted.quoted is None


def test_quoted_from_someone_else(transport):
    raw = make_raw(
        {
            "extendedTextMessage": {
                "text": "reply",
                "contextInfo": {
                    "stanzaId": "Q2",
                    "participant": USER_JID,
                    "quotedMessage": {"conversation": "original"},
                },
            }
        }
    )
    m = serialize(raw, transport)
    assert m.quoted.from_self is False
    assert m.quoted.text == "original"


@pytest.mark.parametrize(
    "content",
    [
        {"extendedTextMessage": {"text": "x"}},
        {"extendedTextMessage": {"text": "x", "contextInfo": None}},
        {"extendedTextMessage": {"text": "x", "contextInfo": {"stanzaId": "1"}}},
        {"conversation": "x"},
    ],
)
def test_missing_context_yields_no_quoted(transport, content):
    assert serialize(make_raw(content), transport).quoted is None


def test_view_once_wrapper_is_unwrapped_for_type_and_body(transport):
    raw = make_raw(
        {"viewOnceMessageV2": {"message": {"imageMessage": {"caption": "peek", "viewOnce": True}}}}
    )
    m = serialize(raw, transport)

    assert m.is_view_once is True
    assert m.raw_type == "viewOnceMessageV2"
    assert m.content_type is ContentType.IMAGE
    assert m.text == "peek"
    assert "viewOnceMessageV2" in m.raw_content


def test_event_without_chat_is_skipped(transport):
    assert serialize({"key": {}, "message": {"conversation": "x"}}, transport) is None


def test_event_without_content(transport):
    m = serialize({"key": {"remoteJid": USER_JID, "id": "1"}}, transport)
    assert m.text == ""
    assert m.content_type is ContentType.OTHER


@pytest.mark.asyncio
async def test_reply_quotes_original(transport):
    raw = make_raw(text="hi")
    m = serialize(raw, transport)

    await m.reply("pong", mentions=[USER_JID])

    assert transport.sent == [
        {
            "jid": USER_JID,
            "content": {"text": "pong", "mentions": [USER_JID]},
            "options": {"quoted": raw},
        }
    ]


@pytest.mark.asyncio
async def test_react_delete_forward(transport):
    raw = make_raw(text="hi")
    m = serialize(raw, transport)

    await m.react("👍")
    await m.delete()
    await m.forward(GROUP_JID)

    assert transport.sent[0]["content"] == {"react": {"text": "👍", "key": m.key}}
    assert transport.sent[1]["content"] == {"delete": m.key}
    assert transport.sent[2]["jid"] == GROUP_JID
    assert transport.sent[2]["content"] == {"forward": raw}


@pytest.mark.asyncio
async def test_copy_n_forward(transport):
    raw = make_raw(text="hi")
    m = serialize(raw, transport)

    await m.copy_n_forward(GROUP_JID)
    await m.copy_n_forward(USER_JID, readViewOnce=True)

    assert transport.copies == [
        {"jid": GROUP_JID, "message": raw, "options": None},
        {"jid": USER_JID, "message": raw, "options": {"readViewOnce": True}},
    ]
    assert transport.sent == []


@pytest.mark.asyncio
async def test_download_returns_bytes(transport):
    m = serialize(make_raw({"imageMessage": {"mimetype": "image/png"}}), transport)
    assert await m.download() == b"media-bytes"
    assert transport.download_calls == [m.raw]


@pytest.mark.asyncio
async def test_download_failure_returns_none():
    transport = FakeTransport()
    transport.media = RuntimeError("expired")
    m = serialize(make_raw({"imageMessage": {}}), transport)

    assert await m.download() is None


def test_own_id_device_suffix_is_ignored():
    transport = FakeTransport(user={"id": BOT_ID})
    raw = make_raw(
        {
            "extendedTextMessage": {
                "text": "t",
                "contextInfo": {
                    "participant": "6281111111111:3@s.whatsapp.net",
                    "quotedMessage": {"conversation": "q"},
                },
            }
        }
    )
    assert serialize(raw, transport).quoted.from_self is True
