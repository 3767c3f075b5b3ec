"""Tests for messages/content.py - content variants and body extraction."""

import json

from kachina.messages.content import (
    ContentType,
    classify,
    extract_body,
    get_content_key,
    unwrap_view_once,
)


def test_conversation_text_is_returned_verbatim():
    assert extract_body({"conversation": "  Hello World  "}) == "  Hello World  "


def test_extended_text_body():
    assert extract_body({"extendedTextMessage": {"text": "abc"}}) == "abc"


def test_button_and_template_replies():
    assert extract_body({"buttonsResponseMessage": {"selectedButtonId": "btn-1"}}) == "btn-1"
    assert extract_body({"templateButtonReplyMessage": {"selectedId": "tpl-2"}}) == "tpl-2"


def test_list_reply_row_id():
    message = {"listResponseMessage": {"singleSelectReply": {"selectedRowId": "!menu"}}}
    assert extract_body(message) == "!menu"


def test_interactive_reply_parses_params_json():
    params = json.dumps({"id": "!ping", "title": "Ping"})
    message = {
        "interactiveResponseMessage": {
            "nativeFlowResponseMessage": {"paramsJson": params}
        }
    }
    assert extract_body(message) == "!ping"


def test_interactive_reply_with_bad_json_yields_empty_string():
    message = {
        "interactiveResponseMessage": {
            "nativeFlowResponseMessage": {"paramsJson": "{not json"}
        }
    }
    assert extract_body(message) == ""


def test_caption_fallback_for_media():
    assert extract_body({"imageMessage": {"caption": "!sticker"}}) == "!sticker"
    assert extract_body({"videoMessage": {"mimetype": "video/mp4"}}) == ""


def test_empty_or_missing_message():
    assert extract_body(None) == ""
    assert extract_body({}) == ""


def test_content_key_skips_bookkeeping_keys():
    message = {
        "senderKeyDistributionMessage": {"groupId": "x"},
        "messageContextInfo": {"deviceListMetadata": {}},
        "imageMessage": {"caption": "hi"},
    }
    assert get_content_key(message) == "imageMessage"
    assert classify("imageMessage") is ContentType.IMAGE
    assert classify("pollCreationMessage") is ContentType.OTHER
    assert classify(None) is ContentType.OTHER


def test_unwrap_view_once_one_level():
    inner = {"imageMessage": {"caption": "secret", "viewOnce": True}}
    message, wrapped = unwrap_view_once({"viewOnceMessageV2": {"message": inner}})
    assert wrapped is True
    assert message == inner

    plain = {"conversation": "hi"}
    assert unwrap_view_once(plain) == (plain, False)
