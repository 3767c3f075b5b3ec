"""Tests for helpers/sticker.py."""

import io
import json
import struct

import pytest
from PIL import Image

from kachina.helpers.sticker import (
    StickerType,
    create_circle_sticker,
    create_sticker,
    sticker_exif,
)


def _png(width: int = 300, height: int = 150) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(out, format="PNG")
    return out.getvalue()


class TestStickerExif:
    def test_payload_length_and_json(self):
        exif = sticker_exif("Pack", "Me", ["😀"], "id-1")
        header, payload = exif[:22], exif[22:]
        assert header[:4] == b"II*\x00"
        assert struct.unpack("<I", header[14:18])[0] == len(payload)
        assert json.loads(payload) == {
            "sticker-pack-id": "id-1",
            "sticker-pack-name": "Pack",
            "sticker-pack-publisher": "Me",
            "emojis": ["😀"],
        }


class TestCreateSticker:
    @pytest.mark.parametrize("sticker_type", list(StickerType))
    def test_renders_512_webp(self, sticker_type):
        data = create_sticker(_png(), type=sticker_type)
        with Image.open(io.BytesIO(data)) as image:
            assert image.format == "WEBP"
            assert image.size == (512, 512)

    def test_embeds_pack_metadata(self):
        data = create_sticker(_png(), pack="MyPack", author="Someone")
        assert b'"sticker-pack-name": "MyPack"' in data
        assert b'"sticker-pack-publisher": "Someone"' in data

    def test_circle_has_transparent_corners(self):
        data = create_circle_sticker(_png(512, 512))
        with Image.open(io.BytesIO(data)) as image:
            assert image.convert("RGBA").getpixel((0, 0))[3] == 0

    def test_type_accepts_string(self):
        assert create_sticker(_png(), type="crop")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            create_sticker(_png(), type="hexagon")
