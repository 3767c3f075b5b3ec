"""
Sticker rendering with Pillow.

Images are fitted onto a 512x512 canvas and saved as WebP carrying the
sticker pack metadata WhatsApp reads from the EXIF block.
"""

import io
import json
import struct
from enum import Enum

from PIL import Image, ImageDraw, ImageOps

STICKER_SIZE = 512

# TIFF header with a single IFD entry (tag 0x5741) pointing at the JSON payload
_EXIF_HEADER = bytes.fromhex("49492a00080000000100415707000000000016000000")


class StickerType(str, Enum):
    DEFAULT = "default"
    FULL = "full"
    CROPPED = "crop"
    CIRCLE = "circle"
    ROUNDED = "rounded"


def sticker_exif(
    pack: str, author: str, categories: list[str] | None = None, sticker_id: str = ""
) -> bytes:
    """EXIF block holding the sticker pack JSON."""
    payload = json.dumps(
        {
            "sticker-pack-id": sticker_id,
            "sticker-pack-name": pack,
            "sticker-pack-publisher": author,
            "emojis": categories or [],
        },
        ensure_ascii=False,
    ).encode("utf-8")
    header = bytearray(_EXIF_HEADER)
    header[14:18] = struct.pack("<I", len(payload))
    return bytes(header) + payload


def _mask(size: int, radius: int | None) -> Image.Image:
    mask = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(mask)
    if radius is None:
        draw.ellipse((0, 0, size - 1, size - 1), fill=255)
    else:
        draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=radius, fill=255)
    return mask


def _render(image: Image.Image, sticker_type: StickerType, background: str) -> Image.Image:
    image = image.convert("RGBA")
    size = (STICKER_SIZE, STICKER_SIZE)

    if sticker_type is StickerType.FULL:
        canvas = image.resize(size, Image.Resampling.LANCZOS)
    elif sticker_type in (StickerType.CROPPED, StickerType.CIRCLE, StickerType.ROUNDED):
        canvas = ImageOps.fit(image, size, Image.Resampling.LANCZOS)
    else:
        fitted = ImageOps.contain(image, size, Image.Resampling.LANCZOS)
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        canvas.paste(fitted, ((size[0] - fitted.width) // 2, (size[1] - fitted.height) // 2))

    if sticker_type is StickerType.CIRCLE:
        canvas.putalpha(_mask(STICKER_SIZE, None))
    elif sticker_type is StickerType.ROUNDED:
        canvas.putalpha(_mask(STICKER_SIZE, STICKER_SIZE // 8))

    if background != "transparent":
        base = Image.new("RGBA", size, background)
        base.alpha_composite(canvas)
        canvas = base
    return canvas


def create_sticker(
    data: bytes,
    pack: str = "Sticker",
    author: str = "Kachina Bot",
    type: StickerType | str = StickerType.DEFAULT,
    categories: list[str] | None = None,
    id: str = "",
    quality: int = 50,
    background: str = "transparent",
) -> bytes:
    """
    Render image bytes into a WebP sticker.

    Args:
        data: Source image (any format Pillow can open).
        pack: Sticker pack name.
        author: Sticker pack publisher.
        type: Canvas shape, see StickerType.
        categories: Emoji categories.
        id: Sticker pack id.
        quality: WebP quality, 1-100.
        background: "transparent" or a colour Pillow understands.
    """
    sticker_type = StickerType(type)
    with Image.open(io.BytesIO(data)) as image:
        canvas = _render(image, sticker_type, background)

    out = io.BytesIO()
    canvas.save(
        out,
        format="WEBP",
        quality=quality,
        exif=sticker_exif(pack, author, categories, id),
    )
    return out.getvalue()


def create_full_sticker(data: bytes, **options) -> bytes:
    return create_sticker(data, **{**options, "type": StickerType.FULL})


def create_cropped_sticker(data: bytes, **options) -> bytes:
    return create_sticker(data, **{**options, "type": StickerType.CROPPED})


def create_circle_sticker(data: bytes, **options) -> bytes:
    return create_sticker(data, **{**options, "type": StickerType.CIRCLE})


def create_rounded_sticker(data: bytes, **options) -> bytes:
    return create_sticker(data, **{**options, "type": StickerType.ROUNDED})
