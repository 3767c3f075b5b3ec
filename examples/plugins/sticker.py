"""Turn a replied-to or attached image into a sticker."""

from kachina.messages import ContentType

name = "sticker"
commands = ["sticker", "s"]
category = "tool"
description = "Convert an image into a sticker"


async def execute(ctx):
    message = ctx.message
    source = message.quoted if message.quoted and message.quoted.content_type is ContentType.IMAGE else message
    if source.content_type is not ContentType.IMAGE:
        await message.reply(f"Reply to an image with {ctx.prefix}{ctx.command}")
        return

    data = await source.download()
    if not data:
        await message.reply("❌ Could not download the image")
        return
    await ctx.client.send_sticker(message.chat_id, data, type=ctx.args[0] if ctx.args else "default")
