"""Reply with bot status."""

import platform
import time

from kachina.helpers.utils import format_time

STARTED = time.monotonic()

name = "ping"
commands = ["ping", "status"]
category = "info"
description = "Check bot status and response time"


async def execute(ctx):
    start = time.perf_counter()
    await ctx.message.react("⏳")
    elapsed = time.perf_counter() - start

    await ctx.message.reply(
        "*🤖 BOT STATUS*\n\n"
        f"📊 Response: {elapsed:.3f}s\n"
        f"⏰ Uptime: {format_time(time.monotonic() - STARTED)}\n"
        f"🖥️ Platform: {platform.system()} {platform.machine()}\n"
        f"🐍 Python: {platform.python_version()}"
    )
    await ctx.message.react("✅")
