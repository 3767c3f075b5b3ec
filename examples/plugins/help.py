"""List loaded commands grouped by category."""

CATEGORY_EMOJIS = {
    "info": "📊",
    "owner": "👑",
    "group": "👥",
    "download": "⬇️",
    "fun": "🎮",
    "tool": "🔧",
}


async def handle(ctx):
    plugins = ctx.client.plugins.list()

    categories: dict[str, list] = {}
    for plugin in plugins:
        categories.setdefault(plugin.category or "other", []).append(plugin)

    lines = ["*📚 HELP MENU*", "", f"Total Commands: {len(plugins)}", ""]
    for category, items in categories.items():
        lines.append(f"{CATEGORY_EMOJIS.get(category, '📦')} *{category.upper()}*")
        for plugin in items:
            lines.append(f"  • {ctx.prefix}{', '.join(plugin.aliases)}")
            if plugin.description:
                lines.append(f"    _{plugin.description}_")
        lines.append("")

    await ctx.message.reply("\n".join(lines).rstrip())


plugin = {
    "name": "help",
    "commands": ["help", "menu"],
    "category": "info",
    "description": "Show available commands",
    "handler": handle,
}
