"""
Command dispatch: resolve a plugin, check access, run its handler.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kachina.helpers.logger import Logger
from kachina.helpers.utils import USER_SUFFIX, jid_to_number
from kachina.messages.serialize import Message
from kachina.plugins.parse import parse_command
from kachina.plugins.registry import Plugin, PluginRegistry

if TYPE_CHECKING:
    from kachina.client import Client

logger = logging.getLogger(__name__)
command_log = Logger(__name__)

OWNER_ONLY_NOTICE = "⚠️ This command is for owner only!"
GROUP_ONLY_NOTICE = "⚠️ This command can only be used in groups!"
PRIVATE_ONLY_NOTICE = "⚠️ This command can only be used in private chat!"
ADMIN_ONLY_NOTICE = "⚠️ This command is for group admins only!"
BOT_ADMIN_NOTICE = "⚠️ Bot must be admin to use this command!"


@dataclass
class DispatchSettings:
    """Prefix and owner list the dispatcher works with."""

    prefix: str = "!"
    owners: list[str] = field(default_factory=list)


@dataclass
class ExecutionContext:
    """Everything a plugin handler receives for one command."""

    client: "Client"
    message: Message
    args: list[str]
    command: str
    prefix: str
    transport: Any

    @property
    def text(self) -> str:
        """Arguments joined with single spaces."""
        return " ".join(self.args)


def is_owner(sender_id: str, owners: list[str]) -> bool:
    """True if the sender appears in `owners` as bare number or full id."""
    return sender_id in owners or jid_to_number(sender_id) in owners


def bot_jid(user: dict[str, Any] | None) -> str:
    """User JID of the bot account, without device suffix."""
    user_id = (user or {}).get("id", "")
    if not user_id:
        return ""
    return jid_to_number(user_id) + USER_SUFFIX


def group_admins(metadata: dict[str, Any]) -> set[str]:
    return {
        p.get("id")
        for p in metadata.get("participants") or []
        if p.get("admin") and p.get("id")
    }


class Dispatcher:
    """
    Executes plugin commands for normalized messages.

    Access checks run in a fixed order (owner, group, private, admin,
    bot admin); the first failing check replies with a short notice and
    stops. Failures of the checks or the handler are logged and reported
    back to the chat; they never propagate to the caller.
    """

    def __init__(
        self,
        client: "Client",
        registry: PluginRegistry,
        settings: DispatchSettings | None = None,
    ):
        self.client = client
        self.registry = registry
        self.settings = settings or DispatchSettings()

    async def _denial(self, plugin: Plugin, message: Message) -> str | None:
        """Notice to send if `message` may not run `plugin`, else None."""
        if plugin.owner_only and not is_owner(message.sender_id, self.settings.owners):
            return OWNER_ONLY_NOTICE
        if plugin.group_only and not message.is_group_chat:
            return GROUP_ONLY_NOTICE
        if plugin.private_only and message.is_group_chat:
            return PRIVATE_ONLY_NOTICE

        if message.is_group_chat and (plugin.require_admin or plugin.require_bot_admin):
            metadata = await self.client.group_metadata(message.chat_id)
            admins = group_admins(metadata)
            if plugin.require_admin and message.sender_id not in admins:
                return ADMIN_ONLY_NOTICE
            if plugin.require_bot_admin and bot_jid(self.client.user) not in admins:
                return BOT_ADMIN_NOTICE
        return None

    async def execute(self, message: Message) -> None:
        """Run the command carried by `message`, if any."""
        prefix = self.settings.prefix
        if not message.text or not message.text.startswith(prefix):
            return

        parsed = parse_command(message.text, prefix)
        if parsed is None or not parsed.command:
            return

        plugin = self.registry.find(parsed.command)
        if plugin is None:
            return

        try:
            notice = await self._denial(plugin, message)
            if notice is not None:
                await message.reply(notice)
                return

            context = ExecutionContext(
                client=self.client,
                message=message,
                args=parsed.args,
                command=parsed.command,
                prefix=prefix,
                transport=self.client.transport,
            )
            command_log.command(f"{prefix}{parsed.command}", message.sender_id)

            result = plugin.handler(context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.exception("Error executing %s", parsed.command)
            try:
                await message.reply(f"❌ Error: {e}")
            except Exception:
                logger.exception("Could not report error for %s", parsed.command)
