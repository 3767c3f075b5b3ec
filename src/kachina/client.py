"""
Client — bridges transport events to framework events and plugin dispatch.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kachina.bus import events
from kachina.bus.emitter import EventEmitter
from kachina.bus.events import ConnectionUpdate, MessagesUpsert
from kachina.config.schema import ClientConfig
from kachina.errors import MediaDownloadError, ViewOnceError
from kachina.helpers.sticker import create_sticker
from kachina.messages.serialize import Message, serialize
from kachina.messages.view_once import NotViewOnce, match_view_once
from kachina.plugins.dispatch import DispatchSettings, Dispatcher
from kachina.plugins.registry import Plugin, PluginRegistry
from kachina.storage.database import Database
from kachina.transport.base import (
    DisconnectReason,
    Transport,
    TransportFactory,
    disconnect_status,
)

logger = logging.getLogger(__name__)


@dataclass
class ViewOnceMedia:
    """Media revealed from a view once message."""

    data: bytes
    type: str
    caption: str = ""
    mimetype: str = ""
    ptt: bool = False


class Client(EventEmitter):
    """
    WhatsApp bot client.

    - Connects through a transport built by `transport_factory`
    - Re-emits transport events as framework events (see `kachina.bus.events`)
    - Normalizes live messages and dispatches prefixed ones to plugins
    - Reconnects with exponential backoff unless logged out
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport_factory: TransportFactory | None = None,
        registry: PluginRegistry | None = None,
    ):
        super().__init__()
        self.config = config or ClientConfig()
        self._transport_factory = transport_factory
        self.transport: Transport | None = None
        self.user: dict[str, Any] | None = None
        self.is_ready = False

        self.plugins = registry or PluginRegistry()
        self.dispatcher = Dispatcher(
            self,
            self.plugins,
            DispatchSettings(prefix=self.config.prefix, owners=list(self.config.owners)),
        )

        self._db: Database | None = None
        self._reconnect_attempts = 0
        self._pairing_task: asyncio.Task[None] | None = None
        self._stopped = False

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> Transport:
        """
        Validate configuration, open a transport session and subscribe to it.

        Raises:
            ConfigurationError: for pairing logins without a valid number.
        """
        pairing_number = None
        if self.config.login_method == "pairing":
            pairing_number = self.config.pairing_number()

        if self._transport_factory is None:
            raise RuntimeError("Client has no transport factory")

        self._stopped = False
        transport = await self._transport_factory(self.config)
        if self._stopped:
            await transport.close()
            return transport
        self.transport = transport
        self._subscribe(transport)

        if pairing_number and not transport.registered:
            self._pairing_task = asyncio.create_task(
                self._request_pairing_code(transport, pairing_number)
            )
        return transport

    async def stop(self) -> None:
        """Cancel pending work and close the transport."""
        self._stopped = True
        if self._pairing_task and not self._pairing_task.done():
            self._pairing_task.cancel()
            try:
                await self._pairing_task
            except asyncio.CancelledError:
                pass
        if self.transport is not None:
            await self.transport.close()
        self.is_ready = False

    def _subscribe(self, transport: Transport) -> None:
        transport.on(events.CONNECTION_UPDATE, self._handle_connection_update)
        transport.on(events.MESSAGES_UPSERT, self._handle_messages_upsert)
        transport.on(events.GROUP_PARTICIPANTS_UPDATE, self._handle_group_update)
        transport.on(events.TRANSPORT_GROUPS_UPDATE, self._handle_groups_update)
        transport.on(events.TRANSPORT_CALL, self._handle_call)

    async def _request_pairing_code(self, transport: Transport, number: str) -> None:
        await asyncio.sleep(self.config.pairing_delay_s)
        try:
            code = await transport.request_pairing_code(number)
        except Exception as e:
            logger.error("Failed to request pairing code: %s", e)
            await self.emit(events.PAIRING_ERROR, e)
            return

        logger.info(
            "WhatsApp pairing code: %s (open WhatsApp > Settings > Linked Devices "
            "> Link a Device and enter the code)",
            code,
        )
        await self.emit(events.PAIRING_CODE, code)

    # -- transport event handlers ------------------------------------------

    async def _handle_connection_update(self, payload: dict[str, Any]) -> None:
        update = ConnectionUpdate.from_payload(payload)

        if update.qr and self.config.login_method == "qr":
            logger.info("Scan the QR code to log in")
            await self.emit(events.QR, update.qr)

        if update.connection == "close":
            self.is_ready = False
            status = disconnect_status(update.last_disconnect)
            if status == DisconnectReason.LOGGED_OUT:
                logger.warning("Logged out, not reconnecting")
                await self.emit(events.LOGOUT)
            elif not self._stopped:
                await self._reconnect(status)
        elif update.connection == "open":
            self.is_ready = True
            self._reconnect_attempts = 0
            self.user = self.transport.user if self.transport else None
            logger.info("Connected as %s", (self.user or {}).get("id", "?"))
            await self.emit(events.READY, self.user)
        elif update.connection == "connecting":
            await self.emit(events.CONNECTING)

    async def _reconnect(self, status: int | None) -> None:
        """
        Restart the session after the policy's backoff.

        A failed restart counts as an attempt and is retried until the
        policy gives up. Stopping the client during a backoff cancels the
        restart.
        """
        policy = self.config.reconnect
        while not self._stopped:
            self._reconnect_attempts += 1
            attempt = self._reconnect_attempts

            if policy.exhausted(attempt):
                logger.error("Giving up after %d reconnect attempts", attempt - 1)
                await self.emit(events.RECONNECT_FAILED, attempt - 1)
                return

            delay = policy.delay_for(attempt)
            logger.warning(
                "Connection closed (status %s), reconnecting in %.1fs (attempt %d)",
                status,
                delay,
                attempt,
            )
            await self.emit(events.RECONNECTING)
            if delay:
                await asyncio.sleep(delay)
            if self._stopped:
                logger.info("Client stopped during backoff, not reconnecting")
                return

            try:
                await self.start()
            except Exception as e:
                logger.error("Reconnect attempt %d failed: %s", attempt, e)
                continue
            return

    async def _handle_messages_upsert(self, payload: dict[str, Any]) -> None:
        batch = MessagesUpsert.from_payload(payload)
        if not batch.is_live:
            return

        for raw in batch.messages:
            message = serialize(raw, self.transport)
            if message is None:
                continue
            await self.emit(events.MESSAGE, message)

            if self.plugins.is_loaded and message.text.startswith(self.prefix):
                await self.dispatcher.execute(message)

    async def _handle_group_update(self, payload: Any) -> None:
        await self.emit(events.GROUP_UPDATE, payload)

    async def _handle_groups_update(self, payload: Any) -> None:
        await self.emit(events.GROUPS_UPDATE, payload)

    async def _handle_call(self, payload: Any) -> None:
        await self.emit(events.CALL, payload)

    # -- sending -------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self.transport is None:
            raise RuntimeError("Client is not started")
        return self.transport

    async def send_message(
        self, jid: str, content: dict[str, Any], options: dict[str, Any] | None = None
    ) -> Any:
        return await self._require_transport().send_message(jid, content, options)

    async def send_text(self, jid: str, text: str, **options: Any) -> Any:
        return await self.send_message(jid, {"text": text}, options or None)

    async def send_image(self, jid: str, data: bytes | str, caption: str = "", **options: Any) -> Any:
        content: dict[str, Any] = {"image": data}
        if caption:
            content["caption"] = caption
        return await self.send_message(jid, content, options or None)

    async def send_video(self, jid: str, data: bytes | str, caption: str = "", **options: Any) -> Any:
        content: dict[str, Any] = {"video": data}
        if caption:
            content["caption"] = caption
        return await self.send_message(jid, content, options or None)

    async def send_audio(
        self,
        jid: str,
        data: bytes | str,
        mimetype: str = "audio/mp4",
        ptt: bool = False,
        **options: Any,
    ) -> Any:
        content = {"audio": data, "mimetype": mimetype, "ptt": ptt}
        return await self.send_message(jid, content, options or None)

    async def send_document(
        self, jid: str, data: bytes | str, filename: str, mimetype: str, **options: Any
    ) -> Any:
        content = {"document": data, "fileName": filename, "mimetype": mimetype}
        return await self.send_message(jid, content, options or None)

    async def send_sticker(self, jid: str, data: bytes, **sticker_options: Any) -> Any:
        """Render `data` into a sticker (see `create_sticker`) and send it."""
        defaults = self.config.sticker
        sticker_options.setdefault("pack", defaults.pack)
        sticker_options.setdefault("author", defaults.author)
        sticker_options.setdefault("quality", defaults.quality)
        sticker = await asyncio.to_thread(create_sticker, data, **sticker_options)
        return await self.send_message(jid, {"sticker": sticker})

    async def send_contact(self, jid: str, contacts: list[dict[str, str]], **options: Any) -> Any:
        """`contacts` is a list of `{"displayName": ..., "vcard": ...}`."""
        return await self.send_message(jid, {"contacts": {"contacts": contacts}}, options or None)

    async def send_location(self, jid: str, latitude: float, longitude: float, **options: Any) -> Any:
        content = {"location": {"degreesLatitude": latitude, "degreesLongitude": longitude}}
        return await self.send_message(jid, content, options or None)

    async def send_poll(
        self, jid: str, name: str, values: list[str], selectable_count: int = 1, **options: Any
    ) -> Any:
        content = {"poll": {"name": name, "values": values, "selectableCount": selectable_count}}
        return await self.send_message(jid, content, options or None)

    async def send_react(self, jid: str, key: dict[str, Any], emoji: str) -> Any:
        return await self.send_message(jid, {"react": {"text": emoji, "key": key}})

    # -- view once -----------------------------------------------------------

    async def read_view_once(self, quoted: Message | dict[str, Any]) -> ViewOnceMedia:
        """
        Reveal the media of a quoted view once message.

        Raises:
            ViewOnceError: if `quoted` is not a view once message or its
                media has expired.
            MediaDownloadError: if every download strategy failed.
        """
        match = match_view_once(quoted)
        if isinstance(match, NotViewOnce):
            raise ViewOnceError(match.reason)

        content = match.content
        if not content.get("mediaKey") and not content.get("directPath") and not content.get("url"):
            raise ViewOnceError("View once media has expired")

        key = quoted.key if isinstance(quoted, Message) else quoted.get("key", {})
        candidates = [{"key": key, "message": match.message}]
        if isinstance(quoted, Message) and quoted.raw:
            candidates.append(quoted.raw)
        elif isinstance(quoted, dict) and "message" in quoted:
            candidates.append(quoted)

        transport = self._require_transport()
        last_error: Exception | None = None
        for candidate in candidates:
            try:
                data = await transport.download_media(candidate)
            except Exception as e:
                logger.debug("View once download strategy failed: %s", e)
                last_error = e
                continue
            if data:
                return ViewOnceMedia(
                    data=data,
                    type=match.media_type,
                    caption=content.get("caption") or "",
                    mimetype=content.get("mimetype") or "",
                    ptt=bool(content.get("ptt")),
                )

        raise MediaDownloadError(
            f"Could not download view once media: {last_error or 'no content found'}"
        )

    async def send_view_once(self, jid: str, quoted: Message | dict[str, Any], **options: Any) -> Any:
        """Reveal a view once message and send its media as a normal message."""
        media = await self.read_view_once(quoted)
        if media.type == "image":
            return await self.send_image(jid, media.data, media.caption, **options)
        if media.type == "video":
            return await self.send_video(jid, media.data, media.caption, **options)
        return await self.send_audio(
            jid, media.data, mimetype=media.mimetype or "audio/mp4", ptt=media.ptt, **options
        )

    # -- groups --------------------------------------------------------------

    async def group_metadata(self, jid: str) -> dict[str, Any]:
        return await self._require_transport().group_metadata(jid)

    async def group_participants_update(self, jid: str, participants: list[str], action: str) -> Any:
        """`action` is one of add, remove, promote, demote."""
        return await self._require_transport().group_participants_update(jid, participants, action)

    async def group_update_subject(self, jid: str, subject: str) -> Any:
        return await self._require_transport().group_update_subject(jid, subject)

    async def group_update_description(self, jid: str, description: str) -> Any:
        return await self._require_transport().group_update_description(jid, description)

    # -- storage -----------------------------------------------------------

    @property
    def db(self) -> Database:
        """Key-value store under `config.database_path`, created on first use."""
        if self._db is None:
            self._db = Database(self.config.database_path)
        return self._db

    # -- plugins -------------------------------------------------------------

    def load_plugin(self, path: str | Path) -> Plugin | None:
        return self.plugins.load(path)

    def load_plugins(self, directory: str | Path) -> int:
        return self.plugins.load_all(directory)

    @property
    def prefix(self) -> str:
        return self.dispatcher.settings.prefix

    @prefix.setter
    def prefix(self, prefix: str) -> None:
        if not prefix:
            raise ValueError("prefix must not be empty")
        self.config.prefix = prefix
        self.dispatcher.settings.prefix = prefix
