"""
CLI commands for kachina.

Uses Typer for command-line interface.
"""

import asyncio
import signal
from pathlib import Path
from typing import Optional

import typer

from kachina.client import Client
from kachina.config import load_config
from kachina.config.loader import DEFAULT_CONFIG_PATH
from kachina.errors import ConfigurationError
from kachina.helpers.logger import setup_logging
from kachina.helpers.sticker import StickerType, create_sticker
from kachina.plugins.registry import PluginRegistry
from kachina.transport import resolve_transport_factory


app = typer.Typer(
    name="kachina",
    help="Kachina — plugin-driven WhatsApp bot framework",
)


def _fail(message: str) -> None:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def run(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH, "--config", "-c", help="Config JSON file"
    ),
    transport: Optional[str] = typer.Option(
        None, "--transport", "-t", help="Transport factory as module:attribute"
    ),
    plugins: Optional[Path] = typer.Option(
        None, "--plugins", "-p", help="Plugin directory"
    ),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Command prefix"),
):
    """
    Start the bot.

    This runs:
    - Transport session (QR or pairing-code login)
    - Plugin loading from the plugin directory
    - Command dispatch until SIGINT/SIGTERM
    """
    try:
        config = load_config(config_path)
        if transport:
            config.transport = transport
        if plugins:
            config.plugins_dir = plugins
        if prefix:
            config.prefix = prefix
        setup_logging(config.log_level)
        factory = resolve_transport_factory(config.transport)
        if config.login_method == "pairing":
            config.pairing_number()
    except ConfigurationError as e:
        _fail(str(e))

    client = Client(config, factory)

    @client.on("pairing.code")
    def _show_code(code: str) -> None:
        typer.echo(f"\nPairing code: {code}\n")

    async def run_client() -> None:
        shutdown_event = asyncio.Event()
        loop = asyncio.get_running_loop()

        def _handle_signal():
            typer.echo("\nShutdown signal received, stopping...")
            shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _handle_signal)

        @client.on("logout")
        def _on_logout() -> None:
            shutdown_event.set()

        if config.plugins_dir:
            client.load_plugins(config.plugins_dir)

        try:
            await client.start()
            await shutdown_event.wait()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            await client.stop()
            typer.echo("Goodbye!")

    try:
        asyncio.run(run_client())
    except ConfigurationError as e:
        _fail(str(e))


@app.command()
def status(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH, "--config", "-c", help="Config JSON file"
    ),
):
    """Show configuration."""
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        _fail(str(e))

    typer.echo("\n=== Kachina Status ===")
    typer.echo(f"Session: {config.session_id}")
    typer.echo(f"Login: {config.login_method}")
    typer.echo(f"Prefix: {config.prefix}")
    typer.echo(f"Owners: {', '.join(config.owners) or '(none)'}")
    typer.echo(f"Plugins: {config.plugins_dir or '(none)'}")
    typer.echo(f"Database: {config.database_path}")
    typer.echo(f"Transport: {config.transport or '(not set)'}")
    typer.echo("")


@app.command("plugins")
def list_plugins(
    directory: Path = typer.Argument(..., help="Plugin directory"),
):
    """Load a plugin directory and list what was found."""
    registry = PluginRegistry()
    loaded = registry.load_all(directory)
    if not registry.is_loaded:
        _fail(f"Plugin directory not found: {directory}")

    typer.echo(f"\n{loaded} plugin(s) loaded from {directory}\n")
    for plugin in registry.list():
        aliases = ", ".join(plugin.aliases)
        category = plugin.category or "other"
        typer.echo(f"  {plugin.name} [{category}]: {aliases}")
        if plugin.description:
            typer.echo(f"    {plugin.description}")
    typer.echo("")


@app.command()
def sticker(
    source: Path = typer.Argument(..., help="Source image"),
    output: Path = typer.Argument(..., help="Output .webp file"),
    pack: str = typer.Option("Sticker", "--pack", help="Sticker pack name"),
    author: str = typer.Option("Kachina Bot", "--author", help="Sticker pack author"),
    sticker_type: StickerType = typer.Option(
        StickerType.DEFAULT, "--type", help="Canvas shape"
    ),
    quality: int = typer.Option(50, "--quality", min=1, max=100),
):
    """Convert an image into a WhatsApp sticker."""
    if not source.is_file():
        _fail(f"File not found: {source}")

    data = create_sticker(
        source.read_bytes(),
        pack=pack,
        author=author,
        type=sticker_type,
        quality=quality,
    )
    output.write_bytes(data)
    typer.echo(f"✓ Sticker written to {output} ({len(data)} bytes)")


def main() -> None:
    """Entry point for CLI."""
    app()
