"""Click CLI: serve the HTTP endpoint or send a single message."""

from __future__ import annotations

import asyncio
import json
import logging

import click
import uvicorn

from tgsend.config import ConfigurationError, Settings
from tgsend.telegram.client import TelegramClient


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level for the process.",
)
def cli(log_level: str) -> None:
    """Forward text messages to Telegram chats."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(host: str, port: int) -> None:
    """Run the HTTP endpoint under uvicorn."""
    uvicorn.run(
        "tgsend.api.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


@cli.command()
@click.argument("chat_id")
@click.argument("text")
def send(chat_id: str, text: str) -> None:
    """Send TEXT to CHAT_ID and print Telegram's response."""
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    client = TelegramClient(
        settings.bot_token,
        api_base=settings.api_base,
        timeout=settings.request_timeout,
    )
    result = asyncio.run(client.send_message(chat_id, text))
    if not result.ok:
        failure = result.failure
        if failure is None:
            raise click.ClickException("Send failed without failure details")
        detail = failure.description or failure.message
        click.echo(f"Error ({failure.kind.value}): {detail}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(result.response, indent=2))
