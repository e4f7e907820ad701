"""Lightweight Telegram notification for command-file runs.

Sends plain-text messages to a Telegram channel via the Bot API for:
- Run start
- Final run summary
- Errors

No retry logic; notifications are non-critical.
"""

from __future__ import annotations

import os

import httpx


TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
) -> bool:
    """Send a plain-text message to a Telegram channel.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.

    Returns:
        True if message was sent successfully, False otherwise.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    if not token:
        return False

    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not chat_id:
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
            return bool(data.get("ok", False))
    except (httpx.HTTPError, ValueError):
        return False


def format_run_start(source: str) -> str:
    """Format run start notification message."""
    return f"Robot run started\nCommands: {source}"


def format_run_summary(
    run_id: str,
    total_commands: int,
    applied: int,
    ignored: int,
    runtime_seconds: float,
) -> str:
    """Format final run summary message."""
    return (
        f"Robot run {run_id} finished\n"
        f"Commands: {total_commands} ({applied} applied, {ignored} ignored)\n"
        f"Runtime: {runtime_seconds:.3f}s"
    )


def format_error(error_msg: str, context: str = "") -> str:
    """Format error notification message."""
    if context:
        return f"Robot run error ({context}): {error_msg}"
    return f"Robot run error: {error_msg}"
