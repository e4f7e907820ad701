"""Unit tests for Telegram notifications (no network: httpx MockTransport)."""

import json
import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from blocksworld.monitoring.telegram_notifier import (
    format_error,
    format_run_start,
    format_run_summary,
    send_telegram,
)


@pytest.fixture
def mock_telegram(monkeypatch):
    """Route httpx.AsyncClient through a MockTransport; returns sent requests."""
    sent = []
    responses = {"handler": lambda request: httpx.Response(200, json={"ok": True})}

    def handler(request):
        sent.append(request)
        return responses["handler"](request)

    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        return real_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return sent, responses


class TestSendTelegram:
    @pytest.mark.asyncio
    async def test_no_token_returns_false(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        assert await send_telegram("hello", chat_id="123") is False

    @pytest.mark.asyncio
    async def test_no_chat_id_returns_false(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
        assert await send_telegram("hello", token="abc") is False

    @pytest.mark.asyncio
    async def test_sends_message(self, mock_telegram):
        sent, _ = mock_telegram
        assert await send_telegram("hello", chat_id="123", token="abc") is True

        assert len(sent) == 1
        assert sent[0].url == "https://api.telegram.org/botabc/sendMessage"
        assert json.loads(sent[0].content) == {"chat_id": "123", "text": "hello"}

    @pytest.mark.asyncio
    async def test_env_credentials(self, mock_telegram, monkeypatch):
        sent, _ = mock_telegram
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "envtoken")
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "999")

        assert await send_telegram("hi") is True
        assert "botenvtoken" in str(sent[0].url)

    @pytest.mark.asyncio
    async def test_api_not_ok(self, mock_telegram):
        _, responses = mock_telegram
        responses["handler"] = lambda request: httpx.Response(400, json={"ok": False})
        assert await send_telegram("hello", chat_id="123", token="abc") is False

    @pytest.mark.asyncio
    async def test_non_json_response(self, mock_telegram):
        _, responses = mock_telegram
        responses["handler"] = lambda request: httpx.Response(502, text="Bad Gateway")
        assert await send_telegram("hello", chat_id="123", token="abc") is False

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_telegram):
        _, responses = mock_telegram

        def fail(request):
            raise httpx.ConnectError("unreachable", request=request)

        responses["handler"] = fail
        assert await send_telegram("hello", chat_id="123", token="abc") is False


class TestFormatting:
    def test_run_start(self):
        assert format_run_start("input.txt") == "Robot run started\nCommands: input.txt"

    def test_run_summary(self):
        msg = format_run_summary("run_1", 8, 7, 1, 0.0123)
        assert "run_1" in msg
        assert "8 (7 applied, 1 ignored)" in msg
        assert "0.012s" in msg

    def test_error(self):
        assert format_error("boom") == "Robot run error: boom"
        assert format_error("boom", context="input.txt") == "Robot run error (input.txt): boom"
