"""Tests for per-attempt browser session lifecycle."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from services.tcvs.browser_session import BrowserSessionManager
from services.tcvs.config import TcvsConfig
from utils.exceptions import BrowserConnectionError


@pytest.fixture
def fake_playwright():
    page = MagicMock()
    page.close = AsyncMock()
    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()
    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=browser)
    pw.chromium.connect_over_cdp = AsyncMock(return_value=browser)
    pw.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=pw)

    with patch("services.tcvs.browser_session.async_playwright", return_value=starter):
        yield pw, browser, context, page


@pytest.mark.asyncio
async def test_local_launch_and_release(fake_playwright):
    pw, browser, context, page = fake_playwright

    async with BrowserSessionManager(TcvsConfig(headless=True)) as session:
        assert session.page is page
        assert session.endpoint == "local"

    pw.chromium.launch.assert_awaited_once()
    assert pw.chromium.launch.await_args.kwargs["headless"] is True
    pw.chromium.connect_over_cdp.assert_not_called()
    assert browser.new_context.await_args.kwargs["viewport"] == {"width": 1280, "height": 800}
    page.close.assert_awaited_once()
    context.close.assert_awaited_once()
    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()
    assert session.page is None


@pytest.mark.asyncio
async def test_remote_connect(fake_playwright):
    pw, browser, _, _ = fake_playwright
    config = TcvsConfig(browserless_api_key="secret", browserless_endpoint="wss://browser.example.test")

    async with BrowserSessionManager(config):
        pass

    assert pw.chromium.connect_over_cdp.await_args.args[0] == "wss://browser.example.test?token=secret"
    pw.chromium.launch.assert_not_called()
    browser.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_released_when_body_raises(fake_playwright):
    pw, browser, _, page = fake_playwright

    with pytest.raises(RuntimeError):
        async with BrowserSessionManager(TcvsConfig()):
            raise RuntimeError("navigation blew up")

    page.close.assert_awaited_once()
    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_connect_failure(fake_playwright):
    pw, browser, _, _ = fake_playwright
    browser.new_context = AsyncMock(side_effect=RuntimeError("Target closed"))

    with pytest.raises(BrowserConnectionError) as exc_info:
        async with BrowserSessionManager(TcvsConfig()):
            pass

    assert exc_info.value.details["endpoint"] == "local"
    browser.close.assert_awaited_once()
    pw.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_is_idempotent(fake_playwright):
    pw, _, _, _ = fake_playwright
    session = BrowserSessionManager(TcvsConfig())
    await session.open()

    await session.close()
    await session.close()

    pw.stop.assert_awaited_once()
