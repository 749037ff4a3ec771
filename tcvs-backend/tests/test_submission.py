"""
Tests for submission triggering.

Pages are AsyncMock doubles; the settle wait is patched out except where it
is under test.
"""

import asyncio
from urllib.parse import parse_qs, urlsplit

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from services.tcvs.submission import (
    build_fallback_url,
    trigger_submission,
    wait_for_settle,
)
from utils.exceptions import SubmissionTriggerError


class TestBuildFallbackUrl:

    def test_adds_fields_and_token(self, sample_request):
        url = build_fallback_url("https://tcvs.example.test/verify", sample_request, "03Atoken")
        parts = urlsplit(url)
        query = parse_qs(parts.query)

        assert parts.path == "/verify"
        assert query["issueDate"] == ["12/06/24"]
        assert query["symbol"] == ["4045"]
        assert query["serial"] == ["57285965"]
        assert query["amount"] == ["10.00"]
        assert query["rtn"] == ["000000518"]
        assert query["g-recaptcha-response"] == ["03Atoken"]

    def test_keeps_existing_params(self, sample_request):
        url = build_fallback_url("https://tcvs.example.test/?lang=en&serial=old", sample_request, "t")
        query = parse_qs(urlsplit(url).query)

        assert query["lang"] == ["en"]
        assert query["serial"] == ["57285965"]


@pytest.fixture
def no_settle():
    with patch("services.tcvs.submission.wait_for_settle", new=AsyncMock(return_value="response")) as settle:
        yield settle


class TestTriggerSubmission:

    @pytest.mark.asyncio
    async def test_submit_event_first(self, mock_page, sample_request, no_settle):
        mock_page.evaluate = AsyncMock(return_value=True)

        name = await trigger_submission(mock_page, sample_request, settle_seconds=2, timeout=30)

        assert name == "submit_event"
        no_settle.assert_awaited_once_with(mock_page, 2, 30)
        mock_page.goto.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_to_button_click(self, mock_page, sample_request, no_settle):
        mock_page.evaluate = AsyncMock(side_effect=RuntimeError("execution context destroyed"))
        button = MagicMock()
        button.bounding_box = AsyncMock(return_value={"x": 100, "y": 200, "width": 80, "height": 40})
        mock_page.query_selector = AsyncMock(return_value=button)

        name = await trigger_submission(mock_page, sample_request)

        assert name == "submit_button"
        mock_page.mouse.click.assert_awaited_once_with(140, 220)

    @pytest.mark.asyncio
    async def test_falls_back_to_button_text(self, mock_page, sample_request, no_settle):
        mock_page.evaluate = AsyncMock(side_effect=[False, True])

        name = await trigger_submission(mock_page, sample_request)

        assert name == "button_text"
        assert mock_page.evaluate.await_args_list[1].args[1] == ["verify", "submit", "check"]

    @pytest.mark.asyncio
    async def test_falls_back_to_url_parameters(self, mock_page, sample_request, no_settle):
        name = await trigger_submission(mock_page, sample_request)

        assert name == "url_parameters"
        url = mock_page.goto.await_args.args[0]
        assert "serial=57285965" in url
        assert "g-recaptcha-response=03A" in url

    @pytest.mark.asyncio
    async def test_all_strategies_fail(self, mock_page, sample_request, no_settle):
        mock_page.goto = AsyncMock(side_effect=RuntimeError("net::ERR_ABORTED"))

        with pytest.raises(SubmissionTriggerError) as exc_info:
            await trigger_submission(mock_page, sample_request)

        assert exc_info.value.details["attempted"] == [
            "submit_event", "submit_button", "button_text", "url_parameters",
        ]
        no_settle.assert_not_called()


class TestWaitForSettle:

    @pytest.mark.asyncio
    async def test_response_wins(self, mock_page):
        async def wait_for_event(event, timeout=None):
            if event == "response":
                return MagicMock()
            await asyncio.Event().wait()

        mock_page.wait_for_event = AsyncMock(side_effect=wait_for_event)

        assert await wait_for_settle(mock_page, 0, 5) == "response"

    @pytest.mark.asyncio
    async def test_nothing_happens(self, mock_page):
        async def never(event, timeout=None):
            await asyncio.Event().wait()

        mock_page.wait_for_event = AsyncMock(side_effect=never)

        assert await wait_for_settle(mock_page, 0, 0.05) == "timeout"
