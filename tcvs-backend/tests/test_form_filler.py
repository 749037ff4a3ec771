"""Tests for navigation and form filling."""

import pytest
from unittest.mock import AsyncMock, call, patch

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from services.tcvs.form_filler import fill_form, navigate_to_form
from utils.exceptions import FormNotFoundError, NavigationError


class TestNavigateToForm:

    @pytest.mark.asyncio
    async def test_waits_for_network_idle_and_form(self, mock_page):
        await navigate_to_form(mock_page, "https://tcvs.example.test/", navigation_timeout=60, form_timeout=30)

        mock_page.goto.assert_awaited_once_with(
            "https://tcvs.example.test/", wait_until="networkidle", timeout=60000
        )
        mock_page.wait_for_selector.assert_awaited_once_with("form", state="attached", timeout=30000)

    @pytest.mark.asyncio
    async def test_timeout_maps_to_navigation_error(self, mock_page):
        mock_page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 60000ms exceeded"))

        with pytest.raises(NavigationError) as exc_info:
            await navigate_to_form(mock_page, "https://tcvs.example.test/")

        assert exc_info.value.status_code == 504
        assert exc_info.value.details["url"] == "https://tcvs.example.test/"

    @pytest.mark.asyncio
    async def test_load_failure_maps_to_navigation_error(self, mock_page):
        mock_page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))

        with pytest.raises(NavigationError):
            await navigate_to_form(mock_page, "https://tcvs.example.test/")

    @pytest.mark.asyncio
    async def test_missing_form(self, mock_page):
        mock_page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 30000ms exceeded"))

        with pytest.raises(FormNotFoundError):
            await navigate_to_form(mock_page, "https://tcvs.example.test/")


class TestFillForm:

    @pytest.mark.asyncio
    async def test_types_fields_in_order_with_pauses(self, mock_page, sample_request):
        with patch("services.tcvs.form_filler.asyncio.sleep", new=AsyncMock()) as sleep:
            await fill_form(mock_page, sample_request)

        assert mock_page.type.await_args_list == [
            call("#issue_date", "12/06/24"),
            call("#symbol_number", "4045"),
            call("#serial_number", "57285965"),
            call("#amount", "10.00"),
            call("#bank_rtn", "000000518"),
        ]
        assert [c.args[0] for c in sleep.await_args_list] == [0.3, 0.3, 0.3, 0.3, 0.5]

    @pytest.mark.asyncio
    async def test_missing_input(self, mock_page, sample_request):
        mock_page.type = AsyncMock(side_effect=PlaywrightError("No node found for selector: #amount"))

        with patch("services.tcvs.form_filler.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(FormNotFoundError) as exc_info:
                await fill_form(mock_page, sample_request)

        assert exc_info.value.details["selector"] == "#issue_date"
