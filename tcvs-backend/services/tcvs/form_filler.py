"""
Form Filler

Navigates to the TCVS page and types the five check fields. Keystrokes are
paced with small fixed pauses between fields.
"""

import asyncio

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from config.constants import FIELD_DELAY, FIELD_SELECTORS, FINAL_FIELD_DELAY, FORM_SELECTOR
from services.tcvs.models import SubmissionRequest
from utils.exceptions import FormNotFoundError, NavigationError
from utils.logging import get_logger

logger = get_logger(__name__)


async def navigate_to_form(
    page: Page,
    url: str,
    navigation_timeout: float = 60.0,
    form_timeout: float = 30.0,
) -> None:
    """
    Load the TCVS page and wait for its form.

    Raises:
        NavigationError: page did not load in time or failed to load
        FormNotFoundError: no form element appeared
    """
    logger.info(f"Navigating to {url}")
    try:
        await page.goto(url, wait_until="networkidle", timeout=navigation_timeout * 1000)
    except PlaywrightTimeoutError as e:
        raise NavigationError(
            f"TCVS page did not load within {navigation_timeout:.0f}s", url=url
        ) from e
    except PlaywrightError as e:
        raise NavigationError(f"TCVS page failed to load: {e}", url=url) from e

    try:
        await page.wait_for_selector(FORM_SELECTOR, state="attached", timeout=form_timeout * 1000)
    except PlaywrightTimeoutError as e:
        raise FormNotFoundError(
            f"No form appeared within {form_timeout:.0f}s", selector=FORM_SELECTOR
        ) from e


async def fill_form(page: Page, request: SubmissionRequest) -> None:
    """
    Type each request value into its input.

    Raises:
        FormNotFoundError: an expected input is missing
    """
    values = request.as_fields()
    last = len(FIELD_SELECTORS) - 1

    for index, (attr, selector) in enumerate(FIELD_SELECTORS.items()):
        try:
            await page.type(selector, values[attr])
        except PlaywrightError as e:
            raise FormNotFoundError(f"Could not type into {selector}: {e}", selector=selector) from e
        await asyncio.sleep(FINAL_FIELD_DELAY if index == last else FIELD_DELAY)

    logger.info("Form filled")
