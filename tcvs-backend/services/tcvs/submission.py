"""
Submission Trigger

Fires the TCVS form's own submission. Strategies are tried in order until one
reports success:

1. submit_event   - synthetic submit event plus native form.submit()
2. submit_button  - mouse click at the centre of the submit button
3. button_text    - first button whose text looks like "verify"/"submit"
4. url_parameters - navigate to the current URL with the fields as query params

After the trigger a fixed settle pause is followed by a race between
navigation and any network response. Timing out on that race is not an error.
"""

import asyncio
from typing import Awaitable, Callable, List, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from playwright.async_api import Page

from config.constants import (
    CAPTCHA_RESPONSE_FIELD,
    FIELD_QUERY_PARAMS,
    SUBMIT_BUTTON_KEYWORDS,
    SUBMIT_BUTTON_SELECTOR,
)
from services.tcvs.captcha import generate_placeholder_token
from services.tcvs.models import SubmissionRequest
from utils.exceptions import SubmissionTriggerError
from utils.logging import get_logger

logger = get_logger(__name__)


SUBMIT_EVENT_JS = """
() => {
    const form = document.querySelector('form');
    if (!form) return false;
    form.dispatchEvent(new Event('submit', { bubbles: true, cancelable: true }));
    HTMLFormElement.prototype.submit.call(form);
    return true;
}
"""

BUTTON_TEXT_JS = """
(keywords) => {
    const buttons = Array.from(document.querySelectorAll('button, input[type="button"], input[type="submit"]'));
    for (const button of buttons) {
        const text = (button.innerText || button.value || '').toLowerCase();
        if (keywords.some(k => text.includes(k))) {
            button.click();
            return true;
        }
    }
    return false;
}
"""


def build_fallback_url(current_url: str, request: SubmissionRequest, token: str) -> str:
    """Current URL with every form field and a challenge token as query params."""
    parts = urlsplit(current_url)
    query = dict(parse_qsl(parts.query))
    for attr, value in request.as_fields().items():
        query[FIELD_QUERY_PARAMS[attr]] = value
    query[CAPTCHA_RESPONSE_FIELD] = token
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


# =============================================================================
# Strategies
# =============================================================================

async def _submit_event(page: Page, request: SubmissionRequest) -> bool:
    return bool(await page.evaluate(SUBMIT_EVENT_JS))


async def _submit_button(page: Page, request: SubmissionRequest) -> bool:
    button = await page.query_selector(SUBMIT_BUTTON_SELECTOR)
    if button is None:
        return False
    box = await button.bounding_box()
    if box is None:
        return False
    await page.mouse.click(box["x"] + box["width"] / 2, box["y"] + box["height"] / 2)
    return True


async def _button_text(page: Page, request: SubmissionRequest) -> bool:
    return bool(await page.evaluate(BUTTON_TEXT_JS, SUBMIT_BUTTON_KEYWORDS))


async def _url_parameters(page: Page, request: SubmissionRequest) -> bool:
    url = build_fallback_url(page.url, request, generate_placeholder_token())
    await page.goto(url, wait_until="domcontentloaded")
    return True


TRIGGER_STRATEGIES: List[Tuple[str, Callable[[Page, SubmissionRequest], Awaitable[bool]]]] = [
    ("submit_event", _submit_event),
    ("submit_button", _submit_button),
    ("button_text", _button_text),
    ("url_parameters", _url_parameters),
]


# =============================================================================
# Public API
# =============================================================================

async def wait_for_settle(page: Page, settle_seconds: float, timeout: float) -> str:
    """
    Pause, then race navigation against a network response.

    Returns:
        "navigation", "response" or "timeout"
    """
    await asyncio.sleep(settle_seconds)

    timeout_ms = timeout * 1000
    waiters = {
        asyncio.ensure_future(page.wait_for_event("framenavigated", timeout=timeout_ms)): "navigation",
        asyncio.ensure_future(page.wait_for_event("response", timeout=timeout_ms)): "response",
    }

    done, pending = await asyncio.wait(
        waiters.keys(), timeout=timeout, return_when=asyncio.FIRST_COMPLETED
    )
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)

    for task in done:
        if task.exception() is None:
            signal = waiters[task]
            logger.debug(f"Post-submit settle resolved by {signal}")
            return signal

    logger.info("No navigation or response after submit; continuing")
    return "timeout"


async def trigger_submission(
    page: Page,
    request: SubmissionRequest,
    settle_seconds: float = 2.0,
    timeout: float = 30.0,
) -> str:
    """
    Fire the form submission and wait for the page to react.

    Returns:
        Name of the strategy that fired

    Raises:
        SubmissionTriggerError: every strategy failed
    """
    attempted = []
    for name, strategy in TRIGGER_STRATEGIES:
        attempted.append(name)
        try:
            fired = await strategy(page, request)
        except Exception as e:
            logger.warning(f"Submit strategy {name} raised: {e}")
            continue

        if fired:
            logger.info(f"Submission triggered via {name}")
            await wait_for_settle(page, settle_seconds, timeout)
            return name

        logger.debug(f"Submit strategy {name} found nothing to trigger")

    raise SubmissionTriggerError(attempted=attempted)
