"""
Page steps used by the orchestrator.

Bundles the form filler, CAPTCHA helper and submission trigger behind one
object so the orchestrator's state machine can be driven by a fake in tests.
"""

from playwright.async_api import Page

from services.tcvs.captcha import CaptchaPatchReport, apply_captcha_workarounds
from services.tcvs.config import TcvsConfig
from services.tcvs.form_filler import fill_form, navigate_to_form
from services.tcvs.models import SubmissionRequest
from services.tcvs.submission import trigger_submission
from utils.exceptions import ExtractionError


class PlaywrightSubmissionSteps:
    def __init__(self, config: TcvsConfig):
        self.config = config

    async def navigate(self, page: Page) -> None:
        await navigate_to_form(
            page,
            self.config.tcvs_url,
            navigation_timeout=self.config.navigation_timeout,
            form_timeout=self.config.form_timeout,
        )

    async def fill(self, page: Page, request: SubmissionRequest) -> None:
        await fill_form(page, request)

    async def handle_captcha(self, page: Page) -> CaptchaPatchReport:
        return await apply_captcha_workarounds(page)

    async def submit(self, page: Page, request: SubmissionRequest) -> str:
        return await trigger_submission(
            page,
            request,
            settle_seconds=self.config.settle_seconds,
            timeout=self.config.submission_timeout,
        )

    async def read_content(self, page: Page) -> str:
        try:
            return await page.content()
        except Exception as e:
            raise ExtractionError(f"Could not read result page: {e}") from e
