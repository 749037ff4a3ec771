"""
reCAPTCHA helper for the TCVS form.

Best-effort only: when a reCAPTCHA widget is present, relax CSP, drop
attributes that hide the form from interaction, put a placeholder token in
the hidden response field and poke grecaptcha.execute(). Nothing here raises;
the outcome is reported and the submission carries on either way. The remote
side may still reject the submission.
"""

import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List

from playwright.async_api import Page

from config.constants import CAPTCHA_RESPONSE_FIELD, CAPTCHA_SELECTORS
from utils.logging import get_logger

logger = get_logger(__name__)


STRIP_ATTRIBUTES_JS = """
() => {
    let stripped = 0;
    const scopes = 'form [aria-hidden], form [inert], .g-recaptcha[aria-hidden], .g-recaptcha [aria-hidden]';
    document.querySelectorAll(scopes).forEach(el => {
        el.removeAttribute('aria-hidden');
        el.removeAttribute('inert');
        stripped++;
    });
    return stripped;
}
"""

INJECT_TOKEN_JS = """
([fieldName, token]) => {
    let field = document.getElementById(fieldName) || document.querySelector(`[name="${fieldName}"]`);
    if (!field) {
        const form = document.querySelector('form');
        if (!form) return false;
        field = document.createElement('textarea');
        field.id = fieldName;
        field.name = fieldName;
        field.style.display = 'none';
        form.appendChild(field);
    }
    field.value = token;
    field.innerHTML = token;
    return true;
}
"""

EXECUTE_JS = """
() => {
    if (window.grecaptcha && typeof window.grecaptcha.execute === 'function') {
        try {
            window.grecaptcha.execute();
            return true;
        } catch (e) {
            return false;
        }
    }
    return false;
}
"""


def generate_placeholder_token() -> str:
    """Token-shaped string for the g-recaptcha-response field."""
    return "03A" + secrets.token_urlsafe(48)


@dataclass
class CaptchaPatchReport:
    """What the helper managed to do on this page."""
    detected: bool = False
    csp_relaxed: bool = False
    attributes_stripped: int = 0
    token_injected: bool = False
    executed: bool = False
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected": self.detected,
            "csp_relaxed": self.csp_relaxed,
            "attributes_stripped": self.attributes_stripped,
            "token_injected": self.token_injected,
            "executed": self.executed,
            "errors": self.errors,
        }


async def detect_captcha(page: Page) -> bool:
    for selector in CAPTCHA_SELECTORS:
        if await page.query_selector(selector):
            logger.info(f"🔐 reCAPTCHA detected ({selector})")
            return True
    return False


async def apply_captcha_workarounds(page: Page, execute: bool = True) -> CaptchaPatchReport:
    """
    Run every patch step, recording failures instead of raising.

    Args:
        page: Page with the TCVS form loaded and filled
        execute: Whether to call grecaptcha.execute() afterwards
    """
    report = CaptchaPatchReport()

    try:
        report.detected = await detect_captcha(page)
    except Exception as e:
        report.errors.append(f"detect: {e}")
        logger.warning(f"⚠️ CAPTCHA detection failed: {e}")
        return report

    if not report.detected:
        return report

    try:
        cdp = await page.context.new_cdp_session(page)
        await cdp.send("Page.setBypassCSP", {"enabled": True})
        report.csp_relaxed = True
    except Exception as e:
        report.errors.append(f"csp: {e}")
        logger.warning(f"⚠️ Could not relax CSP: {e}")

    try:
        report.attributes_stripped = await page.evaluate(STRIP_ATTRIBUTES_JS)
    except Exception as e:
        report.errors.append(f"strip: {e}")
        logger.warning(f"⚠️ Could not strip blocking attributes: {e}")

    try:
        report.token_injected = await page.evaluate(
            INJECT_TOKEN_JS, [CAPTCHA_RESPONSE_FIELD, generate_placeholder_token()]
        )
    except Exception as e:
        report.errors.append(f"inject: {e}")
        logger.warning(f"⚠️ Token injection failed: {e}")

    if execute:
        try:
            report.executed = await page.evaluate(EXECUTE_JS)
        except Exception as e:
            report.errors.append(f"execute: {e}")
            logger.warning(f"⚠️ grecaptcha.execute failed: {e}")

    logger.info(f"CAPTCHA patch report: {report.to_dict()}")
    return report
