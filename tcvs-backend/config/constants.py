"""
Application Constants

Centralizes the fixed facts about the TCVS page and the browser profile used
to drive it. Selectors here track the live site's markup and are the first
thing to check when submissions start failing.

Usage:
    from config.constants import FIELD_SELECTORS, USER_AGENT
"""

# =============================================================================
# Browser Profile
# =============================================================================

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

VIEWPORT = {"width": 1280, "height": 800}

# Flags for launching Chromium inside containers / serverless hosts
BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-accelerated-2d-canvas',
    '--no-first-run',
    '--no-zygote',
    '--disable-gpu',
]

# =============================================================================
# TCVS Form
# =============================================================================

# Request attribute -> input selector, in typing order
FIELD_SELECTORS = {
    "issue_date": "#issue_date",
    "symbol": "#symbol_number",
    "serial": "#serial_number",
    "check_amount": "#amount",
    "rtn": "#bank_rtn",
}

# Query parameter names used by the URL fallback trigger
FIELD_QUERY_PARAMS = {
    "issue_date": "issueDate",
    "symbol": "symbol",
    "serial": "serial",
    "check_amount": "amount",
    "rtn": "rtn",
}

FORM_SELECTOR = "form"

# Pause after each field (seconds); the last field gets a longer pause
FIELD_DELAY = 0.3
FINAL_FIELD_DELAY = 0.5

# =============================================================================
# reCAPTCHA
# =============================================================================

CAPTCHA_SELECTORS = [
    ".g-recaptcha",
    "[data-sitekey]",
    "iframe[src*='recaptcha']",
]

CAPTCHA_RESPONSE_FIELD = "g-recaptcha-response"

# =============================================================================
# Submission
# =============================================================================

SUBMIT_BUTTON_SELECTOR = "button[type='submit'], input[type='submit']"

# Button text that identifies the verification trigger
SUBMIT_BUTTON_KEYWORDS = ["verify", "submit", "check"]
