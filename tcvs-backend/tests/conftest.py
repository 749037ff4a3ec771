"""
Test Configuration

Pytest configuration and shared fixtures for all tests.
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator, List, Optional, Union
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport

from services.tcvs.config import TcvsConfig
from services.tcvs.models import SubmissionRequest
from utils.exceptions import BrowserConnectionError


# =============================================================================
# Page fixtures
# =============================================================================

VERIFIED_HTML = (
    '<div class="col"><h3>Validation Results</h3>'
    '<div class="alert alert-danger"><h3>Check Verified</h3> Status: Paid</div></div>'
)

NO_MATCH_HTML = """
<div _ngcontent-ng-c2147397721="" class="col">
  <h3 _ngcontent-ng-c2147397721="">Validation Results</h3>
  <div _ngcontent-ng-c2147397721="" class="alert alert-danger">
    <h3 _ngcontent-ng-c2147397721="">No Match</h3> Check information does not match our records
  </div>
</div>
"""

SERVER_ERROR_HTML = (
    '<div class="col"><h3>Validation Results</h3>'
    '<div class="alert alert-warning"><h3>Server Error</h3> '
    'The system is unavailable. Please try again later.</div></div>'
)

BLANK_HTML = "<html><body><p>Welcome</p></body></html>"


# =============================================================================
# Resource-tracking browser session double
# =============================================================================

class TrackingSession:
    """Stands in for BrowserSessionManager and records open/close."""

    def __init__(self, tracker: "SessionTracker"):
        self.tracker = tracker
        self.page = MagicMock(name="page")
        self.opened = False
        self.closed = False

    async def __aenter__(self):
        self.opened = True
        if self.tracker.connect_failures > 0:
            self.tracker.connect_failures -= 1
            self.closed = True
            raise BrowserConnectionError("remote browser refused connection", endpoint="fake")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True


class SessionTracker:
    def __init__(self, connect_failures: int = 0):
        self.connect_failures = connect_failures
        self.sessions: List[TrackingSession] = []

    def __call__(self, config):
        session = TrackingSession(self)
        self.sessions.append(session)
        return session

    @property
    def all_closed(self) -> bool:
        return all(session.closed for session in self.sessions)


class FakeSteps:
    """
    Scripted page steps.

    Each entry in `script` drives one attempt: a string is returned as the
    result page HTML, an exception is raised from the named stage.
    """

    def __init__(self, script: List[Union[str, Exception]], fail_stage: str = "navigate"):
        self.script = list(script)
        self.fail_stage = fail_stage
        self.attempts = 0
        self.calls: List[str] = []
        self._current: Optional[Union[str, Exception]] = None

    def _maybe_fail(self, stage: str):
        if isinstance(self._current, Exception) and stage == self.fail_stage:
            raise self._current

    async def navigate(self, page):
        self._current = self.script[min(self.attempts, len(self.script) - 1)]
        self.attempts += 1
        self.calls.append("navigate")
        self._maybe_fail("navigate")

    async def fill(self, page, request):
        self.calls.append("fill")
        self._maybe_fail("fill")

    async def handle_captcha(self, page):
        self.calls.append("captcha")

    async def submit(self, page, request):
        self.calls.append("submit")
        self._maybe_fail("submit")
        return "submit_event"

    async def read_content(self, page):
        self.calls.append("read")
        self._maybe_fail("read")
        return self._current


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


@pytest.fixture
def tracker():
    return SessionTracker()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def production_config():
    return TcvsConfig(environment="production")


@pytest.fixture
def sample_request():
    return SubmissionRequest(
        issue_date="12/06/24",
        symbol="4045",
        serial="57285965",
        check_amount="10.00",
        rtn="000000518",
    )


@pytest.fixture
def sample_payload():
    """Sample API body for tests."""
    return {
        "issueDate": "12/06/24",
        "symbol": "4045",
        "serial": "57285965",
        "checkAmount": "10.00",
        "rtn": "000000518",
    }


@pytest.fixture
def mock_page():
    """Playwright page double with async methods."""
    page = MagicMock(name="page")
    page.url = "https://tcvs.example.test/"
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.type = AsyncMock()
    page.query_selector = AsyncMock(return_value=None)
    page.evaluate = AsyncMock(return_value=False)
    page.content = AsyncMock(return_value=BLANK_HTML)
    page.wait_for_event = AsyncMock()
    page.mouse.click = AsyncMock()
    return page


# =============================================================================
# API client
# =============================================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Get async test client for API testing."""
    from main import app
    from utils.rate_limit import limiter

    limiter.reset()
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
