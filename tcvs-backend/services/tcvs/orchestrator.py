"""
Retry/Simulation Orchestrator

Drives one submission through an explicit state machine:

    INIT → CONNECT → NAVIGATE → FILL → SUBMIT → EXTRACT
         → SUCCESS
         → SERVER_ERROR → RETRY | SIMULATE
         → RETRY | FAILURE            (any other error)

RETRY waits retries × backoff seconds and restarts from CONNECT with a fresh
browser session. The retry/simulate policy lives in small pure functions so
it can be tested without a browser.
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from services.tcvs.browser_session import BrowserSessionManager
from services.tcvs.config import TcvsConfig
from services.tcvs.extractor import ResultExtractor
from services.tcvs.models import (
    ExtractionResult,
    StatusCategory,
    SubmissionOutcome,
    SubmissionRequest,
    utc_timestamp,
)
from services.tcvs.steps import PlaywrightSubmissionSteps
from utils.exceptions import ExtractionError, RemoteServerError
from utils.logging import get_logger, log_submission_event

logger = get_logger(__name__)


class SubmissionState(Enum):
    INIT = "init"
    CONNECT = "connect"
    NAVIGATE = "navigate"
    FILL = "fill"
    SUBMIT = "submit"
    EXTRACT = "extract"
    SUCCESS = "success"
    SERVER_ERROR = "server_error"
    RETRY = "retry"
    SIMULATE = "simulate"
    FAILURE = "failure"


# =============================================================================
# Policy
# =============================================================================

def backoff_delay(retry_number: int, step: float = 5.0) -> float:
    """Seconds to wait before retry number `retry_number` (1-based)."""
    return retry_number * step


def decide_after_server_error(retries: int, max_retries: int, auto_simulate: bool) -> SubmissionState:
    """TCVS reported its own failure: simulate now or try again."""
    if auto_simulate or retries >= max_retries:
        return SubmissionState.SIMULATE
    return SubmissionState.RETRY


def decide_after_error(retries: int, max_retries: int) -> SubmissionState:
    """Any other failure: retry until retries run out."""
    if retries < max_retries:
        return SubmissionState.RETRY
    return SubmissionState.FAILURE


SIMULATED_RESULTS = {
    "success": dict(
        status="Check Verified (Simulated)",
        details="Status: Paid (Simulated)",
        alert_type="alert-success",
        is_successful=True,
        category=StatusCategory.VERIFIED,
    ),
    "noMatch": dict(
        status="No Match (Simulated)",
        details="Check information does not match our records (Simulated)",
        alert_type="alert-danger",
        is_successful=False,
        category=StatusCategory.NO_MATCH,
    ),
}


def build_simulated_result(mode: str) -> ExtractionResult:
    """Fabricated result substituted when TCVS itself is failing."""
    payload = SIMULATED_RESULTS[mode]
    return ExtractionResult(
        full_text=f"{payload['status']} {payload['details']}",
        source="simulation",
        simulated=True,
        **payload,
    )


# =============================================================================
# Orchestrator
# =============================================================================

class SubmissionOrchestrator:
    """
    Runs submissions against TCVS with bounded retries.

    Usage:
        orchestrator = SubmissionOrchestrator(TcvsConfig.from_settings(settings))
        outcome = await orchestrator.submit(request)
        return outcome.to_dict()

    Args:
        config: Explicit core configuration
        session_factory: Callable taking the config and returning an async
            context manager with a `.page` attribute
        steps: Object providing navigate/fill/handle_captcha/submit/read_content
        extractor: Result extractor; defaults to placeholder-enabled outside production
        sleep: Awaitable sleep used for backoff
    """

    def __init__(
        self,
        config: TcvsConfig,
        session_factory: Optional[Callable[[TcvsConfig], Any]] = None,
        steps: Optional[Any] = None,
        extractor: Optional[ResultExtractor] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.session_factory = session_factory or BrowserSessionManager
        self.steps = steps or PlaywrightSubmissionSteps(config)
        self.extractor = extractor or ResultExtractor(allow_placeholder=not config.is_production)
        self._sleep = sleep

    def _enter(self, path: List[SubmissionState], state: SubmissionState, attempt: int,
               details: Optional[str] = None) -> SubmissionState:
        path.append(state)
        success = state not in (SubmissionState.SERVER_ERROR, SubmissionState.RETRY, SubmissionState.FAILURE)
        log_submission_event(state.value, attempt, success=success, details=details)
        return state

    async def _attempt(
        self,
        request: SubmissionRequest,
        attempt: int,
        path: List[SubmissionState],
    ) -> Tuple[ExtractionResult, str]:
        """One pass CONNECT → EXTRACT on a fresh session."""
        self._enter(path, SubmissionState.CONNECT, attempt)
        async with self.session_factory(self.config) as session:
            page = session.page

            self._enter(path, SubmissionState.NAVIGATE, attempt)
            await self.steps.navigate(page)

            self._enter(path, SubmissionState.FILL, attempt)
            await self.steps.fill(page, request)
            await self.steps.handle_captcha(page)

            self._enter(path, SubmissionState.SUBMIT, attempt)
            trigger = await self.steps.submit(page, request)

            self._enter(path, SubmissionState.EXTRACT, attempt)
            html = await self.steps.read_content(page)

        result = self.extractor.extract(html)
        if result is None:
            raise ExtractionError("No verification result found on the page")
        if result.category is StatusCategory.SERVER_ERROR:
            raise RemoteServerError(
                f"TCVS reported an error: {result.status}",
                status=result.status,
                details={"fullText": result.full_text[:200], "trigger": trigger},
            )
        return result, trigger

    def _info(self, attempt: int, retries: int, path: List[SubmissionState],
              trigger: Optional[str] = None, source: Optional[str] = None) -> Dict[str, Any]:
        return {
            "attempts": attempt,
            "retries": retries,
            "triggerStrategy": trigger,
            "extractionSource": source,
            "path": [state.value for state in path],
            "timestamp": utc_timestamp(),
        }

    async def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        """
        Run the state machine to a terminal state.

        Returns:
            SubmissionOutcome: real success, simulated success or failure
        """
        path: List[SubmissionState] = []
        retries = 0
        self._enter(path, SubmissionState.INIT, 1)

        while True:
            attempt = retries + 1
            try:
                result, trigger = await self._attempt(request, attempt, path)

            except RemoteServerError as e:
                self._enter(path, SubmissionState.SERVER_ERROR, attempt, e.message)
                decision = decide_after_server_error(
                    retries, self.config.max_retries, self.config.auto_simulate
                )
                if decision is SubmissionState.SIMULATE:
                    self._enter(path, decision, attempt, f"mode={self.config.simulation_mode}")
                    simulated = build_simulated_result(self.config.simulation_mode)
                    info = self._info(attempt, retries, path, e.details.get("trigger"), simulated.source)
                    info["simulationMode"] = self.config.simulation_mode
                    return SubmissionOutcome.from_extraction(
                        simulated,
                        info,
                        message="TCVS reported a server error; returning simulated result",
                    )

            except Exception as e:
                message = getattr(e, "message", None) or str(e) or e.__class__.__name__
                decision = decide_after_error(retries, self.config.max_retries)
                if decision is SubmissionState.FAILURE:
                    self._enter(path, decision, attempt, message)
                    logger.error(f"Submission failed after {attempt} attempt(s): {message}")
                    return SubmissionOutcome.failure(message, self._info(attempt, retries, path))
                logger.warning(f"Attempt {attempt} failed: {message}")

            else:
                self._enter(path, SubmissionState.SUCCESS, attempt, result.status)
                return SubmissionOutcome.from_extraction(
                    result, self._info(attempt, retries, path, trigger, result.source)
                )

            retries += 1
            delay = backoff_delay(retries, self.config.retry_backoff_seconds)
            self._enter(path, SubmissionState.RETRY, attempt, f"retry {retries} in {delay:.0f}s")
            await self._sleep(delay)
