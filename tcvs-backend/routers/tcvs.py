"""
TCVS API Router

Endpoints:
    POST /api/submit  - submit a check to TCVS and return the verdict
    GET  /api/health  - liveness plus the active simulation policy
    GET  /api/debug   - describe the live form markup
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from core.dependencies import get_orchestrator, get_session_factory, get_tcvs_config
from core.schemas import DebugResponse, HealthResponse, SubmitPayload, SubmitResponse
from config.settings import settings
from services.tcvs.config import TcvsConfig
from services.tcvs.form_filler import navigate_to_form
from services.tcvs.inspector import describe_form_markup
from services.tcvs.models import SubmissionRequest
from services.tcvs.orchestrator import SubmissionOrchestrator
from utils.logging import get_logger
from utils.rate_limit import limit_submit

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["TCVS"])


@router.post(
    "/submit",
    response_model=SubmitResponse,
    responses={400: {"model": SubmitResponse}, 500: {"model": SubmitResponse}},
)
@limit_submit
async def submit_form(
    request: Request,
    payload: SubmitPayload,
    orchestrator: SubmissionOrchestrator = Depends(get_orchestrator),
):
    """
    Submit check details to TCVS.

    Missing fields are rejected with 400 before any browser is started.
    Real and simulated verdicts return 200; `data.simulated` tells them
    apart. Exhausted retries return 500 with the last error.
    """
    submission = SubmissionRequest.from_payload(payload.to_wire())

    logger.info(f"Submitting check serial ending {submission.serial[-4:]}")
    outcome = await orchestrator.submit(submission)

    return JSONResponse(
        status_code=200 if outcome.success else 500,
        content=outcome.to_dict(),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(config: TcvsConfig = Depends(get_tcvs_config)):
    """Health check with the configured browser and simulation policy."""
    return {
        "status": "healthy",
        "environment": config.environment,
        "version": settings.APP_VERSION,
        "remoteBrowser": config.uses_remote_browser,
        "autoSimulate": config.auto_simulate,
        "simulationMode": config.simulation_mode,
    }


@router.get("/debug", response_model=DebugResponse)
async def debug_form(
    config: TcvsConfig = Depends(get_tcvs_config),
    session_factory: Callable = Depends(get_session_factory),
):
    """
    Load the TCVS page and describe its forms, inputs and buttons.

    Navigation and form errors are rendered by the TcvsError handler.
    """
    async with session_factory(config) as session:
        await navigate_to_form(
            session.page,
            config.tcvs_url,
            navigation_timeout=config.navigation_timeout,
            form_timeout=config.form_timeout,
        )
        html = await session.page.content()
        url = session.page.url

    return {"url": url, **describe_form_markup(html)}
