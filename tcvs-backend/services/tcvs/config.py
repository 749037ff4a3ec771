"""
Explicit configuration for the TCVS submission core.

The orchestrator and its helpers never read global settings mid-flow; they
are handed one of these at construction.
"""

from dataclasses import dataclass
from typing import Optional

from config.settings import Settings

SIMULATION_MODES = ("success", "noMatch")


@dataclass(frozen=True)
class TcvsConfig:
    tcvs_url: str = "https://tcvs.fiscal.treasury.gov/"
    browserless_api_key: Optional[str] = None
    browserless_endpoint: str = "wss://chrome.browserless.io"
    headless: bool = True
    auto_simulate: bool = False
    simulation_mode: str = "noMatch"
    environment: str = "development"
    max_retries: int = 3
    retry_backoff_seconds: float = 5.0
    navigation_timeout: float = 60.0
    form_timeout: float = 30.0
    submission_timeout: float = 30.0
    settle_seconds: float = 2.0

    def __post_init__(self):
        if self.simulation_mode not in SIMULATION_MODES:
            raise ValueError(f"simulation_mode must be one of {SIMULATION_MODES}")
        if not 0 <= self.max_retries <= 3:
            raise ValueError("max_retries must be between 0 and 3")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def uses_remote_browser(self) -> bool:
        return bool(self.browserless_api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TcvsConfig":
        return cls(
            tcvs_url=settings.TCVS_URL,
            browserless_api_key=settings.BROWSERLESS_API_KEY,
            browserless_endpoint=settings.BROWSERLESS_ENDPOINT,
            headless=settings.HEADLESS,
            auto_simulate=settings.AUTO_SIMULATE,
            simulation_mode=settings.SIMULATION_MODE,
            environment=settings.ENVIRONMENT,
            max_retries=settings.MAX_RETRIES,
            retry_backoff_seconds=settings.RETRY_BACKOFF_SECONDS,
            navigation_timeout=settings.NAVIGATION_TIMEOUT,
            form_timeout=settings.FORM_TIMEOUT,
            submission_timeout=settings.SUBMISSION_TIMEOUT,
            settle_seconds=settings.SETTLE_SECONDS,
        )
