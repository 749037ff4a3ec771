"""
TCVS domain models.

Plain dataclasses passed between the browser steps, the extractor and the
orchestrator. Wire names (camelCase) only appear in the to_dict()/from_payload
boundaries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from utils.exceptions import MissingFieldsError


# Wire name -> attribute name, in form order
REQUIRED_FIELDS = {
    "issueDate": "issue_date",
    "symbol": "symbol",
    "serial": "serial",
    "checkAmount": "check_amount",
    "rtn": "rtn",
}


class StatusCategory(Enum):
    """Coarse classification of a TCVS status line."""
    VERIFIED = "Verified"
    NO_MATCH = "No Match"
    SERVER_ERROR = "Server Error"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SubmissionRequest:
    """The five values typed into the TCVS form."""
    issue_date: str
    symbol: str
    serial: str
    check_amount: str
    rtn: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SubmissionRequest":
        """
        Build a request from an API body keyed by wire names.

        Only presence is checked: None and empty strings count as missing.

        Raises:
            MissingFieldsError: listing every absent field in form order
        """
        missing = [
            wire for wire in REQUIRED_FIELDS
            if payload.get(wire) is None or str(payload.get(wire)) == ""
        ]
        if missing:
            raise MissingFieldsError(missing)

        return cls(**{attr: str(payload[wire]) for wire, attr in REQUIRED_FIELDS.items()})

    def as_fields(self) -> Dict[str, str]:
        """Attribute name -> value, in form order."""
        return {attr: getattr(self, attr) for attr in REQUIRED_FIELDS.values()}

    def to_dict(self) -> Dict[str, str]:
        return {wire: getattr(self, attr) for wire, attr in REQUIRED_FIELDS.items()}


@dataclass
class ExtractionResult:
    """What one extraction strategy read off the result page."""
    status: str
    details: Union[str, Dict[str, str]]
    full_text: str
    alert_type: str
    is_successful: bool
    category: StatusCategory = StatusCategory.UNKNOWN
    source: str = ""
    simulated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "details": self.details,
            "fullText": self.full_text,
            "alertType": self.alert_type,
            "isSuccessful": self.is_successful,
            "category": self.category.value,
            "source": self.source,
            "simulated": self.simulated,
        }


@dataclass
class SubmissionOutcome:
    """Terminal value returned to the API caller."""
    success: bool
    message: str
    verified: bool = False
    status: str = ""
    details: Union[str, Dict[str, str]] = ""
    full_text: str = ""
    alert_type: str = ""
    simulated: bool = False
    submission_info: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def from_extraction(
        cls,
        result: ExtractionResult,
        submission_info: Dict[str, Any],
        message: str = "Form submitted successfully",
    ) -> "SubmissionOutcome":
        return cls(
            success=True,
            message=message,
            verified=result.is_successful,
            status=result.status,
            details=result.details,
            full_text=result.full_text,
            alert_type=result.alert_type,
            simulated=result.simulated,
            submission_info=submission_info,
        )

    @classmethod
    def failure(cls, error: str, submission_info: Dict[str, Any]) -> "SubmissionOutcome":
        return cls(
            success=False,
            message="Failed to submit form",
            submission_info=submission_info,
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "data": {
                "verified": self.verified,
                "status": self.status,
                "details": self.details,
                "fullText": self.full_text,
                "alertType": self.alert_type,
                "simulated": self.simulated,
                "submissionInfo": self.submission_info,
            },
        }
        if self.error is not None:
            body["error"] = self.error
        return body


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
