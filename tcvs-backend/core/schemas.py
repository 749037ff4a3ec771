from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union


class SubmitPayload(BaseModel):
    """
    Inbound body for POST /api/submit.

    Every field is optional here so that a missing value produces the
    API's own 400 listing all missing fields instead of a 422.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    issue_date: Optional[Union[str, int, float]] = Field(default=None, alias="issueDate")
    symbol: Optional[Union[str, int]] = None
    serial: Optional[Union[str, int]] = None
    check_amount: Optional[Union[str, int, float]] = Field(default=None, alias="checkAmount")
    rtn: Optional[Union[str, int]] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SubmissionData(BaseModel):
    verified: bool
    status: str
    details: Union[str, Dict[str, str]]
    fullText: str
    alertType: str
    simulated: bool
    submissionInfo: Dict[str, Any]


class SubmitResponse(BaseModel):
    success: bool
    message: str
    data: Optional[SubmissionData] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    environment: str
    version: str
    remoteBrowser: bool
    autoSimulate: bool
    simulationMode: str


class DebugResponse(BaseModel):
    url: str
    title: str
    formsCount: int
    forms: List[Dict[str, Any]]
    inputs: List[Dict[str, Any]]
    buttons: List[Dict[str, Any]]
