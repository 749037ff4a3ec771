"""
Result Extractor

Reads the TCVS verdict out of the result page HTML. Each strategy is a pure
function from serialized page content to an optional ExtractionResult; the
extractor tries them in order and returns the first hit.

Strategy order:
1. validation_block - the "Validation Results" heading and its alert div
2. alert_messages   - any alert/message element carrying a status keyword
3. page_text        - the same keywords anywhere in the page text
4. placeholder      - non-production only; a default verified result
"""

from typing import Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from services.tcvs.models import ExtractionResult, StatusCategory
from utils.exceptions import ExtractionError
from utils.logging import get_logger

logger = get_logger(__name__)

Strategy = Callable[[str], Optional[ExtractionResult]]

# First match wins: negated verdicts must precede "verified", and the
# generic error words go last.
STATUS_KEYWORDS: List[Tuple[StatusCategory, Tuple[str, ...]]] = [
    (StatusCategory.NO_MATCH, (
        "no match",
        "does not match",
        "not verified",
        "unverified",
        "not be verified",
    )),
    (StatusCategory.VERIFIED, ("check verified", "verified")),
    (StatusCategory.SERVER_ERROR, ("server error", "system error", "error", "try again", "unavailable")),
]

CANONICAL_STATUS = {
    StatusCategory.VERIFIED: "Check Verified",
    StatusCategory.NO_MATCH: "No Match",
    StatusCategory.SERVER_ERROR: "Server Error",
}

VALIDATION_HEADING = "Validation Results"
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

ALERT_SELECTORS = ", ".join([
    ".alert",
    "[role='alert']",
    ".status-message",
    ".verification-status",
    ".result-message",
    ".message",
    ".result-block",
    ".verification-result",
    ".message-block",
])

DETAILS_TABLE_SELECTOR = "table.results, table.check-details"

SNIPPET_RADIUS = 120


# =============================================================================
# Helpers
# =============================================================================

def _parse(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    return soup


def _normalize(text: str) -> str:
    return " ".join(text.split())


def match_status_keyword(text: str) -> Optional[Tuple[StatusCategory, str]]:
    """Return the first (category, keyword) found in text, case-insensitively."""
    lowered = text.lower()
    for category, keywords in STATUS_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return category, keyword
    return None


def classify_status(text: str) -> StatusCategory:
    match = match_status_keyword(text)
    return match[0] if match else StatusCategory.UNKNOWN


def _alert_type(element: Tag) -> str:
    return next(
        (cls for cls in element.get("class", []) if cls.startswith("alert-")),
        "",
    )


def _details_table(soup: BeautifulSoup) -> Dict[str, str]:
    """Two-column rows of a results table as {label: value}."""
    table = soup.select_one(DETAILS_TABLE_SELECTOR)
    if table is None:
        return {}

    details = {}
    for row in table.find_all("tr"):
        cells = row.find_all(["td", "th"])
        if len(cells) < 2:
            continue
        key = _normalize(cells[0].get_text()).rstrip(":")
        value = _normalize(cells[1].get_text())
        if key and value:
            details[key] = value
    return details


def _snippet(text: str, keyword: str) -> str:
    index = text.lower().find(keyword)
    start = max(0, index - SNIPPET_RADIUS)
    end = min(len(text), index + len(keyword) + SNIPPET_RADIUS)
    return text[start:end].strip()


def _keyword_result(
    category: StatusCategory,
    details,
    full_text: str,
    alert_type: str,
    source: str,
) -> ExtractionResult:
    return ExtractionResult(
        status=CANONICAL_STATUS[category],
        details=details,
        full_text=full_text,
        alert_type=alert_type,
        is_successful=category is StatusCategory.VERIFIED,
        category=category,
        source=source,
    )


# =============================================================================
# Strategies
# =============================================================================

def validation_block(html: str) -> Optional[ExtractionResult]:
    """Structured "Validation Results" block rendered by the TCVS app."""
    soup = _parse(html)

    for heading in soup.find_all(HEADING_TAGS):
        if heading.get_text(strip=True) != VALIDATION_HEADING:
            continue

        alert = heading.find_next_sibling("div", class_="alert")
        if alert is None and heading.parent is not None:
            alert = heading.parent.find("div", class_="alert")
        if alert is None:
            continue

        raw_text = alert.get_text()
        result_heading = alert.find(HEADING_TAGS)
        if result_heading is not None:
            heading_text = result_heading.get_text()
            status = heading_text.strip()
            details = _normalize(raw_text.replace(heading_text, "", 1))
        else:
            status = ""
            details = _normalize(raw_text)

        full_text = _normalize(raw_text)
        category = classify_status(status or full_text)

        return ExtractionResult(
            status=status,
            details=details,
            full_text=full_text,
            alert_type=_alert_type(alert),
            is_successful=category is StatusCategory.VERIFIED,
            category=category,
            source="validation_block",
        )

    return None


def alert_messages(html: str) -> Optional[ExtractionResult]:
    """Generic alert/status elements that mention a status keyword."""
    soup = _parse(html)

    for element in soup.select(ALERT_SELECTORS):
        text = _normalize(element.get_text(" "))
        if not text:
            continue
        match = match_status_keyword(text)
        if match is None:
            continue

        details = _details_table(soup) or text
        return _keyword_result(match[0], details, text, _alert_type(element), "alert_messages")

    return None


def page_text(html: str) -> Optional[ExtractionResult]:
    """Last structural resort: status keywords anywhere in the visible text."""
    soup = _parse(html)
    body = soup.body or soup
    text = _normalize(body.get_text(" "))

    match = match_status_keyword(text)
    if match is None:
        return None

    category, keyword = match
    details = _details_table(soup) or _snippet(text, keyword)
    return _keyword_result(category, details, text[:1000], "", "page_text")


def placeholder(html: str) -> Optional[ExtractionResult]:
    """Default verified result for development runs against unknown markup."""
    return ExtractionResult(
        status="Check Verified",
        details="No verification block found; placeholder result",
        full_text="",
        alert_type="alert-info",
        is_successful=True,
        category=StatusCategory.VERIFIED,
        source="placeholder",
        simulated=True,
    )


DEFAULT_STRATEGIES: List[Strategy] = [validation_block, alert_messages, page_text]


# =============================================================================
# Extractor
# =============================================================================

class ResultExtractor:
    """
    Ordered strategy runner.

    Usage:
        extractor = ResultExtractor(allow_placeholder=not config.is_production)
        result = extractor.extract(await page.content())
    """

    def __init__(
        self,
        allow_placeholder: bool = False,
        strategies: Optional[List[Strategy]] = None,
    ):
        self.strategies = list(strategies or DEFAULT_STRATEGIES)
        if allow_placeholder:
            self.strategies.append(placeholder)

    def extract(self, html: str) -> Optional[ExtractionResult]:
        """
        Run strategies in order.

        Returns:
            The first non-None result, or None when nothing matched.

        Raises:
            ExtractionError: if a strategy itself failed
        """
        for strategy in self.strategies:
            try:
                result = strategy(html)
            except Exception as e:
                raise ExtractionError(
                    f"Extraction strategy {strategy.__name__} failed: {e}",
                    details={"strategy": strategy.__name__},
                ) from e

            if result is not None:
                logger.info(f"Result extracted via {result.source}: {result.status}")
                return result

        logger.warning("No extraction strategy matched the result page")
        return None
