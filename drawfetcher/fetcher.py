"""Main draw fetcher orchestrator."""

import asyncio
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

import httpx
import structlog

from .aggregator import aggregate
from .exceptions import FetchError, UnknownStateError
from .extractor import Extractor
from .html_utils import parse_document
from .models import DailyReport, ExtractionRequest, ExtractionResult, Game, StateConfig
from .scope import heading_predicate
from .state_loader import StateLoader
from .validator import Validator

logger = structlog.get_logger(__name__, service="fetcher")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
DEFAULT_TIMEZONE = "America/New_York"


class DocumentFetcher:
    """Fetch raw result-page markup over HTTP."""

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize document fetcher.

        Args:
            timeout: Per-request timeout (seconds)
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent or DEFAULT_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }
        self.transport = transport

    async def fetch(self, url: str) -> str:
        """
        Fetch a document.

        Args:
            url: Page URL

        Returns:
            Response body for a 2xx response

        Raises:
            FetchError: On timeout, transport failure or non-2xx status
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=self.headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timed out after {self.timeout}s", error_type="timeout") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(
                url,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
                error_type="http_status",
            )

        logger.debug("document_fetched", url=url, html_length=len(response.text))
        return response.text


class DrawFetcher:
    """Resolve a state's latest daily draw results across its candidate pages."""

    def __init__(
        self,
        states: Dict[str, StateConfig],
        document_fetcher: Optional[DocumentFetcher] = None,
        extractor: Optional[Extractor] = None,
        validator: Optional[Validator] = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        """
        Initialize draw fetcher.

        Args:
            states: Slot table keyed by lowercase state code
            document_fetcher: Anything with an async ``fetch(url) -> str``
            extractor: Document extractor
            validator: Digit validator used by the aggregator
            timezone: Reference timezone for "today" and relative dates
        """
        self.states = states
        self.document_fetcher = document_fetcher or DocumentFetcher()
        self.extractor = extractor or Extractor()
        self.validator = validator or Validator()
        self.timezone = ZoneInfo(timezone)

        logger.info(
            "fetcher_initialized",
            states=sorted(states),
            timezone=timezone,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DrawFetcher":
        """Build a fetcher from a load_config() dictionary."""
        fetcher_cfg = config.get("fetcher", {})
        extraction_cfg = config.get("extraction", {})
        heading_cfg = extraction_cfg.get("scope_heading", {})

        extractor = Extractor(
            scope_predicate=heading_predicate(
                all_of=heading_cfg.get("all_of", ["latest"]),
                any_of=heading_cfg.get("any_of", ["number", "result"]),
            ),
            bonus_markers=extraction_cfg.get("bonus_markers") or (),
            require_label=extraction_cfg.get("require_label", True),
        )

        return cls(
            states=StateLoader(config.get("states", {}).get("path")).load_all(),
            document_fetcher=DocumentFetcher(
                timeout=fetcher_cfg.get("timeout", 15.0),
                user_agent=fetcher_cfg.get("user_agent"),
            ),
            extractor=extractor,
            timezone=config.get("report", {}).get("timezone", DEFAULT_TIMEZONE),
        )

    def today(self, request_time: Optional[datetime] = None) -> date:
        """Calendar date of request_time (default: now) in the reference timezone."""
        if request_time is None:
            return datetime.now(self.timezone).date()
        if request_time.tzinfo is None:
            request_time = request_time.replace(tzinfo=self.timezone)
        return request_time.astimezone(self.timezone).date()

    def state_config(self, state: str) -> StateConfig:
        """
        Look up a state's slot table.

        Raises:
            UnknownStateError: If the state is not configured
        """
        code = str(state or "").strip().lower()
        if code not in self.states:
            raise UnknownStateError(code)
        return self.states[code]

    async def resolve(self, state: str, request_time: Optional[datetime] = None) -> DailyReport:
        """
        Build the daily report for a state.

        Every (slot, game) extraction runs concurrently; each one walks its
        candidate URLs sequentially.

        Args:
            state: State code (case-insensitive)
            request_time: Time of the request (default: now)

        Returns:
            DailyReport; never raises for fetch or extraction failures

        Raises:
            UnknownStateError: If the state is not configured
        """
        state_config = self.state_config(state)
        today = self.today(request_time)

        with structlog.contextvars.bound_contextvars(request_id=uuid.uuid4().hex[:12]):
            logger.info("resolve_started", state=state_config.code, today=today.isoformat())

            requests: List[ExtractionRequest] = []
            tasks = []
            for slot, slot_config in state_config.slots.items():
                for game in Game:
                    request = state_config.request_for(slot, game)
                    requests.append(request)
                    tasks.append(self.fetch_slot(request, slot_config.urls.get(game, []), today))

            outcomes = await asyncio.gather(*tasks, return_exceptions=True)

            results: List[ExtractionResult] = []
            for request, outcome in zip(requests, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error("slot_task_failed", tag=request.tag, error=str(outcome))
                    outcome = ExtractionResult.absent(request)
                results.append(outcome)

            report = aggregate(state_config, results, today, self.validator)

            logger.info(
                "resolve_completed",
                state=report.state,
                date_iso=report.date_iso.isoformat(),
                midday=report.midday,
                evening=report.evening,
                night=report.night,
            )

        return report

    async def fetch_slot(
        self,
        request: ExtractionRequest,
        urls: Sequence[str],
        today: date,
    ) -> ExtractionResult:
        """
        Try candidate URLs in order until one yields digits.

        Fetch failures and extraction misses are logged and skipped.

        Args:
            request: What to extract
            urls: Candidate URLs, most preferred first
            today: Current date in the reference timezone

        Returns:
            First result with digits, or an absent result
        """
        log = logger.bind(tag=request.tag)

        if not urls:
            log.warning("no_candidate_urls")

        for attempt, url in enumerate(urls, start=1):
            log.debug("fetch_attempt_started", url=url, attempt=attempt)

            try:
                html = await self.document_fetcher.fetch(url)
            except FetchError as e:
                log.warning(
                    "fetch_attempt_failed",
                    url=url,
                    attempt=attempt,
                    error=str(e),
                    error_type=e.error_type,
                    status_code=e.status_code,
                )
                continue

            try:
                document = parse_document(html, url)
            except Exception as e:
                log.warning("document_parse_failed", url=url, attempt=attempt, error=str(e))
                continue

            result = self.extractor.extract(document, request, today)
            if result.found:
                log.info(
                    "slot_extracted",
                    url=url,
                    attempt=attempt,
                    digits=result.digits,
                    method=result.method,
                )
                return result

            log.info("extraction_missed", url=url, attempt=attempt)

        log.warning("all_candidates_missed", candidates=len(urls))
        return ExtractionResult.absent(request)
