"""Case lookup engine: one `search()` call per case, one outcome per call."""

import time
from typing import Callable, Optional, Union

from selenium.common.exceptions import WebDriverException

from court_lookup.lib.config import Config, LookupSettings
from court_lookup.lib.errors import BrowserLaunchError
from court_lookup.lib.locators import build_selector_catalog
from court_lookup.lib.logging_config import get_logger
from court_lookup.models.case import CaseQuery
from court_lookup.models.search_outcome import SearchOutcome
from court_lookup.services.browser_session import BrowserSession
from court_lookup.services.captcha_resolver import CaptchaResolver
from court_lookup.services.captcha_solver import CaptchaSolver
from court_lookup.services.outcome_classifier import build_outcome
from court_lookup.services.result_extractor import ResultExtractor
from court_lookup.services.search_orchestrator import SearchOrchestrator
from court_lookup.services.search_strategies import StrategyResult, default_strategies

logger = get_logger()


class CaseLookupService:
    """Looks up court cases on the configured site.

    Settings are read once, when the service is built. Every search gets
    its own browser session and CAPTCHA bookkeeping, so one service can be
    used from several threads at once.
    """

    def __init__(
        self,
        settings: Optional[LookupSettings] = None,
        session_factory: Optional[Callable[[LookupSettings], BrowserSession]] = None,
        solver: Optional[CaptchaSolver] = None,
    ):
        self.settings = settings or Config.load_settings()
        self.selectors = build_selector_catalog(self.settings.selector_overrides)
        self.extractor = ResultExtractor(self.settings.base_origin)
        self.solver = solver or CaptchaSolver(self.settings)
        self._session_factory = session_factory or BrowserSession

        if not self.solver.is_configured:
            logger.warning("No CAPTCHA solver API key configured; CAPTCHA-protected searches will fail")

    def search(self, query: CaseQuery) -> SearchOutcome:
        """Search for one case and report what happened.

        Args:
            query: Validated case type, number and filing year

        Returns:
            SearchOutcome: success, not_found, captcha_failed or error

        Raises:
            BrowserLaunchError: The browser could not be started at all
        """
        started = time.monotonic()
        logger.info(f"Searching for case: {query.case_type} {query.case_number}/{query.filing_year}")

        session = self._session_factory(self.settings)
        resolver = CaptchaResolver(self.solver, self.selectors)
        orchestrator = SearchOrchestrator(default_strategies(self.selectors, self.extractor))

        result: Union[StrategyResult, Exception, None] = None
        raw_html = ""
        try:
            session.open()
            result = orchestrator.run(session, query, resolver)
        except BrowserLaunchError:
            raise
        except Exception as exc:
            if isinstance(exc, WebDriverException):
                logger.error(f"Browser failure during search: {exc}")
            else:
                logger.warning(f"Search ended without a result: {exc}")
            result = exc
            raw_html = orchestrator.last_html or _markup_or_empty(session)
        finally:
            session.close()

        outcome = build_outcome(
            result,
            raw_html=raw_html,
            captcha_solved=resolver.solved,
            captcha_attempts=resolver.attempts,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
        logger.info(
            f"Search finished: status={outcome.status} strategy={outcome.strategy} "
            f"orders={len(outcome.orders)} in {outcome.processing_time_ms}ms"
        )
        return outcome


def _markup_or_empty(session) -> str:
    if not session.is_open:
        return ""
    try:
        return session.current_markup()
    except WebDriverException:
        return ""
