"""Run the search strategies in order until one of them finds the case."""

from typing import List, Optional

from selenium.common.exceptions import WebDriverException

from court_lookup.lib.errors import CaptchaError, NotFoundError
from court_lookup.lib.logging_config import get_logger
from court_lookup.models.case import CaseQuery
from court_lookup.services.captcha_resolver import CaptchaResolver
from court_lookup.services.search_strategies import SearchStrategy, StrategyResult

logger = get_logger()


class SearchOrchestrator:
    """Tries each strategy once, in a fixed order, stopping at the first hit.

    A failing strategy counts as "found nothing" and the next one runs.
    When nothing is found the failures decide what is reported:

      - any CAPTCHA failure is re-raised
      - if at least one strategy finished cleanly, NotFoundError
      - otherwise the last strategy error is re-raised
    """

    def __init__(self, strategies: List[SearchStrategy]):
        if not strategies:
            raise ValueError("At least one search strategy is required")
        self.strategies = list(strategies)
        self.attempted: List[str] = []
        self.last_html = ""

    def run(self, session, query: CaseQuery, captcha: CaptchaResolver) -> StrategyResult:
        """Return the first strategy result that is a hit.

        Raises:
            CaptchaError: Nothing found and at least one strategy hit a CAPTCHA failure
            NotFoundError: Nothing found, and some strategy completed without error
            Exception: Every strategy failed; the last failure is re-raised
        """
        captcha_failure: Optional[CaptchaError] = None
        last_error: Optional[Exception] = None
        completed = False

        for strategy in self.strategies:
            self.attempted.append(strategy.name)
            try:
                result = strategy.run(session, query, captcha)
            except CaptchaError as exc:
                logger.warning(f"[{strategy.name}] CAPTCHA failure, moving on: {exc}")
                captcha_failure = exc
                self._remember_page(session)
                continue
            except NotFoundError as exc:
                logger.info(f"[{strategy.name}] {exc}")
                completed = True
                self._remember_page(session)
                continue
            except Exception as exc:
                logger.error(f"Error in {strategy.name} search: {exc.__class__.__name__}: {exc}")
                last_error = exc
                self._remember_page(session)
                continue

            completed = True
            self.last_html = result.raw_html or self.last_html
            if strategy.is_hit(result):
                logger.info(f"Case found using {strategy.name} search")
                return result
            logger.info(f"[{strategy.name}] No usable data")

        if captcha_failure is not None:
            raise captcha_failure
        if completed or last_error is None:
            raise NotFoundError("Case not found using any search method")
        raise last_error

    def _remember_page(self, session) -> None:
        try:
            self.last_html = session.current_markup() or self.last_html
        except (RuntimeError, WebDriverException):
            logger.debug("Could not read page markup after strategy failure")
