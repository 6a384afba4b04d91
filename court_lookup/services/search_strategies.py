"""The three ways of asking the court site about a case.

Every strategy starts from the landing page and assumes nothing about what
an earlier strategy did to the browser.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from court_lookup.lib.errors import ExtractionError
from court_lookup.lib.locators import Locator
from court_lookup.lib.logging_config import get_logger
from court_lookup.models.case import CaseQuery
from court_lookup.models.search_outcome import ExtractionResult
from court_lookup.services.captcha_resolver import CaptchaResolver
from court_lookup.services.result_extractor import ResultExtractor

logger = get_logger()


@dataclass
class StrategyResult:
    """What one strategy produced, plus the page it was read from."""

    strategy: str
    extraction: ExtractionResult = field(default_factory=ExtractionResult)
    raw_html: str = ""

    @property
    def case_info(self):
        return self.extraction.case_info

    @property
    def orders(self):
        return self.extraction.orders


class SearchStrategy:
    """Base class: one independent method of querying the court site."""

    name = "base"

    def __init__(self, selectors: Dict[str, List[Locator]], extractor: ResultExtractor):
        self.selectors = selectors
        self.extractor = extractor

    def run(self, session, query: CaseQuery, captcha: CaptchaResolver) -> StrategyResult:
        raise NotImplementedError()

    def is_hit(self, result: StrategyResult) -> bool:
        """Whether `result` is good enough to stop searching."""
        return result.case_info.is_populated

    def _submit(self, session) -> bool:
        clicked = session.find_and_click(
            self.selectors["submit_button"], settle=session.settings.submit_settle_seconds
        )
        if not clicked:
            logger.warning(f"[{self.name}] No submit control found")
        return clicked

    def _solve_submit_and_extract(self, session, captcha: CaptchaResolver) -> StrategyResult:
        """Shared tail of the form searches: CAPTCHA, submit, read the result page.

        A result page that still shows the form and the challenge means the
        site rejected the answer; that answer is reported back to the solver.
        """
        challenge = captcha.resolve_if_present(session)
        submitted = self._submit(session)

        html = session.current_markup()
        try:
            extraction = self.extractor.extract_order_information(html, submitted=submitted)
        except ExtractionError:
            if challenge is not None and session.is_present(self.selectors["captcha_image"]):
                captcha.report_rejected(challenge)
            raise
        return StrategyResult(self.name, extraction, html)


class PartyNameStrategy(SearchStrategy):
    """Order information system, searched by party name.

    The case number goes into the party-name box. A case number is not a
    party name, so this is probably a mistake in the existing behavior;
    it is left unchanged until someone decides what this form should get.
    """

    name = "party_name"

    def run(self, session, query: CaseQuery, captcha: CaptchaResolver) -> StrategyResult:
        logger.info("Trying Order Information System - Party Name Search")
        session.return_to_landing()
        session.find_and_click(self.selectors["order_info_link"])
        session.find_and_click(self.selectors["party_name_link"])

        session.fill_field(self.selectors["party_name_input"], query.case_number)
        if query.filing_year:
            session.fill_field(self.selectors["year_input"], str(query.filing_year))

        return self._solve_submit_and_extract(session, captcha)


class CaseNumberStrategy(SearchStrategy):
    """Order information system, searched by case type, number and year."""

    name = "case_number"

    def run(self, session, query: CaseQuery, captcha: CaptchaResolver) -> StrategyResult:
        logger.info("Trying Order Information System - Case Number Search")
        session.return_to_landing()
        session.find_and_click(self.selectors["case_number_link"])

        session.select_option(self.selectors["case_type_select"], query.case_type)
        session.fill_field(self.selectors["case_number_input"], query.case_number)
        if query.filing_year:
            session.fill_field(self.selectors["year_input"], str(query.filing_year))

        return self._solve_submit_and_extract(session, captcha)


class JudgmentsListingStrategy(SearchStrategy):
    """Public latest-judgments listing, scanned for the case number.

    The listing has no search form and no CAPTCHA.
    """

    name = "judgments_listing"

    def run(self, session, query: CaseQuery, captcha: CaptchaResolver) -> StrategyResult:
        logger.info("Trying Latest Judgments Search")
        session.return_to_landing()
        session.find_and_click(self.selectors["judgments_link"])

        html = session.current_markup()
        extraction = self.extractor.extract_judgments(html, query)
        return StrategyResult(self.name, extraction, html)

    def is_hit(self, result: StrategyResult) -> bool:
        return bool(result.orders)


def default_strategies(selectors: Dict[str, List[Locator]], extractor: ResultExtractor) -> List[SearchStrategy]:
    """The strategies in the order they are tried."""
    return [
        PartyNameStrategy(selectors, extractor),
        CaseNumberStrategy(selectors, extractor),
        JudgmentsListingStrategy(selectors, extractor),
    ]
