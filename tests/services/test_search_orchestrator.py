import pytest
from selenium.common.exceptions import WebDriverException

from court_lookup.lib.errors import CaptchaSubmitError, NavigationError, NotFoundError
from court_lookup.lib.locators import build_selector_catalog
from court_lookup.services.captcha_resolver import CaptchaResolver
from court_lookup.services.captcha_solver import CaptchaSolver
from court_lookup.services.result_extractor import ResultExtractor
from court_lookup.services.search_orchestrator import SearchOrchestrator
from court_lookup.services.search_strategies import (
    CaseNumberStrategy,
    JudgmentsListingStrategy,
    PartyNameStrategy,
    default_strategies,
)
from tests.utils.fake_session import FakeSession


@pytest.fixture
def selectors():
    return build_selector_catalog()


@pytest.fixture
def extractor(settings):
    return ResultExtractor(settings.base_origin)


@pytest.fixture
def resolver(settings, selectors):
    return CaptchaResolver(CaptchaSolver(settings), selectors)


def _open(session):
    session.open()
    return session


def test_default_order(selectors, extractor):
    names = [s.name for s in default_strategies(selectors, extractor)]
    assert names == ["party_name", "case_number", "judgments_listing"]


def test_party_name_strategy_fills_case_number_as_party(settings, selectors, extractor, resolver, query, load_page):
    session = _open(FakeSession(settings, pages={"party_results": load_page("order_info_results")}))

    result = PartyNameStrategy(selectors, extractor).run(session, query, resolver)

    assert session.filled["party_name_input"] == "12345"
    assert session.filled["year_input"] == "2023"
    assert session.clicked == ["order_info_link", "party_name_link", "submit_button"]
    assert result.case_info.case_number == "FAO 12345/2023"
    assert result.strategy == "party_name"


def test_case_number_strategy_selects_type(settings, selectors, extractor, resolver, query, load_page):
    session = _open(FakeSession(settings, pages={"case_results": load_page("order_info_results")}))

    result = CaseNumberStrategy(selectors, extractor).run(session, query, resolver)

    assert session.selected["case_type_select"] == "FAO"
    assert session.filled["case_number_input"] == "12345"
    assert session.settles[-1] == settings.submit_settle_seconds
    assert len(result.orders) == 2


def test_judgments_strategy_is_hit_only_with_orders(settings, selectors, extractor, resolver, query, load_page):
    strategy = JudgmentsListingStrategy(selectors, extractor)
    hit_session = _open(FakeSession(settings, pages={"judgments": load_page("judgments_listing")}))
    miss_session = _open(FakeSession(settings, pages={"judgments": load_page("no_records")}))

    hit = strategy.run(hit_session, query, resolver)
    miss = strategy.run(miss_session, query, resolver)

    assert strategy.is_hit(hit)
    assert not strategy.is_hit(miss)
    # the listing confirms the query without reading a case row
    assert miss.case_info.is_populated


def test_first_hit_stops_the_search(settings, selectors, extractor, resolver, query, load_page):
    session = _open(FakeSession(settings, pages={"party_results": load_page("order_info_results")}))
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    result = orchestrator.run(session, query, resolver)

    assert result.strategy == "party_name"
    assert orchestrator.attempted == ["party_name"]


def test_falls_through_to_judgments(settings, selectors, extractor, resolver, query, load_page):
    pages = {
        "party_results": load_page("no_records"),
        "case_results": load_page("search_form"),
        "judgments": load_page("judgments_listing"),
    }
    session = _open(FakeSession(settings, pages=pages))
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    result = orchestrator.run(session, query, resolver)

    assert result.strategy == "judgments_listing"
    assert orchestrator.attempted == ["party_name", "case_number", "judgments_listing"]
    assert result.orders[0].url == "https://court.example.test/docs/j1.pdf"


def test_nothing_found_raises_not_found(settings, selectors, extractor, resolver, query, load_page):
    no_records = load_page("no_records")
    pages = {"party_results": no_records, "case_results": no_records, "judgments": no_records}
    session = _open(FakeSession(settings, pages=pages))
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    with pytest.raises(NotFoundError, match="any search method"):
        orchestrator.run(session, query, resolver)
    assert "No records found" in orchestrator.last_html


def test_captcha_failure_wins_over_not_found(settings, selectors, extractor, resolver, query, load_page):
    session = _open(FakeSession(settings, pages={"judgments": load_page("no_records")}, captcha=True))
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    with pytest.raises(CaptchaSubmitError):
        orchestrator.run(session, query, resolver)
    assert orchestrator.attempted == ["party_name", "case_number", "judgments_listing"]
    assert resolver.attempts == 0


@pytest.mark.parametrize("error", [NavigationError("Timed out loading page"), WebDriverException("tab crashed")])
def test_every_strategy_failing_reraises_the_failure(settings, selectors, extractor, resolver, query, error):
    session = _open(FakeSession(settings, landing_error=error))
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    with pytest.raises(type(error)):
        orchestrator.run(session, query, resolver)
    assert len(orchestrator.attempted) == 3


def test_requires_a_strategy():
    with pytest.raises(ValueError):
        SearchOrchestrator([])


def test_unexpected_error_in_one_strategy_does_not_stop_the_search(
    settings, selectors, extractor, resolver, query, load_page
):
    session = _open(
        FakeSession(
            settings,
            pages={"case_results": load_page("order_info_results")},
            click_errors={"order_info_link": AttributeError("'NoneType' object has no attribute 'text'")},
        )
    )
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    result = orchestrator.run(session, query, resolver)

    assert result.strategy == "case_number"
    assert orchestrator.attempted == ["party_name", "case_number"]


def test_clean_miss_beats_other_strategy_errors(settings, selectors, extractor, resolver, query, load_page):
    session = _open(
        FakeSession(
            settings,
            pages={"judgments": load_page("no_records")},
            click_errors={
                "order_info_link": KeyError("party"),
                "case_number_link": NavigationError("Timed out loading page"),
            },
        )
    )
    orchestrator = SearchOrchestrator(default_strategies(selectors, extractor))

    with pytest.raises(NotFoundError):
        orchestrator.run(session, query, resolver)


def test_rejected_captcha_answer_is_reported(settings, selectors, extractor, query, load_page):
    reported = []

    class AcceptingSolver:
        def submit(self, image_bytes):
            return "job-9"

        def wait_for_solution(self, job_id, on_attempt=None):
            on_attempt(1)
            return "wrong"

        def report_bad(self, job_id):
            reported.append(job_id)
            return True

    form = load_page("search_form")
    session = _open(
        FakeSession(
            settings,
            pages={"party_results": form, "case_results": form, "judgments": load_page("judgments_listing")},
            captcha=True,
            captcha_pages=("party_form", "case_form", "party_results", "case_results"),
        )
    )
    captcha = CaptchaResolver(AcceptingSolver(), selectors)

    result = SearchOrchestrator(default_strategies(selectors, extractor)).run(session, query, captcha)

    assert result.strategy == "judgments_listing"
    assert reported == ["job-9", "job-9"]
    assert captcha.solved is True
