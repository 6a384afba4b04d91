import pytest

from court_lookup.models.case import CaseQuery, CaseRecord
from court_lookup.models.order_document import OrderDocument
from court_lookup.models.search_outcome import ExtractionResult, SearchOutcome, SearchStatus


def test_query_strips_and_converts_year():
    q = CaseQuery(case_type="  FAO ", case_number=" 12345 ", filing_year="2023")
    assert q.case_type == "FAO"
    assert q.case_number == "12345"
    assert q.filing_year == 2023
    assert q.to_dict() == {"case_type": "FAO", "case_number": "12345", "filing_year": 2023}


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"case_type": "", "case_number": "1", "filing_year": 2023}, "Case type cannot be empty"),
        ({"case_type": "FAO", "case_number": "  ", "filing_year": 2023}, "Case number cannot be empty"),
        ({"case_type": "FAO", "case_number": "1", "filing_year": 1900}, "Filing year must be between"),
        ({"case_type": "FAO", "case_number": "1", "filing_year": "soon"}, "Filing year must be an integer"),
    ],
)
def test_query_validation(kwargs, message):
    with pytest.raises(ValueError, match=message):
        CaseQuery(**kwargs)


def test_query_year_bounds_are_configurable():
    with pytest.raises(ValueError):
        CaseQuery(case_type="FAO", case_number="1", filing_year=2023, max_year=2020)
    assert CaseQuery(case_type="FAO", case_number="1", filing_year=1940, min_year=1900).filing_year == 1940


def test_query_equality_ignores_bounds():
    a = CaseQuery(case_type="FAO", case_number="1", filing_year=2023)
    b = CaseQuery(case_type="FAO", case_number="1", filing_year=2023, min_year=2000)
    assert a == b


def test_case_record_population():
    assert not CaseRecord().is_populated
    assert not CaseRecord(case_number="   ").is_populated
    assert CaseRecord(case_number="FAO 1/2023").is_populated


def test_order_document_requires_absolute_url():
    with pytest.raises(ValueError):
        OrderDocument(title="Order", url="/orders/1.pdf")
    with pytest.raises(ValueError):
        OrderDocument(title="Order", url="https://x.example.test/1.pdf", type="memo")

    doc = OrderDocument.from_dict({"title": "Order", "url": "https://x.example.test/1.pdf", "type": "order"})
    assert doc.to_dict()["type"] == "order"


def test_outcome_rejects_unknown_status():
    with pytest.raises(ValueError):
        SearchOutcome(status="maybe")


def test_outcome_extracted_data_only_on_success():
    doc = OrderDocument(title="Judgment", url="https://x.example.test/j.pdf", type="judgment")
    ok = SearchOutcome(
        status=SearchStatus.SUCCESS,
        case_info=CaseRecord(case_number="12345"),
        orders=[doc],
        strategy="judgments_listing",
    )
    missing = SearchOutcome(status=SearchStatus.NOT_FOUND, raw_html="<html></html>")

    assert ok.extracted_data["orders"][0]["url"] == "https://x.example.test/j.pdf"
    assert ok.extracted_data["strategy"] == "judgments_listing"
    assert missing.extracted_data is None
    assert "raw_html" not in ok.to_dict(include_html=False)
    assert missing.to_dict()["raw_html"] == "<html></html>"


def test_extraction_result_empty():
    assert ExtractionResult().is_empty
    assert not ExtractionResult(case_info=CaseRecord(case_number="1")).is_empty
