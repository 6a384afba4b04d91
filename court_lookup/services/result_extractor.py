"""Read case records and order documents out of court result pages.

Tables are read by fixed column position. This breaks silently if the
court site reorders its columns; there is no header-based detection.

  - order information table: (case number, petitioner, next hearing date)
  - judgments table: (case number, judgment date, petitioner, respondent)
"""

from datetime import date
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup

from court_lookup.lib.case_utils import (
    contains_ci,
    determine_order_type,
    normalize_text,
    parse_date_str,
)
from court_lookup.lib.errors import ExtractionError, NotFoundError
from court_lookup.lib.logging_config import get_logger
from court_lookup.lib.url_utils import is_absolute_url, resolve_document_url
from court_lookup.models.case import CaseQuery, CaseRecord
from court_lookup.models.order_document import OrderDocument
from court_lookup.models.search_outcome import ExtractionResult

logger = get_logger()

NO_RECORDS_TEXT_MARKERS = ("No records found", "No record found", "No data available")
NO_RECORDS_CSS_MARKERS = (".no-results", ".error-message")
HEADER_CASE_NUMBER_LABELS = ("case number", "case no", "case no.")
MAX_DOCUMENT_LINKS = 10


class ResultExtractor:
    """Parses raw page markup into the canonical case data.

    Only two situations raise: an explicit "no records" page
    (`NotFoundError`) and a submitted search whose page has no table at
    all (`ExtractionError`). Missing cells leave fields empty.
    """

    def __init__(
        self,
        base_origin: str,
        text_markers: Sequence[str] = NO_RECORDS_TEXT_MARKERS,
        css_markers: Sequence[str] = NO_RECORDS_CSS_MARKERS,
    ):
        self.base_origin = base_origin
        self.text_markers = tuple(text_markers)
        self.css_markers = tuple(css_markers)

    def check_no_records(self, soup: BeautifulSoup) -> None:
        """Raise NotFoundError if the page says there is nothing to show."""
        page_text = soup.get_text(" ", strip=True)
        for marker in self.text_markers:
            if contains_ci(page_text, marker):
                logger.info(f"No-records marker found: '{marker}'")
                raise NotFoundError(f"Case not found: page reports '{marker}'")
        for selector in self.css_markers:
            if soup.select_one(selector) is not None:
                logger.info(f"No-records element found: {selector}")
                raise NotFoundError(f"Case not found: page shows {selector}")

    def extract_order_information(self, html: str, submitted: bool = True) -> ExtractionResult:
        """Read the order information result table.

        Rows with fewer than three cells are ignored. When several data
        rows are present the last one is kept.

        Args:
            html: Page markup after the search form was submitted
            submitted: Whether a submit actually happened on this page

        Raises:
            NotFoundError: The page carries a no-records marker
            ExtractionError: Submitted, but the page has no table at all
        """
        soup = BeautifulSoup(html or "", "html.parser")
        self.check_no_records(soup)

        tables = soup.find_all("table")
        if not tables:
            if submitted:
                raise ExtractionError("No result table found after submitting the search")
            return ExtractionResult()

        case_info = CaseRecord()
        for row in soup.select("table tr"):
            cells = row.find_all("td")
            if len(cells) < 3:
                continue
            case_number_text = _cell_text(cells, 0)
            if not case_number_text or case_number_text.lower() in HEADER_CASE_NUMBER_LABELS:
                continue
            case_info.case_number = case_number_text
            case_info.petitioner = _cell_text(cells, 1)
            case_info.next_hearing_date = _cell_text(cells, 2)

        orders = self.extract_document_links(html) if case_info.is_populated else []
        return ExtractionResult(case_info=case_info, orders=orders)

    def extract_judgments(self, html: str, query: CaseQuery) -> ExtractionResult:
        """Scan a judgments listing for rows mentioning the queried case number.

        A row matches if its case number, petitioner or respondent cell
        contains the queried number (any case). Matching rows without a
        document link are skipped.

        Raises:
            NotFoundError: The page carries a no-records marker
        """
        soup = BeautifulSoup(html or "", "html.parser")
        self.check_no_records(soup)

        needle = query.case_number
        orders: List[OrderDocument] = []
        for row in soup.select("table tr"):
            cells = row.find_all("td")
            if len(cells) < 4:
                continue

            case_number_text = _cell_text(cells, 0)
            judgment_date_text = _cell_text(cells, 1)
            petitioner_text = _cell_text(cells, 2)
            respondent_text = _cell_text(cells, 3)

            if not (
                contains_ci(case_number_text, needle)
                or contains_ci(petitioner_text, needle)
                or contains_ci(respondent_text, needle)
            ):
                continue

            url = _row_document_url(row, self.base_origin)
            if not url:
                logger.debug(f"Matching judgment row without a document link: {case_number_text}")
                continue

            orders.append(
                OrderDocument(
                    title=f"Judgment for {case_number_text}",
                    url=url,
                    date=judgment_date_text,
                    type="judgment",
                    case_number=case_number_text,
                    petitioner=petitioner_text,
                    respondent=respondent_text,
                )
            )

        logger.info(f"Found {len(orders)} matching judgment(s) for {needle}")
        case_info = CaseRecord(
            case_number=query.case_number,
            case_type=query.case_type,
            status="Found in judgments",
        )
        return ExtractionResult(case_info=case_info, orders=orders)

    def extract_document_links(self, html: str, limit: int = MAX_DOCUMENT_LINKS) -> List[OrderDocument]:
        """Collect order/judgment download links anywhere on the page.

        The date is the last cell of the row holding the link. Results are
        sorted newest first (undated links last) and capped at `limit`.
        """
        soup = BeautifulSoup(html or "", "html.parser")
        found = []
        seen = set()
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            lowered = href.lower()
            if not any(key in lowered for key in (".pdf", "order", "judgment")):
                continue
            title = normalize_text(anchor.get_text())
            if not title:
                continue
            url = resolve_document_url(href, self.base_origin)
            if not is_absolute_url(url):
                logger.debug(f"Skipping non-http document link: {href}")
                continue
            if url in seen:
                continue
            seen.add(url)

            doc_date = ""
            row = anchor.find_parent("tr")
            if row is not None:
                cells = row.find_all("td")
                if cells:
                    doc_date = normalize_text(cells[-1].get_text())

            found.append(
                OrderDocument(
                    title=title,
                    url=url,
                    date=doc_date,
                    type=determine_order_type(title),
                )
            )

        found.sort(key=_newest_first_key)
        return found[:limit]


def _cell_text(cells, index: int) -> str:
    if index >= len(cells):
        return ""
    return normalize_text(cells[index].get_text(" "))


def _row_document_url(row, base_origin: str) -> Optional[str]:
    """First downloadable link in `row`: `.pdf` hrefs, then "download" anchors.

    Links that do not resolve to http(s) (javascript:, mailto:) are skipped
    and the next candidate is tried.
    """
    anchors = row.find_all("a", href=True)
    candidates = [a for a in anchors if ".pdf" in a["href"].lower()]
    candidates += [a for a in anchors if "download" in a.get_text().lower() and a not in candidates]
    for anchor in candidates:
        url = resolve_document_url(anchor["href"], base_origin)
        if is_absolute_url(url):
            return url
    return None


def _newest_first_key(doc: OrderDocument):
    parsed: Optional[date] = parse_date_str(doc.date) if doc.date else None
    # Undated documents sort after every dated one
    return (parsed is None, -(parsed.toordinal()) if parsed else 0)
