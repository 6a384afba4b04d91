"""Small text helpers shared by the extractor and the models."""

import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

# Most specific first: a title such as "Final Judgment" is a judgment.
_ORDER_TYPE_KEYWORDS = (
    ("judgment", "judgment"),
    ("interim", "interim_order"),
    ("final", "final_order"),
    ("order", "order"),
)


def normalize_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def contains_ci(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case-insensitive substring check; an empty needle never matches."""
    if not haystack or not needle:
        return False
    return needle.lower() in haystack.lower()


def determine_order_type(title: str) -> str:
    """Classify a document by the words in its title.

    Examples:
      - 'Final Judgment' -> 'judgment'
      - 'Interim Order' -> 'interim_order'
      - 'Order dated 01.02.2023' -> 'order'
      - 'Annexure' -> 'document'
    """
    lowered = (title or "").lower()
    for keyword, order_type in _ORDER_TYPE_KEYWORDS:
        if keyword in lowered:
            return order_type
    return "document"


def parse_date_str(s: str) -> Optional[date]:
    """Parse a date string into a date object or return None.

    Court listings mix ISO dates, `DD-MM-YYYY`, `DD/MM/YYYY` and
    `DD.MM.YYYY`; day-first is assumed when the order is ambiguous.
    """
    if not s:
        return None
    s = s.strip()
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass

    fmts = [
        "%d-%m-%Y",
        "%d/%m/%Y",
        "%d.%m.%Y",
        "%B %d, %Y",
        "%d %B %Y",
        "%d %b %Y",
        "%Y/%m/%d",
    ]
    for fmt in fmts:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    try:
        return date_parser.parse(s, dayfirst=True, fuzzy=True).date()
    except (ValueError, OverflowError):
        return None
