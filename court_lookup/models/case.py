"""Case data models for the court lookup engine.

`CaseQuery` is the immutable input of one search; `CaseRecord` is the
best-known state of the matched case as read from the court site.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional

from court_lookup.lib.config import DEFAULT_MIN_FILING_YEAR


@dataclass(frozen=True)
class CaseQuery:
    """What the caller is looking for.

    Attributes:
        case_type: Court case type code (e.g. FAO, CWP, CRL.A.)
        case_number: Case number as entered by the user
        filing_year: Year the case was filed
    """

    case_type: str
    case_number: str
    filing_year: int
    min_year: int = field(default=DEFAULT_MIN_FILING_YEAR, compare=False, repr=False)
    max_year: Optional[int] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize whitespace and validate the query."""
        object.__setattr__(self, "case_type", (self.case_type or "").strip())
        object.__setattr__(self, "case_number", (self.case_number or "").strip())
        self._validate()

    def _validate(self) -> None:
        if not self.case_type:
            raise ValueError("Case type cannot be empty")

        if not self.case_number:
            raise ValueError("Case number cannot be empty")

        try:
            year = int(self.filing_year)
        except (TypeError, ValueError):
            raise ValueError(f"Filing year must be an integer, got: {self.filing_year!r}")
        object.__setattr__(self, "filing_year", year)

        upper = self.max_year if self.max_year is not None else date.today().year
        if not self.min_year <= year <= upper:
            raise ValueError(f"Filing year must be between {self.min_year} and {upper}, got: {year}")

    def to_dict(self) -> dict:
        return {
            "case_type": self.case_type,
            "case_number": self.case_number,
            "filing_year": self.filing_year,
        }


@dataclass
class CaseRecord:
    """Represents the case as shown by the court site.

    Fields the page does not show stay empty; nothing is filled in from
    the query except where a strategy only confirms the case exists.
    """

    case_number: str = ""
    case_type: str = ""
    petitioner: str = ""
    respondent: str = ""
    filing_date: str = ""
    next_hearing_date: str = ""
    status: str = ""

    @property
    def is_populated(self) -> bool:
        return bool(self.case_number and self.case_number.strip())

    def to_dict(self) -> dict:
        """Convert case record to dictionary for JSON export."""
        return asdict(self)
