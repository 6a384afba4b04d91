"""Result types produced by the extractor, the strategies and the engine."""

from dataclasses import dataclass, field
from typing import List, Optional

from court_lookup.models.case import CaseRecord
from court_lookup.models.order_document import OrderDocument


class SearchStatus:
    """The four outcome statuses a search can end with."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    CAPTCHA_FAILED = "captcha_failed"
    ERROR = "error"

    ALL = (SUCCESS, NOT_FOUND, CAPTCHA_FAILED, ERROR)


@dataclass
class ExtractionResult:
    """Case record and documents read from one result page."""

    case_info: CaseRecord = field(default_factory=CaseRecord)
    orders: List[OrderDocument] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.case_info.is_populated and not self.orders

    def to_dict(self) -> dict:
        return {
            "case_info": self.case_info.to_dict(),
            "orders": [o.to_dict() for o in self.orders],
        }


@dataclass
class SearchOutcome:
    """The single value returned for every search.

    `raw_html` is attached whatever the status so failed lookups can be
    replayed from the stored page.
    """

    status: str
    case_info: Optional[CaseRecord] = None
    orders: List[OrderDocument] = field(default_factory=list)
    raw_html: str = ""
    error_message: Optional[str] = None
    captcha_solved: bool = False
    captcha_attempts: int = 0
    processing_time_ms: int = 0
    strategy: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status not in SearchStatus.ALL:
            raise ValueError(f"Unknown search status: {self.status!r}")

    @property
    def is_success(self) -> bool:
        return self.status == SearchStatus.SUCCESS

    @property
    def extracted_data(self) -> Optional[dict]:
        """Parsed case data in the shape the query log stores, or None."""
        if not self.is_success:
            return None
        return {
            "case_info": self.case_info.to_dict() if self.case_info else None,
            "orders": [o.to_dict() for o in self.orders],
            "strategy": self.strategy,
        }

    def to_dict(self, include_html: bool = True) -> dict:
        """Convert the outcome to a dictionary for JSON export."""
        payload = {
            "status": self.status,
            "case_info": self.case_info.to_dict() if self.case_info else None,
            "orders": [o.to_dict() for o in self.orders],
            "error_message": self.error_message,
            "captcha_solved": self.captcha_solved,
            "captcha_attempts": self.captcha_attempts,
            "processing_time_ms": self.processing_time_ms,
            "strategy": self.strategy,
            "extracted_data": self.extracted_data,
        }
        if include_html:
            payload["raw_html"] = self.raw_html
        return payload
