"""Map what happened during a search onto one of the four outcome statuses."""

from typing import Optional, Union

from court_lookup.lib.errors import CaptchaError, NotFoundError
from court_lookup.models.search_outcome import SearchOutcome, SearchStatus
from court_lookup.services.search_strategies import StrategyResult


def is_captcha_failure(exc: BaseException) -> bool:
    """True for CAPTCHA errors, including foreign ones that only say so in the message."""
    return isinstance(exc, CaptchaError) or "captcha" in str(exc).lower()


def classify(result: Union[StrategyResult, BaseException, None]) -> str:
    """Pure mapping from a strategy result or a raised exception to a status.

    | Input                                     | Status          |
    |-------------------------------------------|-----------------|
    | result with case info or orders           | success         |
    | NotFoundError, empty result, or None      | not_found       |
    | exception mentioning a CAPTCHA failure    | captcha_failed  |
    | any other exception                       | error           |
    """
    if isinstance(result, BaseException):
        if isinstance(result, NotFoundError):
            return SearchStatus.NOT_FOUND
        if is_captcha_failure(result):
            return SearchStatus.CAPTCHA_FAILED
        return SearchStatus.ERROR

    if result is None or result.extraction.is_empty:
        return SearchStatus.NOT_FOUND
    return SearchStatus.SUCCESS


def build_outcome(
    result: Union[StrategyResult, BaseException, None],
    raw_html: str = "",
    captcha_solved: bool = False,
    captcha_attempts: int = 0,
    processing_time_ms: int = 0,
) -> SearchOutcome:
    """Assemble the SearchOutcome for `result`.

    Case data is only attached on success; the page markup always is.
    """
    status = classify(result)
    error_message: Optional[str] = None
    case_info = None
    orders = []
    strategy = None

    if status == SearchStatus.SUCCESS:
        case_info = result.case_info
        orders = list(result.orders)
        strategy = result.strategy
        raw_html = result.raw_html or raw_html
    elif isinstance(result, BaseException):
        error_message = str(result) or result.__class__.__name__
    else:
        error_message = "Case not found"

    return SearchOutcome(
        status=status,
        case_info=case_info,
        orders=orders,
        raw_html=raw_html or "",
        error_message=error_message,
        captcha_solved=captcha_solved,
        captcha_attempts=captcha_attempts,
        processing_time_ms=processing_time_ms,
        strategy=strategy,
    )
