"""Exceptions raised by the case lookup engine."""


class CourtLookupError(Exception):
    """Base class for lookup failures."""


class BrowserLaunchError(CourtLookupError):
    """The WebDriver could not be started at all."""


class NavigationError(CourtLookupError):
    """The court website could not be reached or a page load timed out."""


class CaptchaError(CourtLookupError):
    """Base class for CAPTCHA failures.

    Messages always mention CAPTCHA so callers that only see the text can
    still tell these apart from other failures.
    """

    def __init__(self, message: str, attempts: int = 0):
        if "captcha" not in message.lower():
            message = f"CAPTCHA: {message}"
        super().__init__(message)
        self.attempts = attempts


class CaptchaSubmitError(CaptchaError):
    """The challenge image could not be handed to the solving service."""


class CaptchaSolveError(CaptchaError):
    """The solving service reported an error while we were polling."""


class CaptchaTimeoutError(CaptchaError):
    """The solving service did not answer within the poll budget."""


class NotFoundError(CourtLookupError):
    """The site explicitly reported no records, or every strategy came up empty."""


class ExtractionError(CourtLookupError):
    """A search was submitted but the result page had no table to read."""
