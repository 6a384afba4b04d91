"""Client for a 2Captcha-compatible image CAPTCHA solving service.

The service only offers a pull API: the image is submitted to `in.php`
and the answer is polled from `res.php` until it is ready.
"""

import time
from typing import Callable, Optional

import requests

from court_lookup.lib.config import LookupSettings
from court_lookup.lib.errors import (
    CaptchaSolveError,
    CaptchaSubmitError,
    CaptchaTimeoutError,
)
from court_lookup.lib.logging_config import get_logger

logger = get_logger()

NOT_READY = "CAPCHA_NOT_READY"


class CaptchaSolver:
    """Submit challenge images and poll for their answers.

    The solver holds only read-only configuration, so one instance can be
    shared by concurrent searches.
    """

    def __init__(self, settings: LookupSettings, sleep: Callable[[float], None] = time.sleep):
        self.api_key = settings.captcha_api_key
        self.submit_url = settings.captcha_submit_url
        self.result_url = settings.captcha_result_url
        self.poll_interval_seconds = settings.captcha_poll_interval_seconds
        self.max_poll_attempts = settings.captcha_max_poll_attempts
        self.submit_timeout_seconds = settings.captcha_submit_timeout_seconds
        self.poll_timeout_seconds = settings.captcha_poll_timeout_seconds
        self._sleep = sleep

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def submit(self, image_bytes: bytes) -> str:
        """Send a challenge image to the service.

        Returns:
            str: The service's job id for this image

        Raises:
            CaptchaSubmitError: No API key, transport failure, or service error
        """
        if not self.api_key:
            logger.warning("[CAPTCHA] No CAPTCHA solver API key provided")
            raise CaptchaSubmitError("CAPTCHA solver API key is not configured")

        try:
            response = requests.post(
                self.submit_url,
                data={"key": self.api_key, "method": "post", "json": "1"},
                files={"file": ("captcha.png", image_bytes, "image/png")},
                timeout=self.submit_timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error(f"[CAPTCHA] Error submitting CAPTCHA: {exc}")
            raise CaptchaSubmitError(f"CAPTCHA submission failed: {exc}") from exc

        if not isinstance(payload, dict):
            logger.error(f"[CAPTCHA] Unexpected submit response: {payload!r}")
            raise CaptchaSubmitError(f"CAPTCHA submission returned an unexpected response: {payload!r}")
        if payload.get("status") == 1:
            job_id = str(payload.get("request"))
            logger.info(f"[CAPTCHA] CAPTCHA submitted successfully (id: {job_id})")
            return job_id

        error_text = payload.get("error_text") or payload.get("request") or "unknown error"
        logger.error(f"[CAPTCHA] Failed to submit CAPTCHA: {error_text}")
        raise CaptchaSubmitError(f"CAPTCHA submission rejected: {error_text}")

    def check(self, job_id: str) -> Optional[str]:
        """Ask once for the answer to `job_id`.

        Returns:
            The solved text, or None while the service is still working

        Raises:
            CaptchaSolveError: The service reported an error for this job
            requests.RequestException: Transport failure (caller decides)
        """
        response = requests.get(
            self.result_url,
            params={"key": self.api_key, "action": "get", "id": job_id, "json": "1"},
            timeout=self.poll_timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()

        if not isinstance(payload, dict):
            raise CaptchaSolveError(f"CAPTCHA service returned an unexpected response: {payload!r}")
        if payload.get("status") == 1:
            return str(payload.get("request"))
        if payload.get("request") == NOT_READY:
            return None

        error_text = payload.get("error_text") or payload.get("request") or "unknown error"
        logger.error(f"[CAPTCHA] CAPTCHA solution error: {error_text}")
        raise CaptchaSolveError(f"CAPTCHA solving failed: {error_text}")

    def wait_for_solution(self, job_id: str, on_attempt: Optional[Callable[[int], None]] = None) -> str:
        """Poll for the answer at a fixed interval until solved or out of attempts.

        A transport failure uses up one attempt and polling continues; a
        service-reported error stops immediately.

        Args:
            job_id: Id returned by submit()
            on_attempt: Called with the attempt number before each poll

        Raises:
            CaptchaSolveError: The service reported an error
            CaptchaTimeoutError: No answer after max_poll_attempts polls
        """
        for attempt in range(1, self.max_poll_attempts + 1):
            self._sleep(self.poll_interval_seconds)
            if on_attempt is not None:
                on_attempt(attempt)
            try:
                solution = self.check(job_id)
            except CaptchaSolveError as exc:
                exc.attempts = attempt
                raise
            except (requests.RequestException, ValueError) as exc:
                logger.error(f"[CAPTCHA] Error checking CAPTCHA solution (attempt {attempt}): {exc}")
                continue

            if solution:
                logger.info(f"[CAPTCHA] CAPTCHA solved after {attempt} poll(s) (id: {job_id})")
                return solution
            logger.debug(f"[CAPTCHA] Solution not ready (attempt {attempt}/{self.max_poll_attempts})")

        logger.error(f"[CAPTCHA] CAPTCHA solution timeout (id: {job_id})")
        raise CaptchaTimeoutError(
            f"CAPTCHA not solved after {self.max_poll_attempts} attempts",
            attempts=self.max_poll_attempts,
        )

    def get_balance(self) -> Optional[float]:
        """Return the account balance, or None if it cannot be read."""
        if not self.api_key:
            return None
        try:
            response = requests.get(
                self.result_url,
                params={"key": self.api_key, "action": "getbalance", "json": "1"},
                timeout=self.poll_timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error(f"[CAPTCHA] Error getting balance: {exc}")
            return None

        if not isinstance(payload, dict):
            logger.error(f"[CAPTCHA] Unexpected balance response: {payload!r}")
            return None
        if payload.get("status") == 1:
            try:
                return float(payload.get("request"))
            except (TypeError, ValueError):
                return None
        logger.error(f"[CAPTCHA] Failed to get balance: {payload.get('error_text')}")
        return None

    def report_bad(self, job_id: str) -> bool:
        """Tell the service that the answer for `job_id` was wrong."""
        if not self.api_key:
            return False
        try:
            response = requests.get(
                self.result_url,
                params={"key": self.api_key, "action": "reportbad", "id": job_id, "json": "1"},
                timeout=self.poll_timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error(f"[CAPTCHA] Error reporting bad CAPTCHA: {exc}")
            return False

        if not isinstance(payload, dict):
            logger.error(f"[CAPTCHA] Unexpected reportbad response: {payload!r}")
            return False
        if payload.get("status") == 1:
            logger.info(f"[CAPTCHA] Bad CAPTCHA solution reported (id: {job_id})")
            return True
        logger.error(f"[CAPTCHA] Failed to report bad CAPTCHA: {payload.get('error_text')}")
        return False
