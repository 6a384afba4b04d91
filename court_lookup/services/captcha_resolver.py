"""Detect, solve and fill in the image CAPTCHA on the current page.

Each challenge moves through DETECTED -> SUBMITTED -> POLLING and ends in
SOLVED, EXPIRED or FAILED. A page without a challenge is left untouched.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from court_lookup.lib.errors import (
    CaptchaError,
    CaptchaSubmitError,
    CaptchaTimeoutError,
)
from court_lookup.lib.locators import Locator
from court_lookup.lib.logging_config import get_logger
from court_lookup.services.captcha_solver import CaptchaSolver

logger = get_logger()


class CaptchaState:
    DETECTED = "detected"
    SUBMITTED = "submitted"
    POLLING = "polling"
    SOLVED = "solved"
    EXPIRED = "expired"
    FAILED = "failed"

    TERMINAL = (SOLVED, EXPIRED, FAILED)


@dataclass
class CaptchaChallenge:
    """A challenge found on the page, alive until it reaches a terminal state."""

    image_bytes: bytes
    external_id: Optional[str] = None
    attempt_count: int = 0
    state: str = CaptchaState.DETECTED
    solution: Optional[str] = None

    def record_attempt(self, attempt: int) -> None:
        # Poll numbers only move forward
        self.attempt_count = max(self.attempt_count, attempt)

    def move_to(self, state: str) -> None:
        if self.state in CaptchaState.TERMINAL:
            raise RuntimeError(f"Challenge already finished ({self.state})")
        logger.debug(f"[CAPTCHA] {self.state} -> {state}")
        self.state = state


class CaptchaResolver:
    """Per-search CAPTCHA handling and bookkeeping.

    `attempts` adds up the polls of every challenge seen during the search
    and `solved` records whether any challenge was answered.
    """

    def __init__(self, solver: CaptchaSolver, selectors: Dict[str, List[Locator]]):
        self.solver = solver
        self.image_locators = selectors["captcha_image"]
        self.input_locators = selectors["captcha_input"]
        self.attempts = 0
        self.solved = False
        self.history: List[CaptchaChallenge] = []

    def resolve_if_present(self, session) -> Optional[CaptchaChallenge]:
        """Solve the challenge on the current page, if there is one.

        Returns:
            The finished challenge, or None when the page has no challenge

        Raises:
            CaptchaError: The challenge could not be solved
        """
        if not session.is_present(self.image_locators):
            return None

        logger.info("[CAPTCHA] CAPTCHA detected, attempting to solve")
        image_bytes = session.screenshot_region(self.image_locators)
        challenge = CaptchaChallenge(image_bytes=image_bytes or b"")
        self.history.append(challenge)

        try:
            if not image_bytes:
                raise CaptchaSubmitError("CAPTCHA image could not be captured")

            challenge.external_id = self.solver.submit(image_bytes)
            challenge.move_to(CaptchaState.SUBMITTED)

            challenge.move_to(CaptchaState.POLLING)
            challenge.solution = self.solver.wait_for_solution(
                challenge.external_id, on_attempt=challenge.record_attempt
            )
        except CaptchaTimeoutError:
            challenge.move_to(CaptchaState.EXPIRED)
            raise
        except CaptchaError:
            challenge.move_to(CaptchaState.FAILED)
            raise
        finally:
            self.attempts += challenge.attempt_count

        if not session.fill_field(self.input_locators, challenge.solution):
            logger.warning("[CAPTCHA] CAPTCHA solved but no answer field was found")
        challenge.move_to(CaptchaState.SOLVED)
        self.solved = True
        logger.info("[CAPTCHA] CAPTCHA solved successfully")
        return challenge

    def report_rejected(self, challenge: CaptchaChallenge) -> bool:
        """Tell the solving service the site did not accept this answer."""
        if challenge.state != CaptchaState.SOLVED or not challenge.external_id:
            return False
        logger.warning(f"[CAPTCHA] Site rejected the answer for job {challenge.external_id}")
        return self.solver.report_bad(challenge.external_id)
