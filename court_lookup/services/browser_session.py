"""Browser session wrapping one Chrome WebDriver for a single search."""

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from selenium import webdriver
from selenium.common.exceptions import (
    NoSuchElementException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import Select, WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from court_lookup.lib.config import LookupSettings
from court_lookup.lib.errors import BrowserLaunchError, NavigationError
from court_lookup.lib.locators import Locator
from court_lookup.lib.logging_config import get_logger

logger = get_logger()


def create_chrome_driver(settings: LookupSettings) -> webdriver.Chrome:
    """Setup Chrome WebDriver with the configured identity and viewport.

    Returns:
        webdriver.Chrome: Configured Chrome driver
    """
    options = Options()
    if settings.headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument("--no-first-run")
    options.add_argument(f"--window-size={settings.viewport_width},{settings.viewport_height}")
    options.add_argument(f"--user-agent={settings.user_agent}")
    # Accept-Language: "en-US,en;q=0.9" -> "en-US,en"
    languages = [part.split(";")[0].strip() for part in settings.accept_language.split(",") if part.strip()]
    if languages:
        options.add_argument(f"--lang={languages[0]}")
        options.add_experimental_option("prefs", {"intl.accept_languages": ",".join(languages)})

    service = Service(ChromeDriverManager().install())
    driver = webdriver.Chrome(service=service, options=options)
    driver.set_page_load_timeout(settings.navigation_timeout_seconds)

    logger.info("Chrome WebDriver initialized")
    return driver


class BrowserSession:
    """Owns the live page for the duration of one search.

    Every element lookup takes an ordered list of locators and acts on the
    first match. A list with no match is not an error: the lookup methods
    return False/None and the caller decides what that means.
    """

    def __init__(
        self,
        settings: LookupSettings,
        driver_factory: Optional[Callable[[LookupSettings], object]] = None,
        diagnostics_dir: str = "logs",
    ):
        """Initialize the browser session.

        Args:
            settings: Engine settings snapshot
            driver_factory: Builds the WebDriver; defaults to Chrome
            diagnostics_dir: Where screenshots/page sources go on failure
        """
        self.settings = settings
        self.landing_url = settings.base_url
        self._driver_factory = driver_factory or create_chrome_driver
        self._diagnostics_dir = Path(diagnostics_dir)
        self._driver = None
        self.close_count = 0

    @property
    def driver(self):
        if self._driver is None:
            raise RuntimeError("Browser session is not open")
        return self._driver

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    def open(self) -> None:
        """Launch the browser and load the landing page.

        Raises:
            BrowserLaunchError: If the WebDriver cannot be started
            NavigationError: If the landing page cannot be loaded
        """
        try:
            self._driver = self._driver_factory(self.settings)
        except (WebDriverException, OSError, ValueError) as exc:
            logger.error(f"Failed to launch browser: {exc}")
            raise BrowserLaunchError(f"Failed to launch browser: {exc}") from exc

        self.navigate(self.landing_url)
        logger.info(f"Navigated to {self.landing_url}")

    def navigate(self, url: str) -> None:
        """Load `url` and wait for the page body.

        Raises:
            NavigationError: On page-load timeout or network failure
        """
        driver = self.driver
        logger.info(f"[UI_ACTION] Loading page: {url}")
        try:
            driver.get(url)
            WebDriverWait(driver, self.settings.navigation_timeout_seconds).until(
                EC.presence_of_element_located((By.TAG_NAME, "body"))
            )
        except TimeoutException as exc:
            self.save_diagnostics("navigation_timeout")
            raise NavigationError(f"Timed out loading {url}") from exc
        except WebDriverException as exc:
            self.save_diagnostics("navigation_failed")
            raise NavigationError(f"Failed to load {url}: {exc.msg or exc}") from exc

    def return_to_landing(self) -> None:
        """Go back to the landing page so a strategy starts from a known state."""
        self.navigate(self.landing_url)

    def find_first(self, locators: Sequence[Locator], timeout: Optional[float] = None):
        """Return the first element matched by `locators`, or None.

        Waits up to `timeout` seconds (default `element_wait_seconds`) for
        any of the locators to match; the whole list is re-checked on each poll.
        """
        element = self._match_now(locators)
        if element is not None:
            return element

        wait_seconds = self.settings.element_wait_seconds if timeout is None else timeout
        if not wait_seconds or wait_seconds <= 0:
            return None
        try:
            return WebDriverWait(self.driver, wait_seconds).until(lambda _d: self._match_now(locators))
        except TimeoutException:
            logger.debug(f"[UI_ACTION] No element after {wait_seconds}s for {_describe(locators)}")
            return None

    def _match_now(self, locators: Sequence[Locator]):
        driver = self.driver
        for locator in locators:
            by, selector = locator.to_selenium()
            try:
                elements = driver.find_elements(by, selector)
            except (NoSuchElementException, WebDriverException) as exc:
                logger.debug(f"[UI_ACTION] Locator {locator} failed: {exc}")
                continue
            if elements:
                logger.debug(f"[UI_ACTION] Matched element using {locator}")
                return elements[0]
        return None

    def is_present(self, locators: Sequence[Locator]) -> bool:
        """Check the current page right now, without waiting."""
        return self._match_now(locators) is not None

    def find_and_click(self, locators: Sequence[Locator], settle: Optional[float] = None) -> bool:
        """Click the first element matched by `locators`.

        Returns:
            bool: True if something was clicked, False if nothing matched
        """
        element = self.find_first(locators)
        if element is None:
            logger.debug(f"[UI_ACTION] Nothing to click for {_describe(locators)}")
            return False

        element_text = (element.text or "").strip() or element.get_attribute("value") or "<no text>"
        try:
            element.click()
            logger.info(f"[UI_ACTION] Clicked '{element_text}' using native click")
        except WebDriverException:
            logger.info(f"[UI_ACTION] Native click failed, trying JavaScript click ('{element_text}')")
            self.driver.execute_script("arguments[0].click();", element)
            logger.info(f"[UI_ACTION] Clicked '{element_text}' using JavaScript")

        self._pause(self.settings.settle_seconds if settle is None else settle)
        return True

    def fill_field(self, locators: Sequence[Locator], value: str) -> bool:
        """Type `value` into the first input matched by `locators`."""
        element = self.find_first(locators)
        if element is None:
            logger.debug(f"[UI_ACTION] No input found for {_describe(locators)}")
            return False
        self._safe_send_keys(element, value)
        return True

    def select_option(self, locators: Sequence[Locator], value: str) -> bool:
        """Pick `value` in the first <select> matched by `locators`.

        Tries the option value first, then the visible text.
        """
        element = self.find_first(locators)
        if element is None:
            logger.debug(f"[UI_ACTION] No select found for {_describe(locators)}")
            return False
        try:
            dropdown = Select(element)
        except WebDriverException as exc:
            logger.debug(f"[UI_ACTION] Matched element is not a select: {exc}")
            return False
        for pick in (dropdown.select_by_value, dropdown.select_by_visible_text):
            try:
                pick(value)
                logger.info(f"[UI_ACTION] Selected option '{value}'")
                return True
            except (NoSuchElementException, WebDriverException):
                continue
        logger.warning(f"[UI_ACTION] Option '{value}' not available in select")
        return False

    def current_markup(self) -> str:
        """Return the fully rendered HTML of the current page."""
        return self.driver.page_source or ""

    def screenshot_region(self, locators: Sequence[Locator]) -> Optional[bytes]:
        """Capture PNG bytes of the first element matched by `locators`."""
        element = self.find_first(locators)
        if element is None:
            return None
        try:
            return element.screenshot_as_png
        except WebDriverException as exc:
            logger.warning(f"[UI_ACTION] Element screenshot failed: {exc}")
            return None

    def save_diagnostics(self, tag: str) -> List[Path]:
        """Save a screenshot and the page source to help debug failures.

        Best-effort: returns the files written, never raises.
        """
        if self._driver is None:
            return []
        written = []
        ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        try:
            self._diagnostics_dir.mkdir(parents=True, exist_ok=True)
            screenshot_path = self._diagnostics_dir / f"{tag}_{ts}.png"
            page_source_path = self._diagnostics_dir / f"{tag}_{ts}.html"
            if self._driver.save_screenshot(str(screenshot_path)):
                written.append(screenshot_path)
            page_source_path.write_text(self._driver.page_source or "", encoding="utf-8")
            written.append(page_source_path)
            logger.error(f"Saved diagnostics: {', '.join(str(p) for p in written)}")
        except (OSError, WebDriverException) as write_err:
            logger.error(f"Failed to write diagnostic artifacts: {write_err}")
        return written

    def close(self) -> None:
        """Quit the WebDriver. Safe to call again after the first time."""
        self.close_count += 1
        if self._driver is None:
            return
        try:
            self._driver.quit()
            logger.info("WebDriver closed")
        except WebDriverException as exc:
            logger.warning(f"WebDriver quit failed: {exc}")
        finally:
            self._driver = None

    def _safe_send_keys(self, element, text: str) -> None:
        """Safely send keys to an element, using JS fallback if necessary."""
        element_id = element.get_attribute("id") or element.get_attribute("name") or "<anonymous>"
        logger.info(f"[UI_ACTION] Typing text '{text}' into input element (id: {element_id})")

        try:
            element.clear()
        except WebDriverException:
            logger.debug(f"[UI_ACTION] Failed to clear input element (id: {element_id}), continuing")

        try:
            element.send_keys(text)
            return
        except WebDriverException:
            logger.info(f"[UI_ACTION] send_keys failed, trying JavaScript fallback (id: {element_id})")

        self.driver.execute_script(
            "arguments[0].value = arguments[1]; arguments[0].dispatchEvent(new Event('input'));",
            element,
            text,
        )

    def _pause(self, seconds: float) -> None:
        if seconds and seconds > 0:
            time.sleep(seconds)


def _describe(locators: Sequence[Locator]) -> str:
    return ", ".join(str(loc) for loc in locators) or "<no locators>"
