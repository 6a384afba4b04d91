"""Configuration management for the court case lookup engine.

This module loads configuration from TOML files if present:
- `config.private.toml` (local, not checked into VCS)
- `config.toml` (project-level)

Values are read from the loaded config first, then fall back to
environment variables (optional), then to built-in defaults.

The engine never reads these accessors mid-search: `Config.load_settings()`
takes one snapshot when the engine is constructed.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from court_lookup.lib.url_utils import origin_of

# Default values
DEFAULT_BASE_URL = "https://delhihighcourt.nic.in"
DEFAULT_NAVIGATION_TIMEOUT_SECONDS = 30
DEFAULT_ELEMENT_WAIT_SECONDS = 5
DEFAULT_SETTLE_SECONDS = 2.0
DEFAULT_SUBMIT_SETTLE_SECONDS = 3.0

DEFAULT_HEADLESS = True
DEFAULT_VIEWPORT_WIDTH = 1920
DEFAULT_VIEWPORT_HEIGHT = 1080
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_ACCEPT_LANGUAGE = "en-US,en;q=0.9"

DEFAULT_MIN_FILING_YEAR = 1950

DEFAULT_CAPTCHA_SUBMIT_URL = "http://2captcha.com/in.php"
DEFAULT_CAPTCHA_RESULT_URL = "http://2captcha.com/res.php"
DEFAULT_CAPTCHA_POLL_INTERVAL_SECONDS = 10.0
DEFAULT_CAPTCHA_MAX_POLL_ATTEMPTS = 30
DEFAULT_CAPTCHA_SUBMIT_TIMEOUT_SECONDS = 30.0
DEFAULT_CAPTCHA_POLL_TIMEOUT_SECONDS = 10.0

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "logs/court_lookup.log"


def _load_toml_config() -> dict:
    """Load config from `config.toml` then `config.private.toml` if available.

    Returns a dict with merged values (private overrides project file).
    """
    cfg: dict = {}
    cwd = Path.cwd()
    for fname in ("config.toml", "config.private.toml"):
        p = cwd / fname
        if not p.exists():
            continue
        try:
            with open(p, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # Ignore unreadable files and continue with the rest
            continue
        for k, v in data.items():
            if isinstance(v, dict) and isinstance(cfg.get(k), dict):
                cfg[k].update(v)
            else:
                cfg[k] = v
    return cfg


_CONFIG = _load_toml_config()


def _get_from_config(section: str, key: str):
    value = _CONFIG.get(section, {})
    if not isinstance(value, dict):
        return None
    return value.get(key)


def _lookup(section: str, key: str, env_var: str, default):
    """Return the first value that is set: TOML, then environment, then default."""
    val = _get_from_config(section, key)
    if val is None:
        val = os.getenv(env_var)
    if val is None or val == "":
        return default
    return val


def _as_bool(val, default: bool) -> bool:
    if val is None:
        return default
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val)


class Config:
    """Configuration accessors.

    Each accessor prefers the TOML value, then the environment variable,
    then the built-in default.
    """

    @classmethod
    def get_base_url(cls) -> str:
        return str(_lookup("app", "base_url", "COURT_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")

    @classmethod
    def get_navigation_timeout_seconds(cls) -> int:
        return int(
            _lookup(
                "app",
                "navigation_timeout_seconds",
                "COURT_NAVIGATION_TIMEOUT_SECONDS",
                DEFAULT_NAVIGATION_TIMEOUT_SECONDS,
            )
        )

    @classmethod
    def get_element_wait_seconds(cls) -> int:
        return int(
            _lookup("app", "element_wait_seconds", "COURT_ELEMENT_WAIT_SECONDS", DEFAULT_ELEMENT_WAIT_SECONDS)
        )

    @classmethod
    def get_settle_seconds(cls) -> float:
        return float(_lookup("app", "settle_seconds", "COURT_SETTLE_SECONDS", DEFAULT_SETTLE_SECONDS))

    @classmethod
    def get_submit_settle_seconds(cls) -> float:
        return float(
            _lookup("app", "submit_settle_seconds", "COURT_SUBMIT_SETTLE_SECONDS", DEFAULT_SUBMIT_SETTLE_SECONDS)
        )

    @classmethod
    def get_headless(cls) -> bool:
        val = _get_from_config("app", "headless")
        if val is None:
            val = os.getenv("COURT_HEADLESS")
        return _as_bool(val, DEFAULT_HEADLESS)

    @classmethod
    def get_viewport_width(cls) -> int:
        return int(_lookup("app", "viewport_width", "COURT_VIEWPORT_WIDTH", DEFAULT_VIEWPORT_WIDTH))

    @classmethod
    def get_viewport_height(cls) -> int:
        return int(_lookup("app", "viewport_height", "COURT_VIEWPORT_HEIGHT", DEFAULT_VIEWPORT_HEIGHT))

    @classmethod
    def get_user_agent(cls) -> str:
        return str(_lookup("app", "user_agent", "COURT_USER_AGENT", DEFAULT_USER_AGENT))

    @classmethod
    def get_accept_language(cls) -> str:
        return str(_lookup("app", "accept_language", "COURT_ACCEPT_LANGUAGE", DEFAULT_ACCEPT_LANGUAGE))

    @classmethod
    def get_min_filing_year(cls) -> int:
        return int(_lookup("app", "min_filing_year", "COURT_MIN_FILING_YEAR", DEFAULT_MIN_FILING_YEAR))

    @classmethod
    def get_max_filing_year(cls) -> int:
        return int(_lookup("app", "max_filing_year", "COURT_MAX_FILING_YEAR", date.today().year))

    @classmethod
    def get_captcha_api_key(cls) -> Optional[str]:
        return _lookup("captcha", "api_key", "CAPTCHA_SOLVER_API_KEY", None)

    @classmethod
    def get_captcha_submit_url(cls) -> str:
        return str(_lookup("captcha", "submit_url", "CAPTCHA_SOLVER_URL", DEFAULT_CAPTCHA_SUBMIT_URL))

    @classmethod
    def get_captcha_result_url(cls) -> str:
        return str(_lookup("captcha", "result_url", "CAPTCHA_RESULT_URL", DEFAULT_CAPTCHA_RESULT_URL))

    @classmethod
    def get_captcha_poll_interval_seconds(cls) -> float:
        return float(
            _lookup(
                "captcha",
                "poll_interval_seconds",
                "CAPTCHA_POLL_INTERVAL_SECONDS",
                DEFAULT_CAPTCHA_POLL_INTERVAL_SECONDS,
            )
        )

    @classmethod
    def get_captcha_max_poll_attempts(cls) -> int:
        return int(
            _lookup(
                "captcha",
                "max_poll_attempts",
                "CAPTCHA_MAX_POLL_ATTEMPTS",
                DEFAULT_CAPTCHA_MAX_POLL_ATTEMPTS,
            )
        )

    @classmethod
    def get_captcha_submit_timeout_seconds(cls) -> float:
        return float(
            _lookup(
                "captcha",
                "submit_timeout_seconds",
                "CAPTCHA_SUBMIT_TIMEOUT_SECONDS",
                DEFAULT_CAPTCHA_SUBMIT_TIMEOUT_SECONDS,
            )
        )

    @classmethod
    def get_captcha_poll_timeout_seconds(cls) -> float:
        return float(
            _lookup(
                "captcha",
                "poll_timeout_seconds",
                "CAPTCHA_POLL_TIMEOUT_SECONDS",
                DEFAULT_CAPTCHA_POLL_TIMEOUT_SECONDS,
            )
        )

    @classmethod
    def get_selector_overrides(cls) -> dict:
        """Return the `[selectors]` table: name -> list of "kind:value" strings."""
        raw = _CONFIG.get("selectors", {})
        if not isinstance(raw, dict):
            return {}
        out = {}
        for name, specs in raw.items():
            if isinstance(specs, str):
                specs = [specs]
            out[name] = [str(s) for s in specs]
        return out

    @classmethod
    def get_log_level(cls) -> str:
        return str(_lookup("app", "log_level", "COURT_LOG_LEVEL", DEFAULT_LOG_LEVEL))

    @classmethod
    def get_log_file(cls) -> Optional[str]:
        return _lookup("app", "log_file", "COURT_LOG_FILE", DEFAULT_LOG_FILE)

    @classmethod
    def load_settings(cls, **overrides) -> "LookupSettings":
        """Snapshot every engine setting into an immutable `LookupSettings`.

        Keyword overrides win over the configured values (the CLI uses this
        for flags such as `--no-headless`).
        """
        values = dict(
            base_url=cls.get_base_url(),
            navigation_timeout_seconds=cls.get_navigation_timeout_seconds(),
            element_wait_seconds=cls.get_element_wait_seconds(),
            settle_seconds=cls.get_settle_seconds(),
            submit_settle_seconds=cls.get_submit_settle_seconds(),
            headless=cls.get_headless(),
            viewport_width=cls.get_viewport_width(),
            viewport_height=cls.get_viewport_height(),
            user_agent=cls.get_user_agent(),
            accept_language=cls.get_accept_language(),
            min_filing_year=cls.get_min_filing_year(),
            max_filing_year=cls.get_max_filing_year(),
            captcha_api_key=cls.get_captcha_api_key(),
            captcha_submit_url=cls.get_captcha_submit_url(),
            captcha_result_url=cls.get_captcha_result_url(),
            captcha_poll_interval_seconds=cls.get_captcha_poll_interval_seconds(),
            captcha_max_poll_attempts=cls.get_captcha_max_poll_attempts(),
            captcha_submit_timeout_seconds=cls.get_captcha_submit_timeout_seconds(),
            captcha_poll_timeout_seconds=cls.get_captcha_poll_timeout_seconds(),
            selector_overrides=cls.get_selector_overrides(),
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return LookupSettings(**values)


@dataclass(frozen=True)
class LookupSettings:
    """Read-only settings shared by every search an engine runs."""

    base_url: str = DEFAULT_BASE_URL
    navigation_timeout_seconds: int = DEFAULT_NAVIGATION_TIMEOUT_SECONDS
    element_wait_seconds: int = DEFAULT_ELEMENT_WAIT_SECONDS
    settle_seconds: float = DEFAULT_SETTLE_SECONDS
    submit_settle_seconds: float = DEFAULT_SUBMIT_SETTLE_SECONDS
    headless: bool = DEFAULT_HEADLESS
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    min_filing_year: int = DEFAULT_MIN_FILING_YEAR
    max_filing_year: int = field(default_factory=lambda: date.today().year)
    captcha_api_key: Optional[str] = None
    captcha_submit_url: str = DEFAULT_CAPTCHA_SUBMIT_URL
    captcha_result_url: str = DEFAULT_CAPTCHA_RESULT_URL
    captcha_poll_interval_seconds: float = DEFAULT_CAPTCHA_POLL_INTERVAL_SECONDS
    captcha_max_poll_attempts: int = DEFAULT_CAPTCHA_MAX_POLL_ATTEMPTS
    captcha_submit_timeout_seconds: float = DEFAULT_CAPTCHA_SUBMIT_TIMEOUT_SECONDS
    captcha_poll_timeout_seconds: float = DEFAULT_CAPTCHA_POLL_TIMEOUT_SECONDS
    selector_overrides: dict = field(default_factory=dict)

    @property
    def base_origin(self) -> str:
        """Scheme and host of `base_url`, used to absolutize document links."""
        return origin_of(self.base_url)
