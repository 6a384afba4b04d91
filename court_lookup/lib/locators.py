"""Element locators and the default selector catalog for the court site.

A locator list is plain data: the browser session tries each entry in
order and acts on the first element that matches. The defaults below can
be replaced per name from the `[selectors]` table of `config.toml`, e.g.::

    [selectors]
    party_name_input = ["id:txtPartyName", "css:input[name*='party']"]

Layout drift on the court site is then a configuration change.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from selenium.webdriver.common.by import By

_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_LOWER = "abcdefghijklmnopqrstuvwxyz"

KINDS = ("css", "xpath", "id", "name", "text", "href")


def _xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


@dataclass(frozen=True)
class Locator:
    """One way of finding an element.

    Kinds:
      - css / xpath / id / name: passed straight to Selenium
      - text: a link or button whose visible text contains `value` (any case)
      - href: a link whose href contains `value`
    """

    kind: str
    value: str

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Unknown locator kind: {self.kind!r}")
        if not self.value:
            raise ValueError("Locator value cannot be empty")

    @classmethod
    def parse(cls, spec: str) -> "Locator":
        """Build a locator from a "kind:value" string.

        Strings without a known kind prefix are treated as CSS selectors,
        so `a.download` and `input[type='submit']` both work unprefixed.
        """
        spec = spec.strip()
        prefix, sep, rest = spec.partition(":")
        if sep and prefix.strip().lower() in KINDS:
            return cls(prefix.strip().lower(), rest.strip())
        return cls("css", spec)

    def to_selenium(self) -> Tuple[str, str]:
        """Return the `(By, selector)` pair Selenium's find_elements expects."""
        if self.kind == "css":
            return By.CSS_SELECTOR, self.value
        if self.kind == "xpath":
            return By.XPATH, self.value
        if self.kind == "id":
            return By.ID, self.value
        if self.kind == "name":
            return By.NAME, self.value
        if self.kind == "text":
            needle = _xpath_literal(self.value.lower())
            return (
                By.XPATH,
                f"//*[self::a or self::button][contains(translate(normalize-space(.), '{_UPPER}', '{_LOWER}'), {needle})]",
            )
        # href
        return By.XPATH, f"//a[contains(@href, {_xpath_literal(self.value)})]"

    def __str__(self) -> str:
        return f"{self.kind}:{self.value}"


DEFAULT_SELECTORS: Dict[str, List[str]] = {
    # Order information system, searched by party name
    "order_info_link": ["text:order information", "href:order", "href:information"],
    "party_name_link": ["text:party name", "href:party"],
    "party_name_input": [
        "css:input[name*='party']",
        "css:#party_name",
        "css:.party-name",
        "css:input[name*='name']",
    ],
    "year_input": ["css:input[name*='year']", "css:#year", "css:.year-input"],
    # Order information system, searched by case number
    "case_number_link": ["text:case number", "href:case"],
    "case_type_select": ["css:select[name*='case_type']", "css:#case_type", "css:.case-type"],
    "case_number_input": ["css:input[name*='case_number']", "css:#case_number", "css:.case-number"],
    # Public judgments listing
    "judgments_link": ["text:latest judgments", "text:judgments", "href:judgment"],
    # Challenge image and its answer box
    "captcha_image": ["css:img[src*='captcha']", "css:img#captcha", "css:.captcha", "css:#captcha"],
    "captcha_input": ["css:input[name*='captcha']", "css:input#captcha", "css:.captcha-input"],
    "submit_button": ["css:input[type='submit']", "css:button[type='submit']", "css:.submit-btn"],
}


def parse_locators(specs: Iterable[str]) -> List[Locator]:
    return [Locator.parse(s) for s in specs if s and s.strip()]


def build_selector_catalog(overrides: Optional[Dict[str, List[str]]] = None) -> Dict[str, List[Locator]]:
    """Merge configured overrides over the defaults and parse every entry.

    An override replaces the whole list for its name; names that are not
    in the defaults are kept as well so new flows can be configured.
    """
    merged = dict(DEFAULT_SELECTORS)
    for name, specs in (overrides or {}).items():
        merged[name] = list(specs)
    return {name: parse_locators(specs) for name, specs in merged.items()}
