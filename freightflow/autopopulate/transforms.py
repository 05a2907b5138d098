"""Pure value transforms applied to auto-populated fields."""

from __future__ import annotations

import re
from typing import Any, Optional

_FIVE_DIGITS = re.compile(r"\d{5}")

_COUNTRY_ALIASES = {
    "US": ("US", "USA", "UNITED STATES", "UNITED STATES OF AMERICA"),
    "CA": ("CA", "CAN", "CANADA"),
    "MX": ("MX", "MEX", "MEXICO"),
}

_COUNTRY_NAMES = {"US": "United States", "CA": "Canada", "MX": "Mexico"}


def strip(value: Any) -> str:
    return str(value).strip()


def extract_zip(value: Any) -> str:
    """Return the first 5-digit run, else the first five digits, else ''."""
    text = str(value)
    match = _FIVE_DIGITS.search(text)
    if match:
        return match.group(0)
    digits = re.sub(r"\D", "", text)
    return digits[:5] if len(digits) >= 5 else ""


def country_code(value: Any) -> str:
    """Normalise a country name or code to a two-letter code."""
    text = str(value).strip().upper()
    if not text:
        return ""
    for code, aliases in _COUNTRY_ALIASES.items():
        if text in aliases:
            return code
    return text[:2]


def country_name(value: Any) -> str:
    """Normalise a country to the display names the carrier forms use."""
    code = country_code(value)
    if code in _COUNTRY_NAMES:
        return _COUNTRY_NAMES[code]
    text = str(value).strip().upper()
    for name in _COUNTRY_NAMES.values():
        if text in name.upper() or name.upper() in text:
            return name
    return _COUNTRY_NAMES["US"]


def payment_term_code(value: Any) -> str:
    """Map free-text payment terms to ``P`` (prepaid), ``C`` (collect) or ``3``."""
    text = str(value).strip().upper()
    if "PREPAID" in text or "PRE-PAID" in text or text == "P":
        return "P"
    if "COLLECT" in text or text == "C":
        return "C"
    if "THIRD" in text or "3RD" in text or text == "3":
        return "3"
    return ""


def _to_number(value: Any) -> Optional[float]:
    try:
        return float(str(value).strip().replace(",", ""))
    except ValueError:
        return None


def to_positive_int(value: Any) -> Optional[int]:
    number = _to_number(value)
    if number is None or number <= 0:
        return None
    return int(number)


def to_positive_float(value: Any) -> Optional[float]:
    number = _to_number(value)
    if number is None or number <= 0:
        return None
    return number
