"""Shared currency, date, quantity and option-description parsing helpers.

This module centralizes the string parsing used by every brokerage profile so
normalization stays deterministic. Every parser returns None on failure rather
than raising or propagating NaN values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from .models import OptionType

_DOMAIN_NULL_SENTINELS = frozenset({"-", "--", "N/A"})

_DOMAIN_CURRENCY_SUFFIX_SIGNS = {
    "cr": 1,
    "db": -1,
}

_DOMAIN_SLASH_DATE_PATTERN = re.compile(r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})(?:/(?P<year>\d{2}|\d{4}))?$")

_DOMAIN_DESCRIPTION_PATTERN = re.compile(
    r"^(?P<symbol>[A-Za-z][A-Za-z0-9.\-/]*)\s+"
    r"(?P<expiry>\d{1,2}/\d{1,2}/\d{4})\s+"
    r"(?P<option_type>call|put)\s+"
    r"\$?(?P<strike>[\d,]+(?:\.\d+)?)$",
    re.IGNORECASE,
)

# OCC symbology: root, YYMMDD, C/P, strike * 1000 in eight digits.
_DOMAIN_OCC_SYMBOL_PATTERN = re.compile(
    r"^(?P<root>[A-Za-z][A-Za-z0-9.]{0,5})\s*"
    r"(?P<year>\d{2})(?P<month>\d{2})(?P<day>\d{2})"
    r"(?P<option_type>[CP])(?P<strike>\d{8})$"
)

_DOMAIN_OPTION_TYPE_ALIASES = {
    "CALL": OptionType.CALL,
    "C": OptionType.CALL,
    "PUT": OptionType.PUT,
    "P": OptionType.PUT,
}


@dataclass(frozen=True)
class OptionDescription:
    """Option contract details recovered from a free-text description.

    Attributes:
        symbol: Underlying symbol, upper-cased.
        option_type: Option right.
        strike: Strike price.
        expiry: Expiration date.
    """

    symbol: str
    option_type: OptionType
    strike: Decimal
    expiry: date


def domain_normalize_optional_text(value: object | None) -> str | None:
    """Normalize one optional text value using shared null-sentinel policy.

    Args:
        value: Candidate value from a raw row.

    Returns:
        str | None: Normalized text value or None when missing/sentinel.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return None
    if not isinstance(value, str):
        return None

    normalized_value = value.strip()
    if not normalized_value:
        return None
    if normalized_value in _DOMAIN_NULL_SENTINELS:
        return None
    return normalized_value


def domain_parse_currency(value: object | None) -> Decimal | None:
    """Parse one currency-formatted amount into a signed `Decimal`.

    Tolerates `$`, thousands separators, parenthesis-as-negative, a leading
    sign, and the `cr`/`db` suffix form used by some order exports.

    Args:
        value: Candidate amount text, e.g. `"($1,070.04)"` or `"1.22 cr"`.

    Returns:
        Decimal | None: Signed amount, or None when blank or unparseable.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return None

    sign = 1
    suffix_parts = normalized_value.rsplit(maxsplit=1)
    if len(suffix_parts) == 2 and suffix_parts[1].lower() in _DOMAIN_CURRENCY_SUFFIX_SIGNS:
        sign = _DOMAIN_CURRENCY_SUFFIX_SIGNS[suffix_parts[1].lower()]
        normalized_value = suffix_parts[0]

    cleaned_value = normalized_value.replace("$", "").replace(",", "").replace(" ", "")
    if cleaned_value.startswith("(") and cleaned_value.endswith(")"):
        sign = -sign
        cleaned_value = cleaned_value[1:-1]
    if cleaned_value.startswith("-"):
        sign = -sign
        cleaned_value = cleaned_value[1:]
    elif cleaned_value.startswith("+"):
        cleaned_value = cleaned_value[1:]

    if not cleaned_value or not (cleaned_value[0].isdigit() or cleaned_value[0] == "."):
        return None

    try:
        parsed_value = Decimal(cleaned_value)
    except InvalidOperation:
        return None
    if not parsed_value.is_finite():
        return None
    return parsed_value if sign > 0 else -parsed_value


def domain_parse_quantity(value: object | None) -> int | None:
    """Parse one contract quantity into a positive integer.

    Args:
        value: Candidate quantity text; sign is ignored.

    Returns:
        int | None: Absolute integral quantity, or None for blank, fractional or zero values.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return None

    try:
        parsed_value = Decimal(normalized_value.replace(",", ""))
    except InvalidOperation:
        return None
    if not parsed_value.is_finite() or parsed_value == 0:
        return None
    if parsed_value != parsed_value.to_integral_value():
        return None
    return abs(int(parsed_value))


def domain_parse_trade_date(value: object | None, today: date | None = None) -> date | None:
    """Parse one activity date tolerating partial and timestamped forms.

    Supported forms are ISO dates and timestamps, `YYYY/MM/DD`, `M/D/YYYY`,
    `M/D/YY` and bare `M/D`. A bare `M/D` resolves to the current year, or to
    the next year when that date is already before `today`. Trailing time text
    after `,`, `T` or a space is ignored.

    Args:
        value: Candidate date text.
        today: Reference date for year inference; defaults to the local current date.

    Returns:
        date | None: Parsed date when supported, else None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return None

    reference_date = today or date.today()
    for candidate in _domain_build_split_candidates(normalized_value, separators=(",", "T", " ")):
        parsed_value = _domain_parse_date_candidate(candidate.strip(), reference_date)
        if parsed_value is not None:
            return parsed_value
    return None


def domain_parse_option_type(value: object | None) -> OptionType | None:
    """Parse an option right such as `Call`, `PUT` or `C`."""

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return None
    return _DOMAIN_OPTION_TYPE_ALIASES.get(normalized_value.upper())


def domain_parse_option_description(value: object | None) -> OptionDescription | None:
    """Recover option contract details from a description or OCC symbol.

    Recognizes `"QQQ 4/11/2025 Call $460.00"` descriptions and OCC option
    symbols such as `"SPY   250606P00500000"`.

    Args:
        value: Candidate description text.

    Returns:
        OptionDescription | None: Parsed contract details, else None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return None

    description_match = _DOMAIN_DESCRIPTION_PATTERN.match(normalized_value)
    if description_match is not None:
        try:
            expiry = datetime.strptime(description_match.group("expiry"), "%m/%d/%Y").date()
        except ValueError:
            return None
        strike = domain_parse_currency(description_match.group("strike"))
        if strike is None or strike <= 0:
            return None
        return OptionDescription(
            symbol=description_match.group("symbol").upper(),
            option_type=_DOMAIN_OPTION_TYPE_ALIASES[description_match.group("option_type").upper()],
            strike=strike,
            expiry=expiry,
        )

    occ_match = _DOMAIN_OCC_SYMBOL_PATTERN.match(normalized_value)
    if occ_match is not None:
        try:
            expiry = date(
                2000 + int(occ_match.group("year")),
                int(occ_match.group("month")),
                int(occ_match.group("day")),
            )
        except ValueError:
            return None
        strike = Decimal(int(occ_match.group("strike"))) / Decimal(1000)
        if strike <= 0:
            return None
        return OptionDescription(
            symbol=occ_match.group("root").upper(),
            option_type=_DOMAIN_OPTION_TYPE_ALIASES[occ_match.group("option_type")],
            strike=strike,
            expiry=expiry,
        )

    return None


def _domain_parse_date_candidate(candidate: str, reference_date: date) -> date | None:
    """Parse one split date candidate.

    Args:
        candidate: Stripped candidate value.
        reference_date: Reference date for bare month/day values.

    Returns:
        date | None: Parsed date when supported, else None.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not candidate:
        return None

    slash_match = _DOMAIN_SLASH_DATE_PATTERN.match(candidate)
    if slash_match is not None:
        return _domain_resolve_slash_date(
            month=int(slash_match.group("month")),
            day=int(slash_match.group("day")),
            year_text=slash_match.group("year"),
            reference_date=reference_date,
        )

    try:
        return date.fromisoformat(candidate)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(candidate).date()
    except ValueError:
        pass

    try:
        return datetime.strptime(candidate, "%Y/%m/%d").date()
    except ValueError:
        return None


def _domain_resolve_slash_date(month: int, day: int, year_text: str | None, reference_date: date) -> date | None:
    """Resolve `M/D`, `M/D/YY` and `M/D/YYYY` parts into a date."""

    try:
        if year_text is None:
            candidate_date = date(reference_date.year, month, day)
            if candidate_date < reference_date:
                candidate_date = date(reference_date.year + 1, month, day)
            return candidate_date

        year = int(year_text)
        if len(year_text) == 2:
            year += 2000 if year < 50 else 1900
        return date(year, month, day)
    except ValueError:
        return None


def _domain_build_split_candidates(normalized_value: str, separators: tuple[str, ...]) -> list[str]:
    """Build deterministic split candidates using configured separators.

    Args:
        normalized_value: Stripped source value.
        separators: Separators that may indicate trailing timestamp text.

    Returns:
        list[str]: Ordered de-duplicated candidates.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    candidate_values: list[str] = [normalized_value]
    for separator in separators:
        if separator in normalized_value:
            candidate_values.append(normalized_value.split(separator, maxsplit=1)[0])
    return list(dict.fromkeys(candidate_values))


__all__ = [
    "OptionDescription",
    "domain_normalize_optional_text",
    "domain_parse_currency",
    "domain_parse_quantity",
    "domain_parse_trade_date",
    "domain_parse_option_type",
    "domain_parse_option_description",
]
