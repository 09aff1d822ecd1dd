"""Built-in brokerage source profiles."""

from __future__ import annotations

from collections.abc import Iterable
from types import MappingProxyType

from trade_reconciler.domain import LegAction, MatchingPolicy, PositionDirection, RowOrder

from .interfaces import ColumnMapping, SourceProfile, UnknownSourceProfileError

_MAPPING_SHORTHAND_CODES = MappingProxyType(
    {
        "STO": (LegAction.OPEN, PositionDirection.SHORT),
        "BTO": (LegAction.OPEN, PositionDirection.LONG),
        "STC": (LegAction.CLOSE, PositionDirection.LONG),
        "BTC": (LegAction.CLOSE, PositionDirection.SHORT),
    }
)

_MAPPING_VERBOSE_CODES = MappingProxyType(
    {
        "SELL_TO_OPEN": (LegAction.OPEN, PositionDirection.SHORT),
        "BUY_TO_OPEN": (LegAction.OPEN, PositionDirection.LONG),
        "SELL_TO_CLOSE": (LegAction.CLOSE, PositionDirection.LONG),
        "BUY_TO_CLOSE": (LegAction.CLOSE, PositionDirection.SHORT),
    }
)

# Newest-first export, matched most-recent-open-first.
ROBINHOOD_PROFILE = SourceProfile(
    name="robinhood",
    column_mapping=ColumnMapping(
        symbol="Instrument",
        trade_date="Activity Date",
        transaction_code="Trans Code",
        quantity="Quantity",
        amount="Amount",
        description="Description",
    ),
    matching_policy=MatchingPolicy.LIFO,
    row_order=RowOrder.REVERSE_CHRONOLOGICAL,
    transaction_code_mapping=_MAPPING_SHORTHAND_CODES,
)

TASTYTRADE_PROFILE = SourceProfile(
    name="tastytrade",
    column_mapping=ColumnMapping(
        symbol="Underlying Symbol",
        trade_date="Date",
        transaction_code="Action",
        quantity="Quantity",
        amount="Value",
        description="Symbol",
        option_type="Call or Put",
        strike="Strike Price",
        expiry="Expiration Date",
        row_filter=MappingProxyType({"Type": "Trade", "Instrument Type": "Equity Option"}),
    ),
    matching_policy=MatchingPolicy.FIFO,
    row_order=RowOrder.CHRONOLOGICAL,
    transaction_code_mapping=_MAPPING_VERBOSE_CODES,
)

GENERIC_PROFILE = SourceProfile(
    name="generic",
    column_mapping=ColumnMapping(
        symbol="symbol",
        trade_date="date",
        transaction_code="code",
        quantity="quantity",
        amount="amount",
        description="description",
        option_type="option_type",
        strike="strike",
        expiry="expiry",
    ),
    matching_policy=MatchingPolicy.FIFO,
    row_order=RowOrder.CHRONOLOGICAL,
    transaction_code_mapping=_MAPPING_SHORTHAND_CODES,
)

_MAPPING_PROFILE_REGISTRY = MappingProxyType(
    {profile.name: profile for profile in (ROBINHOOD_PROFILE, TASTYTRADE_PROFILE, GENERIC_PROFILE)}
)


def mapping_get_source_profile(name: str) -> SourceProfile:
    """Resolve one built-in source profile by name.

    Args:
        name: Profile name, matched case-insensitively.

    Returns:
        SourceProfile: Registered profile.

    Raises:
        UnknownSourceProfileError: Raised when no profile is registered under the name.
    """

    normalized_name = name.strip().lower()
    profile = _MAPPING_PROFILE_REGISTRY.get(normalized_name)
    if profile is None:
        raise UnknownSourceProfileError(f"unknown source profile={name}")
    return profile


def mapping_list_source_profiles() -> tuple[SourceProfile, ...]:
    """Return built-in source profiles in deterministic name order."""

    return tuple(_MAPPING_PROFILE_REGISTRY[name] for name in sorted(_MAPPING_PROFILE_REGISTRY))


# Most specific column sets first.
_MAPPING_DETECTION_ORDER = (TASTYTRADE_PROFILE, ROBINHOOD_PROFILE, GENERIC_PROFILE)


def mapping_detect_source_profile(column_names: Iterable[str]) -> SourceProfile | None:
    """Detect the built-in source profile of an export from its column names.

    A profile matches when every column it requires (symbol, date,
    transaction code, quantity, amount and row-filter columns) is present,
    compared case-insensitively.

    Args:
        column_names: Header names of the export.

    Returns:
        SourceProfile | None: First matching profile, or None when no profile matches.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_names = {name.strip().lower() for name in column_names if isinstance(name, str)}
    for profile in _MAPPING_DETECTION_ORDER:
        if _mapping_required_columns(profile) <= normalized_names:
            return profile
    return None


def _mapping_required_columns(profile: SourceProfile) -> set[str]:
    columns = profile.column_mapping
    required_columns = {
        columns.symbol,
        columns.trade_date,
        columns.transaction_code,
        columns.quantity,
        columns.amount,
        *columns.row_filter,
    }
    return {column.lower() for column in required_columns}
