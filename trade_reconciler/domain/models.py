"""Typed domain models shared across reconciliation layers.

Legs are produced only by the record normalizer; the matcher, classifier and
report layers never see raw row shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class OptionType(str, Enum):
    """Option right of one contract."""

    CALL = "CALL"
    PUT = "PUT"


class LegAction(str, Enum):
    """Whether one leg opens or closes a position."""

    OPEN = "OPEN"
    CLOSE = "CLOSE"


class PositionDirection(str, Enum):
    """Position direction established by an opening leg."""

    LONG = "LONG"
    SHORT = "SHORT"


class MatchingPolicy(str, Enum):
    """Ledger entry selection policy used when a close consumes open positions.

    `FIFO` consumes the oldest open position first, `LIFO` the most recent one.
    """

    FIFO = "FIFO"
    LIFO = "LIFO"


class RowOrder(str, Enum):
    """Native row ordering of one brokerage export."""

    CHRONOLOGICAL = "CHRONOLOGICAL"
    REVERSE_CHRONOLOGICAL = "REVERSE_CHRONOLOGICAL"


@dataclass(frozen=True)
class ContractKey:
    """Identity of one option contract.

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

    def label(self) -> str:
        """Return a compact human-readable contract label.

        Returns:
            str: Label such as `SPY 2025-02-21 550 PUT`.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return f"{self.symbol} {self.expiry.isoformat()} {self.strike.normalize():f} {self.option_type.value}"


@dataclass(frozen=True)
class Leg:
    """Canonical leg record produced by the record normalizer.

    Attributes:
        contract_key: Contract identity.
        trade_date: Activity date of the leg.
        action: Open or close.
        direction: Opening direction for opens; direction of the closed position for closes.
        quantity: Positive number of contracts.
        amount: Signed cash flow, negative when cash is paid and positive when received.
        transaction_code: Source transaction code, e.g. `STO`.
        source_row_index: Zero-based index of the source row in export order.
    """

    contract_key: ContractKey
    trade_date: date
    action: LegAction
    direction: PositionDirection
    quantity: int
    amount: Decimal
    transaction_code: str
    source_row_index: int


@dataclass(frozen=True)
class Trade:
    """Reconciled trade emitted by the matcher.

    Attributes:
        contract_key: Contract identity.
        direction: Direction of the opening side.
        strategy: Strategy label, refined later by the strategy classifier.
        open_date: Opening date; the close date for partial trades.
        close_date: Closing date, or None while the position is open.
        credit: Cash received, non-negative.
        debit: Cash paid, non-negative.
        quantity: Contracts covered by this trade.
        is_partial: True when the close had no opening leg in the dataset.
        is_open: True when the opening leg has no close yet.
    """

    contract_key: ContractKey
    direction: PositionDirection
    strategy: str
    open_date: date
    close_date: date | None
    credit: Decimal
    debit: Decimal
    quantity: int
    is_partial: bool = False
    is_open: bool = False

    @property
    def profit_loss(self) -> Decimal:
        """Return realized cash P/L as `credit - debit`."""

        return self.credit - self.debit

    @property
    def is_matched(self) -> bool:
        """Return True for a fully paired open/close trade."""

        return not self.is_partial and not self.is_open


def domain_single_leg_strategy(option_type: OptionType, direction: PositionDirection) -> str:
    """Return the default single-leg strategy label.

    Args:
        option_type: Option right.
        direction: Opening direction.

    Returns:
        str: Label such as `Short Put` or `Long Call`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    direction_label = "Long" if direction is PositionDirection.LONG else "Short"
    type_label = "Call" if option_type is OptionType.CALL else "Put"
    return f"{direction_label} {type_label}"
