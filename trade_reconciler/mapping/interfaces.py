"""Typed interfaces for raw-row normalization."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Protocol

from trade_reconciler.domain import Leg, LegAction, MatchingPolicy, PositionDirection, RowOrder


class RejectionReason(str, Enum):
    """Reason codes for rows skipped by the record normalizer."""

    NON_OPTION_TRANSACTION = "non_option_transaction"
    MISSING_SYMBOL = "missing_symbol"
    INVALID_DATE = "invalid_date"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_AMOUNT = "invalid_amount"
    MISSING_OPTION_DETAILS = "missing_option_details"


class NormalizationError(ValueError):
    """Raised when one raw row cannot be normalized into a leg.

    Attributes:
        reason: Rejection reason code.
        row_index: Zero-based source row index.
    """

    def __init__(self, message: str, reason: RejectionReason, row_index: int):
        super().__init__(message)
        self.reason = reason
        self.row_index = row_index


class NonOptionRowError(NormalizationError):
    """Raised for rows that are not option open/close transactions."""


class UnknownSourceProfileError(KeyError):
    """Raised when a source profile name is not registered."""


@dataclass(frozen=True)
class ColumnMapping:
    """Raw column names used by one brokerage export.

    Attributes:
        symbol: Underlying symbol column.
        trade_date: Activity date column.
        transaction_code: Transaction code column, e.g. `Trans Code`.
        quantity: Contract quantity column.
        amount: Signed cash amount column.
        description: Optional free-text description or OCC symbol column.
        option_type: Optional option right column.
        strike: Optional strike column.
        expiry: Optional expiration date column.
        row_filter: Column/value pairs a row must match to be considered an option row.
    """

    symbol: str
    trade_date: str
    transaction_code: str
    quantity: str
    amount: str
    description: str | None = None
    option_type: str | None = None
    strike: str | None = None
    expiry: str | None = None
    row_filter: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SourceProfile:
    """Declared brokerage source profile.

    Attributes:
        name: Profile identifier.
        column_mapping: Raw column names for this source.
        matching_policy: Default ledger selection policy for this source.
        row_order: Native row ordering of the export.
        transaction_code_mapping: Transaction code to `(action, direction)` table.
    """

    name: str
    column_mapping: ColumnMapping
    matching_policy: MatchingPolicy
    row_order: RowOrder
    transaction_code_mapping: Mapping[str, tuple[LegAction, PositionDirection]]


@dataclass(frozen=True)
class RejectedRow:
    """One row skipped during normalization.

    Attributes:
        row_index: Zero-based source row index in export order.
        reason: Rejection reason code.
        message: Diagnostic message.
        transaction_code: Raw transaction code when present.
    """

    row_index: int
    reason: RejectionReason
    message: str
    transaction_code: str | None = None


@dataclass(frozen=True)
class SuspiciousAmountWarning:
    """Non-fatal flag for a leg whose amount magnitude exceeds the threshold.

    Attributes:
        row_index: Zero-based source row index in export order.
        amount: Parsed leg amount.
        threshold: Configured threshold.
        contract_label: Contract label of the flagged leg.
    """

    row_index: int
    amount: Decimal
    threshold: Decimal
    contract_label: str


@dataclass(frozen=True)
class NormalizationBatch:
    """Normalization output for one import.

    Attributes:
        legs: Normalized legs in processing order.
        rejected_rows: Rows skipped with their reasons.
        suspicious_rows: Suspicious-amount flags for emitted legs.
        transaction_type_counts: Tally of raw transaction codes seen, including rejected rows.
    """

    legs: tuple[Leg, ...]
    rejected_rows: tuple[RejectedRow, ...]
    suspicious_rows: tuple[SuspiciousAmountWarning, ...]
    transaction_type_counts: Mapping[str, int]


class NormalizerPort(Protocol):
    """Port definition for raw-row normalization."""

    def mapping_normalize_rows(
        self,
        rows: Sequence[Mapping[str, object]],
        profile: SourceProfile,
    ) -> NormalizationBatch:
        """Normalize raw rows into legs in processing order.

        Args:
            rows: Raw rows in export order.
            profile: Source profile describing the export.

        Returns:
            NormalizationBatch: Legs plus rejection and suspicious-amount diagnostics.

        Raises:
            ValueError: Raised when top-level inputs are invalid.
        """
