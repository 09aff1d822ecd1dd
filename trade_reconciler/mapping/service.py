"""Record normalizer service for raw brokerage rows."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from trade_reconciler.domain import (
    ContractKey,
    Leg,
    RowOrder,
    domain_normalize_optional_text,
    domain_parse_currency,
    domain_parse_option_description,
    domain_parse_option_type,
    domain_parse_quantity,
    domain_parse_trade_date,
)

from .interfaces import (
    NonOptionRowError,
    NormalizationBatch,
    NormalizationError,
    RejectedRow,
    RejectionReason,
    SourceProfile,
    SuspiciousAmountWarning,
)

logger = logging.getLogger(__name__)

_MAPPING_UNKNOWN_TRANSACTION_CODE = "UNKNOWN"


@dataclass(frozen=True)
class NormalizerServiceConfig:
    """Configuration for record normalizer behavior.

    Attributes:
        suspicious_amount_threshold: Absolute amount above which a leg is flagged.
        today: Optional fixed reference date for bare `M/D` year inference.
    """

    suspicious_amount_threshold: Decimal = Decimal("10000")
    today: date | None = None

    def mapping_validate(self) -> None:
        """Validate normalizer configuration values.

        Returns:
            None: This method does not return a value.

        Raises:
            ValueError: Raised when the threshold is not positive.
        """

        if self.suspicious_amount_threshold <= 0:
            raise ValueError("config.suspicious_amount_threshold must be positive")


class RecordNormalizerService:
    """Concrete normalizer turning raw brokerage rows into canonical legs."""

    def __init__(self, config: NormalizerServiceConfig | None = None):
        """Initialize record normalizer service.

        Args:
            config: Optional normalizer configuration values.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        resolved_config = config or NormalizerServiceConfig()
        resolved_config.mapping_validate()

        self._config = resolved_config

    def mapping_normalize_rows(
        self,
        rows: Sequence[Mapping[str, object]],
        profile: SourceProfile,
    ) -> NormalizationBatch:
        """Normalize raw rows into legs in chronological processing order.

        Reverse-chronological exports are reversed; no other reordering is
        applied. Row-level failures are logged, recorded and skipped.

        Args:
            rows: Raw rows in export order.
            profile: Source profile describing the export.

        Returns:
            NormalizationBatch: Legs plus rejection and suspicious-amount diagnostics.

        Raises:
            ValueError: Raised when profile is missing.
        """

        if profile is None:
            raise ValueError("profile must not be None")

        indexed_rows = list(enumerate(rows))
        if profile.row_order is RowOrder.REVERSE_CHRONOLOGICAL:
            indexed_rows.reverse()

        legs: list[Leg] = []
        rejected_rows: list[RejectedRow] = []
        suspicious_rows: list[SuspiciousAmountWarning] = []
        transaction_type_counts: Counter[str] = Counter()

        for row_index, row in indexed_rows:
            transaction_code = self._mapping_cell(row, profile.column_mapping.transaction_code)
            transaction_type_counts[transaction_code.upper() if transaction_code else _MAPPING_UNKNOWN_TRANSACTION_CODE] += 1

            try:
                leg = self.mapping_normalize_row(row=row, profile=profile, row_index=row_index)
            except NonOptionRowError as error:
                logger.debug("skipping non-option row %s: %s", row_index, error)
                rejected_rows.append(
                    RejectedRow(
                        row_index=row_index,
                        reason=error.reason,
                        message=str(error),
                        transaction_code=transaction_code,
                    )
                )
                continue
            except NormalizationError as error:
                logger.warning("skipping row %s: %s", row_index, error)
                rejected_rows.append(
                    RejectedRow(
                        row_index=row_index,
                        reason=error.reason,
                        message=str(error),
                        transaction_code=transaction_code,
                    )
                )
                continue

            if abs(leg.amount) > self._config.suspicious_amount_threshold:
                logger.warning(
                    "suspicious amount %s on row %s for %s",
                    leg.amount,
                    row_index,
                    leg.contract_key.label(),
                )
                suspicious_rows.append(
                    SuspiciousAmountWarning(
                        row_index=row_index,
                        amount=leg.amount,
                        threshold=self._config.suspicious_amount_threshold,
                        contract_label=leg.contract_key.label(),
                    )
                )
            legs.append(leg)

        return NormalizationBatch(
            legs=tuple(legs),
            rejected_rows=tuple(rejected_rows),
            suspicious_rows=tuple(suspicious_rows),
            transaction_type_counts=dict(transaction_type_counts),
        )

    def mapping_normalize_row(
        self,
        row: Mapping[str, object],
        profile: SourceProfile,
        row_index: int,
    ) -> Leg:
        """Normalize one raw row into a canonical leg.

        Args:
            row: Raw string-keyed row.
            profile: Source profile describing the export.
            row_index: Zero-based source row index.

        Returns:
            Leg: Canonical leg record.

        Raises:
            NonOptionRowError: Raised when the row is not an option open/close transaction.
            NormalizationError: Raised when required fields are unrecoverable.
        """

        columns = profile.column_mapping
        for filter_column, expected_value in columns.row_filter.items():
            if self._mapping_cell(row, filter_column) != expected_value:
                raise NonOptionRowError(
                    f"row filter {filter_column}!={expected_value}",
                    reason=RejectionReason.NON_OPTION_TRANSACTION,
                    row_index=row_index,
                )

        transaction_code = (self._mapping_cell(row, columns.transaction_code) or "").upper()
        action_direction = profile.transaction_code_mapping.get(transaction_code)
        if action_direction is None:
            raise NonOptionRowError(
                f"unsupported transaction code={transaction_code or _MAPPING_UNKNOWN_TRANSACTION_CODE}",
                reason=RejectionReason.NON_OPTION_TRANSACTION,
                row_index=row_index,
            )
        action, direction = action_direction

        symbol = self._mapping_cell(row, columns.symbol)
        if symbol is None:
            raise NormalizationError("missing symbol", reason=RejectionReason.MISSING_SYMBOL, row_index=row_index)

        raw_date = self._mapping_cell(row, columns.trade_date)
        trade_date = domain_parse_trade_date(raw_date, today=self._config.today)
        if trade_date is None:
            raise NormalizationError(
                f"invalid date={raw_date}",
                reason=RejectionReason.INVALID_DATE,
                row_index=row_index,
            )

        raw_quantity = self._mapping_cell(row, columns.quantity)
        quantity = domain_parse_quantity(raw_quantity)
        if quantity is None:
            raise NormalizationError(
                f"invalid quantity={raw_quantity}",
                reason=RejectionReason.INVALID_QUANTITY,
                row_index=row_index,
            )

        raw_amount = self._mapping_cell(row, columns.amount)
        amount = Decimal("0") if raw_amount is None else domain_parse_currency(raw_amount)
        if amount is None:
            raise NormalizationError(
                f"invalid amount={raw_amount}",
                reason=RejectionReason.INVALID_AMOUNT,
                row_index=row_index,
            )

        contract_key = self._mapping_resolve_contract_key(row=row, profile=profile, symbol=symbol)
        if contract_key is None:
            raise NormalizationError(
                "option details could not be recovered",
                reason=RejectionReason.MISSING_OPTION_DETAILS,
                row_index=row_index,
            )

        return Leg(
            contract_key=contract_key,
            trade_date=trade_date,
            action=action,
            direction=direction,
            quantity=quantity,
            amount=amount,
            transaction_code=transaction_code,
            source_row_index=row_index,
        )

    def _mapping_resolve_contract_key(
        self,
        row: Mapping[str, object],
        profile: SourceProfile,
        symbol: str,
    ) -> ContractKey | None:
        """Resolve contract identity from explicit columns, falling back to the description.

        Args:
            row: Raw string-keyed row.
            profile: Source profile describing the export.
            symbol: Underlying symbol from the row.

        Returns:
            ContractKey | None: Contract identity when recoverable.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        columns = profile.column_mapping
        if columns.option_type and columns.strike and columns.expiry:
            option_type = domain_parse_option_type(self._mapping_cell(row, columns.option_type))
            strike = domain_parse_currency(self._mapping_cell(row, columns.strike))
            expiry = domain_parse_trade_date(self._mapping_cell(row, columns.expiry), today=self._config.today)
            if option_type is not None and strike is not None and strike > 0 and expiry is not None:
                return ContractKey(symbol=symbol.upper(), option_type=option_type, strike=strike, expiry=expiry)

        if columns.description:
            description = domain_parse_option_description(self._mapping_cell(row, columns.description))
            if description is not None:
                return ContractKey(
                    symbol=symbol.upper(),
                    option_type=description.option_type,
                    strike=description.strike,
                    expiry=description.expiry,
                )

        return None

    def _mapping_cell(self, row: Mapping[str, object], column: str) -> str | None:
        """Read one cell as normalized text, accepting numeric JSON scalars."""

        value = row.get(column)
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            value = str(value)
        return domain_normalize_optional_text(value)
