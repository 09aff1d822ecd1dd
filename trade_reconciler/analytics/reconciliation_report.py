"""Reconciliation report aggregation over reconciled trades."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from trade_reconciler.domain import ReconciliationStageEvent, Trade
from trade_reconciler.mapping import NormalizationBatch


class ReconciliationWarningCode(str, Enum):
    """Dataset-level warning codes surfaced to callers as data."""

    INCOMPLETE_DATA = "INCOMPLETE_DATA"
    SUSPICIOUS_AMOUNT = "SUSPICIOUS_AMOUNT"
    REJECTED_ROWS = "REJECTED_ROWS"


@dataclass(frozen=True)
class ReconciliationWarning:
    """One non-fatal dataset-level warning.

    Attributes:
        code: Warning code.
        message: Human-readable warning text.
        count: Number of trades or rows the warning covers.
    """

    code: ReconciliationWarningCode
    message: str
    count: int


@dataclass(frozen=True)
class ReconciliationReport:
    """Read-only summary of one reconciliation run.

    Attributes:
        matched_trade_count: Fully paired trades.
        partial_trade_count: Closes without an opening leg in the dataset.
        open_trade_count: Opening legs still open at the end of processing.
        total_contracts: Contracts across all trades.
        matched_profit_loss: `credit - debit` over matched trades.
        partial_profit_loss: `credit - debit` over partial trades.
        total_profit_loss: Matched plus partial P/L; open trades are excluded.
        open_credit: Credit held by open trades.
        open_debit: Debit paid for open trades.
        rejected_row_count: Rows skipped by the normalizer.
        suspicious_row_count: Legs flagged above the amount threshold.
        transaction_type_counts: Raw transaction codes seen.
        strategy_counts: Trades by final strategy label.
        warnings: Dataset-level warnings.
        diagnostics: Structured stage events of the run.
    """

    matched_trade_count: int
    partial_trade_count: int
    open_trade_count: int
    total_contracts: int
    matched_profit_loss: Decimal
    partial_profit_loss: Decimal
    total_profit_loss: Decimal
    open_credit: Decimal
    open_debit: Decimal
    rejected_row_count: int
    suspicious_row_count: int
    transaction_type_counts: Mapping[str, int]
    strategy_counts: Mapping[str, int]
    warnings: tuple[ReconciliationWarning, ...]
    diagnostics: tuple[ReconciliationStageEvent, ...] = ()

    @property
    def is_complete(self) -> bool:
        """Return True when every close was paired with an opening leg."""

        return self.partial_trade_count == 0


def analytics_build_reconciliation_report(
    trades: Sequence[Trade],
    batch: NormalizationBatch,
    diagnostics: Sequence[ReconciliationStageEvent] = (),
) -> ReconciliationReport:
    """Aggregate trades and normalizer diagnostics into one report.

    Args:
        trades: Classified matched, partial and open trades.
        batch: Normalization output of the same run.
        diagnostics: Optional stage events to embed.

    Returns:
        ReconciliationReport: Aggregated summary.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    matched_trades = [trade for trade in trades if trade.is_matched]
    partial_trades = [trade for trade in trades if trade.is_partial]
    open_trades = [trade for trade in trades if trade.is_open]

    matched_profit_loss = sum((trade.profit_loss for trade in matched_trades), Decimal("0"))
    partial_profit_loss = sum((trade.profit_loss for trade in partial_trades), Decimal("0"))

    warnings: list[ReconciliationWarning] = []
    if partial_trades:
        warnings.append(
            ReconciliationWarning(
                code=ReconciliationWarningCode.INCOMPLETE_DATA,
                message=(
                    f"{len(partial_trades)} closing transaction(s) have no opening leg in this dataset; "
                    "P/L for them is incomplete"
                ),
                count=len(partial_trades),
            )
        )
    if batch.suspicious_rows:
        warnings.append(
            ReconciliationWarning(
                code=ReconciliationWarningCode.SUSPICIOUS_AMOUNT,
                message=f"{len(batch.suspicious_rows)} row(s) exceed the suspicious amount threshold",
                count=len(batch.suspicious_rows),
            )
        )
    if batch.rejected_rows:
        warnings.append(
            ReconciliationWarning(
                code=ReconciliationWarningCode.REJECTED_ROWS,
                message=f"{len(batch.rejected_rows)} row(s) were skipped during normalization",
                count=len(batch.rejected_rows),
            )
        )

    return ReconciliationReport(
        matched_trade_count=len(matched_trades),
        partial_trade_count=len(partial_trades),
        open_trade_count=len(open_trades),
        total_contracts=sum(trade.quantity for trade in trades),
        matched_profit_loss=matched_profit_loss,
        partial_profit_loss=partial_profit_loss,
        total_profit_loss=matched_profit_loss + partial_profit_loss,
        open_credit=sum((trade.credit for trade in open_trades), Decimal("0")),
        open_debit=sum((trade.debit for trade in open_trades), Decimal("0")),
        rejected_row_count=len(batch.rejected_rows),
        suspicious_row_count=len(batch.suspicious_rows),
        transaction_type_counts=dict(batch.transaction_type_counts),
        strategy_counts=dict(Counter(trade.strategy for trade in trades)),
        warnings=tuple(warnings),
        diagnostics=tuple(diagnostics),
    )
