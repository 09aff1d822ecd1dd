"""Typed interfaces for job-layer reconciliation responsibilities."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from trade_reconciler.analytics import ReconciliationReport
from trade_reconciler.domain import MatchingPolicy, Trade
from trade_reconciler.mapping import SourceProfile


@dataclass(frozen=True)
class ReconciliationResult:
    """Result contract for one reconciliation run.

    Attributes:
        profile_name: Source profile used for normalization.
        matching_policy: Policy actually applied by the matcher.
        trades: Classified trades in emission order.
        report: Aggregated reconciliation report.
    """

    profile_name: str
    matching_policy: MatchingPolicy
    trades: tuple[Trade, ...]
    report: ReconciliationReport


class ReconciliationPipelinePort(Protocol):
    """Port definition for running one import through the reconciliation engine."""

    def job_reconcile(
        self,
        rows: Sequence[Mapping[str, object]],
        profile: SourceProfile,
        matching_policy: MatchingPolicy | None = None,
    ) -> ReconciliationResult:
        """Reconcile raw rows of one import into trades and a report.

        Args:
            rows: Raw rows in export order.
            profile: Source profile describing the export.
            matching_policy: Optional override of the profile's default policy.

        Returns:
            ReconciliationResult: Trades and report for the import.

        Raises:
            ValueError: Raised when top-level inputs are invalid.
        """
