"""Job-layer reconciliation pipeline with a per-run stage timeline."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence

from trade_reconciler.analytics import StrategyClassifier, analytics_build_reconciliation_report
from trade_reconciler.domain import MatchingPolicy, ReconciliationStageEvent, domain_build_stage_event
from trade_reconciler.ledger import MatchRequest, PositionLedger, matcher_match_legs
from trade_reconciler.mapping import NormalizerPort, SourceProfile

from .interfaces import ReconciliationResult

logger = logging.getLogger(__name__)


class ReconciliationPipeline:
    """Runs normalize, match, classify and report for one import at a time."""

    def __init__(self, normalizer: NormalizerPort, classifier: StrategyClassifier | None = None):
        """Initialize reconciliation pipeline dependencies.

        Args:
            normalizer: Record normalizer implementation.
            classifier: Optional strategy classifier; a default instance is used when omitted.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when normalizer is missing.
        """

        if normalizer is None:
            raise ValueError("normalizer must not be None")

        self._normalizer = normalizer
        self._classifier = classifier or StrategyClassifier()

    def job_reconcile(
        self,
        rows: Sequence[Mapping[str, object]],
        profile: SourceProfile,
        matching_policy: MatchingPolicy | None = None,
    ) -> ReconciliationResult:
        """Reconcile raw rows of one import into trades and a report.

        Each call owns a fresh position ledger, so concurrent imports never
        share open positions.

        Args:
            rows: Raw rows in export order.
            profile: Source profile describing the export.
            matching_policy: Optional override of the profile's default policy for this call.

        Returns:
            ReconciliationResult: Trades and report for the import.

        Raises:
            ValueError: Raised when profile is missing.
        """

        if profile is None:
            raise ValueError("profile must not be None")

        resolved_policy = matching_policy or profile.matching_policy
        timeline: list[ReconciliationStageEvent] = []

        stage_started = time.perf_counter()
        batch = self._normalizer.mapping_normalize_rows(rows=rows, profile=profile)
        timeline.append(
            domain_build_stage_event(
                stage="normalize",
                status="success",
                details={
                    "row_count": len(rows),
                    "leg_count": len(batch.legs),
                    "rejected_row_count": len(batch.rejected_rows),
                    "suspicious_row_count": len(batch.suspicious_rows),
                },
                duration_ms=_job_elapsed_ms(stage_started),
            )
        )

        stage_started = time.perf_counter()
        match_result = matcher_match_legs(
            MatchRequest(legs=batch.legs, policy=resolved_policy, ledger=PositionLedger())
        )
        timeline.append(
            domain_build_stage_event(
                stage="match",
                status="success",
                details={
                    "matching_policy": resolved_policy.value,
                    "matched_count": match_result.matched_count,
                    "partial_count": match_result.partial_count,
                    "open_count": match_result.open_count,
                },
                duration_ms=_job_elapsed_ms(stage_started),
            )
        )

        stage_started = time.perf_counter()
        trades = self._classifier.analytics_classify_trades(match_result.trades)
        timeline.append(
            domain_build_stage_event(
                stage="classify",
                status="success",
                details={"trade_count": len(trades)},
                duration_ms=_job_elapsed_ms(stage_started),
            )
        )

        timeline.append(domain_build_stage_event(stage="report", status="success"))
        report = analytics_build_reconciliation_report(trades=trades, batch=batch, diagnostics=timeline)

        logger.info(
            "reconciled profile=%s policy=%s matched=%s partial=%s open=%s rejected=%s total_pl=%s",
            profile.name,
            resolved_policy.value,
            report.matched_trade_count,
            report.partial_trade_count,
            report.open_trade_count,
            report.rejected_row_count,
            report.total_profit_loss,
        )

        return ReconciliationResult(
            profile_name=profile.name,
            matching_policy=resolved_policy,
            trades=tuple(trades),
            report=report,
        )


def _job_elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
