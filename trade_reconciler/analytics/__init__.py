"""Analytics layer package for strategy classification and report aggregation."""

from .reconciliation_report import (
	ReconciliationReport,
	ReconciliationWarning,
	ReconciliationWarningCode,
	analytics_build_reconciliation_report,
)
from .strategy_classifier import StrategyClassifier, analytics_infer_strategy

__all__ = [
	"ReconciliationReport",
	"ReconciliationWarning",
	"ReconciliationWarningCode",
	"analytics_build_reconciliation_report",
	"StrategyClassifier",
	"analytics_infer_strategy",
]
