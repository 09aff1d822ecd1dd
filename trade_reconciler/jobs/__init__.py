"""Job layer package for reconciliation orchestration."""

from .interfaces import ReconciliationPipelinePort, ReconciliationResult
from .reconciliation_pipeline import ReconciliationPipeline

__all__ = ["ReconciliationPipeline", "ReconciliationPipelinePort", "ReconciliationResult"]
