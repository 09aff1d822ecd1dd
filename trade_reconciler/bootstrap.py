"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from trade_reconciler.analytics import StrategyClassifier
from trade_reconciler.api import create_api_application
from trade_reconciler.config import ReconcilerSettings, config_load_settings
from trade_reconciler.jobs import ReconciliationPipeline
from trade_reconciler.mapping import NormalizerServiceConfig, RecordNormalizerService


def bootstrap_create_pipeline(settings: ReconcilerSettings) -> ReconciliationPipeline:
    """Build the reconciliation pipeline from validated settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        ReconciliationPipeline: Fully wired pipeline instance.

    Raises:
        ValueError: Raised when normalizer configuration is invalid.
    """

    normalizer = RecordNormalizerService(
        config=NormalizerServiceConfig(suspicious_amount_threshold=settings.suspicious_amount_threshold)
    )
    return ReconciliationPipeline(normalizer=normalizer, classifier=StrategyClassifier())


def bootstrap_create_application(settings: ReconcilerSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return create_api_application(settings=resolved_settings, pipeline=bootstrap_create_pipeline(resolved_settings))
