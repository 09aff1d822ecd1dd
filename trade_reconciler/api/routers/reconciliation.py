"""Reconciliation API router composition for profile listing and reconcile endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from trade_reconciler.analytics import ReconciliationReport
from trade_reconciler.config import ReconcilerSettings
from trade_reconciler.domain import MatchingPolicy, Trade
from trade_reconciler.jobs import ReconciliationPipelinePort, ReconciliationResult
from trade_reconciler.mapping import (
    SourceProfile,
    UnknownSourceProfileError,
    mapping_detect_source_profile,
    mapping_get_source_profile,
    mapping_list_source_profiles,
)


class ReconciliationRequestBody(BaseModel):
    """Request body for one reconciliation run.

    Attributes:
        profile: Source profile name; when omitted it is detected from the row columns,
            falling back to the configured default.
        matching_policy: Optional override of the profile's matching policy.
        rows: Raw string-keyed rows in export order.
    """

    profile: str | None = None
    matching_policy: MatchingPolicy | None = None
    rows: list[dict[str, Any]] = Field(default_factory=list)


def api_create_reconciliation_router(
    settings: ReconcilerSettings,
    pipeline: ReconciliationPipelinePort,
) -> APIRouter:
    """Create reconciliation router with profile and reconcile endpoints.

    Args:
        settings: Runtime settings used for the default source profile.
        pipeline: Job-layer reconciliation pipeline.

    Returns:
        APIRouter: Router exposing reconciliation APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if pipeline is None:
        raise ValueError("pipeline must not be None")

    router = APIRouter(tags=["reconciliation"])

    @router.get("/profiles")
    def api_profile_list() -> JSONResponse:
        """List built-in source profiles.

        Returns:
            JSONResponse: Profile list envelope payload.
        """

        payload = {
            "items": [api_serialize_source_profile(profile) for profile in mapping_list_source_profiles()],
            "default_profile": settings.default_source_profile,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/reconciliations")
    def api_reconciliation_run(body: ReconciliationRequestBody) -> JSONResponse:
        """Reconcile posted rows into trades and a report.

        Args:
            body: Validated request body.

        Returns:
            JSONResponse: Reconciliation result payload; row-level problems are reported, never raised.
        """

        profile_name = body.profile or _api_resolve_profile_name(
            rows=body.rows,
            default_profile_name=settings.default_source_profile,
        )
        try:
            profile = mapping_get_source_profile(profile_name)
        except UnknownSourceProfileError:
            payload = {
                "status": "error",
                "code": "UNKNOWN_SOURCE_PROFILE",
                "message": f"unknown source profile={profile_name}",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_404_NOT_FOUND)

        result = pipeline.job_reconcile(rows=body.rows, profile=profile, matching_policy=body.matching_policy)
        return JSONResponse(content=api_serialize_reconciliation_result(result), status_code=status.HTTP_200_OK)

    return router


def _api_resolve_profile_name(rows: list[dict[str, Any]], default_profile_name: str) -> str:
    """Detect the source profile from posted column names, else use the configured default."""

    column_names = {column_name for row in rows for column_name in row}
    detected_profile = mapping_detect_source_profile(column_names)
    return detected_profile.name if detected_profile is not None else default_profile_name


def api_serialize_source_profile(profile: SourceProfile) -> dict[str, object]:
    """Serialize one source profile to JSON payload."""

    return {
        "name": profile.name,
        "matching_policy": profile.matching_policy.value,
        "row_order": profile.row_order.value,
        "transaction_codes": sorted(profile.transaction_code_mapping),
    }


def api_serialize_trade(trade: Trade) -> dict[str, object]:
    """Serialize one trade to JSON payload.

    Args:
        trade: Reconciled trade.

    Returns:
        dict[str, object]: JSON-serializable trade payload with Decimal values as strings.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    contract_key = trade.contract_key
    return {
        "symbol": contract_key.symbol,
        "option_type": contract_key.option_type.value,
        "strike": str(contract_key.strike),
        "expiry": contract_key.expiry.isoformat(),
        "direction": trade.direction.value,
        "strategy": trade.strategy,
        "open_date": trade.open_date.isoformat(),
        "close_date": None if trade.close_date is None else trade.close_date.isoformat(),
        "credit": str(trade.credit),
        "debit": str(trade.debit),
        "profit_loss": str(trade.profit_loss),
        "quantity": trade.quantity,
        "is_partial": trade.is_partial,
        "is_open": trade.is_open,
    }


def api_serialize_report(report: ReconciliationReport) -> dict[str, object]:
    """Serialize one reconciliation report to JSON payload."""

    return {
        "matched_trade_count": report.matched_trade_count,
        "partial_trade_count": report.partial_trade_count,
        "open_trade_count": report.open_trade_count,
        "total_contracts": report.total_contracts,
        "matched_profit_loss": str(report.matched_profit_loss),
        "partial_profit_loss": str(report.partial_profit_loss),
        "total_profit_loss": str(report.total_profit_loss),
        "open_credit": str(report.open_credit),
        "open_debit": str(report.open_debit),
        "rejected_row_count": report.rejected_row_count,
        "suspicious_row_count": report.suspicious_row_count,
        "transaction_type_counts": dict(report.transaction_type_counts),
        "strategy_counts": dict(report.strategy_counts),
        "is_complete": report.is_complete,
        "warnings": [
            {"code": warning.code.value, "message": warning.message, "count": warning.count}
            for warning in report.warnings
        ],
        "diagnostics": [event.domain_to_payload() for event in report.diagnostics],
    }


def api_serialize_reconciliation_result(result: ReconciliationResult) -> dict[str, object]:
    """Serialize one reconciliation result to JSON payload."""

    return {
        "profile": result.profile_name,
        "matching_policy": result.matching_policy.value,
        "trades": [api_serialize_trade(trade) for trade in result.trades],
        "report": api_serialize_report(result.report),
    }


__all__ = [
    "ReconciliationRequestBody",
    "api_create_reconciliation_router",
    "api_serialize_reconciliation_result",
    "api_serialize_report",
    "api_serialize_source_profile",
    "api_serialize_trade",
]
