"""Domain models and parsing helpers used across reconciliation layers."""

from .models import (
    ContractKey,
    Leg,
    LegAction,
    MatchingPolicy,
    OptionType,
    PositionDirection,
    RowOrder,
    Trade,
    domain_single_leg_strategy,
)
from .parsing import (
    OptionDescription,
    domain_normalize_optional_text,
    domain_parse_currency,
    domain_parse_option_description,
    domain_parse_option_type,
    domain_parse_quantity,
    domain_parse_trade_date,
)
from .timeline import ReconciliationStageEvent, domain_build_stage_event

__all__ = [
    "ContractKey",
    "Leg",
    "LegAction",
    "MatchingPolicy",
    "OptionType",
    "PositionDirection",
    "RowOrder",
    "Trade",
    "domain_single_leg_strategy",
    "OptionDescription",
    "domain_normalize_optional_text",
    "domain_parse_currency",
    "domain_parse_option_description",
    "domain_parse_option_type",
    "domain_parse_quantity",
    "domain_parse_trade_date",
    "ReconciliationStageEvent",
    "domain_build_stage_event",
]
