"""Ledger layer package for open positions and close matching."""

from .matcher import PARTIAL_STRATEGY_SUFFIX, MatchRequest, MatchResult, matcher_match_legs
from .position_ledger import OpenPosition, PositionLedger

__all__ = [
	"OpenPosition",
	"PositionLedger",
	"MatchRequest",
	"MatchResult",
	"PARTIAL_STRATEGY_SUFFIX",
	"matcher_match_legs",
]
