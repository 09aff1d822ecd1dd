"""Composite strategy inference over trades opened together."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal

from trade_reconciler.domain import OptionType, PositionDirection, Trade

logger = logging.getLogger(__name__)

LegShape = tuple[OptionType, PositionDirection, Decimal]


def analytics_infer_strategy(legs: Iterable[LegShape]) -> str | None:
    """Infer a composite strategy label from distinct leg shapes.

    Args:
        legs: `(option_type, direction, strike)` tuples of one group; duplicates collapse.

    Returns:
        str | None: Composite label, or None when the shape is not recognized.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    shapes = set(legs)
    if len(shapes) == 2:
        return _analytics_infer_two_leg_strategy(*sorted(shapes, key=_analytics_shape_sort_key))
    if len(shapes) == 4:
        return _analytics_infer_four_leg_strategy(shapes)
    return None


def _analytics_infer_two_leg_strategy(first: LegShape, second: LegShape) -> str | None:
    first_type, first_direction, first_strike = first
    second_type, second_direction, second_strike = second

    if first_type is second_type:
        if first_direction is second_direction or first_strike == second_strike:
            return None
        long_strike = first_strike if first_direction is PositionDirection.LONG else second_strike
        short_strike = second_strike if first_direction is PositionDirection.LONG else first_strike
        if first_type is OptionType.CALL:
            return "Bull Call Spread" if long_strike < short_strike else "Bear Call Spread"
        return "Bear Put Spread" if long_strike > short_strike else "Bull Put Spread"

    if first_direction is second_direction:
        return "Straddle" if first_strike == second_strike else "Strangle"
    return None


def _analytics_infer_four_leg_strategy(shapes: set[LegShape]) -> str | None:
    """Label a short iron condor or butterfly.

    The short put and short call form the body and each long wing must sit
    outside its short strike. Debit shapes with the wings inside fall through
    unlabeled.
    """

    strikes: dict[OptionType, dict[PositionDirection, Decimal]] = {}
    for option_type in (OptionType.CALL, OptionType.PUT):
        directions = {direction: strike for shape_type, direction, strike in shapes if shape_type is option_type}
        if set(directions) != {PositionDirection.LONG, PositionDirection.SHORT}:
            return None
        strikes[option_type] = directions

    long_put = strikes[OptionType.PUT][PositionDirection.LONG]
    short_put = strikes[OptionType.PUT][PositionDirection.SHORT]
    short_call = strikes[OptionType.CALL][PositionDirection.SHORT]
    long_call = strikes[OptionType.CALL][PositionDirection.LONG]
    if not long_put < short_put <= short_call < long_call:
        return None
    if short_call == short_put:
        return "Iron Butterfly"
    return "Iron Condor"


def _analytics_shape_sort_key(shape: LegShape) -> tuple[str, str, Decimal]:
    option_type, direction, strike = shape
    return option_type.value, direction.value, strike


class StrategyClassifier:
    """Overwrites single-leg labels with composite strategy labels.

    Trades are grouped by underlying symbol and opening date. Partial trades
    never join a group because their opening side is unknown.
    """

    def analytics_classify_trades(self, trades: Sequence[Trade]) -> list[Trade]:
        """Return trades with composite strategy labels applied.

        Args:
            trades: Matched, partial and open trades.

        Returns:
            list[Trade]: New trade objects in input order; only `strategy` may differ.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        shapes_by_group: dict[tuple[str, date], set[LegShape]] = {}
        for trade in trades:
            if trade.is_partial:
                continue
            shapes_by_group.setdefault(_analytics_group_key(trade), set()).add(
                (trade.contract_key.option_type, trade.direction, trade.contract_key.strike)
            )

        label_by_group: dict[tuple[str, date], str] = {}
        for group_key, shapes in shapes_by_group.items():
            label = analytics_infer_strategy(shapes)
            if label is not None:
                logger.debug("classified %s opened %s as %s", group_key[0], group_key[1].isoformat(), label)
                label_by_group[group_key] = label

        classified: list[Trade] = []
        for trade in trades:
            label = None if trade.is_partial else label_by_group.get(_analytics_group_key(trade))
            classified.append(replace(trade, strategy=label) if label is not None else trade)
        return classified


def _analytics_group_key(trade: Trade) -> tuple[str, date]:
    return trade.contract_key.symbol, trade.open_date
