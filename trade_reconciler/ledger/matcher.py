"""Quantity-aware open/close matcher over a per-import position ledger."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from trade_reconciler.domain import (
    Leg,
    LegAction,
    MatchingPolicy,
    PositionDirection,
    Trade,
    domain_single_leg_strategy,
)

from .position_ledger import OpenPosition, PositionLedger

logger = logging.getLogger(__name__)

PARTIAL_STRATEGY_SUFFIX = " (Partial)"


@dataclass(frozen=True)
class MatchRequest:
    """Input contract for one matching pass.

    Attributes:
        legs: Legs in processing order; the order is replayed literally.
        policy: Ledger entry selection policy.
        ledger: Optional ledger instance owned by this import; a fresh one is used when omitted.
    """

    legs: Sequence[Leg]
    policy: MatchingPolicy
    ledger: PositionLedger | None = None


@dataclass(frozen=True)
class MatchResult:
    """Output payload for one matching pass.

    Attributes:
        trades: Matched and partial trades in close order, followed by open trades.
        matched_count: Number of fully paired trades.
        partial_count: Number of closes (or close remainders) without an opening leg.
        open_count: Number of positions still open at the end of processing.
    """

    trades: tuple[Trade, ...]
    matched_count: int
    partial_count: int
    open_count: int


def matcher_match_legs(request: MatchRequest) -> MatchResult:
    """Pair opening and closing legs into trades.

    Every close repeatedly consumes ledger entries selected by the policy until
    its quantity is exhausted; each consumed slice becomes one trade carrying the
    proportional share of the opening amount. A close remainder with no
    compatible entry becomes one partial trade, and every position left in the
    ledger becomes one open trade. Matching never raises on data.

    Args:
        request: Matching request.

    Returns:
        MatchResult: Trades accounting for every leg quantity.

    Raises:
        ValueError: Raised when request is missing.
    """

    if request is None:
        raise ValueError("request must not be None")

    ledger = request.ledger if request.ledger is not None else PositionLedger()
    trades: list[Trade] = []
    matched_count = 0
    partial_count = 0

    for leg in request.legs:
        if leg.action is LegAction.OPEN:
            ledger.ledger_open_from_leg(leg)
            continue

        close_trades = _matcher_close_leg(leg=leg, policy=request.policy, ledger=ledger)
        for trade in close_trades:
            if trade.is_partial:
                partial_count += 1
            else:
                matched_count += 1
        trades.extend(close_trades)

    open_trades = [_matcher_build_open_trade(position) for position in ledger.ledger_open_positions()]
    trades.extend(open_trades)

    return MatchResult(
        trades=tuple(trades),
        matched_count=matched_count,
        partial_count=partial_count,
        open_count=len(open_trades),
    )


def _matcher_close_leg(leg: Leg, policy: MatchingPolicy, ledger: PositionLedger) -> list[Trade]:
    """Consume ledger entries for one closing leg.

    Args:
        leg: Closing leg.
        policy: Ledger entry selection policy.
        ledger: Import-owned ledger.

    Returns:
        list[Trade]: One trade per matched slice plus at most one partial trade.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    trades: list[Trade] = []
    remaining_quantity = leg.quantity
    remaining_close_amount = leg.amount

    while remaining_quantity > 0:
        position = ledger.ledger_select_entry(leg.contract_key, policy, direction=leg.direction)
        if position is None:
            break

        matched_quantity = min(remaining_quantity, position.remaining_quantity)
        if matched_quantity < leg.quantity or matched_quantity < position.remaining_quantity:
            logger.debug(
                "quantity split: closing %s of %s contracts from position_id=%s holding %s for %s",
                matched_quantity,
                leg.quantity,
                position.position_id,
                position.remaining_quantity,
                leg.contract_key.label(),
            )

        open_date = position.open_date
        open_direction = position.direction
        open_amount = ledger.ledger_decrement_and_maybe_remove(position, matched_quantity)
        if matched_quantity == remaining_quantity:
            close_amount = remaining_close_amount
        else:
            close_amount = leg.amount / leg.quantity * matched_quantity

        trades.append(
            _matcher_build_matched_trade(
                leg=leg,
                open_date=open_date,
                open_direction=open_direction,
                open_amount=open_amount,
                close_amount=close_amount,
                quantity=matched_quantity,
            )
        )
        remaining_quantity -= matched_quantity
        remaining_close_amount -= close_amount

    if remaining_quantity > 0:
        logger.warning(
            "unmatched close %s on %s for %s (%s of %s contracts): opening leg not in dataset",
            leg.transaction_code,
            leg.trade_date.isoformat(),
            leg.contract_key.label(),
            remaining_quantity,
            leg.quantity,
        )
        trades.append(
            _matcher_build_partial_trade(leg=leg, close_amount=remaining_close_amount, quantity=remaining_quantity)
        )

    return trades


def _matcher_build_matched_trade(
    leg: Leg,
    open_date: date,
    open_direction: PositionDirection,
    open_amount: Decimal,
    close_amount: Decimal,
    quantity: int,
) -> Trade:
    """Build one matched trade with direction-aware credit/debit assignment.

    A short opening leg is the credit and its close the debit; a long opening
    leg is the debit and its close the credit.

    Args:
        leg: Closing leg.
        open_date: Date of the consumed open position.
        open_direction: Direction of the consumed open position.
        open_amount: Signed proportional opening amount.
        close_amount: Signed proportional closing amount.
        quantity: Matched contracts.

    Returns:
        Trade: Matched trade.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if open_direction is PositionDirection.SHORT:
        credit, debit = abs(open_amount), abs(close_amount)
    else:
        credit, debit = abs(close_amount), abs(open_amount)

    return Trade(
        contract_key=leg.contract_key,
        direction=open_direction,
        strategy=domain_single_leg_strategy(leg.contract_key.option_type, open_direction),
        open_date=open_date,
        close_date=leg.trade_date,
        credit=credit,
        debit=debit,
        quantity=quantity,
    )


def _matcher_build_partial_trade(leg: Leg, close_amount: Decimal, quantity: int) -> Trade:
    """Build one partial trade for close quantity with no opening leg.

    Only the close side is known: a buy-to-close is a debit, a sell-to-close a credit.
    """

    if leg.direction is PositionDirection.SHORT:
        credit, debit = Decimal("0"), abs(close_amount)
    else:
        credit, debit = abs(close_amount), Decimal("0")

    return Trade(
        contract_key=leg.contract_key,
        direction=leg.direction,
        strategy=domain_single_leg_strategy(leg.contract_key.option_type, leg.direction) + PARTIAL_STRATEGY_SUFFIX,
        open_date=leg.trade_date,
        close_date=leg.trade_date,
        credit=credit,
        debit=debit,
        quantity=quantity,
        is_partial=True,
    )


def _matcher_build_open_trade(position: OpenPosition) -> Trade:
    """Build one open trade from a position left in the ledger."""

    if position.direction is PositionDirection.SHORT:
        credit, debit = abs(position.remaining_amount), Decimal("0")
    else:
        credit, debit = Decimal("0"), abs(position.remaining_amount)

    return Trade(
        contract_key=position.contract_key,
        direction=position.direction,
        strategy=domain_single_leg_strategy(position.contract_key.option_type, position.direction),
        open_date=position.open_date,
        close_date=None,
        credit=credit,
        debit=debit,
        quantity=position.remaining_quantity,
        is_open=True,
    )
