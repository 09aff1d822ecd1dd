"""Tests for per-import position ledger behavior."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from trade_reconciler.domain import ContractKey, Leg, LegAction, MatchingPolicy, OptionType, PositionDirection
from trade_reconciler.ledger import PositionLedger

_CONTRACT = ContractKey(symbol="QQQ", option_type=OptionType.PUT, strike=Decimal("460"), expiry=date(2025, 4, 11))
_OTHER_CONTRACT = ContractKey(symbol="QQQ", option_type=OptionType.CALL, strike=Decimal("480"), expiry=date(2025, 4, 11))


def _open_leg(quantity: int, amount: str, day: int, contract_key: ContractKey = _CONTRACT) -> Leg:
    return Leg(
        contract_key=contract_key,
        trade_date=date(2025, 4, day),
        action=LegAction.OPEN,
        direction=PositionDirection.SHORT,
        quantity=quantity,
        amount=Decimal(amount),
        transaction_code="STO",
        source_row_index=day,
    )


def test_ledger_select_entry_follows_matching_policy() -> None:
    """Select the head for FIFO and the tail for LIFO.

    Returns:
        None: Assertions validate entry selection.

    Raises:
        AssertionError: Raised when selection ignores the policy.
    """

    ledger = PositionLedger()
    first = ledger.ledger_open_from_leg(_open_leg(1, "100", day=1))
    second = ledger.ledger_open_from_leg(_open_leg(1, "120", day=2))

    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.FIFO) is first
    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.LIFO) is second
    assert ledger.ledger_select_entry(_OTHER_CONTRACT, MatchingPolicy.FIFO) is None
    assert len(ledger) == 2


def test_ledger_decrement_allocates_proportional_amounts_and_removes_exhausted_entries() -> None:
    """Allocate per-contract amounts and give the exhausting slice the remainder.

    Returns:
        None: Assertions validate slice amounts and removal.

    Raises:
        AssertionError: Raised when allocation or removal deviates.
    """

    ledger = PositionLedger()
    position = ledger.ledger_open_from_leg(_open_leg(3, "100", day=1))

    first_slice = ledger.ledger_decrement_and_maybe_remove(position, 1)
    second_slice = ledger.ledger_decrement_and_maybe_remove(position, 2)

    assert first_slice == Decimal("100") / Decimal(3)
    assert first_slice + second_slice == Decimal("100")
    assert not ledger.ledger_has_entries(_CONTRACT)
    assert len(ledger) == 0


def test_ledger_decrement_rejects_over_consumption_and_foreign_entries() -> None:
    """Raise ValueError for invalid quantities and positions held by another ledger.

    Returns:
        None: Assertions validate programming-error guards.

    Raises:
        AssertionError: Raised when invalid decrements are accepted.
    """

    ledger = PositionLedger()
    head = ledger.ledger_open_from_leg(_open_leg(1, "100", day=1))
    foreign = PositionLedger().ledger_open_from_leg(_open_leg(1, "100", day=2))

    with pytest.raises(ValueError):
        ledger.ledger_decrement_and_maybe_remove(head, 2)
    with pytest.raises(ValueError):
        ledger.ledger_decrement_and_maybe_remove(foreign, 1)


def test_ledger_select_entry_skips_other_direction_in_policy_order() -> None:
    """Select the first entry of the requested direction scanning by policy.

    Returns:
        None: Assertions validate direction-aware selection and removal.

    Raises:
        AssertionError: Raised when an incompatible entry blocks selection.
    """

    ledger = PositionLedger()
    older_short = ledger.ledger_open_from_leg(_open_leg(1, "100", day=1))
    long_position = ledger.ledger_open_from_leg(
        Leg(
            contract_key=_CONTRACT,
            trade_date=date(2025, 4, 2),
            action=LegAction.OPEN,
            direction=PositionDirection.LONG,
            quantity=1,
            amount=Decimal("-90"),
            transaction_code="BTO",
            source_row_index=2,
        )
    )
    newer_short = ledger.ledger_open_from_leg(_open_leg(1, "120", day=3))

    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.FIFO, direction=PositionDirection.LONG) is long_position
    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.LIFO, direction=PositionDirection.LONG) is long_position
    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.LIFO, direction=PositionDirection.SHORT) is newer_short

    ledger.ledger_decrement_and_maybe_remove(long_position, 1)

    assert ledger.ledger_select_entry(_CONTRACT, MatchingPolicy.LIFO, direction=PositionDirection.LONG) is None
    assert [position.position_id for position in ledger.ledger_open_positions()] == [
        older_short.position_id,
        newer_short.position_id,
    ]


def test_ledger_open_positions_preserve_insertion_order_per_key() -> None:
    """Yield live positions grouped by contract in insertion order.

    Returns:
        None: Assertions validate iteration order.

    Raises:
        AssertionError: Raised when iteration order deviates.
    """

    ledger = PositionLedger()
    ledger.ledger_open_from_leg(_open_leg(1, "100", day=1))
    ledger.ledger_open_from_leg(_open_leg(1, "50", day=2, contract_key=_OTHER_CONTRACT))
    ledger.ledger_open_from_leg(_open_leg(2, "220", day=3))

    open_dates = [position.open_date.day for position in ledger.ledger_open_positions()]

    assert open_dates == [1, 3, 2]
    assert [position.position_id for position in ledger.ledger_open_positions()] == [1, 3, 2]


def test_ledger_open_from_leg_rejects_closing_legs() -> None:
    """Refuse to create positions from closing legs.

    Returns:
        None: Assertions validate the open-only guard.

    Raises:
        AssertionError: Raised when a closing leg is pushed.
    """

    closing_leg = Leg(
        contract_key=_CONTRACT,
        trade_date=date(2025, 4, 2),
        action=LegAction.CLOSE,
        direction=PositionDirection.SHORT,
        quantity=1,
        amount=Decimal("-50"),
        transaction_code="BTC",
        source_row_index=0,
    )

    with pytest.raises(ValueError):
        PositionLedger().ledger_open_from_leg(closing_leg)
