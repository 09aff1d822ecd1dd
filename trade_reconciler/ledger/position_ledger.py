"""Per-import position ledger of open option positions."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from itertools import count

from trade_reconciler.domain import ContractKey, Leg, LegAction, MatchingPolicy, PositionDirection


@dataclass
class OpenPosition:
    """Mutable open-position state owned by one `PositionLedger`.

    Attributes:
        position_id: Ledger-local identifier, increasing in push order.
        contract_key: Contract identity.
        open_date: Opening leg date.
        direction: Opening direction.
        original_quantity: Quantity of the opening leg.
        remaining_quantity: Quantity not yet consumed by closes.
        original_amount: Signed amount of the opening leg.
        remaining_amount: Share of `original_amount` not yet allocated to trades.
        amount_per_contract: `original_amount / original_quantity`, fixed at creation.
    """

    position_id: int
    contract_key: ContractKey
    open_date: date
    direction: PositionDirection
    original_quantity: int
    remaining_quantity: int
    original_amount: Decimal
    remaining_amount: Decimal
    amount_per_contract: Decimal

    def position_slice_amount(self, quantity: int) -> Decimal:
        """Return the signed opening amount attributable to `quantity` contracts.

        The slice that exhausts the position takes the unallocated remainder so
        all slices sum back exactly to `original_amount`.

        Args:
            quantity: Contracts being consumed, at most `remaining_quantity`.

        Returns:
            Decimal: Signed proportional opening amount.

        Raises:
            ValueError: Raised when quantity is outside `1..remaining_quantity`.
        """

        if quantity <= 0 or quantity > self.remaining_quantity:
            raise ValueError(f"quantity={quantity} outside 1..{self.remaining_quantity}")
        if quantity == self.remaining_quantity:
            return self.remaining_amount
        return self.amount_per_contract * quantity


class PositionLedger:
    """Ordered per-contract collection of open positions.

    Entries for one contract key are kept in insertion order in a deque and
    scanned from the head (FIFO) or the tail (LIFO). One ledger belongs to
    exactly one import and is never shared.
    """

    def __init__(self) -> None:
        self._positions_by_key: dict[ContractKey, deque[OpenPosition]] = {}
        self._position_ids = count(1)

    def __len__(self) -> int:
        return sum(len(positions) for positions in self._positions_by_key.values())

    def ledger_open_from_leg(self, leg: Leg) -> OpenPosition:
        """Create and push an open position from one opening leg.

        Args:
            leg: Opening leg.

        Returns:
            OpenPosition: Newly pushed position.

        Raises:
            ValueError: Raised when the leg is not an opening leg.
        """

        if leg.action is not LegAction.OPEN:
            raise ValueError("only opening legs create open positions")

        position = OpenPosition(
            position_id=next(self._position_ids),
            contract_key=leg.contract_key,
            open_date=leg.trade_date,
            direction=leg.direction,
            original_quantity=leg.quantity,
            remaining_quantity=leg.quantity,
            original_amount=leg.amount,
            remaining_amount=leg.amount,
            amount_per_contract=leg.amount / leg.quantity,
        )
        self.ledger_push(position)
        return position

    def ledger_push(self, position: OpenPosition) -> None:
        """Append one open position at the tail of its contract queue.

        Args:
            position: Open position with positive remaining quantity.

        Returns:
            None: Ledger is updated in place.

        Raises:
            ValueError: Raised when remaining quantity is not positive.
        """

        if position.remaining_quantity <= 0:
            raise ValueError("open position remaining_quantity must be positive")
        self._positions_by_key.setdefault(position.contract_key, deque()).append(position)

    def ledger_has_entries(self, contract_key: ContractKey) -> bool:
        """Return True when the contract key has at least one open position."""

        return bool(self._positions_by_key.get(contract_key))

    def ledger_peek_head(self, contract_key: ContractKey) -> OpenPosition | None:
        """Return the oldest open position for the contract key, if any."""

        positions = self._positions_by_key.get(contract_key)
        return positions[0] if positions else None

    def ledger_peek_tail(self, contract_key: ContractKey) -> OpenPosition | None:
        """Return the most recent open position for the contract key, if any."""

        positions = self._positions_by_key.get(contract_key)
        return positions[-1] if positions else None

    def ledger_select_entry(
        self,
        contract_key: ContractKey,
        policy: MatchingPolicy,
        direction: PositionDirection | None = None,
    ) -> OpenPosition | None:
        """Select the entry a close consumes next under the matching policy.

        FIFO scans from the head, LIFO from the tail. When a direction is given,
        entries of the other direction are skipped, so a long and a short
        position on the same contract never block each other.

        Args:
            contract_key: Contract identity.
            policy: `FIFO` selects the oldest entry, `LIFO` the most recent.
            direction: Optional direction the entry must hold.

        Returns:
            OpenPosition | None: Selected entry, or None when no compatible entry exists.

        Raises:
            ValueError: Raised for an unsupported policy.
        """

        positions = self._positions_by_key.get(contract_key)
        if policy is MatchingPolicy.FIFO:
            ordered_positions = iter(positions or ())
        elif policy is MatchingPolicy.LIFO:
            ordered_positions = reversed(positions or ())
        else:
            raise ValueError(f"unsupported matching policy={policy}")

        for position in ordered_positions:
            if direction is None or position.direction is direction:
                return position
        return None

    def ledger_decrement_and_maybe_remove(self, position: OpenPosition, quantity: int) -> Decimal:
        """Consume `quantity` contracts from one live position.

        Args:
            position: Position currently held by this ledger.
            quantity: Contracts to consume.

        Returns:
            Decimal: Signed opening amount allocated to the consumed contracts.

        Raises:
            ValueError: Raised when the position is not in the ledger or quantity is invalid.
        """

        positions = self._positions_by_key.get(position.contract_key, ())
        position_index = next((index for index, held in enumerate(positions) if held is position), None)
        if position_index is None:
            raise ValueError(f"position_id={position.position_id} is not in the ledger")

        slice_amount = position.position_slice_amount(quantity)
        position.remaining_quantity -= quantity
        position.remaining_amount -= slice_amount

        if position.remaining_quantity == 0:
            del positions[position_index]
            if not positions:
                del self._positions_by_key[position.contract_key]

        return slice_amount

    def ledger_open_positions(self) -> Iterator[OpenPosition]:
        """Yield live positions grouped by contract key, each queue in insertion order."""

        for positions in self._positions_by_key.values():
            yield from positions
