from __future__ import annotations

from dataclasses import dataclass

from .models_orders import OrderStatus

ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.NEW: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def is_terminal(status: OrderStatus | str) -> bool:
    return not ORDER_TRANSITIONS[OrderStatus(status)]


def can_transition(current: OrderStatus | str, target: OrderStatus | str) -> bool:
    return OrderStatus(target) in ORDER_TRANSITIONS[OrderStatus(current)]


def next_statuses(current: OrderStatus | str) -> list[OrderStatus]:
    allowed = ORDER_TRANSITIONS[OrderStatus(current)]
    return [status for status in OrderStatus if status in allowed]


@dataclass(frozen=True)
class OrderActionAvailability:
    can_advance: bool
    next_status: OrderStatus | None
    can_cancel: bool
    can_return: bool


def order_action_availability(status: OrderStatus | str) -> OrderActionAvailability:
    current = OrderStatus(status)
    forward = [target for target in next_statuses(current) if target is not OrderStatus.CANCELLED]
    return OrderActionAvailability(
        can_advance=bool(forward),
        next_status=forward[0] if forward else None,
        can_cancel=OrderStatus.CANCELLED in ORDER_TRANSITIONS[current],
        can_return=current is OrderStatus.COMPLETED,
    )
