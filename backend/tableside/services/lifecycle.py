from __future__ import annotations
"""Order lifecycle: creation, KOT add-ons, status changes and the role queues.

All functions take an explicit SQLAlchemy session and the acting ``Actor``;
the vendor scope always comes from the actor.
"""
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Any, List, Optional, Tuple
import logging

from sqlalchemy.orm.exc import StaleDataError

from tableside.constants.roles import (
    OrderStatus,
    ROLE_ALLOWED_STATUSES,
    KITCHEN_QUEUE_STATUSES,
    BILLING_QUEUE_STATUSES,
    REPORT_STATUSES,
    LOCKED_FOR_ADDONS,
    PREPARATION_STATUSES,
    PAYMENT_STATUSES,
)
from tableside.errors import InvalidInput, InvalidState, ConcurrentUpdate
from tableside.models.order import Order, OrderItem
from tableside.services.identity import Actor
from tableside.services.pricing import calculate_total, check_amount
from tableside.services.tenancy import scoped_orders, get_order_for_vendor
from tableside.utils.fsm import StatusAuthorizer
from tableside.utils.validation import validate_line_items, validate_new_order

log = logging.getLogger(__name__)

ORDER_STATUS_AUTH = StatusAuthorizer(ROLE_ALLOWED_STATUSES, OrderStatus)


def _line_to_item(line: dict, position: int) -> OrderItem:
    return OrderItem(
        position=position,
        menu_item_id=line['menu_item_id'],
        name=line.get('name'),
        quantity=line['quantity'],
        item_table_number=line['item_table_number'],
        addons=line.get('addons') or [],
        notes=line.get('notes'),
    )


def _commit(session, order: Order) -> Order:
    try:
        session.commit()
    except StaleDataError:
        session.rollback()
        log.warning('Concurrent update lost on order %s (vendor %s)', order.id, order.vendor_id)
        raise ConcurrentUpdate()
    return order


def create_order(session, actor: Actor, table_number: Any, raw_items: Any) -> Order:
    number, lines = validate_new_order(table_number, raw_items)
    total = check_amount(calculate_total(session, lines, actor.vendor_id))
    order = Order(
        vendor_id=actor.vendor_id,
        table_number=number,
        server=actor.id,
        status=OrderStatus.KITCHEN.value,
        total_amount=total,
        items=[_line_to_item(line, pos) for pos, line in enumerate(lines)],
    )
    session.add(order)
    session.commit()
    log.info('Order %s created for table %s (vendor %s, %d lines, total %s)',
             order.id, number, actor.vendor_id, len(lines), total)
    return order


def add_items(session, actor: Actor, order_id: Any, raw_items: Any) -> Tuple[Order, str]:
    """Append a KOT add-on to an open order.

    Only the new lines are priced; their subtotal is folded into the running
    total. An order that already left the kitchen goes back to ``Kitchen`` so
    the new lines get prepared.
    """
    lines = validate_line_items(raw_items, 'new items list')
    order = get_order_for_vendor(session, order_id, actor.vendor_id)
    current = OrderStatus(order.status)
    if current in LOCKED_FOR_ADDONS:
        log.warning('Add-on rejected for %s order %s (vendor %s)', current.value, order.id, actor.vendor_id)
        raise InvalidState(f'Cannot add items to an already {current.value} order.')
    new_total = check_amount(Decimal(order.total_amount) + calculate_total(session, lines, actor.vendor_id))
    start = len(order.items)
    for offset, line in enumerate(lines):
        order.items.append(_line_to_item(line, start + offset))
    order.total_amount = new_total
    if current not in PREPARATION_STATUSES:
        order.status = OrderStatus.KITCHEN.value
    _commit(session, order)
    log.info('Added %d lines to order %s (vendor %s); status %s -> %s',
             len(lines), order.id, actor.vendor_id, current.value, order.status)
    return order, f'Successfully added {len(lines)} items to the order. Total updated.'


def set_status(session, actor: Actor, order_id: Any, new_status: Any, payment_method: Any = None) -> Tuple[Order, str]:
    if not new_status:
        raise InvalidInput('status required')
    target = ORDER_STATUS_AUTH.assert_can_set(actor.role, new_status)
    order = get_order_for_vendor(session, order_id, actor.vendor_id)
    if order.status == OrderStatus.COMPLETED.value and not actor.is_owner:
        log.warning('%s tried to reopen completed order %s (vendor %s)', actor.role.value, order.id, actor.vendor_id)
        raise InvalidState(f'Cannot change status of an already {order.status} order.')
    # Owner correction path: Vendor may move any order to any status, backwards included.
    if payment_method is not None:
        if target not in PAYMENT_STATUSES:
            raise InvalidInput('payment_method can only be recorded when billing or completing an order')
        if not isinstance(payment_method, str) or not payment_method.strip():
            raise InvalidInput('payment_method must be a non-empty string')
        order.payment_method = payment_method.strip()
    previous = order.status
    order.status = target.value
    _commit(session, order)
    log.info('Order %s status %s -> %s by %s (vendor %s)', order.id, previous, target.value, actor.role.value, actor.vendor_id)
    return order, f'Order status updated to {target.value}'


def get_order(session, actor: Actor, order_id: Any) -> Order:
    return get_order_for_vendor(session, order_id, actor.vendor_id)


def kitchen_queue_query(vendor_id: str):
    return scoped_orders(vendor_id, KITCHEN_QUEUE_STATUSES).order_by(Order.created_at.asc(), Order.id.asc())


def billing_queue_query(vendor_id: str):
    # Billed orders stay out so a settled table does not reappear on the billing screen
    return scoped_orders(vendor_id, BILLING_QUEUE_STATUSES).order_by(
        Order.table_number.asc(), Order.created_at.asc(), Order.id.asc()
    )


def kitchen_queue(session, vendor_id: str) -> List[Order]:
    return list(session.execute(kitchen_queue_query(vendor_id)).scalars())


def billing_queue(session, vendor_id: str) -> List[Order]:
    return list(session.execute(billing_queue_query(vendor_id)).scalars())


def parse_report_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or an ISO timestamp into an aware UTC datetime.

    A bare date used as an upper bound covers the whole day.
    """
    if not value:
        return None
    try:
        if len(value) == 10:
            day = datetime.strptime(value, '%Y-%m-%d').date()
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise InvalidInput(f'Invalid date {value!r}; expected YYYY-MM-DD or ISO 8601')
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def completed_report(session, vendor_id: str, start_date: Optional[str] = None, end_date: Optional[str] = None) -> dict:
    start = parse_report_date(start_date)
    end = parse_report_date(end_date, end_of_day=True)
    if start and end and start > end:
        raise InvalidInput('start_date must not be after end_date')
    stmt = scoped_orders(vendor_id, REPORT_STATUSES)
    if start:
        stmt = stmt.where(Order.updated_at >= start)
    if end:
        stmt = stmt.where(Order.updated_at <= end)
    orders = list(session.execute(stmt.order_by(Order.updated_at.desc(), Order.id.desc())).scalars())
    total_sales = sum((Decimal(o.total_amount) for o in orders), Decimal('0'))
    return {'count': len(orders), 'total_sales': total_sales, 'orders': orders}


__all__ = [
    'ORDER_STATUS_AUTH', 'create_order', 'add_items', 'set_status', 'get_order',
    'kitchen_queue_query', 'billing_queue_query', 'kitchen_queue', 'billing_queue',
    'parse_report_date', 'completed_report',
]
