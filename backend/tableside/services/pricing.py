from __future__ import annotations
"""Menu price resolution and order total calculation.

Prices always come from the vendor's own catalog, never from the request.
Totals are accumulated as ``Decimal`` without intermediate rounding; rounding
to cents happens only when an amount is serialized.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, NamedTuple
import logging

from sqlalchemy import select

from tableside.models.menu_item import MenuItem
from tableside.errors import InvalidInput, InvalidReference

log = logging.getLogger(__name__)

CENTS = Decimal('0.01')
# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal('9999999999.99')


class ResolvedPrice(NamedTuple):
    price: Decimal
    name: str


def resolve_prices(session, vendor_id: str, lines: Iterable[dict]) -> Dict[str, ResolvedPrice]:
    """Map each distinct ``menu_item_id`` in ``lines`` to its current price and name.

    One unknown, unavailable or foreign item fails the whole batch.
    """
    requested = {str(line['menu_item_id']) for line in lines}
    if not requested:
        return {}
    rows = session.execute(
        select(MenuItem.id, MenuItem.price, MenuItem.name).where(
            MenuItem.id.in_(requested),
            MenuItem.vendor_id == vendor_id,
            MenuItem.is_available.is_(True),
        )
    ).all()
    found = {row.id: ResolvedPrice(Decimal(row.price), row.name) for row in rows}
    if len(found) != len(requested):
        log.warning('Rejected menu items %s for vendor %s', sorted(requested - set(found)), vendor_id)
        raise InvalidReference()
    return found


def calculate_total(session, lines: List[dict], vendor_id: str) -> Decimal:
    """Return Σ quantity × unit price and copy each item's name onto its line."""
    prices = resolve_prices(session, vendor_id, lines)
    total = Decimal('0')
    for line in lines:
        resolved = prices[str(line['menu_item_id'])]
        total += resolved.price * int(line['quantity'])
        line['name'] = resolved.name
    return total


def check_amount(value: Decimal) -> Decimal:
    if value > MAX_AMOUNT:
        log.warning('Rejected order amount %s above %s', value, MAX_AMOUNT)
        raise InvalidInput('Order total exceeds the maximum allowed amount.')
    return value


def format_amount(value) -> str:
    return str(Decimal(value or 0).quantize(CENTS, rounding=ROUND_HALF_UP))


__all__ = ['ResolvedPrice', 'resolve_prices', 'calculate_total', 'check_amount', 'format_amount', 'CENTS', 'MAX_AMOUNT']
