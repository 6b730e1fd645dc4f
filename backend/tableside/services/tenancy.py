from __future__ import annotations
"""Tenant scoping for orders.

Every order read or write goes through these helpers with the vendor id taken
from the authenticated actor. A record owned by another vendor is reported as
missing, never as forbidden, so ids from other shops cannot be probed.
"""
from typing import Iterable, Optional
from sqlalchemy import select

from tableside.models.order import Order
from tableside.errors import NotFound


def scoped_orders(vendor_id: str, statuses: Optional[Iterable] = None):
    """Base ``select(Order)`` restricted to one vendor and optionally to statuses."""
    stmt = select(Order).where(Order.vendor_id == vendor_id)
    if statuses is not None:
        stmt = stmt.where(Order.status.in_([getattr(s, 'value', s) for s in statuses]))
    return stmt


def get_order_for_vendor(session, order_id, vendor_id: str) -> Order:
    if not order_id:
        raise NotFound()
    order = session.execute(
        scoped_orders(vendor_id).where(Order.id == str(order_id))
    ).scalar_one_or_none()
    if order is None:
        raise NotFound()
    return order


__all__ = ['scoped_orders', 'get_order_for_vendor']
