"""Staff roles, order statuses and the role -> settable-status matrix.

Never rename values silently: they are stored in order rows and carried in
access tokens.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet, Optional


class Role(str, Enum):
    VENDOR = 'Vendor'
    SERVER = 'Server'
    KITCHEN = 'Kitchen'
    BILLING = 'Billing'

    @classmethod
    def parse(cls, raw) -> Optional['Role']:
        try:
            return cls(raw)
        except ValueError:
            return None


class OrderStatus(str, Enum):
    PENDING = 'Pending'
    KITCHEN = 'Kitchen'
    READY = 'Ready'
    SERVED = 'Served'
    BILLED = 'Billed'
    COMPLETED = 'Completed'

    @classmethod
    def parse(cls, raw) -> Optional['OrderStatus']:
        try:
            return cls(raw)
        except ValueError:
            return None


ALL_STATUSES = tuple(OrderStatus)

ROLE_ALLOWED_STATUSES: Dict[Role, FrozenSet[OrderStatus]] = {
    Role.KITCHEN: frozenset({OrderStatus.READY}),
    Role.SERVER: frozenset({OrderStatus.SERVED}),
    Role.BILLING: frozenset({OrderStatus.BILLED, OrderStatus.COMPLETED}),
    # Owner may set anything, including moving an order backwards
    Role.VENDOR: frozenset(ALL_STATUSES),
}

# Lifecycle groupings used by the role-scoped queues
KITCHEN_QUEUE_STATUSES = (OrderStatus.PENDING, OrderStatus.KITCHEN)
BILLING_QUEUE_STATUSES = (OrderStatus.READY, OrderStatus.SERVED, OrderStatus.COMPLETED)
REPORT_STATUSES = (OrderStatus.BILLED, OrderStatus.COMPLETED)
LOCKED_FOR_ADDONS = (OrderStatus.BILLED, OrderStatus.COMPLETED)
PREPARATION_STATUSES = (OrderStatus.PENDING, OrderStatus.KITCHEN)
PAYMENT_STATUSES = (OrderStatus.BILLED, OrderStatus.COMPLETED)

# Route access, mirrors which staff screens reach which endpoint
CREATE_ROLES = (Role.SERVER, Role.VENDOR, Role.KITCHEN, Role.BILLING)
ADD_ITEMS_ROLES = (Role.SERVER, Role.VENDOR)
KITCHEN_VIEW_ROLES = (Role.KITCHEN, Role.VENDOR)
BILLING_VIEW_ROLES = (Role.BILLING, Role.VENDOR, Role.SERVER, Role.KITCHEN)
DETAIL_VIEW_ROLES = (Role.SERVER, Role.BILLING, Role.VENDOR)
STATUS_ROLES = (Role.KITCHEN, Role.SERVER, Role.BILLING, Role.VENDOR)
REPORT_ROLES = (Role.VENDOR,)
