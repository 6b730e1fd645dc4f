from __future__ import annotations
"""Role based status authorization for lifecycle models.

Orders do not follow a strict transition graph; instead each role may set a
fixed set of target statuses. Usage:
    from tableside.utils.fsm import StatusAuthorizer
    ORDER_STATUS_AUTH = StatusAuthorizer(ROLE_ALLOWED_STATUSES, OrderStatus)
    target = ORDER_STATUS_AUTH.assert_can_set(actor.role, 'Ready')

Raises ``Forbidden`` if the role may not set the target (unknown targets included).
"""
from typing import Dict, FrozenSet, Type
from enum import Enum

from tableside.errors import Forbidden


class StatusAuthorizer:
    def __init__(self, matrix: Dict[Enum, FrozenSet[Enum]], status_enum: Type[Enum], field_name: str = 'status'):
        self.matrix = matrix
        self.status_enum = status_enum
        self.field_name = field_name

    def allowed_for(self, role) -> FrozenSet[Enum]:
        return self.matrix.get(role, frozenset())

    def can_set(self, role, target) -> bool:
        try:
            status = self.status_enum(target)
        except ValueError:
            return False
        return status in self.allowed_for(role)

    def assert_can_set(self, role, target):
        if not self.can_set(role, target):
            role_label = getattr(role, 'value', role)
            raise Forbidden(f"Role {role_label} not authorized to set {self.field_name} to {target}.")
        return self.status_enum(target)

__all__ = ['StatusAuthorizer']
