from __future__ import annotations
"""Domain error taxonomy.

Each error is a werkzeug ``HTTPException`` so it can be raised from the
service layer and rendered by the application error handler without any
per-route translation.
"""
from werkzeug.exceptions import HTTPException


class OrderError(HTTPException):
    code = 400
    description = 'Order operation failed'

    @property
    def type(self) -> str:
        return type(self).__name__


class InvalidInput(OrderError):
    code = 400
    description = 'Invalid request data'


class InvalidReference(OrderError):
    code = 400
    description = 'One or more menu items are invalid or unavailable.'


class NotFound(OrderError):
    code = 404
    description = 'Order not found for this shop.'


class Forbidden(OrderError):
    code = 403
    description = 'Not authorized'


class InvalidState(OrderError):
    code = 400
    description = 'Operation not allowed in the current order state'


class ConcurrentUpdate(OrderError):
    code = 409
    description = 'Order was modified concurrently; reload and retry.'


__all__ = ['OrderError', 'InvalidInput', 'InvalidReference', 'NotFound', 'Forbidden', 'InvalidState', 'ConcurrentUpdate']
