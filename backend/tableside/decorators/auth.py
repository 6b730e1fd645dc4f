from functools import wraps
from flask import g
from flask_jwt_extended import verify_jwt_in_request
from tableside.errors import Forbidden
from tableside.services.identity import current_actor


def require_roles(*roles):
    """Verify the bearer token and require one of ``roles``; exposes ``g.actor``."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            actor = current_actor()
            if actor.role not in roles:
                raise Forbidden(f"Access denied. Requires one of: {', '.join(r.value for r in roles)}")
            g.actor = actor
            return fn(*args, **kwargs)
        return wrapper
    return outer
