from __future__ import annotations
from typing import Any, Dict, Optional
from flask_jwt_extended import get_jwt_identity, get_jwt
from tableside import get_db
from tableside.models.audit import AuditLog


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the current DB session.

    Parameters:
      action: short action code e.g. ORDER.CREATE, ORDER.ITEMS.ADD, ORDER.STATUS.SET
      entity: optional entity name (Order)
      entity_id: optional primary key string
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    session = get_db()
    claims = {}
    try:
        claims = get_jwt() or {}
    except RuntimeError:
        pass  # no JWT context (e.g. service calls outside a request)
    actor = None
    try:
        actor = get_jwt_identity()
    except RuntimeError:
        actor = None
    log = AuditLog(
        actor_id=str(actor) if actor is not None else 'system',
        vendor_id=claims.get('vendor_id'),
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
