from __future__ import annotations
"""Audit logging decorator for order route handlers.

Usage:

@audit_log('ORDER.STATUS.SET', entity='Order', entity_id_key='id', diff_keys=['status'],
           pre_fetch=lambda a, kw: _snapshot(kw.get('order_id')))
def update_status(order_id): ...

Parameters:
  action: audit action code (e.g. ORDER.CREATE)
  entity: optional entity label
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: path parameter to use for entity_id when the key is absent.
  meta_keys: keys projected from the returned JSON into meta.
  diff_keys / pre_fetch: snapshot taken before the handler runs; changed keys land in meta['changes'].

Only successful responses are audited: a handler that raises leaves no entry.
View return values may be dict, (dict, status) or (dict, status, headers); for
envelopes such as {'msg': ..., 'order': {...}} the nested 'order' is inspected.
"""

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict
import logging

from sqlalchemy.exc import SQLAlchemyError

from tableside.services.audit import add_audit
from tableside import get_db

log = logging.getLogger(__name__)


def _extract_payload(rv: Any):
    data = rv[0] if isinstance(rv, tuple) and rv else rv
    if isinstance(data, dict) and isinstance(data.get('order'), dict):
        data = data['order']
    return data


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before_snapshot = pre_fetch(args, kwargs) if (diff_keys and pre_fetch) else None
            rv = fn(*args, **kwargs)
            data = _extract_payload(rv)
            if not isinstance(data, dict):
                data = {}
            entity_id = data.get(entity_id_key) if entity_id_key else None
            if entity_id is None and entity_id_arg:
                entity_id = kwargs.get(entity_id_arg)
            meta = {k: data.get(k) for k in (meta_keys or ()) if k in data}
            if diff_keys and before_snapshot:
                changes = {}
                for k in diff_keys:
                    if k in before_snapshot and k in data and before_snapshot.get(k) != data.get(k):
                        changes[k] = {'before': before_snapshot.get(k), 'after': data.get(k)}
                if changes:
                    meta['changes'] = changes
            session = get_db()
            try:
                add_audit(action, entity, entity_id, meta)
                session.commit()
            except SQLAlchemyError:
                # The order change is already committed; losing the audit row must not fail the request
                session.rollback()
                log.exception('Audit write failed for %s %s', action, entity_id)
            return rv
        return wrapper
    return outer
