from __future__ import annotations
"""Request payload validation for order operations.

Raises ``InvalidInput`` with a short description; never touches the database.
"""
from typing import Any, List, Optional

from tableside.errors import InvalidInput

# Integer columns are 32-bit signed on every supported backend
MAX_INT = 2**31 - 1


def require_json_object(payload: Any) -> dict:
    """Return the parsed request body; a missing body counts as empty."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInput('Request body must be a JSON object')
    return payload


def coerce_positive_int(value: Any) -> Optional[int]:
    """Return ``value`` as an int in 1..MAX_INT, or None when it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if 0 < number <= MAX_INT else None


def _clean_line(raw: Any) -> Optional[dict]:
    if not isinstance(raw, dict):
        return None
    menu_item_id = raw.get('menu_item_id')
    quantity = coerce_positive_int(raw.get('quantity'))
    item_table_number = coerce_positive_int(raw.get('item_table_number'))
    if not menu_item_id or quantity is None or item_table_number is None:
        return None
    addons = raw.get('addons') or []
    if not isinstance(addons, list) or not all(isinstance(a, str) for a in addons):
        return None
    notes = raw.get('notes')
    if notes is not None and not isinstance(notes, str):
        return None
    return {
        'menu_item_id': str(menu_item_id),
        'quantity': quantity,
        'item_table_number': item_table_number,
        'addons': list(addons),
        'notes': notes,
    }


def validate_line_items(raw_items: Any, list_label: str = 'order list') -> List[dict]:
    """Normalize the line entries of a create/add-on request.

    The list itself must be non-empty; every entry needs ``menu_item_id``, a
    positive ``quantity`` and a positive ``item_table_number``.
    """
    if not isinstance(raw_items, list) or not raw_items:
        raise InvalidInput('Must include at least one item.')
    lines = []
    for raw in raw_items:
        line = _clean_line(raw)
        if line is None:
            raise InvalidInput(f'Invalid item data found in the {list_label}.')
        lines.append(line)
    return lines


def validate_new_order(table_number: Any, raw_items: Any):
    """Return ``(table_number, lines)`` for a new order or raise ``InvalidInput``."""
    number = coerce_positive_int(table_number)
    if number is None or not isinstance(raw_items, list) or not raw_items:
        raise InvalidInput('Order must include table number and at least one item.')
    return number, validate_line_items(raw_items)


__all__ = ['MAX_INT', 'require_json_object', 'coerce_positive_int', 'validate_line_items', 'validate_new_order']
