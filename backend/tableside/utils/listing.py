from __future__ import annotations
from typing import Iterable, List, Optional, Tuple
from flask import request, make_response, current_app
from sqlalchemy import select, func
from tableside.config.settings import normalize_pagination
from tableside.errors import InvalidInput
import hashlib


def paginate(session, stmt) -> Tuple[list, int, int, int]:
    """Run ``stmt`` with limit/offset from the query string; returns (rows, total, limit, offset)."""
    try:
        limit, offset = normalize_pagination(
            request.args.get('limit'),
            request.args.get('offset'),
            current_app.config['PAGE_LIMIT_DEFAULT'],
            current_app.config['PAGE_LIMIT_MAX'],
        )
    except ValueError as e:
        raise InvalidInput(str(e))
    total = session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = list(session.execute(stmt.offset(offset).limit(limit)).scalars())
    return rows, total, limit, offset


def compute_etag(keys: Iterable, total: int, limit: int, offset: int) -> str:
    seed = f"{list(keys)}|{total}|{limit}|{offset}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def build_list_payload(rows: list, total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }


def not_modified(etag_value: str):
    """Return a 304 response when If-None-Match matches ``etag_value``, else None."""
    inm = request.headers.get('If-None-Match')
    if inm and inm.strip('"') == etag_value:
        resp = make_response('', 304)
        resp.headers['ETag'] = etag_value
        return resp
    return None


def make_cached_response(body, etag_value: str, status: int = 200):
    cond = not_modified(etag_value)
    if cond:
        return cond
    resp = make_response(body, status)
    resp.headers['ETag'] = etag_value
    return resp


def make_cached_list_response(rows_json: List[dict], version_keys: List, total: int, limit: int, offset: int):
    etag = compute_etag(version_keys, total, limit, offset)
    return make_cached_response(build_list_payload(rows_json, total, limit, offset), etag)


__all__ = ['paginate', 'compute_etag', 'build_list_payload', 'not_modified', 'make_cached_response', 'make_cached_list_response']
