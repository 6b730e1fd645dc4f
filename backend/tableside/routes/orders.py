from __future__ import annotations
from flask import Blueprint, request, g
from tableside import get_db
from tableside.constants.roles import (
    CREATE_ROLES,
    ADD_ITEMS_ROLES,
    KITCHEN_VIEW_ROLES,
    BILLING_VIEW_ROLES,
    DETAIL_VIEW_ROLES,
    STATUS_ROLES,
    REPORT_ROLES,
)
from tableside.decorators.auth import require_roles
from tableside.decorators.audit import audit_log
from tableside.models.order import Order
from tableside.services import lifecycle
from tableside.services.pricing import format_amount
from tableside.services.tenancy import scoped_orders
from tableside.utils.validation import require_json_object
from tableside.utils.listing import paginate, make_cached_list_response, make_cached_response, compute_etag

orders_bp = Blueprint('orders', __name__)


@orders_bp.post('')
@require_roles(*CREATE_ROLES)
@audit_log('ORDER.CREATE', entity='Order', entity_id_key='id', meta_keys=['table_number', 'total_amount', 'status'])
def create_order():
    data = require_json_object(request.get_json(silent=True))
    order = lifecycle.create_order(get_db(), g.actor, data.get('table_number'), data.get('items'))
    return _order_json(order), 201


@orders_bp.put('/<order_id>/items')
@require_roles(*ADD_ITEMS_ROLES)
@audit_log(
    'ORDER.ITEMS.ADD',
    entity='Order',
    entity_id_key='id',
    diff_keys=['status', 'total_amount'],
    pre_fetch=lambda a, kw: _snapshot(kw.get('order_id')),
    meta_keys=['total_amount'],
)
def add_items(order_id: str):
    data = require_json_object(request.get_json(silent=True))
    order, msg = lifecycle.add_items(get_db(), g.actor, order_id, data.get('new_items'))
    return {'msg': msg, 'order': _order_json(order)}


@orders_bp.get('/kitchen')
@require_roles(*KITCHEN_VIEW_ROLES)
def kitchen_orders():
    return _queue_response(lifecycle.kitchen_queue_query(g.actor.vendor_id))


@orders_bp.get('/billing')
@require_roles(*BILLING_VIEW_ROLES)
def billing_orders():
    return _queue_response(lifecycle.billing_queue_query(g.actor.vendor_id))


@orders_bp.get('/completed')
@require_roles(*REPORT_ROLES)
def completed_orders():
    report = lifecycle.completed_report(
        get_db(),
        g.actor.vendor_id,
        request.args.get('start_date'),
        request.args.get('end_date'),
    )
    return {
        'count': report['count'],
        'total_sales': format_amount(report['total_sales']),
        'orders': [_order_json(o) for o in report['orders']],
    }


@orders_bp.get('/<order_id>')
@require_roles(*DETAIL_VIEW_ROLES)
def get_order(order_id: str):
    order = lifecycle.get_order(get_db(), g.actor, order_id)
    etag = compute_etag([(order.id, order.version)], 1, 1, 0)
    return make_cached_response(_order_json(order), etag)


@orders_bp.put('/<order_id>/status')
@require_roles(*STATUS_ROLES)
@audit_log(
    'ORDER.STATUS.SET',
    entity='Order',
    entity_id_key='id',
    diff_keys=['status'],
    pre_fetch=lambda a, kw: _snapshot(kw.get('order_id')),
    meta_keys=['status', 'payment_method'],
)
def update_status(order_id: str):
    data = require_json_object(request.get_json(silent=True))
    order, msg = lifecycle.set_status(get_db(), g.actor, order_id, data.get('status'), data.get('payment_method'))
    return {'msg': msg, 'order': _order_json(order)}


def _queue_response(stmt):
    rows, total, limit, offset = paginate(get_db(), stmt)
    return make_cached_list_response(
        [_order_json(o) for o in rows],
        [(o.id, o.version) for o in rows],
        total,
        limit,
        offset,
    )


def _iso(ts):
    return ts.isoformat() if ts else None


def _item_json(i):
    return {
        'menu_item_id': i.menu_item_id,
        'name': i.name,
        'quantity': i.quantity,
        'item_table_number': i.item_table_number,
        'addons': list(i.addons or []),
        'notes': i.notes,
    }


def _order_json(o: Order):
    return {
        'id': o.id,
        'vendor_id': o.vendor_id,
        'table_number': o.table_number,
        'items': [_item_json(i) for i in o.items],
        'status': o.status,
        'server': o.server,
        'total_amount': format_amount(o.total_amount),
        'payment_method': o.payment_method,
        'created_at': _iso(o.created_at),
        'updated_at': _iso(o.updated_at),
    }


def _snapshot(order_id: str):
    o = get_db().execute(scoped_orders(g.actor.vendor_id).where(Order.id == order_id)).scalar_one_or_none()
    if not o:
        return {}
    return {'status': o.status, 'total_amount': format_amount(o.total_amount)}
