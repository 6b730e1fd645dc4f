from datetime import datetime, timedelta, timezone
from decimal import Decimal
import pytest

from tableside.constants.roles import Role, OrderStatus
from tableside.errors import InvalidInput, InvalidReference, InvalidState, NotFound, Forbidden
from tableside.models.order import Order
from tableside.services import lifecycle
from tests.test_utils_seed import ensure_menu_item, create_order, make_actor, line


def test_create_order_starts_in_kitchen_with_resolved_total(session, vendor):
    a = ensure_menu_item(vendor, 'Item A', '100')
    server = make_actor(vendor, Role.SERVER, 'srv-7')
    order = lifecycle.create_order(session, server, 5, [line(a, 2, 5)])
    assert order.status == OrderStatus.KITCHEN.value
    assert order.total_amount == Decimal('200')
    assert order.server == 'srv-7'
    assert order.vendor_id == vendor.id
    assert [(i.name, i.quantity, i.item_table_number) for i in order.items] == [('Item A', 2, 5)]


def test_add_items_on_kitchen_order_folds_subtotal_and_keeps_status(session, vendor):
    a = ensure_menu_item(vendor, 'Item A', '100')
    b = ensure_menu_item(vendor, 'Item B', '50')
    server = make_actor(vendor, Role.SERVER)
    order = lifecycle.create_order(session, server, 5, [line(a, 2, 5)])
    updated, msg = lifecycle.add_items(session, server, order.id, [line(b, 1, 5)])
    assert updated.total_amount == Decimal('250')
    assert updated.status == OrderStatus.KITCHEN.value
    assert [i.name for i in updated.items] == ['Item A', 'Item B']
    assert [i.position for i in updated.items] == [0, 1]
    assert msg == 'Successfully added 1 items to the order. Total updated.'


def test_add_items_does_not_reprice_existing_lines(session, vendor):
    a = ensure_menu_item(vendor, 'Daily Special', '10')
    server = make_actor(vendor)
    order = lifecycle.create_order(session, server, 2, [line(a, 1, 2)])
    a.price = Decimal('12'); a.name = 'Daily Special (new)'
    session.commit()
    updated, _ = lifecycle.add_items(session, server, order.id, [line(a, 1, 2)])
    assert updated.total_amount == Decimal('22')
    # historical line keeps the name it was ordered under
    assert [i.name for i in updated.items] == ['Daily Special', 'Daily Special (new)']


@pytest.mark.parametrize('status', [OrderStatus.READY, OrderStatus.SERVED])
def test_add_items_after_kitchen_sends_order_back(session, vendor, status):
    a = ensure_menu_item(vendor, 'Fries', '3.50')
    order = create_order(vendor, status=status, total_amount='7.00', lines=[(a, 2)])
    updated, _ = lifecycle.add_items(session, make_actor(vendor), order.id, [line(a, 1)])
    assert updated.status == OrderStatus.KITCHEN.value
    assert updated.total_amount == Decimal('10.50')


def test_add_items_keeps_pending_status(session, vendor):
    a = ensure_menu_item(vendor, 'Olives', '2')
    order = create_order(vendor, status=OrderStatus.PENDING, total_amount='2', lines=[(a, 1)])
    updated, _ = lifecycle.add_items(session, make_actor(vendor), order.id, [line(a, 1)])
    assert updated.status == OrderStatus.PENDING.value


@pytest.mark.parametrize('status', [OrderStatus.BILLED, OrderStatus.COMPLETED])
def test_add_items_rejected_once_billed(session, vendor, status):
    a = ensure_menu_item(vendor, 'Coffee', '2')
    order = create_order(vendor, status=status, total_amount='2', lines=[(a, 1)])
    with pytest.raises(InvalidState) as exc:
        lifecycle.add_items(session, make_actor(vendor), order.id, [line(a, 1)])
    assert exc.value.description == f'Cannot add items to an already {status.value} order.'
    fresh = session.get(Order, order.id, populate_existing=True)
    assert fresh.total_amount == Decimal('2') and len(fresh.items) == 1


def test_add_items_with_bad_reference_leaves_order_untouched(session, vendor, other_vendor):
    a = ensure_menu_item(vendor, 'Water', '1')
    foreign = ensure_menu_item(other_vendor, 'Water', '1')
    order = create_order(vendor, status=OrderStatus.READY, total_amount='1', lines=[(a, 1)])
    with pytest.raises(InvalidReference):
        lifecycle.add_items(session, make_actor(vendor), order.id, [line(a), line(foreign)])
    fresh = session.get(Order, order.id, populate_existing=True)
    assert fresh.status == OrderStatus.READY.value
    assert fresh.total_amount == Decimal('1')


def test_add_items_validates_before_lookup(session, vendor):
    with pytest.raises(InvalidInput):
        lifecycle.add_items(session, make_actor(vendor), 'missing-order', [])


def test_add_items_unknown_order_is_not_found(session, vendor):
    a = ensure_menu_item(vendor, 'Salad', '6')
    with pytest.raises(NotFound):
        lifecycle.add_items(session, make_actor(vendor), 'missing-order', [line(a)])


@pytest.mark.parametrize('table_number, items', [
    (None, [{'menu_item_id': 'x', 'quantity': 1, 'item_table_number': 1}]),
    (0, [{'menu_item_id': 'x', 'quantity': 1, 'item_table_number': 1}]),
    (3, []),
    (3, None),
    (3, [{'quantity': 1, 'item_table_number': 3}]),
    (3, [{'menu_item_id': 'x', 'quantity': 0, 'item_table_number': 3}]),
    (3, [{'menu_item_id': 'x', 'quantity': -2, 'item_table_number': 3}]),
    (3, [{'menu_item_id': 'x', 'quantity': 1}]),
    (3, [{'menu_item_id': 'x', 'quantity': 1, 'item_table_number': 3, 'addons': 'cheese'}]),
])
def test_create_order_rejects_invalid_input(session, vendor, table_number, items):
    with pytest.raises(InvalidInput):
        lifecycle.create_order(session, make_actor(vendor), table_number, items)


def test_create_order_with_invalid_reference_persists_nothing(session, vendor):
    before = session.query(Order).filter_by(vendor_id=vendor.id).count()
    with pytest.raises(InvalidReference):
        lifecycle.create_order(session, make_actor(vendor), 1,
                               [{'menu_item_id': 'nope', 'quantity': 1, 'item_table_number': 1}])
    assert session.query(Order).filter_by(vendor_id=vendor.id).count() == before


def test_kitchen_then_server_billing_flow(session, vendor):
    a = ensure_menu_item(vendor, 'Burger', '12')
    order = lifecycle.create_order(session, make_actor(vendor, Role.SERVER), 4, [line(a, 1, 4)])
    order, msg = lifecycle.set_status(session, make_actor(vendor, Role.KITCHEN), order.id, 'Ready')
    assert order.status == 'Ready' and msg == 'Order status updated to Ready'
    with pytest.raises(Forbidden):
        lifecycle.set_status(session, make_actor(vendor, Role.SERVER), order.id, 'Billed')
    order, _ = lifecycle.set_status(session, make_actor(vendor, Role.SERVER), order.id, 'Served')
    order, _ = lifecycle.set_status(session, make_actor(vendor, Role.BILLING), order.id, 'Billed', payment_method='Card')
    assert order.status == 'Billed' and order.payment_method == 'Card'


def test_forbidden_is_checked_before_existence(session, vendor):
    with pytest.raises(Forbidden):
        lifecycle.set_status(session, make_actor(vendor, Role.KITCHEN), 'missing-order', 'Served')


def test_non_owner_roles_may_repeat_their_status(session, vendor):
    order = create_order(vendor, status=OrderStatus.READY)
    order, _ = lifecycle.set_status(session, make_actor(vendor, Role.KITCHEN), order.id, 'Ready')
    assert order.status == 'Ready'


@pytest.mark.parametrize('role, target', [
    (Role.KITCHEN, 'Ready'), (Role.SERVER, 'Served'), (Role.BILLING, 'Billed'), (Role.BILLING, 'Completed'),
])
def test_completed_order_is_locked_for_staff(session, vendor, role, target):
    order = create_order(vendor, status=OrderStatus.COMPLETED)
    with pytest.raises(InvalidState):
        lifecycle.set_status(session, make_actor(vendor, role), order.id, target)


@pytest.mark.parametrize('target', list(OrderStatus))
def test_owner_can_correct_completed_order_to_any_status(session, vendor, target):
    order = create_order(vendor, status=OrderStatus.COMPLETED)
    order, _ = lifecycle.set_status(session, make_actor(vendor, Role.VENDOR), order.id, target.value)
    assert order.status == target.value


def test_payment_method_only_when_billing(session, vendor):
    order = create_order(vendor, status=OrderStatus.READY)
    with pytest.raises(InvalidInput):
        lifecycle.set_status(session, make_actor(vendor, Role.SERVER), order.id, 'Served', payment_method='Cash')
    with pytest.raises(InvalidInput):
        lifecycle.set_status(session, make_actor(vendor, Role.BILLING), order.id, 'Billed', payment_method='   ')
    assert session.get(Order, order.id, populate_existing=True).status == 'Ready'


def test_missing_status_is_invalid_input(session, vendor):
    with pytest.raises(InvalidInput):
        lifecycle.set_status(session, make_actor(vendor, Role.VENDOR), 'whatever', None)


def test_cross_tenant_access_is_not_found(session, vendor, other_vendor):
    a = ensure_menu_item(vendor, 'Pasta', '9')
    order = create_order(vendor, lines=[(a, 1)], total_amount='9')
    intruder = make_actor(other_vendor, Role.VENDOR)
    with pytest.raises(NotFound):
        lifecycle.get_order(session, intruder, order.id)
    with pytest.raises(NotFound):
        lifecycle.set_status(session, intruder, order.id, 'Completed')
    with pytest.raises(NotFound):
        lifecycle.add_items(session, intruder, order.id, [line(a)])
    assert lifecycle.get_order(session, make_actor(vendor), order.id).id == order.id


def test_kitchen_queue_is_fifo_and_scoped(session, vendor, other_vendor):
    first = create_order(vendor, status=OrderStatus.KITCHEN, table_number=9)
    second = create_order(vendor, status=OrderStatus.PENDING, table_number=1)
    create_order(vendor, status=OrderStatus.READY)
    create_order(other_vendor, status=OrderStatus.KITCHEN)
    assert [o.id for o in lifecycle.kitchen_queue(session, vendor.id)] == [first.id, second.id]


def test_billing_queue_excludes_billed_and_orders_by_table(session, vendor):
    t3 = create_order(vendor, status=OrderStatus.SERVED, table_number=3)
    t1_old = create_order(vendor, status=OrderStatus.READY, table_number=1)
    t1_new = create_order(vendor, status=OrderStatus.COMPLETED, table_number=1)
    create_order(vendor, status=OrderStatus.BILLED, table_number=1)
    create_order(vendor, status=OrderStatus.KITCHEN, table_number=2)
    assert [o.id for o in lifecycle.billing_queue(session, vendor.id)] == [t1_old.id, t1_new.id, t3.id]


def test_completed_report_sums_billed_and_completed(session, vendor, other_vendor):
    create_order(vendor, status=OrderStatus.BILLED, total_amount='10.10')
    create_order(vendor, status=OrderStatus.COMPLETED, total_amount='20.20')
    create_order(vendor, status=OrderStatus.SERVED, total_amount='99')
    create_order(other_vendor, status=OrderStatus.COMPLETED, total_amount='50')
    report = lifecycle.completed_report(session, vendor.id)
    assert report['count'] == 2
    assert report['total_sales'] == Decimal('30.30')
    updated = [o.updated_at for o in report['orders']]
    assert updated == sorted(updated, reverse=True)


def test_completed_report_date_range_is_inclusive_of_end_day(session, vendor):
    create_order(vendor, status=OrderStatus.COMPLETED, total_amount='5')
    today = datetime.now(timezone.utc).strftime('%Y-%m-%d')
    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).strftime('%Y-%m-%d')
    assert lifecycle.completed_report(session, vendor.id, today, today)['count'] == 1
    assert lifecycle.completed_report(session, vendor.id, tomorrow, None)['count'] == 0
    assert lifecycle.completed_report(session, vendor.id, None, today)['count'] == 1


def test_completed_report_rejects_bad_dates(session, vendor):
    with pytest.raises(InvalidInput):
        lifecycle.completed_report(session, vendor.id, 'yesterday', None)
    with pytest.raises(InvalidInput):
        lifecycle.completed_report(session, vendor.id, '2026-02-02', '2026-02-01')


def test_parse_report_date_end_of_day():
    end = lifecycle.parse_report_date('2026-03-04', end_of_day=True)
    assert (end.hour, end.minute, end.second) == (23, 59, 59)
    assert end.tzinfo is not None
    assert lifecycle.parse_report_date('2026-03-04T10:00:00Z').hour == 10
