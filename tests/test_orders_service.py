from datetime import datetime
from decimal import Decimal

import pytest

from moderna.core.errors import (
    DuplicateError, InvalidTransitionError, NotFoundError, ValidationError
)
from moderna.modules.orders import OrdersRepository, OrdersService
from moderna.modules.orders.schemas import OrderItemRequest
from moderna.shared.database.models import PurchaseOrder, PurchaseOrderItem


class FakeClock:
    def __init__(self, *moments):
        self.moments = list(moments)

    def __call__(self) -> datetime:
        return self.moments.pop(0)


def _items():
    return [
        OrderItemRequest(nombre_producto="Paracetamol 500mg", precio_unitario=Decimal("1.50"), cantidad=10),
        OrderItemRequest(nombre_producto="Ibuprofeno 400mg", precio_unitario=Decimal("2.00"), cantidad=5),
    ]


def _create(service, code="PED-001", notes=None, status=None, total=None):
    return service.create(
        code=code, supplier="Droguería Central", status=status, total=total, notes=notes, items=_items()
    )


def test_create_starts_pending_with_computed_total(db):
    order = _create(OrdersService(db))

    assert order.status == "pending"
    assert order.total_amount == Decimal("25.00")
    assert [item.product_name for item in order.items] == ["Paracetamol 500mg", "Ibuprofeno 400mg"]


def test_create_rejects_non_pending_status(db):
    with pytest.raises(ValidationError):
        _create(OrdersService(db), status="paid")

    assert db.query(PurchaseOrder).count() == 0


def test_create_rejects_total_that_does_not_match_items(db):
    with pytest.raises(ValidationError, match="total"):
        _create(OrdersService(db), total=Decimal("30.00"))


def test_create_rejects_duplicate_code(db):
    service = OrdersService(db)
    _create(service, code="PED-001")

    with pytest.raises(DuplicateError):
        _create(service, code="PED-001")

    assert db.query(PurchaseOrder).count() == 1


def test_create_rolls_back_header_when_an_item_fails(db, monkeypatch):
    original_add_item = OrdersRepository.add_item
    calls = []

    def failing_add_item(self, *args, **kwargs):
        calls.append(1)
        if len(calls) == 2:
            raise RuntimeError("boom")
        return original_add_item(self, *args, **kwargs)

    monkeypatch.setattr(OrdersRepository, "add_item", failing_add_item)

    with pytest.raises(RuntimeError):
        _create(OrdersService(db))

    assert db.query(PurchaseOrder).count() == 0
    assert db.query(PurchaseOrderItem).count() == 0


def test_mark_paid_twice_fails_and_keeps_paid(db):
    service = OrdersService(db)
    order_id = _create(service).id

    assert service.mark_paid(order_id).status == "paid"

    with pytest.raises(InvalidTransitionError):
        service.mark_paid(order_id)

    assert service.get_order(order_id).status == "paid"


@pytest.mark.parametrize("final_event", ["mark_completed", "cancel"])
@pytest.mark.parametrize("next_event", ["mark_paid", "mark_completed", "cancel"])
def test_terminal_orders_reject_every_transition(db, final_event, next_event):
    clock = FakeClock(datetime(2024, 5, 1, 9, 0, 0), datetime(2024, 5, 2, 9, 0, 0))
    service = OrdersService(db, clock=clock)
    order_id = _create(service).id
    getattr(service, final_event)(order_id)

    before = service.get_order(order_id)
    snapshot = (before.status, before.notes, before.updated_at)

    with pytest.raises(InvalidTransitionError):
        getattr(service, next_event)(order_id)

    after = service.get_order(order_id)
    assert (after.status, after.notes, after.updated_at) == snapshot


def test_notes_are_appended_in_order(db):
    clock = FakeClock(datetime(2024, 5, 1, 9, 30, 0), datetime(2024, 5, 3, 17, 5, 9))
    service = OrdersService(db, clock=clock)
    order_id = _create(service, notes="Pedido urgente").id

    service.mark_paid(order_id)
    service.mark_completed(order_id, note="Recibido completo")

    assert service.get_order(order_id).notes == (
        "Pedido urgente; "
        "[2024-05-01 09:30:00] Pedido marcado como pagado; "
        "[2024-05-03 17:05:09] Pedido completado: Recibido completo"
    )


def test_first_note_has_no_separator(db):
    clock = FakeClock(datetime(2024, 5, 1, 9, 30, 0))
    service = OrdersService(db, clock=clock)
    order_id = _create(service).id

    service.cancel(order_id)

    order = service.get_order(order_id)
    assert order.notes == "[2024-05-01 09:30:00] Pedido cancelado"
    assert order.updated_at == datetime(2024, 5, 1, 9, 30, 0)


def test_pending_order_can_be_completed_directly(db):
    service = OrdersService(db)
    order_id = _create(service).id

    assert service.mark_completed(order_id).status == "completed"


def test_paid_order_can_be_cancelled(db):
    service = OrdersService(db)
    order_id = _create(service).id
    service.mark_paid(order_id)

    assert service.cancel(order_id).status == "cancelled"


def test_transition_on_missing_order_is_not_found(db):
    with pytest.raises(NotFoundError):
        OrdersService(db).mark_paid(12345)


def test_list_orders_by_status(db):
    service = OrdersService(db)
    paid_id = _create(service, code="PED-001").id
    _create(service, code="PED-002")
    service.mark_paid(paid_id)

    assert [order.id for order in service.list_orders(status="paid")] == [paid_id]
    with pytest.raises(ValidationError):
        service.list_orders(status="shipped")
