import threading
from decimal import Decimal

from moderna.core.errors import AppError, InsufficientStockError, InvalidTransitionError
from moderna.modules.inventory import InventoryService
from moderna.modules.orders import OrdersService
from moderna.modules.orders.schemas import OrderItemRequest
from moderna.modules.sales import SalesService
from moderna.modules.sales.schemas import SaleItemRequest
from moderna.shared.database.models import PurchaseOrder, StockMovement


def run_concurrently(session_factory, work, workers):
    """Ejecutar ``work(session)`` en varios hilos a la vez, cada uno con su sesión"""
    barrier = threading.Barrier(workers)
    results = [None] * workers

    def run(position):
        with session_factory() as session:
            barrier.wait()
            try:
                results[position] = ("ok", work(session))
            except AppError as exc:
                results[position] = ("error", exc)

    threads = [threading.Thread(target=run, args=(n,)) for n in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    return results


def test_concurrent_restocks_are_all_applied(session_factory, make_product, stock_of):
    pid = make_product(stock=5, product_id=1)

    results = run_concurrently(
        session_factory, lambda session: InventoryService(session).restock(pid, 2), workers=6
    )

    assert [status for status, _ in results] == ["ok"] * 6
    assert stock_of(pid) == 17
    with session_factory() as session:
        movements = session.query(StockMovement).order_by(StockMovement.id).all()
    assert [m.quantity_after for m in movements] == [7, 9, 11, 13, 15, 17]
    assert all(m.quantity_after - m.quantity_before == 2 for m in movements)


def test_concurrent_sales_never_oversell(session_factory, make_product, stock_of):
    pid = make_product(stock=5, unit_price="5.00", product_id=1)

    def sell_two(session):
        return SalesService(session).sell([SaleItemRequest(productId=pid, quantity=2)])

    results = run_concurrently(session_factory, sell_two, workers=4)

    succeeded = [value for status, value in results if status == "ok"]
    failed = [value for status, value in results if status == "error"]
    assert len(succeeded) == 2
    assert all(isinstance(exc, InsufficientStockError) for exc in failed)
    assert stock_of(pid) == 1


def test_concurrent_mark_paid_applies_once(db, session_factory):
    order = OrdersService(db).create(
        code="PED-500",
        supplier="Droguería Central",
        status=None,
        total=None,
        notes=None,
        items=[OrderItemRequest(nombre_producto="Alcohol 70%", precio_unitario=Decimal("2.00"), cantidad=3)],
    )
    order_id = order.id

    results = run_concurrently(
        session_factory, lambda session: OrdersService(session).mark_paid(order_id).status, workers=4
    )

    assert [value for status, value in results if status == "ok"] == ["paid"]
    failed = [value for status, value in results if status == "error"]
    assert len(failed) == 3
    assert all(isinstance(exc, InvalidTransitionError) for exc in failed)

    with session_factory() as session:
        stored = session.get(PurchaseOrder, order_id)
        assert stored.status == "paid"
        assert stored.notes.count("Pedido marcado como pagado") == 1
