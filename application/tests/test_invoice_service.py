import asyncio
import json
import random
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from supermarket.connections.database import SessionLocal
from supermarket.core.constants import OrderStatus, InvoiceStatus
from supermarket.core.exceptions import (
    OrderNotFoundError,
    InvalidOrderStateError,
    InsufficientStockError,
    InvoiceConflictError,
)
from supermarket.core.invoices import create_invoice_for_order_core
from supermarket.models.invoices import SaleInvoiceHeader, SaleInvoiceDetail
from supermarket.models.promotions import PromotionDetail
from supermarket.models.warehouse import Warehouse, WarehouseTransaction
from supermarket.repository.invoices import InvoiceRepository
from supermarket.services.invoice_service import InvoiceService
from supermarket.utils.invoice_number import InvoiceNumberGenerator, is_valid_invoice_number


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_invoice_totals_reconcile_with_order(db, make_order, recording_warehouse):
    order_id = make_order(
        [(101, 2, 10000, 1000), (102, 1, 5000, 0)],
        subtotal=25000,
        total_amount=24000,
    )

    number = InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)
    db.commit()

    header = db.execute(select(SaleInvoiceHeader)).scalar_one()
    assert header.invoice_number == number
    assert header.order_id == order_id
    assert header.subtotal == Decimal("25000.00")
    assert header.total_discount == Decimal("1000.00")
    assert header.total_tax == Decimal("0.00")
    assert header.total_amount == Decimal("24000.00")
    assert header.paid_amount == header.total_amount
    assert header.status == InvoiceStatus.PAID
    assert header.customer_id == 7
    assert header.employee_id == 3

    details = db.execute(select(SaleInvoiceDetail).order_by(SaleInvoiceDetail.invoice_detail_id)).scalars().all()
    assert [d.product_unit_id for d in details] == [101, 102]
    assert [d.line_total for d in details] == [Decimal("19000.00"), Decimal("5000.00")]
    assert all(d.tax_amount == Decimal("0.00") for d in details)
    assert all(d.line_total_with_tax == d.line_total for d in details)


def test_header_copies_order_amounts_without_recomputing(db, make_order, recording_warehouse):
    order_id = make_order([(101, 1, 100, 0)], subtotal=123.45, total_amount=99.99)

    InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)

    header = InvoiceRepository(db).get_by_order_id(order_id)
    assert header.subtotal == Decimal("123.45")
    assert header.total_amount == Decimal("99.99")


def test_missing_line_discount_counts_as_zero(db, make_order, recording_warehouse):
    order_id = make_order([(101, 3, 20, None), (102, 1, 50, 5)])

    InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)

    header = InvoiceRepository(db).get_by_order_id(order_id)
    assert header.total_discount == Decimal("5.00")
    first = InvoiceRepository(db).get_details_ordered(header.invoice_id)[0]
    assert first.discount_amount == Decimal("0.00")
    assert first.line_total == Decimal("60.00")


def test_stock_out_called_once_per_line_with_reason(db, make_order, recording_warehouse):
    order_id = make_order([(101, 2, 10, 0), (102, 5, 1, 0), (101, 1, 10, 0)])

    number = InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)

    assert recording_warehouse.calls == [
        (101, 2, number, f"Bán hàng - Invoice: {number}"),
        (102, 5, number, f"Bán hàng - Invoice: {number}"),
        (101, 1, number, f"Bán hàng - Invoice: {number}"),
    ]


def test_invoicing_is_idempotent(db, make_order, recording_warehouse):
    order_id = make_order([(101, 2, 10000, 1000), (102, 1, 5000, 0)])
    service = InvoiceService(db, warehouse_service=recording_warehouse)

    first = service.create_invoice_for_completed_order(order_id)
    db.commit()
    second = service.create_invoice_for_completed_order(order_id)
    db.commit()

    assert first == second
    assert _count(db, SaleInvoiceHeader) == 1
    assert _count(db, SaleInvoiceDetail) == 2
    assert len(recording_warehouse.calls) == 2


def test_idempotent_invoicing_deducts_real_stock_once(db, make_order, stock):
    stock(101, 10)
    stock(102, 10)
    order_id = make_order([(101, 2, 10000, 1000), (102, 1, 5000, 0)])

    first = asyncio.run(create_invoice_for_order_core(order_id))
    second = asyncio.run(create_invoice_for_order_core(order_id))

    assert first == second
    assert is_valid_invoice_number(first)
    quantities = dict(db.execute(select(Warehouse.product_unit_id, Warehouse.quantity_on_hand)).all())
    assert quantities == {101: 8, 102: 9}
    assert _count(db, WarehouseTransaction) == 2


@pytest.mark.parametrize("status", [
    OrderStatus.PENDING, OrderStatus.UNPAID, OrderStatus.PREPARED,
    OrderStatus.SHIPPING, OrderStatus.DELIVERED, OrderStatus.CANCELLED,
])
def test_non_completed_order_is_rejected(db, make_order, recording_warehouse, status):
    order_id = make_order([(101, 1, 10, 0)], status=status)

    with pytest.raises(InvalidOrderStateError) as exc_info:
        InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)

    assert exc_info.value.code == "ORDER_NOT_COMPLETED"
    assert exc_info.value.key == str(order_id)
    assert recording_warehouse.calls == []
    assert _count(db, SaleInvoiceHeader) == 0
    assert _count(db, SaleInvoiceDetail) == 0


def test_unknown_order_is_not_found(db, recording_warehouse):
    with pytest.raises(OrderNotFoundError) as exc_info:
        InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(4242)
    assert exc_info.value.key == "4242"


def test_insufficient_stock_rolls_back_everything(make_order, stock):
    stock(101, 10)
    stock(102, 1)
    order_id = make_order([(101, 2, 10, 0), (102, 5, 10, 0)])

    with pytest.raises(InsufficientStockError):
        asyncio.run(create_invoice_for_order_core(order_id))

    check = SessionLocal()
    try:
        assert _count(check, SaleInvoiceHeader) == 0
        assert _count(check, SaleInvoiceDetail) == 0
        assert _count(check, WarehouseTransaction) == 0
        quantities = dict(check.execute(select(Warehouse.product_unit_id, Warehouse.quantity_on_hand)).all())
        assert quantities == {101: 10, 102: 1}
    finally:
        check.close()


def test_promotion_usage_counted_once_per_detail(db, make_order, promotion_detail, recording_warehouse):
    promotion_detail(11, usage_count=4)
    promotion_detail(12)
    promotion_detail(13)
    order_json = json.dumps([
        {"promotionId": "ORDER10", "promotionDetailId": 12},
        {"promotion_id": "ORDER10-DUP", "promotion_detail_id": 11},
        {"promotionId": "GONE", "promotionDetailId": 999},
    ])
    order_id = make_order(
        [(101, 1, 10, 1, 11), (102, 1, 10, 1, 11), (103, 1, 10, 0)],
        order_promotions_json=order_json,
    )

    InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)
    db.commit()

    usage = dict(db.execute(select(PromotionDetail.detail_id, PromotionDetail.usage_count)).all())
    assert usage == {11: 5, 12: 1, 13: 0}


def test_malformed_order_promotions_json_does_not_abort(db, make_order, promotion_detail, recording_warehouse):
    promotion_detail(11)
    order_id = make_order([(101, 1, 10, 0, 11)], order_promotions_json="{not json")

    number = InvoiceService(db, warehouse_service=recording_warehouse).create_invoice_for_completed_order(order_id)
    db.commit()

    assert is_valid_invoice_number(number)
    assert db.get(PromotionDetail, 11).usage_count == 1


def test_number_uses_injected_generator_clock(db, make_order, recording_warehouse):
    fixed = datetime(2025, 3, 1, 8, 0, 5)
    generator = InvoiceNumberGenerator(clock=lambda: fixed, rng=random.Random(3))
    order_id = make_order([(101, 1, 10, 0)])

    number = InvoiceService(db, warehouse_service=recording_warehouse, number_generator=generator).create_invoice_for_completed_order(order_id)

    assert number.startswith("INV20250301080005")


def test_number_collision_with_other_order_is_a_conflict(make_order, stock, monkeypatch):
    stock(101, 10)
    fixed = datetime(2025, 3, 1, 8, 0, 5)
    first_order = make_order([(101, 1, 10, 0)])
    second_order = make_order([(101, 1, 10, 0)])

    monkeypatch.setattr(
        "supermarket.services.invoice_service.InvoiceNumberGenerator",
        lambda: InvoiceNumberGenerator(clock=lambda: fixed, rng=random.Random(5)),
    )
    taken = asyncio.run(create_invoice_for_order_core(first_order))

    # pretend the number check raced with another writer
    monkeypatch.setattr(InvoiceRepository, "invoice_number_exists", lambda self, number: False)
    with pytest.raises(InvoiceConflictError):
        asyncio.run(create_invoice_for_order_core(second_order))

    check = SessionLocal()
    try:
        assert _count(check, SaleInvoiceHeader) == 1
        assert check.execute(select(SaleInvoiceHeader.invoice_number)).scalar_one() == taken
        assert check.execute(select(Warehouse.quantity_on_hand)).scalar_one() == 9
    finally:
        check.close()


def test_concurrent_invoice_for_same_order_returns_winner(make_order, stock, monkeypatch):
    stock(101, 10)
    order_id = make_order([(101, 1, 10, 0)])
    winner = asyncio.run(create_invoice_for_order_core(order_id))

    # the losing request saw no invoice when it checked
    original = InvoiceRepository.get_by_order_id
    calls = {"n": 0}

    def first_call_misses(self, oid):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return original(self, oid)

    monkeypatch.setattr(InvoiceRepository, "get_by_order_id", first_call_misses)

    assert asyncio.run(create_invoice_for_order_core(order_id)) == winner

    check = SessionLocal()
    try:
        assert _count(check, SaleInvoiceHeader) == 1
        assert check.execute(select(Warehouse.quantity_on_hand)).scalar_one() == 9
    finally:
        check.close()
