import os
from decimal import Decimal

# must be set before any supermarket module reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATABASE_READ_URL"] = "sqlite://"
os.environ["LOG_TO_STDOUT"] = "true"
os.environ["SENTRY_ENABLED"] = "false"
os.environ["DEBUG"] = "true"

import pytest

from supermarket.connections.database import Base, engine, SessionLocal
from supermarket.core.constants import OrderStatus
from supermarket.models.orders import Order, OrderDetail
from supermarket.models.invoices import SaleInvoiceHeader  # noqa: F401
from supermarket.models.promotions import PromotionDetail
from supermarket.models.warehouse import Warehouse


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_order(db):
    """Persist an order. ``lines`` are (product_unit_id, quantity, price, discount[, promotion_detail_id])."""

    def _make(lines, status=OrderStatus.COMPLETED, subtotal=None, total_amount=None,
              customer_id=7, employee_id=3, order_promotions_json=None):
        details = []
        for line in lines:
            product_unit_id, quantity, price, discount = line[:4]
            promotion_detail_id = line[4] if len(line) > 4 else None
            details.append(OrderDetail(
                product_unit_id=product_unit_id,
                quantity=quantity,
                price_at_purchase=Decimal(str(price)),
                discount=None if discount is None else Decimal(str(discount)),
                promotion_detail_id=promotion_detail_id,
            ))
        computed_subtotal = sum((d.price_at_purchase * d.quantity for d in details), Decimal("0"))
        line_discount = sum((d.discount or Decimal("0") for d in details), Decimal("0"))
        order = Order(
            status=status,
            customer_id=customer_id,
            employee_id=employee_id,
            subtotal=computed_subtotal if subtotal is None else Decimal(str(subtotal)),
            line_item_discount=line_discount,
            order_discount=Decimal("0"),
            total_amount=(computed_subtotal - line_discount) if total_amount is None else Decimal(str(total_amount)),
            applied_order_promotions_json=order_promotions_json,
            details=details,
        )
        db.add(order)
        db.commit()
        return order.order_id

    return _make


@pytest.fixture
def stock(db):
    def _stock(product_unit_id, quantity):
        db.add(Warehouse(product_unit_id=product_unit_id, quantity_on_hand=quantity))
        db.commit()

    return _stock


@pytest.fixture
def promotion_detail(db):
    def _detail(detail_id, usage_count=0):
        db.add(PromotionDetail(detail_id=detail_id, promotion_line_id=1, usage_count=usage_count))
        db.commit()

    return _detail


class RecordingWarehouseService:
    """Stands in for stock-out and remembers every call."""

    def __init__(self):
        self.calls = []

    def stock_out(self, product_unit_id, quantity, reference_id=None, notes=None):
        self.calls.append((product_unit_id, quantity, reference_id, notes))


@pytest.fixture
def recording_warehouse():
    return RecordingWarehouseService()
