"""
SQLAlchemy ORM Models
Orders and their line items. Invoicing only reads these tables.
"""

from sqlalchemy import Column, Integer, String, DECIMAL, ForeignKey, Index, Text
from sqlalchemy.orm import relationship
from supermarket.models.common import CommonModel
from supermarket.core.constants import OrderStatus


class Order(CommonModel):
    """
    Customer order. ``applied_order_promotions_json`` holds the order-level
    promotions chosen at checkout as a JSON list.
    """
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, index=True)
    status = Column(String(32), nullable=False, default=OrderStatus.UNPAID, index=True)
    customer_id = Column(Integer, nullable=True, index=True)
    employee_id = Column(Integer, nullable=True)
    subtotal = Column(DECIMAL(12, 2), nullable=False, default=0)
    order_discount = Column(DECIMAL(12, 2), nullable=False, default=0)
    line_item_discount = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    applied_order_promotions_json = Column(Text, nullable=True)

    details = relationship(
        "OrderDetail",
        back_populates="order",
        order_by="OrderDetail.order_detail_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Order(order_id={self.order_id}, customer_id={self.customer_id}, status='{self.status}')>"

    __table_args__ = (
        Index('idx_orders_customer_status', 'customer_id', 'status'),
    )


class OrderDetail(CommonModel):
    """
    Order line: one product unit at the price captured when the order was placed.
    """
    __tablename__ = "order_details"

    order_detail_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)
    product_unit_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price_at_purchase = Column(DECIMAL(12, 2), nullable=False)
    discount = Column(DECIMAL(12, 2), nullable=True, default=0)
    promotion_detail_id = Column(Integer, nullable=True)

    order = relationship("Order", back_populates="details")

    def __repr__(self):
        return f"<OrderDetail(order_detail_id={self.order_detail_id}, order_id={self.order_id}, product_unit_id={self.product_unit_id}, quantity={self.quantity})>"
