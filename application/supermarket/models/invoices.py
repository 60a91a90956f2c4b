"""
SQLAlchemy ORM Models
Sale invoice header, its lines and the promotions recorded against them.
"""

from sqlalchemy import Column, Integer, String, DECIMAL, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
from supermarket.models.common import CommonModel
from supermarket.core.constants import InvoiceStatus


class SaleInvoiceHeader(CommonModel):
    """
    Invoice header. At most one per order (``order_id`` is unique).
    """
    __tablename__ = "sale_invoice_header"

    invoice_id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(32), nullable=False, unique=True)
    invoice_date = Column(TIMESTAMP(timezone=True), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, unique=True)
    customer_id = Column(Integer, nullable=True, index=True)
    employee_id = Column(Integer, nullable=True)
    subtotal = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_discount = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_tax = Column(DECIMAL(12, 2), nullable=False, default=0)
    total_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    paid_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    status = Column(String(32), nullable=False, default=InvoiceStatus.UNPAID)

    details = relationship(
        "SaleInvoiceDetail",
        back_populates="invoice",
        order_by="SaleInvoiceDetail.invoice_detail_id",
        cascade="all, delete-orphan",
    )
    order_promotions = relationship(
        "AppliedOrderPromotion",
        back_populates="invoice",
        order_by="AppliedOrderPromotion.applied_order_promotion_id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<SaleInvoiceHeader(invoice_id={self.invoice_id}, invoice_number='{self.invoice_number}', order_id={self.order_id})>"

    __table_args__ = (
        Index('idx_sale_invoice_header_invoice_date', 'invoice_date'),
    )


class SaleInvoiceDetail(CommonModel):
    __tablename__ = "sale_invoice_detail"

    invoice_detail_id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("sale_invoice_header.invoice_id"), nullable=False, index=True)
    product_unit_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(DECIMAL(12, 2), nullable=False)
    discount_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    line_total = Column(DECIMAL(12, 2), nullable=False)
    tax_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    line_total_with_tax = Column(DECIMAL(12, 2), nullable=False)

    invoice = relationship("SaleInvoiceHeader", back_populates="details")
    applied_promotion = relationship(
        "AppliedPromotion",
        back_populates="invoice_detail",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<SaleInvoiceDetail(invoice_detail_id={self.invoice_detail_id}, invoice_id={self.invoice_id}, product_unit_id={self.product_unit_id})>"


class AppliedOrderPromotion(CommonModel):
    """
    Order-level promotion applied to an invoice.
    """
    __tablename__ = "applied_order_promotions"

    applied_order_promotion_id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("sale_invoice_header.invoice_id"), nullable=False, index=True)
    promotion_id = Column(String(64), nullable=True)
    promotion_name = Column(String(255), nullable=True)
    promotion_detail_id = Column(Integer, nullable=True)
    promotion_summary = Column(String(1024), nullable=True)
    discount_type = Column(String(32), nullable=True)
    discount_value = Column(DECIMAL(12, 2), nullable=True)

    invoice = relationship("SaleInvoiceHeader", back_populates="order_promotions")


class AppliedPromotion(CommonModel):
    """
    Item-level promotion applied to a single invoice line.
    """
    __tablename__ = "applied_promotions"

    applied_promotion_id = Column(Integer, primary_key=True, index=True)
    invoice_detail_id = Column(Integer, ForeignKey("sale_invoice_detail.invoice_detail_id"), nullable=False, index=True)
    promotion_id = Column(String(64), nullable=True)
    promotion_name = Column(String(255), nullable=True)
    promotion_line_id = Column(Integer, nullable=True)
    promotion_detail_id = Column(Integer, nullable=True)
    promotion_summary = Column(String(1024), nullable=True)
    discount_type = Column(String(32), nullable=True)
    discount_value = Column(DECIMAL(12, 2), nullable=True)
    source_line_item_id = Column(Integer, nullable=True)

    invoice_detail = relationship("SaleInvoiceDetail", back_populates="applied_promotion")
