"""
SQLAlchemy ORM Models
Stock on hand per product unit and the ledger of stock movements.
"""

from sqlalchemy import Column, Integer, String, Index
from supermarket.models.common import CommonModel


class Warehouse(CommonModel):
    __tablename__ = "warehouses"

    warehouse_id = Column(Integer, primary_key=True, index=True)
    product_unit_id = Column(Integer, nullable=False, unique=True)
    quantity_on_hand = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self):
        return f"<Warehouse(product_unit_id={self.product_unit_id}, quantity_on_hand={self.quantity_on_hand})>"


class WarehouseTransaction(CommonModel):
    __tablename__ = "warehouse_transactions"

    transaction_id = Column(Integer, primary_key=True, index=True)
    product_unit_id = Column(Integer, nullable=False, index=True)
    before_quantity = Column(Integer, nullable=False)
    quantity_change = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    transaction_type = Column(String(32), nullable=False)
    reference_id = Column(String(64), nullable=True)
    notes = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<WarehouseTransaction(transaction_id={self.transaction_id}, product_unit_id={self.product_unit_id}, quantity_change={self.quantity_change}, type='{self.transaction_type}')>"

    __table_args__ = (
        Index('idx_warehouse_transactions_reference', 'reference_id'),
    )
