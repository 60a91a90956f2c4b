from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from supermarket.models.warehouse import Warehouse, WarehouseTransaction

from supermarket.logging.utils import get_app_logger
logger = get_app_logger("supermarket.warehouse_repository")


class WarehouseRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_for_update(self, product_unit_id: int) -> Optional[Warehouse]:
        """Stock row locked until the surrounding transaction ends."""
        try:
            stmt = select(Warehouse).where(Warehouse.product_unit_id == product_unit_id).with_for_update()
            return self.db.execute(stmt).scalar_one_or_none()
        except Exception as e:
            logger.error(f"warehouse_lock_error | product_unit_id={product_unit_id} error={e}", exc_info=True)
            raise

    def get(self, product_unit_id: int) -> Optional[Warehouse]:
        stmt = select(Warehouse).where(Warehouse.product_unit_id == product_unit_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def add(self, warehouse: Warehouse) -> Warehouse:
        self.db.add(warehouse)
        return warehouse

    def add_transaction(self, transaction: WarehouseTransaction) -> WarehouseTransaction:
        self.db.add(transaction)
        return transaction
