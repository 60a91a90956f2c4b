from typing import Optional

from sqlalchemy.orm import Session

from supermarket.core.constants import WarehouseTransactionType
from supermarket.core.exceptions import WarehouseNotFoundError, InsufficientStockError
from supermarket.models.warehouse import Warehouse, WarehouseTransaction
from supermarket.repository.warehouse import WarehouseRepository

# Request context
from supermarket.middlewares.request_context import request_context

# Logger
from supermarket.logging.utils import get_app_logger
logger = get_app_logger(__name__)


class WarehouseService:
    """Stock movements for product units. Callers own the transaction."""

    def __init__(self, db: Session):
        self.db = db
        self.repository = WarehouseRepository(db)
        request_context.module_name = 'warehouse_service'

    def stock_out(self, product_unit_id: int, quantity: int, reference_id: Optional[str] = None, notes: Optional[str] = None) -> Warehouse:
        """Remove ``quantity`` units from stock and record a SALE movement.

        Raises:
            ValueError: quantity is not positive
            WarehouseNotFoundError: no stock row for the product unit
            InsufficientStockError: less than ``quantity`` on hand
        """
        if quantity is None or quantity <= 0:
            raise ValueError(f"Stock-out quantity must be positive, got {quantity}")

        warehouse = self.repository.get_for_update(product_unit_id)
        if warehouse is None:
            logger.error(f"stock_out_no_warehouse | product_unit_id={product_unit_id} reference_id={reference_id}")
            raise WarehouseNotFoundError(product_unit_id)

        before = warehouse.quantity_on_hand or 0
        if quantity > before:
            logger.error(f"stock_out_insufficient | product_unit_id={product_unit_id} required={quantity} available={before} reference_id={reference_id}")
            raise InsufficientStockError(product_unit_id, quantity, before)

        warehouse.quantity_on_hand = before - quantity
        self.repository.add_transaction(WarehouseTransaction(
            product_unit_id=product_unit_id,
            before_quantity=before,
            quantity_change=-quantity,
            new_quantity=warehouse.quantity_on_hand,
            transaction_type=WarehouseTransactionType.SALE,
            reference_id=reference_id,
            notes=notes,
        ))
        logger.info(f"stock_out_done | product_unit_id={product_unit_id} quantity={quantity} before={before} after={warehouse.quantity_on_hand} reference_id={reference_id}")
        return warehouse

    def stock_in(self, product_unit_id: int, quantity: int, reference_id: Optional[str] = None, notes: Optional[str] = None) -> Warehouse:
        """Add stock, creating the warehouse row on first receipt."""
        if quantity is None or quantity <= 0:
            raise ValueError(f"Stock-in quantity must be positive, got {quantity}")

        warehouse = self.repository.get_for_update(product_unit_id)
        if warehouse is None:
            warehouse = self.repository.add(Warehouse(product_unit_id=product_unit_id, quantity_on_hand=0))

        before = warehouse.quantity_on_hand or 0
        warehouse.quantity_on_hand = before + quantity
        self.repository.add_transaction(WarehouseTransaction(
            product_unit_id=product_unit_id,
            before_quantity=before,
            quantity_change=quantity,
            new_quantity=warehouse.quantity_on_hand,
            transaction_type=WarehouseTransactionType.STOCK_IN,
            reference_id=reference_id,
            notes=notes,
        ))
        self.db.flush()
        logger.info(f"stock_in_done | product_unit_id={product_unit_id} quantity={quantity} after={warehouse.quantity_on_hand}")
        return warehouse

    def get_current_stock(self, product_unit_id: int) -> int:
        warehouse = self.repository.get(product_unit_id)
        return warehouse.quantity_on_hand if warehouse is not None else 0
