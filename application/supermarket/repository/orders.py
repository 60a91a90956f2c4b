from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from supermarket.models.orders import Order

from supermarket.logging.utils import get_app_logger
logger = get_app_logger("supermarket.orders_repository")


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_order_with_details(self, order_id: int) -> Optional[Order]:
        try:
            stmt = select(Order).options(selectinload(Order.details)).where(Order.order_id == order_id)
            return self.db.execute(stmt).scalar_one_or_none()
        except Exception as e:
            logger.error(f"order_fetch_error | order_id={order_id} error={e}", exc_info=True)
            raise
