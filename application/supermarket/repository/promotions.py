from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from supermarket.models.promotions import PromotionDetail

from supermarket.logging.utils import get_app_logger
logger = get_app_logger("supermarket.promotions_repository")


class PromotionDetailRepository:
    def __init__(self, db: Session):
        self.db = db

    def increment_usage_counts(self, detail_ids: Iterable[int]) -> int:
        """Add one use to each existing detail id. Returns how many rows were updated."""
        ids = sorted(set(detail_ids))
        if not ids:
            return 0
        try:
            stmt = select(PromotionDetail).where(PromotionDetail.detail_id.in_(ids)).with_for_update()
            details = self.db.execute(stmt).scalars().all()
            for detail in details:
                detail.usage_count = (detail.usage_count or 0) + 1
            found = {d.detail_id for d in details}
            missing = [i for i in ids if i not in found]
            if missing:
                logger.warning(f"promotion_detail_missing | detail_ids={missing}")
            logger.info(f"promotion_usage_updated | detail_ids={sorted(found)}")
            return len(details)
        except Exception as e:
            logger.error(f"promotion_usage_update_error | detail_ids={ids} error={e}", exc_info=True)
            raise
