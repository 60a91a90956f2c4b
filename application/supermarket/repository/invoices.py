from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from supermarket.models.invoices import (
    SaleInvoiceHeader,
    SaleInvoiceDetail,
    AppliedOrderPromotion,
    AppliedPromotion,
)

from supermarket.logging.utils import get_app_logger
logger = get_app_logger("supermarket.invoices_repository")


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_order_id(self, order_id: int) -> Optional[SaleInvoiceHeader]:
        try:
            stmt = select(SaleInvoiceHeader).where(SaleInvoiceHeader.order_id == order_id)
            return self.db.execute(stmt).scalar_one_or_none()
        except Exception as e:
            logger.error(f"invoice_fetch_by_order_error | order_id={order_id} error={e}", exc_info=True)
            raise

    def get_by_invoice_number(self, invoice_number: str, with_lines: bool = False) -> Optional[SaleInvoiceHeader]:
        try:
            stmt = select(SaleInvoiceHeader).where(SaleInvoiceHeader.invoice_number == invoice_number)
            if with_lines:
                stmt = stmt.options(
                    selectinload(SaleInvoiceHeader.details).selectinload(SaleInvoiceDetail.applied_promotion),
                    selectinload(SaleInvoiceHeader.order_promotions),
                )
            return self.db.execute(stmt).scalar_one_or_none()
        except Exception as e:
            logger.error(f"invoice_fetch_error | invoice_number={invoice_number} error={e}", exc_info=True)
            raise

    def invoice_number_exists(self, invoice_number: str) -> bool:
        stmt = select(SaleInvoiceHeader.invoice_id).where(SaleInvoiceHeader.invoice_number == invoice_number)
        return self.db.execute(stmt).first() is not None

    def get_details_ordered(self, invoice_id: int) -> List[SaleInvoiceDetail]:
        """Invoice lines in creation order (ascending id)."""
        try:
            stmt = (
                select(SaleInvoiceDetail)
                .where(SaleInvoiceDetail.invoice_id == invoice_id)
                .order_by(SaleInvoiceDetail.invoice_detail_id.asc())
            )
            return list(self.db.execute(stmt).scalars().all())
        except Exception as e:
            logger.error(f"invoice_details_fetch_error | invoice_id={invoice_id} error={e}", exc_info=True)
            raise

    def add_header(self, header: SaleInvoiceHeader) -> SaleInvoiceHeader:
        self.db.add(header)
        # flush to obtain invoice_id for the detail rows
        self.db.flush()
        return header

    def add_detail(self, detail: SaleInvoiceDetail) -> SaleInvoiceDetail:
        self.db.add(detail)
        return detail

    def add_order_promotion(self, promotion: AppliedOrderPromotion) -> AppliedOrderPromotion:
        self.db.add(promotion)
        return promotion

    def add_item_promotion(self, promotion: AppliedPromotion) -> AppliedPromotion:
        self.db.add(promotion)
        return promotion

    def flush(self):
        self.db.flush()
