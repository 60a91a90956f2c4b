from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from supermarket.connections.database import get_db_session
from supermarket.core.exceptions import InvoiceConflictError
from supermarket.dto.invoices import OrderPromotionRequest, PromotionApplied, InvoiceResponse
from supermarket.repository.invoices import InvoiceRepository
from supermarket.services.invoice_service import InvoiceService

from supermarket.logging.utils import get_app_logger
logger = get_app_logger('invoice_core')


async def create_invoice_for_order_core(order_id: int) -> str:
    """Invoice a completed order in a single transaction.

    A unique-constraint violation means another request invoiced the same
    order (or drew the same number) first; the winner's number is returned
    when there is one.
    """
    try:
        with get_db_session() as db:
            return InvoiceService(db).create_invoice_for_completed_order(order_id)
    except IntegrityError as e:
        logger.warning(f"invoice_create_integrity_error | order_id={order_id} error={e.orig}")
        with get_db_session(read_only=True) as db:
            existing = InvoiceRepository(db).get_by_order_id(order_id)
            if existing is not None:
                logger.info(f"invoice_create_resolved_concurrent | order_id={order_id} invoice_number={existing.invoice_number}")
                return existing.invoice_number
        raise InvoiceConflictError(f"Could not create invoice for order {order_id}", key=str(order_id)) from e


async def save_applied_promotions_core(
    invoice_number: str,
    order_promotions: Optional[List[OrderPromotionRequest]] = None,
    item_promotions: Optional[Dict[int, PromotionApplied]] = None,
) -> Dict:
    with get_db_session() as db:
        InvoiceService(db).save_applied_promotions(invoice_number, order_promotions, item_promotions)
    return {"success": True, "invoice_number": invoice_number}


async def get_invoice_core(invoice_number: str) -> InvoiceResponse:
    with get_db_session(read_only=True) as db:
        return InvoiceService(db).get_invoice_by_number(invoice_number)
