from fastapi import APIRouter, Path, status

from supermarket.core.invoices import (
    create_invoice_for_order_core,
    save_applied_promotions_core,
    get_invoice_core,
)
from supermarket.dto.invoices import InvoiceCreatedResponse, InvoiceResponse, SaveAppliedPromotionsRequest
from supermarket.middlewares.request_context import request_context
from supermarket.logging.utils import get_app_logger

logger = get_app_logger('api_invoices')

api_router = APIRouter(prefix="/invoices", tags=["invoices"])


@api_router.post("/orders/{order_id}", response_model=InvoiceCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice_for_order(order_id: int = Path(..., gt=0, description="Completed order to invoice")):
    """Create the invoice for a completed order. Repeated calls return the same invoice number."""
    request_context.module_name = 'api_invoices'
    invoice_number = await create_invoice_for_order_core(order_id)
    return InvoiceCreatedResponse(invoice_number=invoice_number, order_id=order_id)


@api_router.post("/{invoice_number}/promotions")
async def save_applied_promotions(payload: SaveAppliedPromotionsRequest, invoice_number: str = Path(..., max_length=32)):
    request_context.module_name = 'api_invoices'
    return await save_applied_promotions_core(invoice_number, payload.order_promotions, payload.item_promotions)


@api_router.get("/{invoice_number}", response_model=InvoiceResponse)
async def get_invoice(invoice_number: str = Path(..., max_length=32)):
    request_context.module_name = 'api_invoices'
    return await get_invoice_core(invoice_number)
