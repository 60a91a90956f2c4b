"""
Invoice generation and promotion recording.

``InvoiceService`` turns a completed order into a sale invoice (header and
one detail per order line), takes the sold quantities out of stock and
bumps promotion usage counters. It then records which promotions were
applied to the invoice. It never commits: the caller owns the transaction,
so any failure leaves no trace of the invoice or the stock movements.
"""
import json
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from supermarket.core.constants import OrderStatus, InvoiceStatus, InvoiceConstants
from supermarket.core.exceptions import OrderNotFoundError, InvalidOrderStateError, InvoiceNotFoundError
from supermarket.dto.invoices import OrderPromotionRequest, PromotionApplied, InvoiceResponse
from supermarket.models.orders import Order
from supermarket.models.invoices import (
    SaleInvoiceHeader,
    SaleInvoiceDetail,
    AppliedOrderPromotion,
    AppliedPromotion,
)
from supermarket.repository.orders import OrderRepository
from supermarket.repository.invoices import InvoiceRepository
from supermarket.repository.promotions import PromotionDetailRepository
from supermarket.services.warehouse_service import WarehouseService
from supermarket.utils.invoice_number import InvoiceNumberGenerator
from supermarket.utils.datetime_helpers import get_store_now

# Request context
from supermarket.middlewares.request_context import request_context

# Logger
from supermarket.logging.utils import get_app_logger
logger = get_app_logger(__name__)

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(value).quantize(CENTS)


class InvoiceService:
    def __init__(
        self,
        db: Session,
        warehouse_service: Optional[WarehouseService] = None,
        number_generator: Optional[InvoiceNumberGenerator] = None,
    ):
        self.db = db
        self.orders = OrderRepository(db)
        self.invoices = InvoiceRepository(db)
        self.promotion_details = PromotionDetailRepository(db)
        self.warehouse_service = warehouse_service or WarehouseService(db)
        self.number_generator = number_generator or InvoiceNumberGenerator()
        request_context.module_name = 'invoice_service'

    def create_invoice_for_completed_order(self, order_id: int) -> str:
        """Create the invoice for a completed order and return its number.

        Calling it again for an order that already has an invoice returns the
        existing number without touching stock.

        Raises:
            OrderNotFoundError: no such order
            InvalidOrderStateError: order status is not COMPLETED
            WarehouseNotFoundError, InsufficientStockError: stock-out failed
            InvoiceNumberExhaustedError: no free invoice number was found
        """
        request_context.order_id = str(order_id)
        logger.info(f"invoice_create_initiated | order_id={order_id}")

        order = self.orders.get_order_with_details(order_id)
        if order is None:
            logger.error(f"invoice_create_order_not_found | order_id={order_id}")
            raise OrderNotFoundError(order_id)

        if order.status != OrderStatus.COMPLETED:
            logger.error(f"invoice_create_invalid_status | order_id={order_id} status={order.status}")
            raise InvalidOrderStateError(order_id, order.status)

        existing = self.invoices.get_by_order_id(order_id)
        if existing is not None:
            logger.warning(f"invoice_already_exists | order_id={order_id} invoice_number={existing.invoice_number}")
            request_context.invoice_number = existing.invoice_number
            return existing.invoice_number

        invoice_number = self.number_generator.generate_unique(self.invoices.invoice_number_exists)
        request_context.invoice_number = invoice_number

        reason = InvoiceConstants.stock_out_reason(invoice_number)
        for line in order.details:
            self.warehouse_service.stock_out(line.product_unit_id, line.quantity, invoice_number, reason)

        header = self._build_header(order, invoice_number)
        self.invoices.add_header(header)

        for line in order.details:
            unit_price = _money(line.price_at_purchase)
            discount = _money(line.discount)
            line_total = (unit_price * line.quantity - discount).quantize(CENTS)
            self.invoices.add_detail(SaleInvoiceDetail(
                invoice_id=header.invoice_id,
                product_unit_id=line.product_unit_id,
                quantity=line.quantity,
                unit_price=unit_price,
                discount_amount=discount,
                line_total=line_total,
                tax_amount=ZERO,
                line_total_with_tax=line_total,
            ))
        self.invoices.flush()

        self._update_promotion_usage(order)

        logger.info(f"invoice_created | order_id={order_id} invoice_number={invoice_number} lines={len(order.details)} total_amount={header.total_amount}")
        return invoice_number

    def _build_header(self, order: Order, invoice_number: str) -> SaleInvoiceHeader:
        total_amount = _money(order.total_amount)
        return SaleInvoiceHeader(
            invoice_number=invoice_number,
            invoice_date=get_store_now(),
            order_id=order.order_id,
            customer_id=order.customer_id,
            employee_id=order.employee_id,
            subtotal=_money(order.subtotal),
            total_discount=sum((_money(line.discount) for line in order.details), ZERO),
            total_tax=ZERO,
            total_amount=total_amount,
            paid_amount=total_amount,
            status=InvoiceStatus.PAID,
        )

    def _update_promotion_usage(self, order: Order) -> None:
        """One use per distinct promotion detail referenced by the order."""
        detail_ids: Set[int] = {
            line.promotion_detail_id for line in order.details if line.promotion_detail_id is not None
        }
        detail_ids.update(self._order_promotion_detail_ids(order))
        updated = self.promotion_details.increment_usage_counts(detail_ids)
        logger.info(f"promotion_usage_done | order_id={order.order_id} detail_ids={len(detail_ids)} updated={updated}")

    def _order_promotion_detail_ids(self, order: Order) -> Iterable[int]:
        raw = order.applied_order_promotions_json
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError as e:
            logger.error(f"order_promotions_json_invalid | order_id={order.order_id} error={e}", exc_info=True)
            return []
        if not isinstance(entries, list):
            logger.error(f"order_promotions_json_invalid | order_id={order.order_id} error=expected a list")
            return []

        ids = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            detail_id = entry.get("promotionDetailId", entry.get("promotion_detail_id"))
            if detail_id is None:
                continue
            try:
                ids.append(int(detail_id))
            except (TypeError, ValueError):
                logger.warning(f"order_promotion_detail_id_invalid | order_id={order.order_id} value={detail_id}")
        return ids

    def save_applied_promotions(
        self,
        invoice_number: str,
        order_promotions: Optional[List[OrderPromotionRequest]] = None,
        item_promotions_by_index: Optional[Dict[int, PromotionApplied]] = None,
    ) -> None:
        """Record order-level and item-level promotions against an invoice.

        Item promotions are matched to invoice lines by zero-based position in
        creation order. Positions with no line are skipped.

        Raises:
            InvoiceNotFoundError: no invoice with that number
        """
        request_context.invoice_number = invoice_number
        header = self.invoices.get_by_invoice_number(invoice_number)
        if header is None:
            logger.error(f"save_promotions_invoice_not_found | invoice_number={invoice_number}")
            raise InvoiceNotFoundError(invoice_number)

        order_promotions = order_promotions or []
        for promo in order_promotions:
            self.invoices.add_order_promotion(AppliedOrderPromotion(
                invoice_id=header.invoice_id,
                promotion_id=promo.promotion_id,
                promotion_name=promo.promotion_name,
                promotion_detail_id=promo.promotion_detail_id,
                promotion_summary=promo.promotion_summary,
                discount_type=promo.discount_type,
                discount_value=promo.discount_value,
            ))

        saved_items = 0
        if item_promotions_by_index:
            details = self.invoices.get_details_ordered(header.invoice_id)
            for index, promo in sorted(item_promotions_by_index.items()):
                if promo is None:
                    continue
                if index < 0 or index >= len(details):
                    logger.debug(f"item_promotion_index_skipped | invoice_number={invoice_number} index={index} lines={len(details)}")
                    continue
                self.invoices.add_item_promotion(AppliedPromotion(
                    invoice_detail_id=details[index].invoice_detail_id,
                    promotion_id=promo.promotion_id,
                    promotion_name=promo.promotion_name,
                    promotion_line_id=promo.promotion_line_id,
                    promotion_detail_id=promo.promotion_detail_id,
                    promotion_summary=promo.promotion_summary,
                    discount_type=promo.discount_type,
                    discount_value=promo.discount_value,
                    source_line_item_id=promo.source_line_item_id,
                ))
                saved_items += 1

        self.invoices.flush()
        logger.info(f"promotions_saved | invoice_number={invoice_number} order_promotions={len(order_promotions)} item_promotions={saved_items}")

    def get_invoice_by_number(self, invoice_number: str) -> InvoiceResponse:
        header = self.invoices.get_by_invoice_number(invoice_number, with_lines=True)
        if header is None:
            logger.error(f"invoice_not_found | invoice_number={invoice_number}")
            raise InvoiceNotFoundError(invoice_number)
        return InvoiceResponse.from_header(header)
