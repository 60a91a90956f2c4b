"""
Core constants for the supermarket invoicing service

Order/invoice status codes as stored in the database, Vietnamese
display labels for invoices and discounts, and the invoice numbering format.
"""

class OrderStatus:
    """Order status constants for lifecycle management"""

    UNPAID = "UNPAID"
    PENDING = "PENDING"
    PREPARED = "PREPARED"
    SHIPPING = "SHIPPING"
    DELIVERED = "DELIVERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class InvoiceStatus:
    """Sale invoice payment status"""

    UNPAID = "UNPAID"
    PAID = "PAID"
    RETURNED = "RETURNED"

    LABELS = {
        UNPAID: "Chưa thanh toán",
        PAID: "Đã thanh toán",
        RETURNED: "Đã trả hàng",
    }

    @classmethod
    def label(cls, status: str) -> str:
        return cls.LABELS.get(status, status)


class DiscountType:
    """Discount kinds carried by applied promotions"""

    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    FREE = "FREE"

    LABELS = {
        PERCENTAGE: "Giảm theo phần trăm",
        FIXED_AMOUNT: "Giảm số tiền cố định",
        FREE: "Tặng miễn phí",
        # checkout sends lowercase "percentage" and "fixed"
        "FIXED": "Giảm số tiền cố định",
    }

    @classmethod
    def label(cls, discount_type: str) -> str:
        """Display label; unknown types come back unchanged."""
        return cls.LABELS.get(discount_type.upper(), discount_type)


class WarehouseTransactionType:
    """Stock movement kinds recorded in warehouse_transactions"""

    STOCK_IN = "STOCK_IN"
    SALE = "SALE"
    RETURN = "RETURN"
    ADJUSTMENT = "ADJUSTMENT"


class InvoiceConstants:
    """Invoice numbering and stock-out reference text"""

    NUMBER_PREFIX = "INV"
    TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
    SUFFIX_DIGITS = 4
    NUMBER_PATTERN = r"^INV\d{18}$"

    STOCK_OUT_REASON = "Bán hàng - Invoice: {invoice_number}"

    @classmethod
    def stock_out_reason(cls, invoice_number: str) -> str:
        return cls.STOCK_OUT_REASON.format(invoice_number=invoice_number)
