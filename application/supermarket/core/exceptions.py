"""
Domain errors raised by the invoicing services.

Every error carries a stable ``code`` and the key that identifies the
offending record so callers can translate the message and operators can
find the row.
"""
from typing import Optional


class InvoicingError(Exception):
    code = "INVOICING_ERROR"
    status_code = 400

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.key = key

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code, "key": self.key}


class OrderNotFoundError(InvoicingError):
    code = "ORDER_NOT_FOUND"
    status_code = 404

    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found", key=str(order_id))
        self.order_id = order_id


class InvoiceNotFoundError(InvoicingError):
    code = "INVOICE_NOT_FOUND"
    status_code = 404

    def __init__(self, invoice_number: str):
        super().__init__(f"Invoice {invoice_number} not found", key=invoice_number)
        self.invoice_number = invoice_number


class InvalidOrderStateError(InvoicingError):
    code = "ORDER_NOT_COMPLETED"
    status_code = 409

    def __init__(self, order_id, status: str):
        super().__init__(
            f"Order {order_id} is not in completed state (status={status})",
            key=str(order_id),
        )
        self.order_id = order_id
        self.status = status


class WarehouseNotFoundError(InvoicingError):
    code = "WAREHOUSE_NOT_FOUND"
    status_code = 422

    def __init__(self, product_unit_id):
        super().__init__(f"No stock record for product unit {product_unit_id}", key=str(product_unit_id))
        self.product_unit_id = product_unit_id


class InsufficientStockError(InvoicingError):
    code = "INSUFFICIENT_STOCK"
    status_code = 422

    def __init__(self, product_unit_id, required_quantity: int, available_quantity: int):
        super().__init__(
            f"Insufficient stock for product unit {product_unit_id}: "
            f"required={required_quantity} available={available_quantity}",
            key=str(product_unit_id),
        )
        self.product_unit_id = product_unit_id
        self.required_quantity = required_quantity
        self.available_quantity = available_quantity


class InvoiceConflictError(InvoicingError):
    code = "INVOICE_CONFLICT"
    status_code = 409


class InvoiceNumberExhaustedError(InvoiceConflictError):
    def __init__(self, attempts: int):
        super().__init__(f"Could not allocate a unique invoice number after {attempts} attempts")
        self.attempts = attempts
