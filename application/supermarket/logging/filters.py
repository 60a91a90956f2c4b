"""
Basic Logging Filters for supermarket invoicing
"""
import logging
from supermarket.middlewares.request_context import request_context


class RequestContextFilter(logging.Filter):
    def filter(self, record):
        record.request_id = getattr(request_context, 'request_id', None) or ''
        record.request_method = getattr(request_context, 'request_method', None) or ''
        record.request_path = getattr(request_context, 'request_path', None) or ''
        record.employee_id = getattr(request_context, 'employee_id', None) or ''
        return True


class BusinessContextFilter(logging.Filter):
    def filter(self, record):
        record.order_id = getattr(request_context, 'order_id', None) or ''
        record.invoice_number = getattr(request_context, 'invoice_number', None) or ''
        return True
