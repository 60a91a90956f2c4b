from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from supermarket.core.constants import DiscountType, InvoiceStatus


class _CamelModel(BaseModel):
    # checkout clients send camelCase; python callers use field names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderPromotionRequest(_CamelModel):
    promotion_id: str = Field(..., min_length=1, max_length=64, description="Promotion code/identifier")
    promotion_name: str = Field(..., min_length=1, max_length=255)
    promotion_detail_id: int = Field(..., description="Promotion detail that was applied")
    promotion_summary: Optional[str] = Field(None, max_length=1024)
    discount_type: str = Field(..., min_length=1, max_length=32, description="Stored as sent, e.g. PERCENTAGE or percentage")
    discount_value: Decimal = Field(..., max_digits=12, decimal_places=2)


class PromotionApplied(_CamelModel):
    promotion_id: str = Field(..., min_length=1, max_length=64)
    promotion_name: str = Field(..., min_length=1, max_length=255)
    promotion_detail_id: Optional[int] = None
    promotion_line_id: Optional[int] = None
    promotion_summary: Optional[str] = Field(None, max_length=1024)
    discount_type: str = Field(..., min_length=1, max_length=32)
    discount_value: Decimal = Field(..., max_digits=12, decimal_places=2)
    source_line_item_id: Optional[int] = Field(None, description="Cart line the promotion originated from")


class SaveAppliedPromotionsRequest(_CamelModel):
    order_promotions: List[OrderPromotionRequest] = Field(default_factory=list)
    item_promotions: Dict[int, PromotionApplied] = Field(
        default_factory=dict,
        description="Item-level promotions keyed by zero-based invoice line index",
    )


class InvoiceCreatedResponse(BaseModel):
    success: bool = True
    invoice_number: str
    order_id: int


class AppliedPromotionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    promotion_id: Optional[str] = None
    promotion_name: Optional[str] = None
    promotion_detail_id: Optional[int] = None
    promotion_line_id: Optional[int] = None
    promotion_summary: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    source_line_item_id: Optional[int] = None
    discount_type_label: Optional[str] = None

    @model_validator(mode="after")
    def fill_discount_type_label(self):
        if self.discount_type and self.discount_type_label is None:
            self.discount_type_label = DiscountType.label(self.discount_type)
        return self


class InvoiceDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_detail_id: int
    product_unit_id: int
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    line_total: Decimal
    tax_amount: Decimal
    line_total_with_tax: Decimal
    applied_promotion: Optional[AppliedPromotionResponse] = None


class InvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    invoice_id: int
    invoice_number: str
    invoice_date: datetime
    order_id: int
    customer_id: Optional[int] = None
    employee_id: Optional[int] = None
    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    status: str
    status_label: Optional[str] = None
    details: List[InvoiceDetailResponse] = Field(default_factory=list)
    order_promotions: List[AppliedPromotionResponse] = Field(default_factory=list)

    @classmethod
    def from_header(cls, header) -> "InvoiceResponse":
        response = cls.model_validate(header)
        response.status_label = InvoiceStatus.label(header.status)
        return response
