from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field

from shared.config.database import INTEGER_MAX
from services.catalog_service.schemas import ProductResponse, SupplierResponse
from .models import OrderStatus


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(ge=1, le=INTEGER_MAX)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2) # unit price snapshot


class OrderCreate(BaseModel):
    supplier_id: int
    order_number: str | None = Field(default=None, min_length=1, max_length=50)
    items: list[OrderItemCreate] = Field(min_length=1)
    notes: str | None = None


class OrderUpdate(BaseModel):
    status: OrderStatus | None = None
    notes: str | None = None


class OrderFilters(BaseModel):
    status: OrderStatus | None = None
    date_from: date | None = None
    date_to: date | None = None


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal
    total: Decimal
    product: ProductResponse | None = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    supplier_id: int
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    notes: str | None = None
    fulfilled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse] = []
    supplier: SupplierResponse | None = None

    class Config:
        from_attributes = True
