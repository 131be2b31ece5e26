from decimal import Decimal
from pydantic import BaseModel, Field


class SupplierResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    contact_person: str | None = None

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    sku: str = Field(min_length=1, max_length=100)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    supplier_id: int | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    sku: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    supplier_id: int | None = None


class ProductResponse(BaseModel):
    id: int
    name: str
    sku: str
    description: str | None = None
    price: Decimal
    supplier_id: int | None = None

    class Config:
        from_attributes = True
