from pydantic import BaseModel, Field
from shared.config.database import INTEGER_MAX
from services.catalog_service.schemas import ProductResponse


class InventoryCreate(BaseModel):
    product_id: int
    quantity: int = Field(ge=0, le=INTEGER_MAX)
    location: str | None = Field(default=None, max_length=255)
    reorder_level: int = Field(default=0, ge=0, le=INTEGER_MAX)


class InventoryUpdate(BaseModel):
    quantity: int | None = Field(default=None, ge=0, le=INTEGER_MAX)
    location: str | None = Field(default=None, max_length=255)
    reorder_level: int | None = Field(default=None, ge=0, le=INTEGER_MAX)


class StockAdjust(BaseModel):
    quantity: int = Field(ge=-INTEGER_MAX - 1, le=INTEGER_MAX) # signed: positive adds stock, negative removes it
    reason: str | None = Field(default=None, max_length=255)


class InventoryResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    reorder_level: int
    location: str | None = None
    is_low_stock: bool
    product: ProductResponse | None = None

    class Config:
        from_attributes = True
