from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import atomic, paginate
from shared.errors import NotFoundError, ValidationFailed
from .models import Product
from .repository import ProductRepository, SupplierRepository
from .schemas import ProductCreate, ProductUpdate

REQUIRED_PRODUCT_FIELDS = ("name", "sku", "price")


class ProductService:

    @staticmethod
    async def _validate(db: AsyncSession, sku: str | None, supplier_id: int | None, product_id: int | None = None):
        errors = {}
        if sku is not None:
            existing = await ProductRepository.get_by_sku(db, sku)
            if existing and existing.id != product_id:
                errors["sku"] = ["The sku has already been taken."]
        if supplier_id is not None and not await SupplierRepository.get_supplier(db, supplier_id):
            errors["supplier_id"] = ["The selected supplier_id is invalid."]
        if errors:
            raise ValidationFailed(errors)

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate):
        await ProductService._validate(db, data.sku, data.supplier_id)
        product = Product(**data.model_dump())
        async with atomic(db, "create_product"):
            await ProductRepository.add_product(db, product)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, search: str | None, page: int, per_page: int):
        return await paginate(db, ProductRepository.search_statement(search), page, per_page)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate):
        product = await ProductService.get_product_by_id(db, product_id)
        changes = data.model_dump(exclude_unset=True)
        # null on a required column means "leave as is"; description and supplier_id may be cleared
        changes = {
            field: value for field, value in changes.items()
            if value is not None or field not in REQUIRED_PRODUCT_FIELDS
        }
        await ProductService._validate(db, changes.get("sku"), changes.get("supplier_id"), product_id)
        async with atomic(db, "update_product"):
            for field, value in changes.items():
                setattr(product, field, value)
        return product
