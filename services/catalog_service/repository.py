from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_, select
from .models import Product, Supplier


class SupplierRepository:
    @staticmethod
    async def get_supplier(db: AsyncSession, supplier_id: int):
        return await db.get(Supplier, supplier_id)


class ProductRepository:

    @staticmethod
    async def add_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.flush()
        return product

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int):
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_sku(db: AsyncSession, sku: str):
        result = await db.execute(select(Product).where(Product.sku == sku))
        return result.scalars().first()

    @staticmethod
    async def existing_ids(db: AsyncSession, product_ids) -> set[int]:
        ids = set(product_ids)
        if not ids:
            return set()
        result = await db.execute(select(Product.id).where(Product.id.in_(ids)))
        return set(result.scalars().all())

    @staticmethod
    def search_statement(search: str | None = None):
        stmt = select(Product).order_by(Product.id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
        return stmt
