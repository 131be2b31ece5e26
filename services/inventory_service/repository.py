from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import case, select, update
from .models import InventoryRecord


class InventoryRepository:

    @staticmethod
    async def add_record(db: AsyncSession, record: InventoryRecord):
        db.add(record)
        await db.flush()
        return record

    @staticmethod
    async def get_record(db: AsyncSession, record_id: int):
        result = await db.execute(
            select(InventoryRecord)
            .where(InventoryRecord.id == record_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def first_for_product(db: AsyncSession, product_id: int):
        result = await db.execute(
            select(InventoryRecord)
            .where(InventoryRecord.product_id == product_id)
            .order_by(InventoryRecord.id)
            .limit(1)
        )
        return result.scalars().first()

    @staticmethod
    async def apply_clamped_delta(db: AsyncSession, record_id: int, delta: int) -> int:
        """Single-statement `quantity = max(0, quantity + delta)`. Returns matched row count."""
        new_quantity = case(
            (InventoryRecord.quantity + delta < 0, 0),
            else_=InventoryRecord.quantity + delta,
        )
        result = await db.execute(
            update(InventoryRecord)
            .where(InventoryRecord.id == record_id)
            .values(quantity=new_quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    async def increment(db: AsyncSession, record_id: int, quantity: int) -> int:
        result = await db.execute(
            update(InventoryRecord)
            .where(InventoryRecord.id == record_id)
            .values(quantity=InventoryRecord.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    async def low_stock(db: AsyncSession):
        result = await db.execute(
            select(InventoryRecord)
            .where(InventoryRecord.quantity <= InventoryRecord.reorder_level)
            .order_by(InventoryRecord.id)
        )
        return result.scalars().all()

    @staticmethod
    def list_statement(product_id: int | None = None, low_stock: bool = False):
        stmt = select(InventoryRecord).order_by(InventoryRecord.id)
        if product_id is not None:
            stmt = stmt.where(InventoryRecord.product_id == product_id)
        if low_stock:
            stmt = stmt.where(InventoryRecord.quantity <= InventoryRecord.reorder_level)
        return stmt

    @staticmethod
    async def delete_record(db: AsyncSession, record: InventoryRecord):
        await db.delete(record)
        await db.flush()
