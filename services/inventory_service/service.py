"""
Stock ledger: on-hand quantities per inventory record.

Quantities only ever change through relational statements
(`quantity = quantity + n`), so concurrent writers touching the same row are
serialized by the database instead of racing on a value read into Python.
"""
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import atomic, paginate
from shared.errors import NotFoundError, ValidationFailed
from shared.observability.metrics import warehouse_stock_adjustments_total
from services.catalog_service.repository import ProductRepository
from .models import InventoryRecord
from .repository import InventoryRepository
from .schemas import InventoryCreate, InventoryUpdate

logger = structlog.get_logger(__name__)


class InventoryService:

    @staticmethod
    async def adjust_stock(db: AsyncSession, record_id: int, delta: int, reason: str | None = None):
        """
        Apply a signed adjustment, clamping the result at zero.

        Over-removal is absorbed silently: removing 10 from a record holding 4
        leaves 0. Returns the refreshed record.
        """
        async with atomic(db, "adjust_stock"):
            matched = await InventoryRepository.apply_clamped_delta(db, record_id, delta)
            if not matched:
                raise NotFoundError("Inventory record", record_id)

        record = await InventoryRepository.get_record(db, record_id)
        direction = "increase" if delta > 0 else "decrease" if delta < 0 else "none"
        warehouse_stock_adjustments_total.labels(direction=direction).inc()
        logger.info(
            "stock_adjusted",
            inventory_id=record_id,
            delta=delta,
            quantity=record.quantity,
            reason=reason,
        )
        return record

    @staticmethod
    async def check_low_stock(db: AsyncSession):
        return await InventoryRepository.low_stock(db)

    @staticmethod
    async def credit_product(db: AsyncSession, product_id: int, quantity: int) -> InventoryRecord:
        """
        Add `quantity` units of a product to its inventory record.

        Runs inside the caller's unit of work. When the product has no record yet,
        one is created holding exactly the credited quantity; when it has several,
        the oldest one receives the credit.
        """
        record = await InventoryRepository.first_for_product(db, product_id)
        if record is None:
            record = InventoryRecord(product_id=product_id, quantity=quantity, reorder_level=0)
            await InventoryRepository.add_record(db, record)
            logger.info("inventory_record_created", inventory_id=record.id, product_id=product_id,
                        quantity=quantity, source="fulfillment")
            return record

        await InventoryRepository.increment(db, record.id, quantity)
        return await InventoryRepository.get_record(db, record.id)

    @staticmethod
    async def create_record(db: AsyncSession, data: InventoryCreate):
        if not await ProductRepository.get_product_by_id(db, data.product_id):
            raise ValidationFailed.single("product_id", "The selected product_id is invalid.")

        record = InventoryRecord(**data.model_dump())
        async with atomic(db, "create_inventory_record"):
            await InventoryRepository.add_record(db, record)
        logger.info("inventory_record_created", inventory_id=record.id, product_id=record.product_id,
                    quantity=record.quantity, source="manual")
        return await InventoryRepository.get_record(db, record.id)

    @staticmethod
    async def get_record(db: AsyncSession, record_id: int):
        record = await InventoryRepository.get_record(db, record_id)
        if not record:
            raise NotFoundError("Inventory record", record_id)
        return record

    @staticmethod
    async def list_records(db: AsyncSession, product_id: int | None, low_stock: bool, page: int, per_page: int):
        stmt = InventoryRepository.list_statement(product_id=product_id, low_stock=low_stock)
        return await paginate(db, stmt, page, per_page)

    @staticmethod
    async def update_record(db: AsyncSession, record_id: int, data: InventoryUpdate):
        record = await InventoryService.get_record(db, record_id)
        async with atomic(db, "update_inventory_record"):
            for field, value in data.model_dump(exclude_unset=True).items():
                if field in ("quantity", "reorder_level") and value is None:
                    continue
                setattr(record, field, value)
        return await InventoryRepository.get_record(db, record_id)

    @staticmethod
    async def delete_record(db: AsyncSession, record_id: int):
        record = await InventoryService.get_record(db, record_id)
        async with atomic(db, "delete_inventory_record"):
            await InventoryRepository.delete_record(db, record)
        logger.info("inventory_record_deleted", inventory_id=record_id)
