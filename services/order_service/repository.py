from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, update
from .models import Order, OrderItem, OrderStatus, SequenceCounter


class OrderRepository:
    @staticmethod
    async def add_order(db: AsyncSession, order: Order):
        db.add(order)
        await db.flush()
        return order

    @staticmethod
    async def add_item(db: AsyncSession, item: OrderItem):
        db.add(item)
        await db.flush()
        return item

    @staticmethod
    async def set_total(db: AsyncSession, order_id: int, total_amount):
        await db.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(total_amount=total_amount)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        result = await db.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def count_orders(db: AsyncSession) -> int:
        return await db.scalar(select(func.count(Order.id))) or 0

    @staticmethod
    async def order_number_exists(db: AsyncSession, order_number: str) -> bool:
        result = await db.execute(select(Order.id).where(Order.order_number == order_number))
        return result.first() is not None

    @staticmethod
    async def next_sequence_value(db: AsyncSession, name: str) -> int:
        """
        Bump a named counter and return its new value.

        The UPDATE takes the row lock, so concurrent creators queue behind each
        other until the surrounding transaction ends. The first call for a name
        seeds the counter from the number of existing orders.
        """
        result = await db.execute(
            update(SequenceCounter)
            .where(SequenceCounter.name == name)
            .values(value=SequenceCounter.value + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return await db.scalar(select(SequenceCounter.value).where(SequenceCounter.name == name))

        value = await OrderRepository.count_orders(db) + 1
        db.add(SequenceCounter(name=name, value=value))
        await db.flush()
        return value

    @staticmethod
    async def claim_fulfillment(db: AsyncSession, order_id: int, fulfilled_at: datetime) -> bool:
        """
        Check-and-set on fulfilled_at. False means the order was already
        fulfilled, or has been cancelled since it was read.
        """
        result = await db.execute(
            update(Order)
            .where(
                Order.id == order_id,
                Order.fulfilled_at.is_(None),
                Order.status != OrderStatus.CANCELLED.value,
            )
            .values(fulfilled_at=fulfilled_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def set_status(db: AsyncSession, order_id: int, status: str):
        await db.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def transition_status(db: AsyncSession, order_id: int, expected: str, status: str) -> bool:
        """Move the order to `status` only while it is still in `expected` and unfulfilled."""
        result = await db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == expected, Order.fulfilled_at.is_(None))
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    async def current_status(db: AsyncSession, order_id: int) -> str | None:
        return await db.scalar(select(Order.status).where(Order.id == order_id))

    @staticmethod
    def list_statement(status: str | None = None, date_from=None, date_to=None):
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if status:
            stmt = stmt.where(Order.status == status)
        if date_from:
            stmt = stmt.where(func.date(Order.created_at) >= date_from)
        if date_to:
            stmt = stmt.where(func.date(Order.created_at) <= date_to)
        return stmt

    @staticmethod
    async def delete_order(db: AsyncSession, order: Order):
        await db.delete(order)
        await db.flush()
