"""
Order engine: purchase-order creation, status changes and fulfillment.

Every operation validates its input first and then performs all of its writes
inside one `atomic()` block, so a failure at any step leaves no partial order,
item, counter bump or inventory credit behind.
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import atomic, paginate
from shared.errors import NotFoundError, TransactionFailed, ValidationFailed
from shared.observability.metrics import (
    warehouse_inventory_credited_units_total,
    warehouse_order_fulfillments_total,
    warehouse_orders_created_total,
)
from services.catalog_service.repository import ProductRepository, SupplierRepository
from services.inventory_service.service import InventoryService
from .models import ALLOWED_TRANSITIONS, Order, OrderItem, OrderStatus
from .repository import OrderRepository
from .schemas import OrderCreate, OrderFilters, OrderUpdate

logger = structlog.get_logger(__name__)

ORDER_NUMBER_SEQUENCE = "order_number"


class OrderService:

    @staticmethod
    async def _validate_new_order(db: AsyncSession, data: OrderCreate):
        errors = {}
        if not await SupplierRepository.get_supplier(db, data.supplier_id):
            errors["supplier_id"] = ["The selected supplier_id is invalid."]

        if not data.items:
            errors["items"] = ["The items field must have at least 1 items."]
        else:
            known = await ProductRepository.existing_ids(db, (i.product_id for i in data.items))
            for index, item in enumerate(data.items):
                if item.product_id not in known:
                    errors[f"items.{index}.product_id"] = ["The selected product_id is invalid."]
                if item.quantity < 1:
                    errors[f"items.{index}.quantity"] = ["The quantity must be at least 1."]
                if item.price < 0:
                    errors[f"items.{index}.price"] = ["The price must be at least 0."]

        if data.order_number and await OrderRepository.order_number_exists(db, data.order_number):
            errors["order_number"] = ["The order_number has already been taken."]

        if errors:
            raise ValidationFailed(errors)

    @staticmethod
    async def generate_order_number(db: AsyncSession, today: date | None = None) -> str:
        """
        ORD-YYYYMMDD-NNNN, NNNN taken from the order-number counter.

        Must run inside the creating transaction so the counter bump commits or
        rolls back together with the order. Numbers already taken by explicitly
        supplied order numbers are skipped.
        """
        today = today or datetime.now(timezone.utc).date()
        while True:
            seq = await OrderRepository.next_sequence_value(db, ORDER_NUMBER_SEQUENCE)
            order_number = f"ORD-{today:%Y%m%d}-{seq:04d}"
            if not await OrderRepository.order_number_exists(db, order_number):
                return order_number

    @staticmethod
    async def create_order(db: AsyncSession, data: OrderCreate):
        await OrderService._validate_new_order(db, data)

        async with atomic(db, "create_order"):
            order_number = data.order_number or await OrderService.generate_order_number(db)
            order = Order(
                supplier_id=data.supplier_id,
                order_number=order_number,
                status=OrderStatus.PENDING.value,
                total_amount=Decimal("0"),
                notes=data.notes,
            )
            await OrderRepository.add_order(db, order)

            total_amount = Decimal("0")
            for item in data.items:
                order_item = OrderItem(
                    order_id=order.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                )
                await OrderRepository.add_item(db, order_item)
                total_amount += order_item.total

            await OrderRepository.set_total(db, order.id, total_amount)

        warehouse_orders_created_total.inc()
        logger.info(
            "order_created",
            order_id=order.id,
            order_number=order_number,
            supplier_id=data.supplier_id,
            items=len(data.items),
            total_amount=str(total_amount),
        )
        return await OrderRepository.get_order(db, order.id)

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int):
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    @staticmethod
    async def list_orders(db: AsyncSession, filters: OrderFilters, page: int, per_page: int):
        stmt = OrderRepository.list_statement(
            status=filters.status.value if filters.status else None,
            date_from=filters.date_from,
            date_to=filters.date_to,
        )
        return await paginate(db, stmt, page, per_page)

    @staticmethod
    async def fulfill_order(db: AsyncSession, order_id: int):
        """
        Credit every item's quantity into inventory and mark the order completed.

        The order is claimed first by stamping fulfilled_at where it is still
        empty and the order is not cancelled; a second call finds nothing to
        claim and returns the order untouched, so inventory is credited at most
        once per order.
        """
        order = await OrderService.get_order(db, order_id)
        if order.status == OrderStatus.CANCELLED.value:
            raise ValidationFailed.single("status", "A cancelled order cannot be fulfilled.")

        credited_units = 0
        async with atomic(db, "fulfill_order"):
            claimed = await OrderRepository.claim_fulfillment(db, order_id, datetime.now(timezone.utc))
            if claimed:
                for item in order.items:
                    await InventoryService.credit_product(db, item.product_id, item.quantity)
                    credited_units += item.quantity
                await OrderRepository.set_status(db, order_id, OrderStatus.COMPLETED.value)
            elif await OrderRepository.current_status(db, order_id) == OrderStatus.CANCELLED.value:
                # cancelled between the read above and the claim
                raise ValidationFailed.single("status", "A cancelled order cannot be fulfilled.")

        if not claimed:
            warehouse_order_fulfillments_total.labels(outcome="already_fulfilled").inc()
            logger.warning("order_fulfillment_skipped", order_id=order_id, reason="already_fulfilled")
        else:
            warehouse_order_fulfillments_total.labels(outcome="fulfilled").inc()
            warehouse_inventory_credited_units_total.inc(credited_units)
            logger.info("order_fulfilled", order_id=order_id, items=len(order.items), units=credited_units)
        return await OrderRepository.get_order(db, order_id)

    @staticmethod
    async def update_order(db: AsyncSession, order_id: int, data: OrderUpdate):
        """
        Plain field update; moving to completed triggers fulfillment afterwards.

        The field update commits on its own first. The status write only applies
        while the order still has the status the transition was checked against;
        otherwise the whole update is refused as a conflict. Fulfillment then
        runs as a separate unit of work that flips the status and credits
        inventory.
        """
        order = await OrderService.get_order(db, order_id)
        changes = data.model_dump(exclude_unset=True)
        requested = changes.pop("status", None)
        current = OrderStatus(order.status)

        if requested is not None:
            if requested != current and requested not in ALLOWED_TRANSITIONS[current]:
                raise ValidationFailed.single(
                    "status", f"Cannot change status from {current.value} to {requested.value}."
                )

        async with atomic(db, "update_order"):
            # completed is written by fulfillment, together with the inventory credit
            if requested is not None and requested not in (current, OrderStatus.COMPLETED):
                moved = await OrderRepository.transition_status(db, order_id, current.value, requested.value)
                if not moved:
                    raise TransactionFailed(
                        f"Order {order_id} changed status while being updated; reload and retry."
                    )
            if "notes" in changes:
                order.notes = changes["notes"]

        logger.info("order_updated", order_id=order_id, old_status=current.value,
                    requested_status=requested.value if requested else None)

        if requested == OrderStatus.COMPLETED:
            return await OrderService.fulfill_order(db, order_id)
        return await OrderRepository.get_order(db, order_id)

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int):
        order = await OrderService.get_order(db, order_id)
        async with atomic(db, "delete_order"):
            await OrderRepository.delete_order(db, order)
        logger.info("order_deleted", order_id=order_id, order_number=order.order_number)
