import pytest

from shared.errors import NotFoundError, TransactionFailed, ValidationFailed
from services.inventory_service.models import InventoryRecord
from services.inventory_service.schemas import InventoryCreate, InventoryUpdate
from services.inventory_service.service import InventoryService


async def test_adjust_adds_and_removes_stock(db, catalog, add_inventory):
    record_id = await add_inventory(catalog["a"].id, quantity=10)

    record = await InventoryService.adjust_stock(db, record_id, 5, reason="cycle count")
    assert record.quantity == 15

    record = await InventoryService.adjust_stock(db, record_id, -7)
    assert record.quantity == 8


async def test_adjust_clamps_over_removal_to_zero(db, catalog, add_inventory):
    record_id = await add_inventory(catalog["a"].id, quantity=4)

    record = await InventoryService.adjust_stock(db, record_id, -10, reason="damaged")

    assert record.quantity == 0


async def test_adjust_persists_the_new_quantity(db, session_factory, catalog, add_inventory):
    record_id = await add_inventory(catalog["a"].id, quantity=3)

    await InventoryService.adjust_stock(db, record_id, 2)

    async with session_factory() as other:
        assert (await other.get(InventoryRecord, record_id)).quantity == 5


async def test_adjust_unknown_record_is_not_found_and_writes_nothing(db, catalog, add_inventory, inventory_quantities):
    await add_inventory(catalog["a"].id, quantity=3)

    with pytest.raises(NotFoundError):
        await InventoryService.adjust_stock(db, 9999, 5)

    assert await inventory_quantities() == {catalog["a"].id: 3}


async def test_check_low_stock_returns_exactly_records_at_or_below_reorder_level(db, catalog, add_inventory):
    below = await add_inventory(catalog["a"].id, quantity=2, reorder_level=5, location="Aisle 1")
    at = await add_inventory(catalog["a"].id, quantity=5, reorder_level=5, location="Aisle 2")
    above = await add_inventory(catalog["b"].id, quantity=6, reorder_level=5)
    empty_no_threshold = await add_inventory(catalog["b"].id, quantity=0, reorder_level=0)

    records = await InventoryService.check_low_stock(db)

    assert {r.id for r in records} == {below, at, empty_no_threshold}
    assert above not in {r.id for r in records}
    assert all(r.product is not None for r in records)
    assert all(r.is_low_stock for r in records)


async def test_credit_product_creates_missing_record_with_credited_quantity(db, catalog, inventory_quantities):
    async with db.begin():
        record = await InventoryService.credit_product(db, catalog["b"].id, 7)

    assert record.product_id == catalog["b"].id
    assert await inventory_quantities() == {catalog["b"].id: 7}


async def test_credit_product_increments_oldest_record(db, session_factory, catalog, add_inventory):
    first = await add_inventory(catalog["a"].id, quantity=1, location="Dock")
    second = await add_inventory(catalog["a"].id, quantity=1, location="Shelf")

    async with db.begin():
        record = await InventoryService.credit_product(db, catalog["a"].id, 4)

    # the returned record reflects the increment, not the row as it was read
    assert record.id == first
    assert record.quantity == 5
    async with session_factory() as other:
        assert (await other.get(InventoryRecord, first)).quantity == 5
        assert (await other.get(InventoryRecord, second)).quantity == 1


async def test_adjust_beyond_integer_range_fails_the_transaction(db, catalog, add_inventory, inventory_quantities):
    record_id = await add_inventory(catalog["a"].id, quantity=3)

    with pytest.raises(TransactionFailed):
        await InventoryService.adjust_stock(db, record_id, 10**20)

    assert await inventory_quantities() == {catalog["a"].id: 3}


async def test_create_record_rejects_unknown_product(db, count_rows):
    with pytest.raises(ValidationFailed) as exc_info:
        await InventoryService.create_record(db, InventoryCreate(product_id=12345, quantity=1))

    assert "product_id" in exc_info.value.errors
    assert await count_rows(InventoryRecord) == 0


async def test_update_record_changes_only_sent_fields(db, catalog, add_inventory):
    record_id = await add_inventory(catalog["a"].id, quantity=9, reorder_level=2, location="Bay 4")

    record = await InventoryService.update_record(db, record_id, InventoryUpdate(reorder_level=10))

    assert record.reorder_level == 10
    assert record.quantity == 9
    assert record.location == "Bay 4"
    assert record.is_low_stock


async def test_delete_record(db, catalog, add_inventory, count_rows):
    record_id = await add_inventory(catalog["a"].id, quantity=1)

    await InventoryService.delete_record(db, record_id)

    assert await count_rows(InventoryRecord) == 0
    with pytest.raises(NotFoundError):
        await InventoryService.get_record(db, record_id)
