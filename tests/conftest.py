"""
Shared fixtures: a throwaway SQLite database per test, a session on it, and an
HTTP client bound to the FastAPI app with `get_db` pointed at that database.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["TRACING_ENABLED"] = "false"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from main import app
from shared.config.database import Base, get_db
from services.catalog_service.models import Product, Supplier
from services.inventory_service.models import InventoryRecord

API_HEADERS = {"X-Internal-API-Key": "test-internal-key"}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str):
    engine = create_async_engine(url)
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'warehouse.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers=API_HEADERS) as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def catalog(session_factory):
    """One supplier and two products, A (sku SKU-A) and B (sku SKU-B)."""
    async with session_factory() as session:
        supplier = Supplier(name="Sample Supplier", email="supplier@example.com", contact_person="Jo Doe")
        session.add(supplier)
        await session.flush()
        product_a = Product(name="Pallet Wrap", sku="SKU-A", price=Decimal("10.00"), supplier_id=supplier.id)
        product_b = Product(name="Box Cutter", sku="SKU-B", price=Decimal("5.00"), supplier_id=supplier.id)
        session.add_all([product_a, product_b])
        await session.commit()
        return {"supplier": supplier, "a": product_a, "b": product_b}


@pytest.fixture
def add_inventory(session_factory):
    async def _add(product_id: int, quantity: int, reorder_level: int = 0, location: str | None = None):
        async with session_factory() as session:
            record = InventoryRecord(
                product_id=product_id, quantity=quantity, reorder_level=reorder_level, location=location
            )
            session.add(record)
            await session.commit()
            return record.id
    return _add


@pytest.fixture
def count_rows(session_factory):
    async def _count(model) -> int:
        async with session_factory() as session:
            return await session.scalar(select(func.count()).select_from(model))
    return _count


@pytest.fixture
def inventory_quantities(session_factory):
    """Map of product_id -> summed on-hand quantity, read in a fresh session."""
    async def _read() -> dict[int, int]:
        async with session_factory() as session:
            result = await session.execute(
                select(InventoryRecord.product_id, func.sum(InventoryRecord.quantity))
                .group_by(InventoryRecord.product_id)
            )
            return {product_id: int(total) for product_id, total in result.all()}
    return _read
