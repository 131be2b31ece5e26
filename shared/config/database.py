from contextlib import asynccontextmanager

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.errors import DomainError, TransactionFailed
from shared.observability.metrics import warehouse_transaction_failures_total
from .settings import DATABASE_URL, DB_ECHO

logger = structlog.get_logger(__name__)

engine = create_async_engine(DATABASE_URL, echo=DB_ECHO)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()

# Upper bound of the INTEGER columns; request schemas cap integer fields with it
INTEGER_MAX = 2**31 - 1


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str):
    """
    Unit-of-work boundary for multi-row mutations.

    Everything flushed inside the block commits together when it exits cleanly.
    Any exception rolls the whole session back before it propagates; constraint
    violations and values the database cannot store are re-raised as
    TransactionFailed so callers see one failure type.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        warehouse_transaction_failures_total.labels(operation=operation).inc()
        logger.warning("transaction_failed", operation=operation, error=str(exc.orig))
        raise TransactionFailed(f"{operation} could not be committed: constraint violation") from exc
    except (DBAPIError, OverflowError) as exc:
        # out-of-range values: numeric overflow on the server, or a driver that cannot bind the int
        await db.rollback()
        warehouse_transaction_failures_total.labels(operation=operation).inc()
        logger.warning("transaction_failed", operation=operation, error=repr(exc))
        raise TransactionFailed(f"{operation} could not be committed: value out of range") from exc
    except DomainError:
        await db.rollback()
        raise
    except Exception as exc:
        await db.rollback()
        warehouse_transaction_failures_total.labels(operation=operation).inc()
        logger.error("transaction_rolled_back", operation=operation, error=repr(exc))
        raise


async def paginate(db: AsyncSession, stmt, page: int, per_page: int) -> dict:
    total = await db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    result = await db.execute(stmt.limit(per_page).offset((page - 1) * per_page))
    return {
        "data": list(result.scalars().unique().all()),
        "total": total or 0,
        "page": page,
        "per_page": per_page,
    }
