from datetime import date

from fastapi import APIRouter, Depends, Query, status as http_status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from shared.errors import DomainError, to_http_exception
from shared.security.dependencies import verify_internal_api_key
from .models import OrderStatus
from .schemas import OrderCreate, OrderFilters, OrderResponse, OrderUpdate
from .service import OrderService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


@router.post("/", response_model=OrderResponse, status_code=http_status.HTTP_201_CREATED)
async def create_order(order: OrderCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await OrderService.create_order(db, order)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/")
async def list_orders(
    status: OrderStatus | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    filters = OrderFilters(status=status, date_from=date_from, date_to=date_to)
    result = await OrderService.list_orders(db, filters, page, per_page)
    result["data"] = [OrderResponse.model_validate(o) for o in result["data"]]
    return result


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await OrderService.get_order(db, order_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(order_id: int, payload: OrderUpdate, db: AsyncSession = Depends(get_db)):
    try:
        return await OrderService.update_order(db, order_id, payload)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{order_id}/fulfill", response_model=OrderResponse)
async def fulfill_order(order_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await OrderService.fulfill_order(db, order_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{order_id}")
async def delete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await OrderService.delete_order(db, order_id)
    except DomainError as e:
        raise to_http_exception(e)
    return {"message": "Order deleted successfully"}
