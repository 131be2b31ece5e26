from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from shared.errors import DomainError, to_http_exception
from shared.security.dependencies import verify_internal_api_key
from .schemas import InventoryCreate, InventoryResponse, InventoryUpdate, StockAdjust
from .service import InventoryService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


@router.get("/")
async def list_inventory(
    product_id: int | None = Query(default=None),
    low_stock: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    result = await InventoryService.list_records(db, product_id, low_stock, page, per_page)
    result["data"] = [InventoryResponse.model_validate(r) for r in result["data"]]
    return result


@router.get("/low-stock", response_model=list[InventoryResponse])
async def low_stock(db: AsyncSession = Depends(get_db)):
    return await InventoryService.check_low_stock(db)


@router.post("/", response_model=InventoryResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory(payload: InventoryCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await InventoryService.create_record(db, payload)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{record_id}", response_model=InventoryResponse)
async def get_inventory(record_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await InventoryService.get_record(db, record_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{record_id}", response_model=InventoryResponse)
async def update_inventory(record_id: int, payload: InventoryUpdate, db: AsyncSession = Depends(get_db)):
    try:
        return await InventoryService.update_record(db, record_id, payload)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{record_id}/adjust", response_model=InventoryResponse)
async def adjust_stock(record_id: int, payload: StockAdjust, db: AsyncSession = Depends(get_db)):
    try:
        return await InventoryService.adjust_stock(db, record_id, payload.quantity, payload.reason)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{record_id}")
async def delete_inventory(record_id: int, db: AsyncSession = Depends(get_db)):
    try:
        await InventoryService.delete_record(db, record_id)
    except DomainError as e:
        raise to_http_exception(e)
    return {"message": "Inventory record deleted successfully"}
