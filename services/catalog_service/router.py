from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from shared.errors import DomainError, to_http_exception
from shared.security.dependencies import verify_internal_api_key
from .schemas import ProductCreate, ProductResponse, ProductUpdate
from .service import ProductService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await ProductService.create_product(db, product)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/")
async def list_products(
    search: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    result = await ProductService.list_products(db, search, page, per_page)
    result["data"] = [ProductResponse.model_validate(p) for p in result["data"]]
    return result


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await ProductService.get_product_by_id(db, product_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: int, payload: ProductUpdate, db: AsyncSession = Depends(get_db)):
    try:
        return await ProductService.update_product(db, product_id, payload)
    except DomainError as e:
        raise to_http_exception(e)
