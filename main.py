from fastapi import APIRouter, FastAPI
from shared.config.database import engine, Base
from shared.config.settings import SERVICE_NAME
from shared.observability import setup_observability

# IMPORTANT: import models so they register with Base
from services.catalog_service import models as catalog_models
from services.inventory_service import models as inventory_models
from services.order_service import models as order_models

from services.catalog_service.router import router as product_router
from services.inventory_service.router import router as inventory_router
from services.order_service.router import router as order_router

app = FastAPI(title="Warehouse Core", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, SERVICE_NAME)

public_router = APIRouter()  # For any public endpoints (e.g. health check)


@public_router.get("/health")
async def health_check():
    return {"service": SERVICE_NAME, "status": "running"}


app.include_router(public_router)
app.include_router(product_router, prefix="/products", tags=["products"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(order_router, prefix="/orders", tags=["orders"])


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
