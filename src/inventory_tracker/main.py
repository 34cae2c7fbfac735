import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from tortoise import Tortoise
from tortoise.contrib.fastapi import tortoise_exception_handlers

from .core.config import DATABASE_URL, TORTOISE_ORM_CONFIG
from .core.exceptions import unhandled_exception_handler
from .core.logging_config import configure_logging
from .features.auth.router import router as auth_router
from .features.users.router import router as users_router
from .features.inventory.router import categories_router, items_router
from .features.sales.router import router as sales_router
from .features.reports.router import router as reports_router
from .features.dashboard.router import router as dashboard_router

configure_logging()
logger = logging.getLogger("inventory_tracker.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Opens the Tortoise connections for the lifetime of the app.

    The schema comes from the aerich migrations in `migrations/`; run
    `aerich upgrade` before the first start.
    """
    logger.info(f"Connecting to {DATABASE_URL.split(':', 1)[0]} database")
    await Tortoise.init(config=TORTOISE_ORM_CONFIG)
    try:
        yield
    finally:
        await Tortoise.close_connections()
        logger.info("Database connections closed")


app = FastAPI(
    title="Inventory Tracker API",
    description="API for tracking items, categories, sales and sales reports.",
    version="0.1.0",
    exception_handlers={
        **tortoise_exception_handlers(),
        Exception: unhandled_exception_handler,
    },
    lifespan=lifespan,
)


@app.get("/")
async def read_root(request: Request):
    """Health check; reports the API version."""
    logger.debug(f"Health check from {request.client.host if request.client else 'unknown'}")
    return {"message": "Inventory Tracker API", "version": app.version}


app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(items_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(sales_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")
