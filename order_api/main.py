# order_api/main.py
# Run with: uvicorn order_api.main:create_app --factory
import logging
from typing import Optional
from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from order_api.config import Settings
from order_api.database import build_engine, build_session_factory, create_tables, check_connection
from order_api.application.seed_demo import seed_demo_users, seed_demo_data
from order_api.infrastructure.security import PasslibPasswordHasher
from order_api.infrastructure.unit_of_work import SQLAlchemyUnitOfWork
from order_api.presentation.api import router as orders_router
from order_api.presentation.auth_api import router as auth_router
from order_api.presentation.catalog_api import products_router, customers_router
from order_api.presentation.errors import register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle"""
        engine = build_engine(settings)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)

        if settings.CREATE_TABLES:
            await create_tables(engine)
            logger.info("Tables created")

        unit_of_work = SQLAlchemyUnitOfWork(app.state.session_factory)
        if settings.SEED_DEMO_USERS:
            await seed_demo_users(unit_of_work, PasslibPasswordHasher(), settings.DEMO_USER_PASSWORD)
        if settings.SEED_DEMO_DATA:
            await seed_demo_data(unit_of_work)

        yield

        logger.info("Application is shutting down...")
        await engine.dispose()

    app = FastAPI(
        title="Order Inventory API",
        description="Customers, products and orders with stock reconciliation",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    register_exception_handlers(app)

    app.include_router(auth_router, prefix="/api")
    app.include_router(products_router, prefix="/api")
    app.include_router(customers_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/health/readiness")
    async def readiness():
        try:
            await check_connection(app.state.engine)
        except Exception as e:
            logger.error(f"Database readiness check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "database": "unavailable"}
            )
        return {"status": "healthy", "database": "available"}

    return app
