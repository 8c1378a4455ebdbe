import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

import flockwise.models  # noqa: F401  registers every table on Base.metadata
import flockwise.routers.banking as banking
import flockwise.routers.batch as batch
import flockwise.routers.births as births
import flockwise.routers.egg_collection as egg_collection
import flockwise.routers.fcr as fcr
import flockwise.routers.feed as feed
import flockwise.routers.finance as finance
import flockwise.routers.financial_reports as financial_reports
import flockwise.routers.flocks as flocks
import flockwise.routers.health as health
import flockwise.routers.inventory_items as inventory_items
import flockwise.routers.mortality as mortality
import flockwise.routers.purchase_orders as purchase_orders
import flockwise.routers.stock_movements as stock_movements
import flockwise.routers.suppliers as suppliers
import flockwise.routers.weight_tracking as weight_tracking
from flockwise.config import Settings
from flockwise.database import Base, build_engine, build_session_factory
from flockwise.exception_handlers import setup_exception_handlers

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_logging_configured = False


def configure_logging(settings: Settings):
    """Log to a timestamped file under settings.log_dir (when set) and to the console."""
    global _logging_configured
    if _logging_configured:
        return
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)  # Create the log directory if it doesn't exist
        current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        log_file = os.path.join(settings.log_dir, f"app_{current_time_str}.log")
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=log_file, filemode='a')
    else:
        logging.getLogger().setLevel(level)

    # Also output logs to the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(console_handler)
    _logging_configured = True


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = build_engine(settings.database_url)
    # Create database tables; schema migrations are run outside the app
    Base.metadata.create_all(bind=engine)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logging.getLogger(__name__).info("Application starting up...")
    try:
        yield
    finally:
        engine.dispose()
        logging.getLogger(__name__).info("Application shut down, database engine disposed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    app = FastAPI(title="Flockwise Farm Management API", lifespan=lifespan)
    app.state.settings = settings

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title="Flockwise Farm Management API",
            version="1.0.0",
            description="API for poultry farm stock, production and finance",
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
            }
        }
        # Apply security globally to all endpoints
        openapi_schema["security"] = [{"BearerAuth": []}]
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi
    setup_exception_handlers(app)

    app.include_router(suppliers.router)
    app.include_router(feed.router)
    app.include_router(inventory_items.router)
    app.include_router(stock_movements.router)
    app.include_router(purchase_orders.router)
    app.include_router(batch.router)
    app.include_router(flocks.router)
    app.include_router(weight_tracking.router)
    app.include_router(mortality.router)
    app.include_router(births.router)
    app.include_router(egg_collection.router)
    app.include_router(fcr.router)
    app.include_router(finance.router)
    app.include_router(banking.router)
    app.include_router(financial_reports.router)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to the Flockwise API"}

    @app.get("/health")
    async def healthcheck():
        return {"status": "ok"}

    return app


app = create_app()
