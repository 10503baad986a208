from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import logging

from inventory_api.config import Settings, get_settings
from inventory_api.database import AppContext
from inventory_api.exceptions import ApiError
from inventory_api.middleware import UploadSizeLimitMiddleware
from inventory_api.services.product_service import PRODUCTS
from inventory_api.services.schema_prober import SchemaProber
from inventory_api.api import admin, auth, health, products, sales, upload

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def check_products_schema(context: AppContext) -> None:
    """Log the products layout the service will run against."""
    with context.session_factory() as db:
        columns = SchemaProber(db).columns(PRODUCTS.name)

    if not columns:
        logger.warning("Products table not found")
        return

    logger.info(f"Products table columns: {', '.join(sorted(columns))}")

    scoping = context.settings.OWNER_SCOPING
    if scoping == "on" and "user_id" not in columns:
        raise RuntimeError("OWNER_SCOPING=on but the products table has no user_id column")
    if scoping == "auto":
        logger.info(f"Owner scoping {'active' if 'user_id' in columns else 'inactive'} (auto)")
    if not context.settings.SCOPE_DELETE_TO_OWNER:
        logger.warning("Product deletes are not restricted to the owner (SCOPE_DELETE_TO_OWNER=false)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    context: AppContext = app.state.context

    # Startup
    logger.info("Starting up application...")

    logger.info("Creating database tables...")
    context.create_tables()
    check_products_schema(context)

    Path(context.settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    context.engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods both read as a missing endpoint
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its context (engine, pool, settings)."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
    REST backend for a point-of-sale mobile app:

    - **Products**: CRUD, search and stock adjustment, scoped to the owning user
    - **Sales**: Recording sales and summarising revenue
    - **Auth**: Registration and login with JWT access tokens
    - **Uploads**: Product image uploads
    """,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )
    app.state.context = AppContext.from_settings(settings)

    app.add_middleware(
        UploadSizeLimitMiddleware,
        path="/api/upload",
        max_size=settings.MAX_UPLOAD_SIZE
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(products.router, prefix="/api")
    app.include_router(sales.router, prefix="/api")
    app.include_router(upload.router, prefix="/api")
    if settings.ENABLE_DB_DIAGNOSTICS:
        app.include_router(admin.router, prefix="/api")

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/api/health"
        }

    return app


app = create_app()
