import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from inventory_api.api.deps import get_app_settings, verify_api_key
from inventory_api.config import Settings
from inventory_api.schemas.admin import ConnectionTestRequest, ConnectionTestResponse

logger = logging.getLogger(__name__)

# Only mounted when ENABLE_DB_DIAGNOSTICS is set; it connects to
# whatever database the caller names.
router = APIRouter(tags=["Admin"], dependencies=[Depends(verify_api_key)])


@router.post(
    "/test-connection",
    response_model=ConnectionTestResponse,
    summary="Test an external database connection",
    description="Connect to the given MySQL database and report whether it has a products table."
)
def test_connection(
    data: ConnectionTestRequest,
    settings: Settings = Depends(get_app_settings)
):
    url = URL.create(
        settings.DIAGNOSTIC_DB_DRIVER,
        username=data.user,
        password=data.password,
        host=data.host,
        port=data.port,
        database=data.database,
    )
    engine = create_engine(url, poolclass=NullPool)

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            tables = conn.execute(
                text(
                    "SELECT table_name FROM information_schema.tables "
                    "WHERE table_schema = :schema AND table_name = 'products'"
                ),
                {"schema": data.database}
            ).fetchall()
    except SQLAlchemyError as e:
        logger.error(f"Database connection test failed for {data.host}:{data.port}: {e}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Database connection failed",
                "details": str(e.__cause__ or e)
            }
        )
    finally:
        engine.dispose()

    return ConnectionTestResponse(
        success=True,
        message="Database connection successful",
        hasProductsTable=len(tables) > 0,
        database=data.database,
        host=data.host
    )
