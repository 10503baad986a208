from pydantic import BaseModel, Field


class ConnectionTestRequest(BaseModel):
    """Credentials of an external database to probe."""
    host: str = Field(..., min_length=1)
    port: int = Field(..., gt=0, lt=65536)
    database: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ConnectionTestResponse(BaseModel):
    success: bool
    message: str
    hasProductsTable: bool
    database: str
    host: str
