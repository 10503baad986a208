from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Any, Dict, List, Optional


class SaleCreate(BaseModel):
    """Schema for recording a sale. Accepts the camelCase keys the mobile client sends."""
    id: str = Field(..., min_length=1, max_length=255, description="Sale ID")
    timestamp: datetime = Field(..., description="When the sale happened")
    items: List[Dict[str, Any]] = Field(..., description="Line items, stored as JSON")
    total_amount: float = Field(..., alias="totalAmount", ge=0)
    payment_method: str = Field(..., alias="paymentMethod", min_length=1, max_length=50)
    customer_name: Optional[str] = Field(None, alias="customerName", max_length=255)
    notes: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class SaleResponse(BaseModel):
    """Schema for sale response with decoded line items."""
    id: str
    timestamp: datetime
    items: List[Dict[str, Any]]
    total_amount: float
    payment_method: str
    customer_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class SaleCreatedResponse(BaseModel):
    message: str
    saleId: str


class SalesSummary(BaseModel):
    """Aggregate figures over all sales and over today's sales."""
    totalSales: int
    totalRevenue: float
    todaySales: int
    todayRevenue: float
    averageSaleAmount: float
