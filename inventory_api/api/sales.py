from datetime import datetime
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from inventory_api.database import get_db
from inventory_api.schemas.sale import (
    SaleCreate,
    SaleResponse,
    SaleCreatedResponse,
    SalesSummary
)
from inventory_api.services.sale_service import SaleService, present_sale

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get(
    "",
    response_model=List[SaleResponse],
    summary="List sales",
    description="Get sales newest first, optionally limited to a date range."
)
def list_sales(
    start_date: Optional[datetime] = Query(None, alias="startDate", description="Earliest sale timestamp"),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="Latest sale timestamp"),
    db: Session = Depends(get_db)
):
    service = SaleService(db)
    return [present_sale(sale) for sale in service.get_all(start_date, end_date)]


@router.post(
    "",
    response_model=SaleCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a sale"
)
def create_sale(
    sale_data: SaleCreate,
    db: Session = Depends(get_db)
):
    """
    Record a completed sale.

    - **id**: Sale ID (required, must be unique)
    - **timestamp**: When the sale happened (required)
    - **items**: Line items (required)
    - **totalAmount**: Sale total, non-negative (required)
    - **paymentMethod**: Payment method (required)
    - **customerName**, **notes**: optional
    """
    service = SaleService(db)
    sale = service.create(sale_data)
    return SaleCreatedResponse(message="Sale created successfully", saleId=sale.id)


@router.get(
    "/summary",
    response_model=SalesSummary,
    summary="Sales summary",
    description="Totals over all sales and over today's sales (UTC)."
)
def sales_summary(db: Session = Depends(get_db)):
    return SaleService(db).summary()


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Get sale by ID"
)
def get_sale(
    sale_id: str,
    db: Session = Depends(get_db)
):
    service = SaleService(db)
    return present_sale(service.get_by_id(sale_id))
