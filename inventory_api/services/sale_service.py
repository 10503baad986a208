from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import json
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_api.exceptions import ConflictError, NotFoundError
from inventory_api.models.sale import Sale
from inventory_api.schemas.sale import SaleCreate

logger = logging.getLogger(__name__)


def to_naive_utc(value: datetime) -> datetime:
    """Sale timestamps are stored as naive UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def present_sale(sale: Sale) -> Dict[str, Any]:
    """Convert a Sale row into a response dict with decoded line items."""
    return {
        "id": sale.id,
        "timestamp": sale.timestamp,
        "items": json.loads(sale.items or "[]"),
        "total_amount": sale.total_amount,
        "payment_method": sale.payment_method,
        "customer_name": sale.customer_name,
        "notes": sale.notes,
        "created_at": sale.created_at,
    }


class SaleService:
    """Service class for recording and reporting sales."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, sale_data: SaleCreate) -> Sale:
        """
        Record a new sale.

        Args:
            sale_data: Sale creation data

        Returns:
            Created sale instance

        Raises:
            ConflictError: If a sale with the same ID already exists
        """
        sale = Sale(
            id=sale_data.id,
            timestamp=to_naive_utc(sale_data.timestamp),
            items=json.dumps(sale_data.items),
            total_amount=sale_data.total_amount,
            payment_method=sale_data.payment_method,
            customer_name=sale_data.customer_name or None,
            notes=sale_data.notes or None,
        )
        self.db.add(sale)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Sale with this ID already exists")

        logger.info(f"Sale {sale.id} recorded ({len(sale_data.items)} items)")
        return sale

    def get_by_id(self, sale_id: str) -> Sale:
        sale = self.db.query(Sale).filter(Sale.id == sale_id).first()

        if not sale:
            raise NotFoundError("Sale not found")

        return sale

    def get_all(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[Sale]:
        """
        Get sales, newest first.

        Args:
            start_date: Only include sales at or after this moment
            end_date: Only include sales at or before this moment

        Returns:
            List of sales
        """
        query = self.db.query(Sale)

        if start_date:
            query = query.filter(Sale.timestamp >= to_naive_utc(start_date))
        if end_date:
            query = query.filter(Sale.timestamp <= to_naive_utc(end_date))

        return query.order_by(Sale.timestamp.desc()).all()

    def summary(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Aggregate sales: overall count, revenue and average, plus today's
        count and revenue. "Today" is the current UTC calendar day.
        """
        now = to_naive_utc(now or datetime.now(timezone.utc))
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        today_end = today_start + timedelta(days=1)

        total_count, total_revenue, average = self.db.query(
            func.count(Sale.id),
            func.sum(Sale.total_amount),
            func.avg(Sale.total_amount),
        ).one()

        today_count, today_revenue = (
            self.db.query(func.count(Sale.id), func.sum(Sale.total_amount))
            .filter(Sale.timestamp >= today_start, Sale.timestamp < today_end)
            .one()
        )

        return {
            "totalSales": total_count or 0,
            "totalRevenue": float(total_revenue or 0),
            "todaySales": today_count or 0,
            "todayRevenue": float(today_revenue or 0),
            "averageSaleAmount": float(average or 0),
        }
