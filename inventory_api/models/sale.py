from sqlalchemy import Column, String, Numeric, DateTime, Text, CheckConstraint
from sqlalchemy.sql import func

from inventory_api.database import Base


class Sale(Base):
    """
    Sale model representing a completed checkout.

    Attributes:
        id: Client-assigned identifier for the sale
        timestamp: When the sale happened (naive UTC)
        items: JSON-encoded list of line items
        total_amount: Sale total (must be non-negative)
        payment_method: How the customer paid
        customer_name: Optional customer name
        notes: Optional free-form notes
        created_at: Timestamp when the row was stored
    """
    __tablename__ = "sales"

    id = Column(String(255), primary_key=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    items = Column(Text, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    customer_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="check_total_amount_non_negative"),
    )

    def __repr__(self):
        return f"<Sale(id='{self.id}', total_amount={self.total_amount})>"
