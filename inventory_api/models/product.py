from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint, ForeignKey
from sqlalchemy.sql import func

from inventory_api.database import Base


class Product(Base):
    """
    Product model representing items available for sale.

    Attributes:
        id: Client-assigned identifier for the product
        name: Product name
        price: Selling price
        price_in: Cost price, kept as text for compatibility with existing data
        quantity: Available stock (must be non-negative)
        image_path: Local image path on the client device
        price_out: Display price; falls back to price when zero
        image_url: Public URL of the uploaded image
        user_id: Owner of the product (optional column on older schemas)
        created_at: Timestamp when product was created (optional column on older schemas)
        updated_at: Timestamp when product was last updated

    Product rows are read and written through SQLAlchemy Core against
    the columns the live table actually has, so columns here carry no
    Python-side defaults or onupdate hooks.
    """
    __tablename__ = "products"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False, server_default="0")
    price_in = Column(String(50), nullable=False, server_default="0")
    quantity = Column(Integer, nullable=False, server_default="0")
    image_path = Column(String(500), nullable=False, server_default="")
    price_out = Column(Numeric(10, 2), nullable=True)
    image_url = Column(String(500), nullable=False, server_default="")
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="check_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<Product(id='{self.id}', name='{self.name}', quantity={self.quantity})>"
