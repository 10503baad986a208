from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple
import logging

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from inventory_api.exceptions import ConflictError, NotFoundError, ValidationError
from inventory_api.models.product import Product
from inventory_api.schemas.product import ProductCreate, ProductUpdate
from inventory_api.services.schema_prober import SchemaProber

logger = logging.getLogger(__name__)

PRODUCTS = Product.__table__

STOCK_OPERATIONS = ("add", "subtract")


def _is_zero(value: Any) -> bool:
    try:
        return Decimal(str(value)) == 0
    except InvalidOperation:
        return False


def present_product(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Shape a product row for API consumers.

    The mobile client displays price_out, so a missing or zero
    price_out ("0.00" included) is replaced by price.
    """
    product = dict(row)
    price_out = product.get("price_out")
    if price_out is None or _is_zero(price_out):
        product["price_out"] = product.get("price")
    return product


class ProductService:
    """
    Service class for Product CRUD operations.

    Products are queried through SQLAlchemy Core against the columns the
    live ``products`` table actually has. Older databases lack
    ``user_id`` and ``created_at``; without ``user_id`` products are
    shared by everyone, without ``created_at`` listings fall back to
    ordering by id.

    Owner-scoping is decided by the ``owner_scoping`` mode:
    - ``auto``: scope when the ``user_id`` column exists
    - ``on``: always scope (the column is checked at startup)
    - ``off``: never scope
    """

    def __init__(self, db: Session, owner_scoping: str = "auto", scope_delete: bool = True):
        self.db = db
        self.owner_scoping = owner_scoping
        self.scope_delete = scope_delete
        self.prober = SchemaProber(db)

    def _columns(self) -> Set[str]:
        return self.prober.columns(PRODUCTS.name)

    def _is_scoped(self, columns: Set[str]) -> bool:
        if self.owner_scoping == "off":
            return False
        if self.owner_scoping == "on":
            return True
        return "user_id" in columns

    def _owned(self, stmt, columns: Set[str], user_id: Optional[int]):
        """Restrict a statement to the user's rows when scoping is active."""
        if user_id is not None and self._is_scoped(columns):
            stmt = stmt.where(PRODUCTS.c.user_id == user_id)
        return stmt

    @staticmethod
    def _select(columns: Set[str]):
        return select(*[column for column in PRODUCTS.c if column.name in columns])

    @staticmethod
    def _order_by(columns: Set[str]):
        if "created_at" in columns:
            return PRODUCTS.c.created_at.desc()
        return PRODUCTS.c.id.desc()

    @staticmethod
    def _existing(values: Dict[str, Any], columns: Set[str]) -> Dict[str, Any]:
        return {key: value for key, value in values.items() if key in columns}

    def _fetch(self, product_id: str, columns: Set[str], user_id: Optional[int] = None) -> Dict[str, Any]:
        stmt = self._select(columns).where(PRODUCTS.c.id == product_id)
        stmt = self._owned(stmt, columns, user_id)
        row = self.db.execute(stmt).mappings().first()

        if row is None:
            raise NotFoundError("Product not found")

        return present_product(row)

    def get_all(self, user_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Get all products visible to a user, newest first.

        Args:
            user_id: ID of the requesting user

        Returns:
            List of presented products (empty if the table does not exist)
        """
        columns = self._columns()
        if not columns:
            return []

        stmt = self._owned(self._select(columns), columns, user_id).order_by(self._order_by(columns))
        rows = self.db.execute(stmt).mappings().all()

        logger.info(f"Retrieved {len(rows)} products for user {user_id}")
        return [present_product(row) for row in rows]

    def get_by_id(self, product_id: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Get a product by ID.

        Raises:
            NotFoundError: If the product doesn't exist or belongs to another user
        """
        columns = self._columns()
        if not columns:
            raise NotFoundError("Product not found")
        return self._fetch(product_id, columns, user_id)

    def create(self, product_data: ProductCreate, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Create a new product.

        Args:
            product_data: Product creation data
            user_id: Owner, recorded when scoping is active

        Returns:
            The stored product

        Raises:
            ConflictError: If a product with the same ID already exists
        """
        columns = self._columns()
        price = product_data.price or 0

        values = {
            "id": product_data.id,
            "name": product_data.name,
            "price": price,
            "price_in": str(product_data.price_in) if product_data.price_in is not None else "0",
            "quantity": product_data.quantity or 0,
            "image_path": product_data.image_path or "",
            "price_out": product_data.price_out or price,
            "image_url": product_data.image_url or "",
        }
        if user_id is not None and self._is_scoped(columns):
            values["user_id"] = user_id

        try:
            self.db.execute(insert(PRODUCTS).values(**self._existing(values, columns)))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Product with this ID already exists")

        logger.info(f"Product {product_data.id} created for user {user_id}")
        return self._fetch(product_data.id, columns)

    def update(self, product_id: str, product_data: ProductUpdate, user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Replace a product's mutable fields.

        Omitted fields are reset to their defaults, and a zero price_out
        means "display the price".

        Raises:
            NotFoundError: If no row matched (missing product or another user's product)
        """
        columns = self._columns()
        if not columns:
            raise NotFoundError("Product not found")

        values = {
            "name": product_data.name,
            "price": product_data.price or 0,
            "price_in": str(product_data.price_in) if product_data.price_in is not None else "0",
            "quantity": product_data.quantity or 0,
            "image_path": product_data.image_path or "",
            "price_out": product_data.price_out or 0,
            "image_url": product_data.image_url or "",
            "updated_at": func.now(),
        }

        stmt = update(PRODUCTS).where(PRODUCTS.c.id == product_id).values(**self._existing(values, columns))
        result = self.db.execute(self._owned(stmt, columns, user_id))

        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Product not found")

        self.db.commit()
        logger.info(f"Product {product_id} updated for user {user_id}")
        return self._fetch(product_id, columns)

    def delete(self, product_id: str, user_id: Optional[int] = None) -> None:
        """
        Delete a product.

        The owner filter only applies when delete scoping is enabled.

        Raises:
            NotFoundError: If no row was deleted
        """
        columns = self._columns()
        if not columns:
            raise NotFoundError("Product not found")

        stmt = delete(PRODUCTS).where(PRODUCTS.c.id == product_id)
        if self.scope_delete:
            stmt = self._owned(stmt, columns, user_id)

        result = self.db.execute(stmt)
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Product not found")

        self.db.commit()
        logger.info(f"Product {product_id} deleted by user {user_id}")

    def search(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring search over product name and id."""
        columns = self._columns()
        if not columns:
            return []

        stmt = (
            self._select(columns)
            .where(or_(
                PRODUCTS.c.name.icontains(query, autoescape=True),
                PRODUCTS.c.id.icontains(query, autoescape=True),
            ))
            .order_by(self._order_by(columns))
        )
        rows = self.db.execute(stmt).mappings().all()
        return [present_product(row) for row in rows]

    def adjust_stock(self, product_id: str, quantity: int, operation: str) -> Tuple[int, int]:
        """
        Add to or subtract from a product's stock.

        Subtracting never takes stock below zero. The product row is read
        with SELECT ... FOR UPDATE so the read and the write happen under
        the same row lock on databases that support it.

        Args:
            product_id: Product to adjust
            quantity: Amount to add or subtract
            operation: "add" or "subtract"

        Returns:
            Tuple of (old quantity, new quantity)

        Raises:
            ValidationError: If the operation is unknown
            NotFoundError: If the product doesn't exist
        """
        if operation not in STOCK_OPERATIONS:
            raise ValidationError('Invalid operation. Use "add" or "subtract"')

        columns = self._columns()
        if not columns:
            raise NotFoundError("Product not found")

        row = self.db.execute(
            select(PRODUCTS.c.quantity)
            .where(PRODUCTS.c.id == product_id)
            .with_for_update()
        ).first()

        if row is None:
            self.db.rollback()
            raise NotFoundError("Product not found")

        old_quantity = row.quantity or 0
        if operation == "subtract":
            new_quantity = max(0, old_quantity - quantity)
        else:
            new_quantity = old_quantity + quantity

        values = self._existing({"quantity": new_quantity, "updated_at": func.now()}, columns)
        self.db.execute(update(PRODUCTS).where(PRODUCTS.c.id == product_id).values(**values))
        self.db.commit()

        logger.info(f"Product {product_id} stock {operation}: {old_quantity} -> {new_quantity}")
        return old_quantity, new_quantity
