from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional, Union


class ProductBase(BaseModel):
    """Mutable product attributes shared by create and update payloads."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    price: Optional[float] = Field(None, ge=0, description="Selling price")
    price_in: Optional[Union[str, float]] = Field(None, description="Cost price")
    quantity: Optional[int] = Field(None, ge=0, description="Available stock (must be non-negative)")
    image_path: Optional[str] = Field(None, max_length=500)
    price_out: Optional[float] = Field(None, ge=0, description="Display price, defaults to price")
    image_url: Optional[str] = Field(None, max_length=500)


class ProductCreate(ProductBase):
    """Schema for creating a new product. The client supplies the id."""
    id: str = Field(..., min_length=1, max_length=255, description="Product ID")


class ProductUpdate(ProductBase):
    """Schema for replacing a product's mutable fields. Omitted fields are reset to defaults."""
    pass


class ProductResponse(BaseModel):
    """Schema for product response including all fields."""
    id: str
    name: str
    price: float
    price_in: Optional[str] = None
    quantity: int
    image_path: Optional[str] = None
    price_out: float
    image_url: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductMutationResponse(BaseModel):
    message: str
    product: ProductResponse


class MessageResponse(BaseModel):
    message: str


class StockAdjustment(BaseModel):
    """Schema for adding to or subtracting from a product's stock."""
    quantity: int = Field(..., gt=0, description="Amount to add or subtract")
    operation: str = Field(..., description='Either "add" or "subtract"')


class StockAdjustmentResponse(BaseModel):
    message: str
    productId: str
    oldQuantity: int
    newQuantity: int
