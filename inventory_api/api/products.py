from fastapi import APIRouter, Depends, status
from typing import List

from inventory_api.api.deps import get_current_user, get_product_service
from inventory_api.schemas.auth import TokenClaims
from inventory_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductMutationResponse,
    MessageResponse,
    StockAdjustment,
    StockAdjustmentResponse
)
from inventory_api.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="Get the authenticated user's products, newest first."
)
def list_products(
    user: TokenClaims = Depends(get_current_user),
    service: ProductService = Depends(get_product_service)
):
    """
    List products.

    When the products table records owners, only the caller's products
    are returned; otherwise every product is.
    """
    return service.get_all(user_id=user.id)


@router.post(
    "",
    response_model=ProductMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product with a client-assigned ID."
)
def create_product(
    product_data: ProductCreate,
    user: TokenClaims = Depends(get_current_user),
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product.

    - **id**: Product ID (required, must be unique)
    - **name**: Product name (required)
    - **price**, **price_in**, **quantity**, **image_path**, **price_out**, **image_url**: optional
    """
    product = service.create(product_data, user_id=user.id)
    return {"message": "Product created successfully", "product": product}


@router.get(
    "/search/{query}",
    response_model=List[ProductResponse],
    summary="Search products",
    description="Case-insensitive search over product name and ID."
)
def search_products(
    query: str,
    service: ProductService = Depends(get_product_service)
):
    return service.search(query)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID"
)
def get_product(
    product_id: str,
    user: TokenClaims = Depends(get_current_user),
    service: ProductService = Depends(get_product_service)
):
    """Get a product by ID. Another user's product is reported as not found."""
    return service.get_by_id(product_id, user_id=user.id)


@router.put(
    "/{product_id}",
    response_model=ProductMutationResponse,
    summary="Update a product",
    description="Replace a product's fields. Omitted fields are reset to their defaults."
)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    user: TokenClaims = Depends(get_current_user),
    service: ProductService = Depends(get_product_service)
):
    product = service.update(product_id, product_data, user_id=user.id)
    return {"message": "Product updated successfully", "product": product}


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product"
)
def delete_product(
    product_id: str,
    user: TokenClaims = Depends(get_current_user),
    service: ProductService = Depends(get_product_service)
):
    """Delete a product. Limited to the caller's products when SCOPE_DELETE_TO_OWNER is set."""
    service.delete(product_id, user_id=user.id)
    return {"message": "Product deleted successfully"}


@router.put(
    "/{product_id}/stock",
    response_model=StockAdjustmentResponse,
    summary="Adjust product stock",
    description='Add to or subtract from stock. Subtracting stops at zero.'
)
def adjust_stock(
    product_id: str,
    adjustment: StockAdjustment,
    service: ProductService = Depends(get_product_service)
):
    """
    Adjust stock after a sale or a delivery.

    - **quantity**: Positive amount
    - **operation**: "add" or "subtract"
    """
    old_quantity, new_quantity = service.adjust_stock(
        product_id, adjustment.quantity, adjustment.operation
    )
    return StockAdjustmentResponse(
        message="Product stock updated successfully",
        productId=product_id,
        oldQuantity=old_quantity,
        newQuantity=new_quantity
    )
