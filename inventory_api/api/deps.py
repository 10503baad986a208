from typing import Optional
import secrets

from fastapi import Depends, Header
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from inventory_api.config import Settings
from inventory_api.database import AppContext, get_context, get_db
from inventory_api.exceptions import UnauthorizedError
from inventory_api.schemas.auth import TokenClaims
from inventory_api.services.product_service import ProductService
from inventory_api.utils.security import decode_access_token


def get_app_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings)
) -> TokenClaims:
    """
    Dependency that authenticates the request from its bearer token.

    Returns the token's claims; routes use the user id to scope products.
    """
    token = _bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Access token required")

    claims = decode_access_token(token, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    try:
        return TokenClaims.model_validate(claims)
    except PydanticValidationError:
        raise UnauthorizedError("Invalid or expired token")


def verify_api_key(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings)
) -> None:
    """Check the static API key when one is configured."""
    if not settings.API_KEY:
        return
    if not secrets.compare_digest(
        (authorization or "").encode("utf-8"),
        f"Bearer {settings.API_KEY}".encode("utf-8"),
    ):
        raise UnauthorizedError("Invalid API key")


def get_product_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> ProductService:
    return ProductService(
        db,
        owner_scoping=settings.OWNER_SCOPING,
        scope_delete=settings.SCOPE_DELETE_TO_OWNER,
    )
