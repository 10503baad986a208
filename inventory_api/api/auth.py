from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from inventory_api.api.deps import get_app_settings
from inventory_api.config import Settings
from inventory_api.database import get_db
from inventory_api.schemas.auth import RegisterRequest, LoginRequest, AuthResponse, UserProfile
from inventory_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="Create an account and return an access token valid for 24 hours."
)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    user, token = AuthService(db, settings).register(data)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserProfile.model_validate(user)
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="Exchange email and password for an access token."
)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    user, token = AuthService(db, settings).login(data)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserProfile.model_validate(user)
    )
