from typing import Tuple
import logging

from sqlalchemy.orm import Session

from inventory_api.config import Settings
from inventory_api.exceptions import UnauthorizedError
from inventory_api.models.user import User
from inventory_api.schemas.auth import RegisterRequest, LoginRequest
from inventory_api.services.user_service import UserService
from inventory_api.utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration and login.

    Both flows finish by issuing the same kind of token: an HS256 JWT
    carrying the user's id, email and role, valid for JWT_EXPIRES_HOURS.
    """

    INVALID_CREDENTIALS = "Invalid email or password"

    def __init__(self, db: Session, settings: Settings):
        self.settings = settings
        self.users = UserService(db)

    def issue_token(self, user: User) -> str:
        return create_access_token(
            {"id": user.id, "email": user.email, "role": user.role},
            self.settings.JWT_SECRET,
            algorithm=self.settings.JWT_ALGORITHM,
            expires_hours=self.settings.JWT_EXPIRES_HOURS,
        )

    def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """
        Register a user and log them in.

        Returns:
            Tuple of (user, token)

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken
        """
        password_hash = hash_password(data.password, rounds=self.settings.BCRYPT_ROUNDS)
        user = self.users.create(data.email, password_hash, data.name, data.role)
        return user, self.issue_token(user)

    def login(self, data: LoginRequest) -> Tuple[User, str]:
        """
        Check credentials and issue a token.

        Unknown emails and wrong passwords fail with the same message.

        Raises:
            UnauthorizedError: If the credentials don't match
        """
        user = self.users.find_by_email(data.email)

        if not user or not verify_password(data.password, user.password_hash):
            logger.info("Rejected login attempt")
            raise UnauthorizedError(self.INVALID_CREDENTIALS)

        return user, self.issue_token(user)
