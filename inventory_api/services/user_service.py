from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_api.exceptions import EmailAlreadyRegisteredError
from inventory_api.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Service class for User persistence."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, email: str, password_hash: str, name: str, role: str = "user") -> User:
        """
        Create a new user.

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken
        """
        if self.find_by_email(email):
            raise EmailAlreadyRegisteredError()

        user = User(email=email, password_hash=password_hash, name=name, role=role)
        self.db.add(user)

        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            raise EmailAlreadyRegisteredError()

        self.db.refresh(user)
        logger.info(f"User #{user.id} registered")
        return user
