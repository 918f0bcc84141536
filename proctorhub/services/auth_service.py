import logging
from datetime import timedelta
from typing import Tuple

from ..core.config import settings
from ..core.exceptions import AuthenticationError, NotFoundError
from ..core.security import create_access_token
from ..schemas.auth import Principal
from ..schemas.user import User, UserCreate
from ..storage.base import Storage
from .user_service import UserService

logger = logging.getLogger(__name__)

# same message for unknown email and wrong password
LOGIN_FAILED_MESSAGE = "Invalid email or password"


class AuthService:
    def __init__(self, storage: Storage):
        self.storage = storage
        self.user_service = UserService(storage)

    def register(self, user_data: UserCreate) -> User:
        return self.user_service.create_user(user_data).public()

    def authenticate_and_create_token(self, email: str, password: str) -> Tuple[str, User]:
        user = self.user_service.authenticate_user(email, password)
        if not user:
            logger.warning("Failed login attempt")
            raise AuthenticationError(LOGIN_FAILED_MESSAGE)

        token = create_access_token(
            data={"id": user.id, "role": user.role.value, "email": user.email},
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )
        return token, user.public()

    def get_current_user(self, principal: Principal) -> User:
        user = self.user_service.get_user_by_id(principal.id)
        if user is None:
            raise NotFoundError("User not found")
        return user.public()
