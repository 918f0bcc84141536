import logging
from typing import Optional

from ..core.exceptions import NotFoundError
from ..core.security import get_password_hash, verify_password
from ..schemas.user import UserCreate, UserInDB, ProfileUpdate
from ..storage.base import Storage

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        return self.storage.get_user_by_email(email)

    def get_user_by_id(self, user_id: int) -> Optional[UserInDB]:
        return self.storage.get_user(user_id)

    def create_user(self, user_data: UserCreate) -> UserInDB:
        fields = user_data.model_dump(exclude={"password"})
        fields["hashed_password"] = get_password_hash(user_data.password)
        user = self.storage.create_user(fields)
        logger.info(f"Registered {user.role.value} {user.id}")
        return user

    def update_profile(self, user_id: int, profile: ProfileUpdate) -> UserInDB:
        update_data = {
            field: value
            for field, value in profile.model_dump(exclude_unset=True).items()
            if value is not None
        }
        user = self.storage.update_user(user_id, update_data)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def set_profile_picture(self, user_id: int, picture_path: str) -> UserInDB:
        user = self.storage.update_user(user_id, {"profile_picture": picture_path})
        if user is None:
            raise NotFoundError("User not found")
        return user

    def authenticate_user(self, email: str, password: str) -> Optional[UserInDB]:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user
