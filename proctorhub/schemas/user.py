from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from .base import CamelModel
from .status import Role


class UserBase(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    role: Role = Role.STUDENT
    profile_picture: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None


class User(UserBase):
    """Public profile; never carries the password hash."""
    id: int
    created_at: Optional[datetime] = None


class UserInDB(UserBase):
    id: int
    hashed_password: str
    created_at: Optional[datetime] = None

    def public(self) -> User:
        return User.model_validate(self.model_dump(exclude={"hashed_password"}))


class UserResponse(CamelModel):
    message: str
    user: User
