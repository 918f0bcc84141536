from pydantic import BaseModel, EmailStr
from typing import Dict, List

from .base import CamelModel
from .status import Role
from .user import User


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    message: str
    token: str
    user: User


class Principal(BaseModel):
    """Identity attached to a request by the auth gate."""
    id: int
    role: Role
    email: str

    @property
    def is_proctor(self) -> bool:
        return self.role == Role.PROCTOR


class DetectorPrincipal(BaseModel):
    name: str


class NavigationResponse(CamelModel):
    message: str
    role: Role
    home: str
    items: List[Dict[str, str]]
