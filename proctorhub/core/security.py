from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings
from .exceptions import InvalidTokenError
from ..schemas.auth import Principal, DetectorPrincipal
from ..schemas.status import Role


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DETECTOR_ROLE = "detector"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unparseable hash in storage
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Principal:
    """Verify signature and expiry of a user token and return its principal."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidTokenError()

    user_id = payload.get("id")
    role = payload.get("role")
    email = payload.get("email")
    if user_id is None or role not in Role.values() or email is None:
        raise InvalidTokenError()
    return Principal(id=user_id, role=Role(role), email=email)


def create_detector_token(name: str, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a service credential for an external detector.

    Signed with its own key, so an end-user token can never pass as one.
    """
    to_encode = {"sub": name, "role": DETECTOR_ROLE}
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.detector_token_expire_minutes)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.detector_secret_key, algorithm=settings.algorithm)


def decode_detector_token(token: str) -> DetectorPrincipal:
    try:
        payload = jwt.decode(token, settings.detector_secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidTokenError()

    if payload.get("role") != DETECTOR_ROLE or not payload.get("sub"):
        raise InvalidTokenError()
    return DetectorPrincipal(name=payload["sub"])
