import logging
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.config import settings
from ..core.exceptions import AuthenticationError, ForbiddenError
from ..core.security import decode_access_token, decode_detector_token
from ..schemas.auth import Principal, DetectorPrincipal
from ..services import AuthService, ExamService, EnrollmentService, AlertService, UserService
from ..storage import Storage, get_storage

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication token required")
    return decode_access_token(credentials.credentials)


def require_proctor(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.is_proctor:
        raise ForbiddenError("Access denied. Proctor role required")
    return principal


def require_detector(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_detector_token: Optional[str] = Header(None),
) -> DetectorPrincipal:
    if not settings.detector_auth_required:
        return DetectorPrincipal(name="anonymous")

    token = x_detector_token or (credentials.credentials if credentials else None)
    if not token:
        raise AuthenticationError("Detector token required")
    return decode_detector_token(token)


def get_auth_service(storage: Storage = Depends(get_storage)) -> AuthService:
    return AuthService(storage)


def get_user_service(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage)


def get_exam_service(storage: Storage = Depends(get_storage)) -> ExamService:
    return ExamService(storage)


def get_enrollment_service(storage: Storage = Depends(get_storage)) -> EnrollmentService:
    return EnrollmentService(storage)


def get_alert_service(storage: Storage = Depends(get_storage)) -> AlertService:
    return AlertService(storage)
