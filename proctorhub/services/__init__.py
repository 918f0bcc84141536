from .user_service import UserService
from .auth_service import AuthService
from .exam_service import ExamService
from .enrollment_service import EnrollmentService
from .alert_service import AlertService

__all__ = [
    "UserService",
    "AuthService",
    "ExamService",
    "EnrollmentService",
    "AlertService",
]
