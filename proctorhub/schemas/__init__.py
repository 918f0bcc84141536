from .status import Role, EnrollmentStatus, AlertStatus
from .auth import LoginRequest, LoginResponse, Principal, DetectorPrincipal, NavigationResponse
from .user import User, UserCreate, UserInDB, ProfileUpdate, UserResponse
from .exam import Exam, ExamCreate, ExamUpdate, ExamResponse, ExamListResponse, ExamStats, ExamStatsResponse
from .enrollment import (
    Enrollment, EnrollmentCreate, EnrollmentUpdate, EnrollmentComplete,
    EnrollmentWithExam, EnrollmentWithStudent, ExamSession,
)
from .alert import Alert, AlertCreate, AlertUpdate, AlertWithStudent, StudentMonitoring

__all__ = [
    "Role",
    "EnrollmentStatus",
    "AlertStatus",
    "LoginRequest",
    "LoginResponse",
    "Principal",
    "DetectorPrincipal",
    "NavigationResponse",
    "User",
    "UserCreate",
    "UserInDB",
    "ProfileUpdate",
    "UserResponse",
    "Exam",
    "ExamCreate",
    "ExamUpdate",
    "ExamResponse",
    "ExamListResponse",
    "ExamStats",
    "ExamStatsResponse",
    "Enrollment",
    "EnrollmentCreate",
    "EnrollmentUpdate",
    "EnrollmentComplete",
    "EnrollmentWithExam",
    "EnrollmentWithStudent",
    "ExamSession",
    "Alert",
    "AlertCreate",
    "AlertUpdate",
    "AlertWithStudent",
    "StudentMonitoring",
]
