from pydantic import Field
from typing import Any, List, Optional
from datetime import datetime

from .base import CamelModel
from .enrollment import Enrollment
from .status import AlertStatus
from .user import User


class AlertCreate(CamelModel):
    exam_id: int
    student_id: int
    type: str = Field(..., min_length=1)
    details: Optional[Any] = None


class AlertUpdate(CamelModel):
    status: AlertStatus


class Alert(CamelModel):
    id: int
    exam_id: int
    student_id: int
    type: str
    details: Optional[Any] = None
    status: AlertStatus = AlertStatus.NEW
    timestamp: datetime


class AlertWithStudent(Alert):
    student: Optional[User] = None


class AlertResponse(CamelModel):
    message: str
    alert: Alert


class AlertWithStudentListResponse(CamelModel):
    message: str
    alerts: List[AlertWithStudent]


class StudentMonitoring(CamelModel):
    student: Optional[User] = None
    enrollment: Optional[Enrollment] = None
    alerts: List[Alert]


class StudentMonitoringResponse(CamelModel):
    message: str
    monitoring: StudentMonitoring
