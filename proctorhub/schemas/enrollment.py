from pydantic import Field
from typing import List, Optional
from datetime import datetime

from .base import CamelModel
from .exam import Exam
from .status import EnrollmentStatus
from .user import User


class EnrollmentCreate(CamelModel):
    exam_id: int


class EnrollmentUpdate(CamelModel):
    status: Optional[EnrollmentStatus] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    completion_percentage: Optional[int] = Field(None, ge=0, le=100)


class EnrollmentComplete(CamelModel):
    completion_percentage: int = Field(100, ge=0, le=100)


class Enrollment(CamelModel):
    id: int
    exam_id: int
    student_id: int
    status: EnrollmentStatus = EnrollmentStatus.ENROLLED
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    completion_percentage: int = 0


class EnrollmentWithExam(Enrollment):
    exam: Optional[Exam] = None


class EnrollmentWithStudent(Enrollment):
    student: Optional[User] = None


class EnrollmentResponse(CamelModel):
    message: str
    enrollment: Enrollment


class EnrollmentWithExamListResponse(CamelModel):
    message: str
    enrollments: List[EnrollmentWithExam]


class EnrollmentWithStudentListResponse(CamelModel):
    message: str
    enrollments: List[EnrollmentWithStudent]


class ExamSession(CamelModel):
    """Timed view of one attempt, as the exam-taking screen needs it."""
    enrollment: Enrollment
    exam: Exam
    deadline: Optional[datetime] = None
    seconds_remaining: Optional[int] = None


class ExamSessionResponse(CamelModel):
    message: str
    session: ExamSession
