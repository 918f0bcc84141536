from pydantic import Field
from typing import List, Optional
from datetime import datetime

from .base import CamelModel


class ExamBase(CamelModel):
    name: str = Field(..., min_length=1)
    course: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: datetime
    duration: int = Field(..., gt=0, description="Minutes")
    total_questions: int = Field(..., gt=0)
    is_active: bool = False


class ExamCreate(ExamBase):
    pass


class ExamUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    course: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    duration: Optional[int] = Field(None, gt=0)
    total_questions: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class Exam(ExamBase):
    id: int
    proctor_id: int
    created_at: Optional[datetime] = None


class ExamResponse(CamelModel):
    message: str
    exam: Exam


class ExamListResponse(CamelModel):
    message: str
    exams: List[Exam]


class ExamStats(CamelModel):
    total_exams: int
    active_exams: int
    total_students: int
    pending_alerts: int


class ExamStatsResponse(CamelModel):
    message: str
    stats: ExamStats
