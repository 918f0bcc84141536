from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.sql import func

from ..core.database import Base, UTCDateTime


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    course = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(UTCDateTime, nullable=False)
    duration = Column(Integer, nullable=False)                 # minutes
    total_questions = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=False, index=True)
    proctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
