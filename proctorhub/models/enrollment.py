from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from ..core.database import Base, UTCDateTime


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("exam_id", "student_id", name="uq_enrollment_exam_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default="enrolled")    # enrolled, in-progress, completed
    start_time = Column(UTCDateTime, nullable=True)
    end_time = Column(UTCDateTime, nullable=True)
    completion_percentage = Column(Integer, default=0)

    def __repr__(self):
        return f"<Enrollment exam={self.exam_id} student={self.student_id} {self.status}>"
