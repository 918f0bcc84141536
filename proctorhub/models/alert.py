from sqlalchemy import Column, Integer, String, ForeignKey, JSON

from ..core.database import Base, UTCDateTime


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)                      # face-not-visible, multiple-faces, ...
    details = Column(JSON)
    status = Column(String, nullable=False, default="new")     # new, reviewed, flagged, dismissed
    timestamp = Column(UTCDateTime, nullable=False)

    def __repr__(self):
        return f"<Alert {self.type} for exam {self.exam_id}>"
