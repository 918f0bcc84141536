from sqlalchemy import Column, Integer, String
from sqlalchemy.sql import func

from ..core.database import Base, UTCDateTime


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")
    profile_picture = Column(String, nullable=True)
    created_at = Column(UTCDateTime, server_default=func.now())
