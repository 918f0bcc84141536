from .user import User
from .exam import Exam
from .enrollment import Enrollment
from .alert import Alert

__all__ = [
    "User",
    "Exam",
    "Enrollment",
    "Alert",
]
