"""
Closed enumerations for roles and record states, with their transition rules.
"""
import enum
from typing import Dict, FrozenSet, List

from ..core.exceptions import ValidationError


class Role(str, enum.Enum):
    STUDENT = "student"
    PROCTOR = "proctor"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    def navigation(self) -> List[Dict[str, str]]:
        """Views a user with this role may navigate to"""
        return _NAVIGATION[self]

    def home(self) -> str:
        return self.navigation()[0]["path"]


_NAVIGATION = {
    Role.STUDENT: [
        {"label": "Dashboard", "path": "/student/dashboard"},
        {"label": "Exam", "path": "/student/exam"},
        {"label": "Settings", "path": "/settings"},
    ],
    Role.PROCTOR: [
        {"label": "Dashboard", "path": "/proctor/dashboard"},
        {"label": "Monitoring", "path": "/proctor/monitoring"},
        {"label": "Settings", "path": "/settings"},
    ],
}


class EnrollmentStatus(str, enum.Enum):
    ENROLLED = "enrolled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    def transition(self, target: "EnrollmentStatus") -> "EnrollmentStatus":
        """Return ``target`` if the move is allowed; re-asserting the current state is a no-op."""
        if target == self or target in _ENROLLMENT_TRANSITIONS[self]:
            return target
        raise ValidationError(
            f"Invalid enrollment status transition from '{self.value}' to '{target.value}'"
        )


_ENROLLMENT_TRANSITIONS: Dict[EnrollmentStatus, FrozenSet[EnrollmentStatus]] = {
    EnrollmentStatus.ENROLLED: frozenset({EnrollmentStatus.IN_PROGRESS}),
    EnrollmentStatus.IN_PROGRESS: frozenset({EnrollmentStatus.COMPLETED}),
    EnrollmentStatus.COMPLETED: frozenset(),
}


class AlertStatus(str, enum.Enum):
    NEW = "new"
    REVIEWED = "reviewed"
    FLAGGED = "flagged"
    DISMISSED = "dismissed"

    @classmethod
    def review_states(cls) -> FrozenSet["AlertStatus"]:
        return frozenset({cls.REVIEWED, cls.FLAGGED, cls.DISMISSED})

    def transition(self, target: "AlertStatus") -> "AlertStatus":
        # a reviewed alert may be re-classified but never reopened
        if target == self or target in AlertStatus.review_states():
            return target
        raise ValidationError(
            f"Invalid alert status transition from '{self.value}' to '{target.value}'"
        )
