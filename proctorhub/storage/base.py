"""
Storage interface shared by the in-memory and SQL backends.

Every entity type gets the same four operations: ``get``, ``list`` with
equality filters, ``create`` and ``update``. Records are never deleted.
Ids and creation timestamps are assigned here, never by callers.
"""
import abc
from typing import Any, Dict, List, Optional

from ..schemas.user import UserInDB
from ..schemas.exam import Exam
from ..schemas.enrollment import Enrollment
from ..schemas.alert import Alert

PROTECTED_FIELDS = frozenset({"id", "created_at"})


def strip_protected(fields: Dict[str, Any], extra: frozenset = frozenset()) -> Dict[str, Any]:
    """Drop fields a caller is never allowed to set."""
    blocked = PROTECTED_FIELDS | extra
    return {key: value for key, value in fields.items() if key not in blocked}


def normalize_email(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Emails are stored lowercased so uniqueness and lookup ignore case."""
    if fields.get("email"):
        fields = {**fields, "email": fields["email"].strip().lower()}
    return fields


class Storage(abc.ABC):

    # Users

    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[UserInDB]:
        ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        ...

    @abc.abstractmethod
    def list_users(self, **filters) -> List[UserInDB]:
        ...

    @abc.abstractmethod
    def create_user(self, fields: Dict[str, Any]) -> UserInDB:
        """Raises ConflictError when the email is taken."""

    @abc.abstractmethod
    def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[UserInDB]:
        ...

    # Exams

    @abc.abstractmethod
    def get_exam(self, exam_id: int) -> Optional[Exam]:
        ...

    @abc.abstractmethod
    def list_exams(self, **filters) -> List[Exam]:
        ...

    @abc.abstractmethod
    def create_exam(self, fields: Dict[str, Any]) -> Exam:
        ...

    @abc.abstractmethod
    def update_exam(self, exam_id: int, fields: Dict[str, Any]) -> Optional[Exam]:
        ...

    def get_exams_by_proctor(self, proctor_id: int) -> List[Exam]:
        return self.list_exams(proctor_id=proctor_id)

    def get_active_exams(self) -> List[Exam]:
        return self.list_exams(is_active=True)

    # Enrollments

    @abc.abstractmethod
    def get_enrollment(self, enrollment_id: int) -> Optional[Enrollment]:
        ...

    @abc.abstractmethod
    def list_enrollments(self, **filters) -> List[Enrollment]:
        ...

    @abc.abstractmethod
    def create_enrollment(self, fields: Dict[str, Any]) -> Enrollment:
        """Raises ConflictError when the (exam, student) pair already exists."""

    @abc.abstractmethod
    def update_enrollment(self, enrollment_id: int, fields: Dict[str, Any]) -> Optional[Enrollment]:
        ...

    def get_enrollments_by_student(self, student_id: int) -> List[Enrollment]:
        return self.list_enrollments(student_id=student_id)

    def get_enrollments_by_exam(self, exam_id: int) -> List[Enrollment]:
        return self.list_enrollments(exam_id=exam_id)

    def get_enrollment_for(self, exam_id: int, student_id: int) -> Optional[Enrollment]:
        found = self.list_enrollments(exam_id=exam_id, student_id=student_id)
        return found[0] if found else None

    # Alerts

    @abc.abstractmethod
    def get_alert(self, alert_id: int) -> Optional[Alert]:
        ...

    @abc.abstractmethod
    def list_alerts(self, **filters) -> List[Alert]:
        ...

    @abc.abstractmethod
    def create_alert(self, fields: Dict[str, Any]) -> Alert:
        ...

    @abc.abstractmethod
    def update_alert(self, alert_id: int, fields: Dict[str, Any]) -> Optional[Alert]:
        ...

    def get_alerts_by_exam(self, exam_id: int) -> List[Alert]:
        return self.list_alerts(exam_id=exam_id)

    def get_alerts_by_student(self, student_id: int) -> List[Alert]:
        return self.list_alerts(student_id=student_id)

    def close(self) -> None:
        pass
