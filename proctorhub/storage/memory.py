"""
In-memory storage, for tests and demos.

One dict and one id counter per entity type. A single lock covers id
assignment and the uniqueness indexes (email, exam/student pair) because
FastAPI runs sync dependencies on a threadpool.
"""
import itertools
import logging
import threading
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

from .base import Storage, normalize_email, strip_protected
from ..core.exceptions import ConflictError
from ..schemas.user import UserInDB
from ..schemas.exam import Exam
from ..schemas.enrollment import Enrollment
from ..schemas.alert import Alert
from ..utils.timezone import utc_now

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _Table(Generic[RecordT]):
    def __init__(self, schema: Type[RecordT]):
        self.schema = schema
        self.rows: Dict[int, RecordT] = {}
        self.ids = itertools.count(1)

    def get(self, record_id: int) -> Optional[RecordT]:
        row = self.rows.get(record_id)
        return row.model_copy(deep=True) if row else None

    def select(self, filters: Dict[str, Any]) -> List[RecordT]:
        unknown = set(filters) - set(self.schema.model_fields)
        if unknown:
            raise ValueError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")
        return [
            row.model_copy(deep=True)
            for _, row in sorted(self.rows.items())
            if all(getattr(row, key) == value for key, value in filters.items())
        ]

    def insert(self, fields: Dict[str, Any]) -> RecordT:
        record_id = next(self.ids)
        row = self.schema.model_validate({**fields, "id": record_id})
        self.rows[record_id] = row
        return row.model_copy(deep=True)

    def replace(self, record_id: int, fields: Dict[str, Any]) -> RecordT:
        current = self.rows[record_id]
        row = self.schema.model_validate({**current.model_dump(), **fields})
        self.rows[record_id] = row
        return row.model_copy(deep=True)


class MemoryStorage(Storage):

    def __init__(self):
        self._lock = threading.Lock()
        self._users = _Table(UserInDB)
        self._exams = _Table(Exam)
        self._enrollments = _Table(Enrollment)
        self._alerts = _Table(Alert)
        self._user_ids_by_email: Dict[str, int] = {}
        self._enrollment_ids_by_pair: Dict[Tuple[int, int], int] = {}

    # Users

    def get_user(self, user_id: int) -> Optional[UserInDB]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self._lock:
            user_id = self._user_ids_by_email.get(email.strip().lower())
            return self._users.get(user_id) if user_id is not None else None

    def list_users(self, **filters) -> List[UserInDB]:
        with self._lock:
            return self._users.select(filters)

    def create_user(self, fields: Dict[str, Any]) -> UserInDB:
        fields = normalize_email(strip_protected(fields))
        key = fields["email"]
        with self._lock:
            if key in self._user_ids_by_email:
                raise ConflictError("User already exists with this email")
            user = self._users.insert({**fields, "created_at": utc_now()})
            self._user_ids_by_email[key] = user.id
        return user

    def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[UserInDB]:
        fields = normalize_email(strip_protected(fields))
        with self._lock:
            current = self._users.rows.get(user_id)
            if current is None:
                return None
            old_key = current.email
            new_key = fields.get("email", current.email)
            if new_key != old_key and new_key in self._user_ids_by_email:
                raise ConflictError("User already exists with this email")
            user = self._users.replace(user_id, fields)
            if new_key != old_key:
                del self._user_ids_by_email[old_key]
                self._user_ids_by_email[new_key] = user_id
        return user

    # Exams

    def get_exam(self, exam_id: int) -> Optional[Exam]:
        with self._lock:
            return self._exams.get(exam_id)

    def list_exams(self, **filters) -> List[Exam]:
        with self._lock:
            return self._exams.select(filters)

    def create_exam(self, fields: Dict[str, Any]) -> Exam:
        fields = strip_protected(fields)
        with self._lock:
            return self._exams.insert({**fields, "created_at": utc_now()})

    def update_exam(self, exam_id: int, fields: Dict[str, Any]) -> Optional[Exam]:
        fields = strip_protected(fields, frozenset({"proctor_id"}))
        with self._lock:
            if exam_id not in self._exams.rows:
                return None
            return self._exams.replace(exam_id, fields)

    # Enrollments

    def get_enrollment(self, enrollment_id: int) -> Optional[Enrollment]:
        with self._lock:
            return self._enrollments.get(enrollment_id)

    def list_enrollments(self, **filters) -> List[Enrollment]:
        with self._lock:
            if set(filters) == {"exam_id", "student_id"}:
                enrollment_id = self._enrollment_ids_by_pair.get((filters["exam_id"], filters["student_id"]))
                return [self._enrollments.get(enrollment_id)] if enrollment_id is not None else []
            return self._enrollments.select(filters)

    def create_enrollment(self, fields: Dict[str, Any]) -> Enrollment:
        fields = strip_protected(fields)
        pair = (fields["exam_id"], fields["student_id"])
        with self._lock:
            if pair in self._enrollment_ids_by_pair:
                raise ConflictError("Student already enrolled in this exam")
            enrollment = self._enrollments.insert(fields)
            self._enrollment_ids_by_pair[pair] = enrollment.id
        return enrollment

    def update_enrollment(self, enrollment_id: int, fields: Dict[str, Any]) -> Optional[Enrollment]:
        fields = strip_protected(fields, frozenset({"exam_id", "student_id"}))
        with self._lock:
            if enrollment_id not in self._enrollments.rows:
                return None
            return self._enrollments.replace(enrollment_id, fields)

    # Alerts

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        with self._lock:
            return self._alerts.get(alert_id)

    def list_alerts(self, **filters) -> List[Alert]:
        with self._lock:
            return self._alerts.select(filters)

    def create_alert(self, fields: Dict[str, Any]) -> Alert:
        fields = strip_protected(fields, frozenset({"timestamp"}))
        with self._lock:
            return self._alerts.insert({**fields, "timestamp": utc_now()})

    def update_alert(self, alert_id: int, fields: Dict[str, Any]) -> Optional[Alert]:
        fields = strip_protected(fields, frozenset({"timestamp", "exam_id", "student_id"}))
        with self._lock:
            if alert_id not in self._alerts.rows:
                return None
            return self._alerts.replace(alert_id, fields)
