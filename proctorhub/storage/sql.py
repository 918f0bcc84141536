"""
SQLAlchemy-backed storage.

Ids come from the database. Uniqueness of ``users.email`` and of
``enrollments(exam_id, student_id)`` is enforced by constraints, so the
check-then-insert race between concurrent requests is closed in the schema.
"""
import enum
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .base import Storage, normalize_email, strip_protected
from ..core.database import build_engine, build_session_factory, create_db_and_tables
from ..core.exceptions import ConflictError
from .. import models
from ..schemas.user import UserInDB
from ..schemas.exam import Exam
from ..schemas.enrollment import Enrollment
from ..schemas.alert import Alert
from ..utils.timezone import utc_now

logger = logging.getLogger(__name__)


def _column_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.value if isinstance(value, enum.Enum) else value
        for key, value in fields.items()
    }


class SqlStorage(Storage):

    def __init__(self, engine: Optional[Engine] = None, create_tables: bool = True):
        self.engine = engine or build_engine()
        self.SessionLocal = build_session_factory(self.engine)
        if create_tables:
            create_db_and_tables(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _get(self, model, schema: Type[BaseModel], record_id: int):
        with self._session() as db:
            row = db.get(model, record_id)
            return schema.model_validate(row) if row else None

    def _list(self, model, schema: Type[BaseModel], filters: Dict[str, Any]):
        with self._session() as db:
            rows = (
                db.query(model)
                .filter_by(**_column_values(filters))
                .order_by(model.id)
                .all()
            )
            return [schema.model_validate(row) for row in rows]

    def _create(self, model, schema: Type[BaseModel], fields: Dict[str, Any], conflict_message: str = None):
        try:
            with self._session() as db:
                row = model(**_column_values(fields))
                db.add(row)
                db.flush()
                db.refresh(row)
                return schema.model_validate(row)
        except IntegrityError as e:
            logger.warning(f"Integrity error creating {model.__tablename__}: {e.orig}")
            raise ConflictError(conflict_message or "Resource already exists")

    def _update(self, model, schema: Type[BaseModel], record_id: int, fields: Dict[str, Any],
                conflict_message: str = None):
        try:
            with self._session() as db:
                row = db.get(model, record_id)
                if row is None:
                    return None
                for field, value in _column_values(fields).items():
                    setattr(row, field, value)
                db.flush()
                db.refresh(row)
                return schema.model_validate(row)
        except IntegrityError as e:
            logger.warning(f"Integrity error updating {model.__tablename__} {record_id}: {e.orig}")
            raise ConflictError(conflict_message or "Resource already exists")

    # Users

    def get_user(self, user_id: int) -> Optional[UserInDB]:
        return self._get(models.User, UserInDB, user_id)

    def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        with self._session() as db:
            row = db.query(models.User).filter(models.User.email == email.strip().lower()).first()
            return UserInDB.model_validate(row) if row else None

    def list_users(self, **filters) -> List[UserInDB]:
        return self._list(models.User, UserInDB, filters)

    def create_user(self, fields: Dict[str, Any]) -> UserInDB:
        fields = {**normalize_email(strip_protected(fields)), "created_at": utc_now()}
        return self._create(models.User, UserInDB, fields, "User already exists with this email")

    def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[UserInDB]:
        return self._update(models.User, UserInDB, user_id, normalize_email(strip_protected(fields)),
                            "User already exists with this email")

    # Exams

    def get_exam(self, exam_id: int) -> Optional[Exam]:
        return self._get(models.Exam, Exam, exam_id)

    def list_exams(self, **filters) -> List[Exam]:
        return self._list(models.Exam, Exam, filters)

    def create_exam(self, fields: Dict[str, Any]) -> Exam:
        fields = {**strip_protected(fields), "created_at": utc_now()}
        return self._create(models.Exam, Exam, fields)

    def update_exam(self, exam_id: int, fields: Dict[str, Any]) -> Optional[Exam]:
        fields = strip_protected(fields, frozenset({"proctor_id"}))
        return self._update(models.Exam, Exam, exam_id, fields)

    # Enrollments

    def get_enrollment(self, enrollment_id: int) -> Optional[Enrollment]:
        return self._get(models.Enrollment, Enrollment, enrollment_id)

    def list_enrollments(self, **filters) -> List[Enrollment]:
        return self._list(models.Enrollment, Enrollment, filters)

    def create_enrollment(self, fields: Dict[str, Any]) -> Enrollment:
        return self._create(models.Enrollment, Enrollment, strip_protected(fields),
                            "Student already enrolled in this exam")

    def update_enrollment(self, enrollment_id: int, fields: Dict[str, Any]) -> Optional[Enrollment]:
        fields = strip_protected(fields, frozenset({"exam_id", "student_id"}))
        return self._update(models.Enrollment, Enrollment, enrollment_id, fields)

    # Alerts

    def get_alert(self, alert_id: int) -> Optional[Alert]:
        return self._get(models.Alert, Alert, alert_id)

    def list_alerts(self, **filters) -> List[Alert]:
        return self._list(models.Alert, Alert, filters)

    def create_alert(self, fields: Dict[str, Any]) -> Alert:
        fields = {**strip_protected(fields, frozenset({"timestamp"})), "timestamp": utc_now()}
        return self._create(models.Alert, Alert, fields)

    def update_alert(self, alert_id: int, fields: Dict[str, Any]) -> Optional[Alert]:
        fields = strip_protected(fields, frozenset({"timestamp", "exam_id", "student_id"}))
        return self._update(models.Alert, Alert, alert_id, fields)

    def close(self) -> None:
        self.engine.dispose()
