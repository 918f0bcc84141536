import logging
from typing import List

from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..schemas.auth import Principal
from ..schemas.exam import Exam, ExamCreate, ExamUpdate, ExamStats
from ..schemas.status import AlertStatus, EnrollmentStatus
from ..storage.base import Storage

logger = logging.getLogger(__name__)

NOT_OWNER_MESSAGE = "Access denied. You do not own this exam"

# may be set, but never to null
REQUIRED_EXAM_FIELDS = ("name", "course", "date", "duration", "total_questions", "is_active")


class ExamService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def create_exam(self, principal: Principal, exam_data: ExamCreate) -> Exam:
        fields = exam_data.model_dump()
        fields["proctor_id"] = principal.id
        exam = self.storage.create_exam(fields)
        logger.info(f"Proctor {principal.id} created exam {exam.id}")
        return exam

    def list_for_proctor(self, principal: Principal) -> List[Exam]:
        return self.storage.get_exams_by_proctor(principal.id)

    def list_active(self, principal: Principal) -> List[Exam]:
        """Proctors see their own active exams; students see every active exam."""
        if principal.is_proctor:
            return [exam for exam in self.storage.get_exams_by_proctor(principal.id) if exam.is_active]
        return self.storage.get_active_exams()

    def get_exam(self, exam_id: int) -> Exam:
        exam = self.storage.get_exam(exam_id)
        if exam is None:
            raise NotFoundError("Exam not found")
        return exam

    def get_owned_exam(self, principal: Principal, exam_id: int) -> Exam:
        exam = self.get_exam(exam_id)
        if exam.proctor_id != principal.id:
            logger.warning(f"User {principal.id} denied access to exam {exam_id}")
            raise ForbiddenError(NOT_OWNER_MESSAGE)
        return exam

    def update_exam(self, principal: Principal, exam_id: int, exam_data: ExamUpdate) -> Exam:
        exam = self.get_owned_exam(principal, exam_id)

        update_data = exam_data.model_dump(exclude_unset=True)
        for field in REQUIRED_EXAM_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValidationError(f"Field '{field}' cannot be null")

        if exam.is_active and update_data.get("is_active") is False:
            self._ensure_can_deactivate(exam)

        updated = self.storage.update_exam(exam_id, update_data)
        logger.info(f"Exam {exam_id} updated: {', '.join(sorted(update_data)) or 'no changes'}")
        return updated

    def end_exam(self, principal: Principal, exam_id: int) -> Exam:
        exam = self.get_owned_exam(principal, exam_id)
        if not exam.is_active:
            return exam
        self._ensure_can_deactivate(exam)
        logger.info(f"Exam {exam_id} ended by proctor {principal.id}")
        return self.storage.update_exam(exam_id, {"is_active": False})

    def _ensure_can_deactivate(self, exam: Exam) -> None:
        in_progress = [
            enrollment for enrollment in self.storage.get_enrollments_by_exam(exam.id)
            if enrollment.status == EnrollmentStatus.IN_PROGRESS
        ]
        if in_progress:
            raise ConflictError(
                "Cannot deactivate an exam while students are taking it",
                error=f"{len(in_progress)} enrollment(s) in progress",
            )

    def get_stats(self, principal: Principal) -> ExamStats:
        exams = self.storage.get_exams_by_proctor(principal.id)
        students = set()
        pending_alerts = 0
        for exam in exams:
            students.update(e.student_id for e in self.storage.get_enrollments_by_exam(exam.id))
            pending_alerts += len(self.storage.list_alerts(exam_id=exam.id, status=AlertStatus.NEW))
        return ExamStats(
            total_exams=len(exams),
            active_exams=sum(1 for exam in exams if exam.is_active),
            total_students=len(students),
            pending_alerts=pending_alerts,
        )
