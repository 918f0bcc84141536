import logging
from datetime import timedelta
from typing import Any, Dict, List

from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..schemas.auth import Principal
from ..schemas.enrollment import (
    Enrollment, EnrollmentCreate, EnrollmentUpdate,
    EnrollmentWithExam, EnrollmentWithStudent, ExamSession,
)
from ..schemas.status import EnrollmentStatus, Role
from ..storage.base import Storage
from ..utils.timezone import ensure_utc, seconds_until, utc_now
from .exam_service import ExamService

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Enrollment lifecycle: enrolled -> in-progress -> completed."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self.exam_service = ExamService(storage)

    def enroll(self, principal: Principal, enrollment_data: EnrollmentCreate) -> Enrollment:
        if principal.role != Role.STUDENT:
            raise ForbiddenError("Only students can enroll in exams")

        self.exam_service.get_exam(enrollment_data.exam_id)

        # the store rejects a duplicate pair atomically
        enrollment = self.storage.create_enrollment({
            "exam_id": enrollment_data.exam_id,
            "student_id": principal.id,
            "status": EnrollmentStatus.ENROLLED,
            "completion_percentage": 0,
        })
        logger.info(f"Student {principal.id} enrolled in exam {enrollment.exam_id}")
        return enrollment

    def list_for_student(self, principal: Principal) -> List[EnrollmentWithExam]:
        result = []
        for enrollment in self.storage.get_enrollments_by_student(principal.id):
            exam = self.storage.get_exam(enrollment.exam_id)
            result.append(EnrollmentWithExam(**enrollment.model_dump(), exam=exam))
        return result

    def list_for_exam(self, principal: Principal, exam_id: int) -> List[EnrollmentWithStudent]:
        self.exam_service.get_owned_exam(principal, exam_id)
        result = []
        for enrollment in self.storage.get_enrollments_by_exam(exam_id):
            student = self.storage.get_user(enrollment.student_id)
            result.append(EnrollmentWithStudent(
                **enrollment.model_dump(),
                student=student.public() if student else None,
            ))
        return result

    def get_enrollment(self, principal: Principal, enrollment_id: int) -> Enrollment:
        """Students reach their own enrollments; proctors those of exams they own."""
        enrollment = self.storage.get_enrollment(enrollment_id)
        if enrollment is None:
            raise NotFoundError("Enrollment not found")

        if principal.is_proctor:
            self.exam_service.get_owned_exam(principal, enrollment.exam_id)
        elif enrollment.student_id != principal.id:
            raise ForbiddenError("Access denied")
        return enrollment

    def update_enrollment(self, principal: Principal, enrollment_id: int,
                          update: EnrollmentUpdate) -> Enrollment:
        enrollment = self.get_enrollment(principal, enrollment_id)
        changes = {
            field: value
            for field, value in update.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not changes:
            return enrollment

        fields = self._apply_changes(principal, enrollment, changes)
        updated = self.storage.update_enrollment(enrollment_id, fields)
        if updated.status != enrollment.status:
            logger.info(
                f"Enrollment {enrollment_id} moved {enrollment.status.value} -> {updated.status.value}"
            )
        return updated

    def start(self, principal: Principal, enrollment_id: int) -> Enrollment:
        return self.update_enrollment(
            principal, enrollment_id, EnrollmentUpdate(status=EnrollmentStatus.IN_PROGRESS)
        )

    def complete(self, principal: Principal, enrollment_id: int, completion_percentage: int = 100) -> Enrollment:
        return self.update_enrollment(
            principal, enrollment_id,
            EnrollmentUpdate(status=EnrollmentStatus.COMPLETED, completion_percentage=completion_percentage),
        )

    def get_session(self, principal: Principal, enrollment_id: int) -> ExamSession:
        enrollment = self.get_enrollment(principal, enrollment_id)
        exam = self.exam_service.get_exam(enrollment.exam_id)

        deadline = None
        seconds_remaining = None
        if enrollment.start_time is not None:
            deadline = ensure_utc(enrollment.start_time) + timedelta(minutes=exam.duration)
            if enrollment.status == EnrollmentStatus.COMPLETED:
                seconds_remaining = 0
            else:
                seconds_remaining = seconds_until(deadline)

        return ExamSession(
            enrollment=enrollment,
            exam=exam,
            deadline=deadline,
            seconds_remaining=seconds_remaining,
        )

    def _apply_changes(self, principal: Principal, enrollment: Enrollment,
                       changes: Dict[str, Any]) -> Dict[str, Any]:
        fields = dict(changes)
        current = enrollment.status

        # the attempt clock is server-owned; only the exam's proctor may correct it
        if ("start_time" in changes or "end_time" in changes) and not principal.is_proctor:
            raise ForbiddenError("Only the exam proctor can set attempt times")
        if "start_time" in changes and enrollment.start_time is not None:
            if ensure_utc(changes["start_time"]) != ensure_utc(enrollment.start_time):
                raise ValidationError("Start time cannot be changed once the attempt has started")

        if "status" in changes:
            target = current.transition(changes["status"])
            if target != current:
                now = utc_now()
                if target == EnrollmentStatus.IN_PROGRESS and "start_time" not in changes:
                    fields["start_time"] = enrollment.start_time or now
                if target == EnrollmentStatus.COMPLETED and "end_time" not in changes:
                    fields["end_time"] = now
            fields["status"] = target

        if "completion_percentage" in changes:
            if changes["completion_percentage"] < enrollment.completion_percentage:
                raise ValidationError(
                    "Completion percentage cannot decrease",
                    error=f"current value is {enrollment.completion_percentage}",
                )

        start_time = fields.get("start_time", enrollment.start_time)
        end_time = fields.get("end_time", enrollment.end_time)
        if start_time and end_time and ensure_utc(end_time) < ensure_utc(start_time):
            raise ValidationError("End time cannot be before start time")

        return fields
