import logging
from typing import List, Optional

from ..core.exceptions import NotFoundError
from ..schemas.alert import Alert, AlertCreate, AlertUpdate, AlertWithStudent, StudentMonitoring
from ..schemas.auth import Principal
from ..schemas.status import AlertStatus
from ..storage.base import Storage
from ..utils.timezone import ensure_utc
from .exam_service import ExamService

logger = logging.getLogger(__name__)


class AlertService:
    """Alerts come from the external detector and are reviewed by the exam's proctor."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self.exam_service = ExamService(storage)

    def create_alert(self, alert_data: AlertCreate, source: str = "detector") -> Alert:
        self.exam_service.get_exam(alert_data.exam_id)
        if self.storage.get_user(alert_data.student_id) is None:
            raise NotFoundError("Student not found")

        alert = self.storage.create_alert({
            "exam_id": alert_data.exam_id,
            "student_id": alert_data.student_id,
            "type": alert_data.type,
            "details": alert_data.details,
            "status": AlertStatus.NEW,
        })
        logger.info(
            f"Alert {alert.id} ({alert.type}) from {source} for student {alert.student_id} "
            f"in exam {alert.exam_id}"
        )
        return alert

    def list_for_exam(self, principal: Principal, exam_id: int,
                      status: Optional[AlertStatus] = None) -> List[AlertWithStudent]:
        self.exam_service.get_owned_exam(principal, exam_id)

        filters = {"exam_id": exam_id}
        if status is not None:
            filters["status"] = status
        alerts = sorted(
            self.storage.list_alerts(**filters),
            key=lambda a: (ensure_utc(a.timestamp), a.id),
            reverse=True,
        )

        students = {}
        result = []
        for alert in alerts:
            if alert.student_id not in students:
                student = self.storage.get_user(alert.student_id)
                students[alert.student_id] = student.public() if student else None
            result.append(AlertWithStudent(**alert.model_dump(), student=students[alert.student_id]))
        return result

    def update_status(self, principal: Principal, alert_id: int, update: AlertUpdate) -> Alert:
        alert = self.storage.get_alert(alert_id)
        if alert is None:
            raise NotFoundError("Alert not found")

        self.exam_service.get_owned_exam(principal, alert.exam_id)

        target = alert.status.transition(update.status)
        if target == alert.status:
            return alert

        updated = self.storage.update_alert(alert_id, {"status": target})
        logger.info(f"Alert {alert_id} moved {alert.status.value} -> {target.value} by proctor {principal.id}")
        return updated

    def get_student_monitoring(self, principal: Principal, exam_id: int, student_id: int) -> StudentMonitoring:
        self.exam_service.get_owned_exam(principal, exam_id)

        student = self.storage.get_user(student_id)
        enrollment = self.storage.get_enrollment_for(exam_id, student_id)
        if student is None and enrollment is None:
            raise NotFoundError("Student not found")

        alerts = self.storage.list_alerts(exam_id=exam_id, student_id=student_id)
        return StudentMonitoring(
            student=student.public() if student else None,
            enrollment=enrollment,
            alerts=alerts,
        )
