from fastapi import APIRouter, Depends

from ....schemas.alert import StudentMonitoringResponse
from ....schemas.auth import Principal
from ....services.alert_service import AlertService
from ...deps import get_alert_service, require_proctor

router = APIRouter()


@router.get("/{exam_id}/student/{student_id}", response_model=StudentMonitoringResponse)
async def get_student_monitoring(
    exam_id: int,
    student_id: int,
    principal: Principal = Depends(require_proctor),
    alert_service: AlertService = Depends(get_alert_service)
):
    monitoring = alert_service.get_student_monitoring(principal, exam_id, student_id)
    return {"message": "Monitoring data retrieved", "monitoring": monitoring}
