from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ....schemas.alert import AlertCreate, AlertUpdate, AlertResponse, AlertWithStudentListResponse
from ....schemas.auth import DetectorPrincipal, Principal
from ....schemas.status import AlertStatus
from ....services.alert_service import AlertService
from ...deps import get_alert_service, require_detector, require_proctor

router = APIRouter()


@router.post("", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
async def create_alert(
    alert_data: AlertCreate,
    detector: DetectorPrincipal = Depends(require_detector),
    alert_service: AlertService = Depends(get_alert_service)
):
    alert = alert_service.create_alert(alert_data, source=detector.name)
    return {"message": "Alert created successfully", "alert": alert}


@router.get("/exam/{exam_id}", response_model=AlertWithStudentListResponse)
async def list_exam_alerts(
    exam_id: int,
    alert_status: Optional[AlertStatus] = Query(None, alias="status"),
    principal: Principal = Depends(require_proctor),
    alert_service: AlertService = Depends(get_alert_service)
):
    alerts = alert_service.list_for_exam(principal, exam_id, alert_status)
    return {"message": "Alerts retrieved", "alerts": alerts}


@router.put("/{alert_id}", response_model=AlertResponse)
async def update_alert_status(
    alert_id: int,
    update: AlertUpdate,
    principal: Principal = Depends(require_proctor),
    alert_service: AlertService = Depends(get_alert_service)
):
    alert = alert_service.update_status(principal, alert_id, update)
    return {"message": "Alert updated successfully", "alert": alert}
