from fastapi import APIRouter, Depends, status

from ....schemas.alert import AlertCreate, AlertResponse
from ....schemas.auth import DetectorPrincipal
from ....services.alert_service import AlertService
from ...deps import get_alert_service, require_detector

router = APIRouter()


@router.post("/proctoring", response_model=AlertResponse, status_code=status.HTTP_201_CREATED)
async def receive_proctoring_result(
    result: AlertCreate,
    detector: DetectorPrincipal = Depends(require_detector),
    alert_service: AlertService = Depends(get_alert_service)
):
    """Turn one detector finding into a new alert"""
    alert = alert_service.create_alert(result, source=detector.name)
    return {"message": "Proctoring alert created", "alert": alert}
