from fastapi import APIRouter, Depends, status

from ....schemas.auth import Principal
from ....schemas.exam import ExamCreate, ExamUpdate, ExamResponse, ExamListResponse, ExamStatsResponse
from ....services.exam_service import ExamService
from ...deps import get_current_principal, get_exam_service, require_proctor

router = APIRouter()


@router.post("", response_model=ExamResponse, status_code=status.HTTP_201_CREATED)
async def create_exam(
    exam_data: ExamCreate,
    principal: Principal = Depends(require_proctor),
    exam_service: ExamService = Depends(get_exam_service)
):
    exam = exam_service.create_exam(principal, exam_data)
    return {"message": "Exam created successfully", "exam": exam}


@router.get("", response_model=ExamListResponse)
async def list_my_exams(
    principal: Principal = Depends(require_proctor),
    exam_service: ExamService = Depends(get_exam_service)
):
    return {"message": "Exams retrieved", "exams": exam_service.list_for_proctor(principal)}


@router.get("/active", response_model=ExamListResponse)
async def list_active_exams(
    principal: Principal = Depends(get_current_principal),
    exam_service: ExamService = Depends(get_exam_service)
):
    return {"message": "Active exams retrieved", "exams": exam_service.list_active(principal)}


@router.get("/stats", response_model=ExamStatsResponse)
async def get_dashboard_stats(
    principal: Principal = Depends(require_proctor),
    exam_service: ExamService = Depends(get_exam_service)
):
    """Counts shown on the proctor dashboard"""
    return {"message": "Statistics retrieved", "stats": exam_service.get_stats(principal)}


@router.get("/{exam_id}", response_model=ExamResponse)
async def get_exam(
    exam_id: int,
    principal: Principal = Depends(get_current_principal),
    exam_service: ExamService = Depends(get_exam_service)
):
    return {"message": "Exam retrieved", "exam": exam_service.get_exam(exam_id)}


@router.put("/{exam_id}", response_model=ExamResponse)
async def update_exam(
    exam_id: int,
    exam_data: ExamUpdate,
    principal: Principal = Depends(require_proctor),
    exam_service: ExamService = Depends(get_exam_service)
):
    exam = exam_service.update_exam(principal, exam_id, exam_data)
    return {"message": "Exam updated successfully", "exam": exam}


@router.post("/{exam_id}/end", response_model=ExamResponse)
async def end_exam(
    exam_id: int,
    principal: Principal = Depends(require_proctor),
    exam_service: ExamService = Depends(get_exam_service)
):
    exam = exam_service.end_exam(principal, exam_id)
    return {"message": "Exam ended", "exam": exam}
