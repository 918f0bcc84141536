from typing import Optional

from fastapi import APIRouter, Depends, status

from ....schemas.auth import Principal
from ....schemas.enrollment import (
    EnrollmentCreate, EnrollmentUpdate, EnrollmentComplete, EnrollmentResponse,
    EnrollmentWithExamListResponse, EnrollmentWithStudentListResponse, ExamSessionResponse,
)
from ....services.enrollment_service import EnrollmentService
from ...deps import get_current_principal, get_enrollment_service, require_proctor

router = APIRouter()


@router.post("", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll(
    enrollment_data: EnrollmentCreate,
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    enrollment = enrollment_service.enroll(principal, enrollment_data)
    return {"message": "Enrolled successfully", "enrollment": enrollment}


@router.get("/student", response_model=EnrollmentWithExamListResponse)
async def list_my_enrollments(
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    return {"message": "Enrollments retrieved", "enrollments": enrollment_service.list_for_student(principal)}


@router.get("/exam/{exam_id}", response_model=EnrollmentWithStudentListResponse)
async def list_exam_enrollments(
    exam_id: int,
    principal: Principal = Depends(require_proctor),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    enrollments = enrollment_service.list_for_exam(principal, exam_id)
    return {"message": "Enrollments retrieved", "enrollments": enrollments}


@router.put("/{enrollment_id}", response_model=EnrollmentResponse)
async def update_enrollment(
    enrollment_id: int,
    update: EnrollmentUpdate,
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    enrollment = enrollment_service.update_enrollment(principal, enrollment_id, update)
    return {"message": "Enrollment updated successfully", "enrollment": enrollment}


@router.post("/{enrollment_id}/start", response_model=EnrollmentResponse)
async def start_exam(
    enrollment_id: int,
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    enrollment = enrollment_service.start(principal, enrollment_id)
    return {"message": "Exam started", "enrollment": enrollment}


@router.post("/{enrollment_id}/complete", response_model=EnrollmentResponse)
async def complete_exam(
    enrollment_id: int,
    body: Optional[EnrollmentComplete] = None,
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    completion = body.completion_percentage if body else 100
    enrollment = enrollment_service.complete(principal, enrollment_id, completion)
    return {"message": "Exam completed", "enrollment": enrollment}


@router.get("/{enrollment_id}/session", response_model=ExamSessionResponse)
async def get_exam_session(
    enrollment_id: int,
    principal: Principal = Depends(get_current_principal),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service)
):
    """Deadline and remaining time for the exam-taking screen"""
    session = enrollment_service.get_session(principal, enrollment_id)
    return {"message": "Exam session retrieved", "session": session}
