from fastapi import APIRouter

from .endpoints import auth, profile, navigation, exams, enrollments, alerts, ml, monitoring, health

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(navigation.router, prefix="/navigation", tags=["navigation"])
api_router.include_router(exams.router, prefix="/exams", tags=["exams"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["enrollments"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(ml.router, prefix="/ml", tags=["ml"])
api_router.include_router(monitoring.router, prefix="/monitoring", tags=["monitoring"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
