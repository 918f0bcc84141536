import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from proctorhub.core.config import settings
from proctorhub.core.exceptions import ProctorHubError
from proctorhub.api.v1.api import api_router
from proctorhub.middleware.performance import PerformanceMiddleware
from proctorhub.storage import get_storage, shutdown_storage
from proctorhub.utils.file_paths import PUBLIC_UPLOAD_PREFIX, ensure_upload_directory


logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Exam proctoring API: exams, enrollments and detector alerts",
    version="1.0.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None
)


app.add_middleware(
    PerformanceMiddleware,
    slow_request_threshold=settings.slow_request_threshold
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount(PUBLIC_UPLOAD_PREFIX, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.exception_handler(ProctorHubError)
async def proctorhub_exception_handler(request: Request, exc: ProctorHubError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid data provided", "error": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Server error"},
        headers={"X-Request-ID": getattr(request.state, "request_id", "unknown")},
    )


@app.on_event("startup")
async def startup_event():
    """Application startup tasks"""
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")

    ensure_upload_directory()
    get_storage()

    if not settings.detector_auth_required:
        logger.warning("Detector authentication is disabled: alert endpoints accept anonymous writes")

    logger.info(f"{settings.app_name} startup completed")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.app_name}...")
    shutdown_storage()


app.include_router(api_router, prefix="/api")


@app.get("/")
async def read_root():
    return {
        "message": f"Welcome to the {settings.app_name}!",
        "version": "1.0.0",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("proctorhub.main:app", host="0.0.0.0", port=settings.port)
