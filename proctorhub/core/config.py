from pydantic import model_validator
from pydantic_settings import BaseSettings


INSECURE_SECRET_KEY = "proctorhub-dev-secret-key"
INSECURE_DETECTOR_SECRET_KEY = "proctorhub-dev-detector-key"


class Settings(BaseSettings):

    app_name: str = "ProctorHub API"
    port: int = 8000
    environment: str = "development"
    log_level: str = "INFO"


    secret_key: str = INSECURE_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24


    detector_secret_key: str = INSECURE_DETECTOR_SECRET_KEY
    detector_auth_required: bool = True
    detector_token_expire_minutes: int = 60 * 24 * 30


    storage_backend: str = "memory"
    database_url: str = "sqlite:///./proctorhub.db"
    database_echo: bool = False


    upload_dir: str = "uploads"
    max_upload_size: int = 5 * 1024 * 1024
    allowed_image_types_str: str = "image/jpeg,image/jpg,image/png"

    @property
    def allowed_image_types(self) -> list[str]:
        return [t.strip() for t in self.allowed_image_types_str.split(",") if t.strip()]


    cors_origins_str: str = "*"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins_str.split(",")]


    slow_request_threshold: float = 1.0

    @model_validator(mode="after")
    def _check_production_secrets(self) -> "Settings":
        if self.environment == "production":
            if self.secret_key == INSECURE_SECRET_KEY:
                raise ValueError("SECRET_KEY must be set in production")
            if self.detector_secret_key == INSECURE_DETECTOR_SECRET_KEY:
                raise ValueError("DETECTOR_SECRET_KEY must be set in production")
        if self.storage_backend not in ("memory", "sql"):
            raise ValueError(f"Unknown storage backend: {self.storage_backend}")
        return self

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
