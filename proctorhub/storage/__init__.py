import logging
from typing import Optional

from .base import Storage
from .memory import MemoryStorage
from ..core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

_storage: Optional[Storage] = None


def create_storage(config: Optional[Settings] = None) -> Storage:
    """Build the backend named by ``storage_backend``."""
    config = config or default_settings
    if config.storage_backend == "sql":
        from .sql import SqlStorage
        from ..core.database import build_engine

        logger.info("Using SQL storage backend")
        return SqlStorage(build_engine(config.database_url, config.database_echo))

    logger.info("Using in-memory storage backend")
    return MemoryStorage()


def get_storage() -> Storage:
    """Process-wide storage instance, created on first use."""
    global _storage
    if _storage is None:
        _storage = create_storage()
    return _storage


def shutdown_storage() -> None:
    global _storage
    if _storage is not None:
        _storage.close()
        _storage = None


__all__ = ["Storage", "MemoryStorage", "create_storage", "get_storage", "shutdown_storage"]
