"""
Paths for uploaded files
"""
import os
import re
import time

from ..core.config import settings

PUBLIC_UPLOAD_PREFIX = "/uploads"


def ensure_upload_directory() -> str:
    """Create the upload directory if needed and return its absolute path"""
    full_dir = os.path.abspath(settings.upload_dir)
    os.makedirs(full_dir, exist_ok=True)
    return full_dir


def build_upload_filename(original_name: str) -> str:
    """Timestamp-prefixed name with anything outside [A-Za-z0-9._-] replaced"""
    base = os.path.basename(original_name or "upload")
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", base) or "upload"
    return f"{int(time.time() * 1000)}-{safe}"


def get_public_upload_path(filename: str) -> str:
    return f"{PUBLIC_UPLOAD_PREFIX}/{filename}"
