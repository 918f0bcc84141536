import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ....core.config import settings
from ....core.exceptions import ValidationError
from ....schemas.auth import Principal
from ....schemas.user import ProfileUpdate, UserResponse
from ....services.user_service import UserService
from ....utils.file_paths import build_upload_filename, ensure_upload_directory, get_public_upload_path
from ...deps import get_current_principal, get_user_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.put("", response_model=UserResponse)
async def update_profile(
    profile: ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.update_profile(principal.id, profile)
    return {"message": "Profile updated successfully", "user": user.public()}


@router.post("/upload", response_model=UserResponse)
async def upload_profile_picture(
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    principal: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service)
):
    if profile_picture is None or not profile_picture.filename:
        raise ValidationError("No file uploaded")

    if profile_picture.content_type not in settings.allowed_image_types:
        raise ValidationError("Invalid file type. Only JPEG, JPG and PNG are allowed.")

    content = await profile_picture.read(settings.max_upload_size + 1)
    if len(content) > settings.max_upload_size:
        raise ValidationError(
            "File too large",
            error=f"Maximum size is {settings.max_upload_size // (1024 * 1024)}MB",
        )

    filename = build_upload_filename(profile_picture.filename)
    file_path = os.path.join(ensure_upload_directory(), filename)
    with open(file_path, "wb") as buffer:
        buffer.write(content)
    logger.info(f"Saved profile picture for user {principal.id}: {file_path} ({len(content)} bytes)")

    user = user_service.set_profile_picture(principal.id, get_public_upload_path(filename))
    return {"message": "Profile picture uploaded successfully", "user": user.public()}
