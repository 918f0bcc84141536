from fastapi import APIRouter, Depends

from ....schemas.auth import NavigationResponse, Principal
from ...deps import get_current_principal

router = APIRouter()


@router.get("", response_model=NavigationResponse)
async def get_navigation(principal: Principal = Depends(get_current_principal)):
    """Views available to the caller, dispatched on their role."""
    return {
        "message": "Navigation retrieved",
        "role": principal.role,
        "home": principal.role.home(),
        "items": principal.role.navigation(),
    }
