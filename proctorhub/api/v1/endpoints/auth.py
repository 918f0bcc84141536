from fastapi import APIRouter, Depends, status

from ....schemas.auth import LoginRequest, LoginResponse, Principal
from ....schemas.user import UserCreate, UserResponse
from ....services.auth_service import AuthService
from ...deps import get_auth_service, get_current_principal

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    user = auth_service.register(user_data)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    token, user = auth_service.authenticate_and_create_token(credentials.email, credentials.password)
    return {"message": "Login successful", "token": token, "user": user}


@router.get("/me", response_model=UserResponse)
async def read_users_me(
    principal: Principal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service)
):
    return {"message": "User retrieved", "user": auth_service.get_current_user(principal)}
