import json

import pydantic
from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError

from ..config import Settings
from ..dependencies import get_app_settings, get_current_user, get_user_repository
from ..limiter import limiter
from ..schemas.auth import Token, UserCreate, UserLogin, UserResponse
from ..services.auth_service import AuthService

router = APIRouter(prefix="/api/users", tags=["users"])


async def get_auth_service(
    user_repo=Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(user_repo, settings)


async def read_login_credentials(request: Request) -> UserLogin:
    """
    Credentials from a JSON body (web client) or an OAuth2 password form
    (Swagger UI and OAuth2 tooling).
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            data = await request.json()
            if not isinstance(data, dict):
                raise RequestValidationError(
                    [{"type": "dict_type", "loc": ("body",), "msg": "Input should be an object", "input": data}]
                )
        else:
            form = await request.form()
            data = {"username": form.get("username"), "password": form.get("password")}
        return UserLogin(**data)
    except json.JSONDecodeError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body", e.pos), "msg": "JSON decode error", "input": {}}]
        ) from e
    except pydantic.ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def register(
    user_data: UserCreate,
    request: Request,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    user_id = await service.register_user(user_data)
    return {"id": user_id, "username": user_data.username, "message": "User registered successfully"}


@router.post("/login", response_model=Token)
@limiter.limit("10/minute")
async def login(
    request: Request,
    login_data: UserLogin = Depends(read_login_credentials),
    service: AuthService = Depends(get_auth_service)
):
    """Login to get JWT token"""
    return await service.authenticate_user(login_data)


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    return user
