from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from app.core import security
from app.core.config import settings
from app.db.repository import Repository, get_repository
from app.models.user import (
    Token, UserCreate, UserInDB, UserLogin, UserResponse, UserRole,
    LoginResponse, RegisterResponse,
)
from app.services.account_service import authenticate, register_user

router = APIRouter()


def _token_for(user: UserInDB) -> str:
    return security.create_access_token(user.id, role=user.role.value, email=user.email)


@router.post("/register", response_model=RegisterResponse)
async def register(
    user_in: UserCreate,
    repo: Repository = Depends(get_repository),
) -> Any:
    """Create a new user, worker or (when enabled) admin account."""
    if user_in.role == UserRole.ADMIN and not settings.ALLOW_ADMIN_SIGNUP:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered",
        )
    user = await register_user(repo, user_in)
    return RegisterResponse(
        message="Registered successfully",
        user=UserResponse.model_validate(user.model_dump()),
    )


@router.post("/login", response_model=Token)
async def login_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    repo: Repository = Depends(get_repository),
) -> Any:
    """OAuth2 compatible token login, get an access token for future requests."""
    user = await authenticate(repo, form_data.username, form_data.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    return {"access_token": _token_for(user), "token_type": "bearer"}


@router.post("/login/json", response_model=LoginResponse)
async def login_json(
    user_in: UserLogin,
    repo: Repository = Depends(get_repository),
) -> Any:
    """JSON login for the dashboard client; returns the token and the user."""
    user = await authenticate(repo, user_in.email, user_in.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")

    return LoginResponse(
        access_token=_token_for(user),
        token_type="bearer",
        user=UserResponse.model_validate(user.model_dump()),
    )
