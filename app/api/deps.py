from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from app.core import security
from app.core.config import settings
from app.db.repository import Repository, get_repository
from app.models.user import UserInDB, UserRole

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)
optional_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)


async def _user_from_token(token: str, repo: Repository) -> UserInDB:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = security.decode_token(token)
    if payload is None:
        raise credentials_exception
    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = await repo.get_user(user_id)
    if user is None:
        raise credentials_exception
    return user


async def get_current_user(
    token: str = Depends(reusable_oauth2),
    repo: Repository = Depends(get_repository),
) -> UserInDB:
    return await _user_from_token(token, repo)


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2),
    repo: Repository = Depends(get_repository),
) -> Optional[UserInDB]:
    """Like get_current_user, but anonymous or stale-token callers get None instead of a 401."""
    if token is None:
        return None
    payload = security.decode_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    return await repo.get_user(payload["sub"])


async def get_current_active_user(
    current_user: UserInDB = Depends(get_current_user),
) -> UserInDB:
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def _require_role(role: UserRole):
    async def dependency(
        current_user: UserInDB = Depends(get_current_active_user),
    ) -> UserInDB:
        if current_user.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="The user does not have enough privileges",
            )
        return current_user
    return dependency


get_current_customer = _require_role(UserRole.USER)
get_current_worker = _require_role(UserRole.WORKER)
get_current_admin = _require_role(UserRole.ADMIN)
