from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    WORKER = "worker"
    ADMIN = "admin"


# Token Schemas
class Token(BaseModel):
    access_token: str
    token_type: str


# User Schemas
class UserBase(BaseModel):
    email: EmailStr
    name: str
    role: UserRole = UserRole.USER
    phone: str = ""
    address: str = ""
    occupation: str = ""


class UserCreate(UserBase):
    """Registration payload. Worker-only fields are ignored for other roles."""
    password: str = Field(min_length=6)
    service_types: List[str] = []
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    advance_payment: Optional[float] = Field(default=None, ge=0)
    available_times: Optional[str] = None
    bio: str = ""
    experience: str = ""
    location: str = ""


class UserInDB(UserBase):
    id: str
    password_hash: str
    is_active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class UserResponse(UserBase):
    id: str
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(Token):
    user: UserResponse


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
