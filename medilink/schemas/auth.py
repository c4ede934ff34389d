from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Optional

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=2)
    phone: Optional[str] = None
    address: Optional[str] = None

class AuthUser(BaseModel):
    id: UUID
    email: str

class AuthSession(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: AuthUser
    expires_at: datetime

class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    expires_at: datetime
    user: AuthUser
    role: Optional[str] = None
    redirect_to: str

class MeResponse(BaseModel):
    user: AuthUser
    role: Optional[str] = None
    resolution: str
