from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.shared.schemas.common import BaseResponse


class UserRegister(BaseModel):
    """Schema para registro de usuario"""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del usuario")
    email: EmailStr = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=6, description="Contraseña del usuario")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name is required')
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ana Pérez",
                "email": "ana@example.com",
                "password": "secret123"
            }
        }


class UserLogin(BaseModel):
    """Schema para login de usuario"""
    email: EmailStr = Field(..., description="Email del usuario")
    password: str = Field(..., min_length=1, description="Contraseña del usuario")


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    """Schema para respuesta de usuario"""
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseResponse):
    """Schema para respuesta de token"""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: Optional[UserResponse] = None


class UserProfileResponse(BaseResponse):
    user: UserResponse


class TokenPayload(BaseModel):
    """Schema para payload del token"""
    user_id: int
    email: str
    type: str
    exp: Optional[datetime] = None
