# app/modules/customers/schemas.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.shared.schemas.common import BaseResponse


class Address(BaseModel):
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=3, max_length=20, pattern=r"^[A-Za-z0-9 \-]+$")
    country: str = Field(..., min_length=1, max_length=100)

    @field_validator('street', 'city', 'state', 'zip_code', 'country')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip()


class CustomerCreate(BaseModel):
    """Schema para crear un cliente"""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del cliente")
    email: EmailStr
    mobile_number: str = Field(..., pattern=r"^\d{10,15}$", description="10 a 15 dígitos")
    address: Address

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Customer name is required')
        return v.strip()

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class CustomerUpdate(CustomerCreate):
    """El cliente se reemplaza completo, igual que al crearlo"""


class CustomerOut(BaseModel):
    id: int
    name: str
    email: str
    mobile_number: str
    address: Address
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerSummary(BaseModel):
    """Forma resuelta de un cliente referenciado desde una venta"""
    id: int
    name: str
    email: str
    mobile_number: str

    class Config:
        from_attributes = True


class CustomerResponse(BaseResponse):
    customer: CustomerOut


class CustomerListResponse(BaseResponse):
    customers: List[CustomerOut]
    total: int
