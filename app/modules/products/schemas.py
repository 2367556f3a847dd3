# app/modules/products/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from decimal import Decimal
from datetime import datetime
from app.shared.database.models import InventoryChangeType
from app.shared.schemas.common import BaseResponse


class ProductCreate(BaseModel):
    """Schema para crear un producto"""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del producto")
    description: str = Field(..., min_length=1, description="Descripción")
    quantity: int = Field(..., ge=0, description="Unidades en stock")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Precio unitario")

    @field_validator('name', 'description')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip()


class ProductUpdate(BaseModel):
    """Schema para actualizar un producto (solo los campos enviados)"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @field_validator('name', 'description')
    @classmethod
    def validate_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip() if v else v


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    quantity: int
    price: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    """Forma resuelta de un producto referenciado desde una venta"""
    id: int
    name: str
    description: str
    price: Decimal
    quantity: int

    class Config:
        from_attributes = True


class ProductResponse(BaseResponse):
    product: ProductOut


class ProductListResponse(BaseResponse):
    products: List[ProductOut]
    total: int


class InventoryChangeOut(BaseModel):
    id: int
    change_type: InventoryChangeType
    quantity_before: int
    quantity_after: int
    reference_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StockHistoryResponse(BaseResponse):
    product_id: int
    current_quantity: int
    changes: List[InventoryChangeOut]
