# app/modules/sales/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.shared.database.models import PaymentMethod
from app.shared.schemas.common import BaseResponse, Reference, to_reference
from app.modules.products.schemas import ProductSummary
from app.modules.customers.schemas import CustomerSummary


class SaleItemCreate(BaseModel):
    """
    Línea de venta.

    `product_id` acepta el id crudo o el producto expandido que devuelve
    GET /sales (`{"id": 3, "name": ...}`); siempre se normaliza a Reference.
    """
    product_id: Reference = Field(..., description="Producto (id o forma expandida)")
    quantity: int = Field(..., gt=0, description="Cantidad")

    @field_validator('product_id', mode='before')
    @classmethod
    def normalize_product(cls, v):
        return to_reference(v)


class SaleCreateRequest(BaseModel):
    items: List[SaleItemCreate] = Field(..., min_length=1, description="Items de la venta")
    customer_id: Optional[Reference] = Field(None, description="Cliente (opcional)")
    payment_method: PaymentMethod
    total_price: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2,
        description="Total; si se omite se calcula con los precios del catálogo"
    )

    @field_validator('customer_id', mode='before')
    @classmethod
    def normalize_customer(cls, v):
        return None if v is None else to_reference(v)

    class Config:
        json_schema_extra = {
            "example": {
                "items": [{"product_id": 1, "quantity": 4}],
                "customer_id": 2,
                "payment_method": "Cash",
                "total_price": "40.00"
            }
        }


class SaleUpdateRequest(BaseModel):
    items: List[SaleItemCreate] = Field(..., min_length=1, description="Nuevos items de la venta")
    payment_method: Optional[PaymentMethod] = None
    total_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

    class Config:
        json_schema_extra = {
            "example": {
                "items": [{"product_id": 1, "quantity": 7}],
                "payment_method": "Credit Card",
                "total_price": "70.00"
            }
        }


class SaleItemOut(BaseModel):
    position: int
    product_id: Optional[int] = None
    quantity: int
    product: Optional[ProductSummary] = None


class SaleOut(BaseModel):
    id: int
    customer_id: Optional[int] = None
    customer: Optional[CustomerSummary] = None
    payment_method: PaymentMethod
    total_price: Decimal
    date: datetime
    items: List[SaleItemOut]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SaleResponse(BaseResponse):
    sale: SaleOut


class SaleListResponse(BaseResponse):
    sales: List[SaleOut]
    count: int


class SaleDeleteResponse(BaseResponse):
    sale_id: int
    stock_restored: bool
