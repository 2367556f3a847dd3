# app/modules/dashboard/schemas.py
from pydantic import BaseModel
from typing import List
from decimal import Decimal
from app.shared.schemas.common import BaseResponse


class MonthlySales(BaseModel):
    month: str
    total_sales: Decimal
    total_orders: int


class TopProduct(BaseModel):
    id: int
    name: str
    description: str
    quantity: int
    price: Decimal
    total_sold: int


class TopCustomer(BaseModel):
    id: int
    name: str
    email: str
    mobile_number: str
    total_spent: Decimal


class DashboardData(BaseModel):
    total_customers: int
    total_sales: int
    total_products: int
    total_revenue: Decimal
    average_order_value: Decimal
    monthly_sales: List[MonthlySales]
    top_products: List[TopProduct]
    top_customers: List[TopCustomer]


class DashboardResponse(BaseResponse):
    data: DashboardData
