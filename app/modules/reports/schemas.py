# app/modules/reports/schemas.py
import enum

from pydantic import BaseModel, EmailStr, Field
from app.shared.schemas.common import BaseResponse


class ReportKind(str, enum.Enum):
    SALES = "sales"
    PRODUCTS = "products"
    CUSTOMERS = "customers"


class ReportRequest(BaseModel):
    email: EmailStr = Field(..., description="Destinatario")
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, description="Texto plano que acompaña la tabla")


class ReportResponse(BaseResponse):
    report: ReportKind
    recipient: str
    rows: int
    delivered: bool
