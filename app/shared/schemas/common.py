# app/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Generic, Literal, Optional, TypeVar, Union
from datetime import datetime

RecordT = TypeVar("RecordT")


class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class Reference(BaseModel):
    """Referencia sin resolver: solo el id del registro"""
    kind: Literal["reference"] = "reference"
    id: int


class Resolved(BaseModel, Generic[RecordT]):
    """Referencia ya resuelta contra la base de datos"""
    kind: Literal["resolved"] = "resolved"
    id: int
    record: RecordT


def to_reference(value: Union[int, str, Dict[str, Any], Reference]) -> Reference:
    """
    Normalizar una referencia de entrada.

    Acepta el id crudo o la forma expandida que devuelve la propia API
    (un objeto con `id`), y siempre devuelve un Reference.
    """
    if isinstance(value, Reference):
        return value
    if isinstance(value, dict):
        if "id" not in value:
            raise ValueError("expanded reference must include 'id'")
        value = value["id"]
    if isinstance(value, bool):
        raise ValueError("reference id must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("reference id must be an integer")
    try:
        ref_id = int(value)
    except (TypeError, ValueError):
        raise ValueError("reference id must be an integer")
    if ref_id <= 0:
        raise ValueError("reference id must be positive")
    return Reference(id=ref_id)
