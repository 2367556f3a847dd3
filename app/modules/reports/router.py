# app/modules/reports/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_owner_id
from .service import ReportsService
from .schemas import ReportKind, ReportRequest, ReportResponse

router = APIRouter()


@router.post("/{kind}", response_model=ReportResponse)
async def send_report(
    kind: ReportKind,
    request: ReportRequest,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Enviar por correo un reporte HTML

    **Tipos:** `sales`, `products`, `customers`

    Si no hay SMTP configurado el reporte se genera pero no se envía
    (`delivered: false`).
    """
    service = ReportsService(db)
    return await service.send_report(kind, request, owner_id)
