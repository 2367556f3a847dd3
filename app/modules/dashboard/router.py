# app/modules/dashboard/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_owner_id
from .service import DashboardService
from .schemas import DashboardResponse

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Dashboard del usuario

    **Incluye:**
    - Total de clientes, productos y ventas
    - Ingresos totales y valor promedio por venta
    - Ventas y órdenes por mes
    - Top 3 productos más vendidos y top 3 clientes
    """
    service = DashboardService(db)
    return await service.get_dashboard(owner_id)
