# app/modules/sales/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_owner_id
from .service import SalesService
from .schemas import (
    SaleCreateRequest, SaleUpdateRequest, SaleResponse,
    SaleListResponse, SaleDeleteResponse
)

router = APIRouter()


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(
    sale_data: SaleCreateRequest,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Registrar venta con descuento automático de inventario

    **Incluye:**
    - Validación de existencia y stock de cada producto, en orden
    - Descuento atómico (nunca deja stock negativo)
    - Cliente opcional
    - Total calculado con precios de catálogo si no se envía

    **Errores:** 400 stock insuficiente / datos inválidos, 404 producto o cliente inexistente.
    """
    service = SalesService(db)
    return await service.create_sale(sale_data, owner_id)


@router.get("", response_model=SaleListResponse)
async def list_sales(
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """Ventas del usuario con productos y cliente resueltos"""
    service = SalesService(db)
    return await service.get_sales(owner_id)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(
    sale_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = SalesService(db)
    return await service.get_sale(sale_id, owner_id)


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(
    sale_id: int,
    update_data: SaleUpdateRequest,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Reemplazar los items de una venta

    El stock de los items anteriores se devuelve y el de los nuevos se
    descuenta en la misma transacción; si algo falla no cambia nada.
    """
    service = SalesService(db)
    return await service.update_sale(sale_id, owner_id, update_data)


@router.delete("/{sale_id}", response_model=SaleDeleteResponse)
async def delete_sale(
    sale_id: int,
    restock: Optional[bool] = Query(None, description="Devolver el stock de la venta (por defecto según configuración)"),
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = SalesService(db)
    return await service.delete_sale(sale_id, owner_id, restock)
