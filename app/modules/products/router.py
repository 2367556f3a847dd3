# app/modules/products/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_owner_id
from .service import ProductsService
from .schemas import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse,
    StockHistoryResponse
)

router = APIRouter()


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Agregar un producto al catálogo del usuario

    El nombre es único dentro del catálogo de cada usuario (409 si se repite).
    """
    service = ProductsService(db)
    return await service.create_product(product_data, owner_id)


@router.get("", response_model=ProductListResponse)
async def list_products(
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """Listar el catálogo del usuario"""
    service = ProductsService(db)
    return await service.get_products(owner_id)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.get_product(product_id, owner_id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    update_data: ProductUpdate,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Actualizar un producto

    Un cambio directo de `quantity` queda registrado como ajuste manual
    en el historial de stock.
    """
    service = ProductsService(db)
    return await service.update_product(product_id, owner_id, update_data)


@router.delete("/{product_id}", response_model=ProductResponse)
async def delete_product(
    product_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = ProductsService(db)
    return await service.delete_product(product_id, owner_id)


@router.get("/{product_id}/stock-history", response_model=StockHistoryResponse)
async def get_stock_history(
    product_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """Movimientos de stock del producto, del más antiguo al más reciente"""
    service = ProductsService(db)
    return await service.get_stock_history(product_id, owner_id)
