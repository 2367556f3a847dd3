# app/modules/customers/router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_owner_id
from .service import CustomersService
from .schemas import CustomerCreate, CustomerUpdate, CustomerResponse, CustomerListResponse

router = APIRouter()


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """
    Registrar un cliente

    Email y móvil son únicos dentro de los clientes de cada usuario.
    """
    service = CustomersService(db)
    return await service.create_customer(customer_data, owner_id)


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = CustomersService(db)
    return await service.get_customers(owner_id)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = CustomersService(db)
    return await service.get_customer(customer_id, owner_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    update_data: CustomerUpdate,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    service = CustomersService(db)
    return await service.update_customer(customer_id, owner_id, update_data)


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: int,
    owner_id: int = Depends(get_current_owner_id),
    db: Session = Depends(get_db)
):
    """Eliminar un cliente; sus ventas se conservan sin cliente asociado"""
    service = CustomersService(db)
    return await service.delete_customer(customer_id, owner_id)
