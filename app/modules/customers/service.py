# app/modules/customers/service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Any, Dict
import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.shared.database.models import Customer
from .repository import CustomersRepository
from .schemas import (
    Address, CustomerCreate, CustomerUpdate, CustomerOut,
    CustomerResponse, CustomerListResponse
)

logger = logging.getLogger(__name__)

CUSTOMER_ALREADY_EXISTS = "Customer already exists"
CUSTOMER_NOT_FOUND = "Customer not found."


class CustomersService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = CustomersRepository(db)

    async def create_customer(self, customer_data: CustomerCreate, owner_id: int) -> CustomerResponse:
        self._ensure_unique(customer_data, owner_id)

        try:
            customer = self.repository.create_customer(self._to_columns(customer_data), owner_id)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(CUSTOMER_ALREADY_EXISTS)

        logger.info(f"Cliente {customer.id} creado - dueño {owner_id}")
        return CustomerResponse(
            success=True,
            message="Customer created successfully.",
            customer=self.to_out(customer)
        )

    async def get_customers(self, owner_id: int) -> CustomerListResponse:
        customers = self.repository.get_customers(owner_id)
        return CustomerListResponse(
            success=True,
            message="Customers fetched successfully.",
            customers=[self.to_out(c) for c in customers],
            total=len(customers)
        )

    async def get_customer(self, customer_id: int, owner_id: int) -> CustomerResponse:
        customer = self._get_or_404(customer_id, owner_id)
        return CustomerResponse(
            success=True,
            message="Customer fetched successfully.",
            customer=self.to_out(customer)
        )

    async def update_customer(
        self,
        customer_id: int,
        owner_id: int,
        update_data: CustomerUpdate
    ) -> CustomerResponse:
        customer = self._get_or_404(customer_id, owner_id)
        self._ensure_unique(update_data, owner_id, exclude_id=customer_id)

        try:
            customer = self.repository.update_customer(customer, self._to_columns(update_data))
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(CUSTOMER_ALREADY_EXISTS)

        return CustomerResponse(
            success=True,
            message="Customer updated successfully.",
            customer=self.to_out(customer)
        )

    async def delete_customer(self, customer_id: int, owner_id: int) -> Dict[str, Any]:
        customer = self._get_or_404(customer_id, owner_id)
        self.repository.delete_customer(customer)
        logger.info(f"Cliente {customer_id} eliminado - dueño {owner_id}")

        return {
            "success": True,
            "message": "Customer deleted successfully.",
            "customer_id": customer_id
        }

    @staticmethod
    def to_out(customer: Customer) -> CustomerOut:
        return CustomerOut(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            mobile_number=customer.mobile_number,
            address=Address(
                street=customer.street,
                city=customer.city,
                state=customer.state,
                zip_code=customer.zip_code,
                country=customer.country
            ),
            created_at=customer.created_at,
            updated_at=customer.updated_at
        )

    # MÉTODOS PRIVADOS HELPERS

    def _ensure_unique(self, data: CustomerCreate, owner_id: int, exclude_id: int = None) -> None:
        duplicate = self.repository.find_duplicate(
            data.email, data.mobile_number, owner_id, exclude_id=exclude_id
        )
        if duplicate:
            field = "email" if duplicate.email == data.email else "mobile_number"
            raise ConflictError(CUSTOMER_ALREADY_EXISTS, details={"field": field})

    def _get_or_404(self, customer_id: int, owner_id: int) -> Customer:
        customer = self.repository.get_customer(customer_id, owner_id)
        if not customer:
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        return customer

    @staticmethod
    def _to_columns(data: CustomerCreate) -> Dict[str, Any]:
        columns = data.model_dump(exclude={"address"})
        columns.update(data.address.model_dump())
        return columns
