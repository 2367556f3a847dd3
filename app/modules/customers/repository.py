from sqlalchemy.orm import Session
from sqlalchemy import and_, or_, desc
from typing import List, Optional

from app.shared.database.models import Customer


class CustomersRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_customer(self, customer_data: dict, owner_id: int) -> Customer:
        customer = Customer(owner_id=owner_id, **customer_data)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def get_customer(self, customer_id: int, owner_id: int) -> Optional[Customer]:
        return self.db.query(Customer).filter(
            and_(
                Customer.id == customer_id,
                Customer.owner_id == owner_id
            )
        ).first()

    def get_customers(self, owner_id: int) -> List[Customer]:
        return self.db.query(Customer).filter(
            Customer.owner_id == owner_id
        ).order_by(desc(Customer.created_at), desc(Customer.id)).all()

    def find_duplicate(
        self,
        email: str,
        mobile_number: str,
        owner_id: int,
        exclude_id: Optional[int] = None
    ) -> Optional[Customer]:
        """Cliente del mismo dueño que ya usa ese email o ese móvil"""
        query = self.db.query(Customer).filter(
            and_(
                Customer.owner_id == owner_id,
                or_(
                    Customer.email == email,
                    Customer.mobile_number == mobile_number
                )
            )
        )
        if exclude_id is not None:
            query = query.filter(Customer.id != exclude_id)
        return query.first()

    def update_customer(self, customer: Customer, update_data: dict) -> Customer:
        for key, value in update_data.items():
            setattr(customer, key, value)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def delete_customer(self, customer: Customer) -> None:
        self.db.delete(customer)
        self.db.commit()
