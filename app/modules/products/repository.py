from sqlalchemy.orm import Session
from sqlalchemy import and_, desc
from typing import List, Optional

from app.shared.database.models import Product, InventoryChange
from app.shared.services.inventory_service import InventoryService


class ProductsRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_product(self, product_data: dict, owner_id: int) -> Product:
        """Crear un nuevo producto"""
        product = Product(owner_id=owner_id, **product_data)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def get_product(self, product_id: int, owner_id: int) -> Optional[Product]:
        """Obtener un producto del dueño por ID"""
        return self.db.query(Product).filter(
            and_(
                Product.id == product_id,
                Product.owner_id == owner_id
            )
        ).first()

    def get_products(self, owner_id: int) -> List[Product]:
        return self.db.query(Product).filter(
            Product.owner_id == owner_id
        ).order_by(desc(Product.created_at), desc(Product.id)).all()

    def name_exists(self, name: str, owner_id: int, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Product.id).filter(
            and_(
                Product.name == name,
                Product.owner_id == owner_id
            )
        )
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def update_product(self, product: Product, update_data: dict) -> Product:
        """Actualizar los campos enviados; un cambio de cantidad queda en la bitácora"""
        quantity_before = product.quantity

        for key, value in update_data.items():
            if value is not None:
                setattr(product, key, value)

        InventoryService.record_manual_adjustment(self.db, product, quantity_before)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: Product) -> None:
        self.db.delete(product)
        self.db.commit()

    def get_stock_history(self, product_id: int, owner_id: int) -> List[InventoryChange]:
        return self.db.query(InventoryChange).filter(
            and_(
                InventoryChange.product_id == product_id,
                InventoryChange.owner_id == owner_id
            )
        ).order_by(InventoryChange.created_at, InventoryChange.id).all()
