from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_
import logging

from app.core.exceptions import InsufficientStockError, NotFoundError
from app.shared.database.models import Product, InventoryChange, InventoryChangeType

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Mutaciones de stock de productos.

    Toda mutación de `Product.quantity` pasa por aquí como un UPDATE
    condicional de una sola sentencia, nunca como leer-modificar-escribir.
    Ningún método hace commit: la transacción pertenece al llamador, que
    decide confirmar o revertir la operación completa.
    """

    @staticmethod
    def deduct_stock(
        db: Session,
        product_id: int,
        owner_id: int,
        quantity: int,
        change_type: InventoryChangeType = InventoryChangeType.SALE,
        reference_id: Optional[int] = None
    ) -> Product:
        """
        Descontar `quantity` unidades solo si hay stock suficiente.

        UPDATE products SET quantity = quantity - :n
        WHERE id = :id AND owner_id = :owner AND quantity >= :n

        Raises:
            NotFoundError: el producto no existe para este dueño
            InsufficientStockError: el stock actual es menor a lo pedido
        """
        matched = db.query(Product).filter(
            and_(
                Product.id == product_id,
                Product.owner_id == owner_id,
                Product.quantity >= quantity
            )
        ).update(
            {Product.quantity: Product.quantity - quantity},
            synchronize_session=False
        )

        product = InventoryService._load(db, product_id, owner_id)

        if not matched:
            if product is None:
                raise NotFoundError(f"Product not found: {product_id}")
            logger.info(
                f"Stock insuficiente producto {product_id}: "
                f"disponible {product.quantity}, pedido {quantity}"
            )
            raise InsufficientStockError(
                f"Insufficient stock for product: {product.name}",
                details={
                    "product_id": product_id,
                    "available": product.quantity,
                    "requested": quantity
                }
            )

        InventoryService._record_change(
            db, product, change_type,
            quantity_before=product.quantity + quantity,
            reference_id=reference_id
        )
        return product

    @staticmethod
    def restore_stock(
        db: Session,
        product_id: int,
        owner_id: int,
        quantity: int,
        change_type: InventoryChangeType,
        reference_id: Optional[int] = None
    ) -> Optional[Product]:
        """
        Devolver `quantity` unidades al producto.

        Un producto que ya no existe se ignora: no hay stock al que devolver.
        """
        matched = db.query(Product).filter(
            and_(
                Product.id == product_id,
                Product.owner_id == owner_id
            )
        ).update(
            {Product.quantity: Product.quantity + quantity},
            synchronize_session=False
        )

        if not matched:
            logger.warning(f"Producto {product_id} no existe, se omite restauración de {quantity}")
            return None

        product = InventoryService._load(db, product_id, owner_id)
        InventoryService._record_change(
            db, product, change_type,
            quantity_before=product.quantity - quantity,
            reference_id=reference_id
        )
        return product

    @staticmethod
    def record_manual_adjustment(
        db: Session,
        product: Product,
        quantity_before: int
    ) -> None:
        """Registrar un cambio directo de cantidad hecho al editar el producto"""
        if product.quantity == quantity_before:
            return
        InventoryService._record_change(
            db, product, InventoryChangeType.MANUAL_ADJUSTMENT,
            quantity_before=quantity_before
        )

    @staticmethod
    def _load(db: Session, product_id: int, owner_id: int) -> Optional[Product]:
        product = db.query(Product).filter(
            and_(
                Product.id == product_id,
                Product.owner_id == owner_id
            )
        ).first()
        if product is not None:
            # El UPDATE masivo no sincroniza la identidad ya cargada en la sesión
            db.refresh(product)
        return product

    @staticmethod
    def _record_change(
        db: Session,
        product: Product,
        change_type: InventoryChangeType,
        quantity_before: int,
        reference_id: Optional[int] = None
    ) -> None:
        notes = f"Venta #{reference_id}" if reference_id else None
        db.add(InventoryChange(
            owner_id=product.owner_id,
            product_id=product.id,
            change_type=change_type,
            quantity_before=quantity_before,
            quantity_after=product.quantity,
            reference_id=reference_id,
            notes=notes
        ))
