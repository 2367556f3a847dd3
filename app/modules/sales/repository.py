from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy import and_, desc
from typing import Dict, Any, List, Optional
from decimal import Decimal
import logging

from app.core.exceptions import AppError, NotFoundError
from app.shared.database.models import (
    Sale, SaleItem, Customer, InventoryChangeType
)
from app.shared.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

SALE_NOT_FOUND = "Sale not found."


class SalesRepository:
    """
    Acceso a datos de ventas.

    Crear, actualizar y eliminar son una sola transacción cada una: los
    movimientos de stock, la venta y la bitácora se confirman juntos o se
    revierten juntos.
    """

    def __init__(self, db: Session):
        self.db = db
        self.inventory_service = InventoryService()

    def create_sale_atomic(self, sale_data: Dict[str, Any], owner_id: int) -> Sale:
        """
        Crear venta descontando stock en transacción atómica.

        Proceso:
        1. Validar cliente (si viene)
        2. Crear Sale (flush para obtener id)
        3. Descontar stock por item, en el orden recibido (UPDATE condicional)
        4. Calcular total si no vino
        5. Crear SaleItems
        6. Commit único

        Args:
            sale_data: {items: [{product_id, quantity}], customer_id, payment_method, total_price}
            owner_id: Dueño de la venta (tenant)

        Raises:
            NotFoundError: producto o cliente inexistente
            InsufficientStockError: stock insuficiente en algún item
        """
        try:
            customer_id = sale_data.get('customer_id')
            if customer_id is not None:
                self._require_customer(customer_id, owner_id)

            sale = Sale(
                owner_id=owner_id,
                customer_id=customer_id,
                payment_method=sale_data['payment_method'],
                total_price=sale_data.get('total_price') or Decimal('0')
            )
            self.db.add(sale)
            self.db.flush()

            computed_total = self._apply_items(
                sale, sale_data['items'], owner_id, InventoryChangeType.SALE
            )

            if sale_data.get('total_price') is None:
                sale.total_price = computed_total

            self.db.commit()
            logger.info(f"Transacción completada - Venta #{sale.id}")

            self.db.refresh(sale)
            return sale

        except AppError as e:
            logger.info(f"Venta rechazada: {e.message}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception("Error en transacción de venta")
            self.db.rollback()
            raise

    def update_sale_atomic(self, sale_id: int, owner_id: int, update_data: Dict[str, Any]) -> Sale:
        """
        Reemplazar los items de una venta reconciliando el stock.

        Fase 1 devuelve al stock los items actuales, fase 2 descuenta los
        nuevos. Si cualquier item nuevo falla se revierte todo: ni la venta
        ni ningún producto quedan modificados.
        """
        sale = self.get_sale(sale_id, owner_id)
        if not sale:
            raise NotFoundError(SALE_NOT_FOUND)

        try:
            # FASE 1: restaurar
            for old_item in sale.items:
                if old_item.product_id is None:
                    continue
                self.inventory_service.restore_stock(
                    self.db, old_item.product_id, owner_id, old_item.quantity,
                    InventoryChangeType.SALE_UPDATE_RESTORE, reference_id=sale.id
                )

            # FASE 2: aplicar
            sale.items = []
            self.db.flush()
            self._apply_items(sale, update_data['items'], owner_id, InventoryChangeType.SALE_UPDATE)

            if update_data.get('payment_method') is not None:
                sale.payment_method = update_data['payment_method']
            if update_data.get('total_price') is not None:
                sale.total_price = update_data['total_price']

            self.db.commit()
            logger.info(f"Venta #{sale.id} actualizada")

            self.db.refresh(sale)
            return sale

        except AppError as e:
            logger.info(f"Actualización de venta #{sale_id} rechazada: {e.message}")
            self.db.rollback()
            raise
        except Exception:
            logger.exception(f"Error actualizando venta #{sale_id}")
            self.db.rollback()
            raise

    def delete_sale(self, sale_id: int, owner_id: int, restore_stock: bool) -> None:
        """Eliminar una venta; el stock se devuelve solo si `restore_stock`"""
        sale = self.get_sale(sale_id, owner_id)
        if not sale:
            raise NotFoundError(SALE_NOT_FOUND)

        try:
            if restore_stock:
                for item in sale.items:
                    if item.product_id is None:
                        continue
                    self.inventory_service.restore_stock(
                        self.db, item.product_id, owner_id, item.quantity,
                        InventoryChangeType.SALE_DELETE_RESTORE, reference_id=sale.id
                    )

            self.db.delete(sale)
            self.db.commit()
            logger.info(f"Venta #{sale_id} eliminada (stock restaurado: {restore_stock})")

        except Exception:
            logger.exception(f"Error eliminando venta #{sale_id}")
            self.db.rollback()
            raise

    def get_sale(self, sale_id: int, owner_id: int) -> Optional[Sale]:
        return self._with_references(
            self.db.query(Sale).filter(
                and_(
                    Sale.id == sale_id,
                    Sale.owner_id == owner_id
                )
            )
        ).first()

    def get_sales(self, owner_id: int) -> List[Sale]:
        """Ventas del dueño, más recientes primero, con productos y cliente cargados"""
        return self._with_references(
            self.db.query(Sale).filter(Sale.owner_id == owner_id)
        ).order_by(desc(Sale.sale_date), desc(Sale.id)).all()

    # MÉTODOS PRIVADOS HELPERS

    def _apply_items(
        self,
        sale: Sale,
        items: List[Dict[str, Any]],
        owner_id: int,
        change_type: InventoryChangeType
    ) -> Decimal:
        """Descontar stock y crear las líneas en orden; devuelve el total a precio de catálogo"""
        total = Decimal('0')
        for position, item in enumerate(items):
            product = self.inventory_service.deduct_stock(
                self.db, item['product_id'], owner_id, item['quantity'],
                change_type, reference_id=sale.id
            )
            total += Decimal(str(product.price)) * item['quantity']
            sale.items.append(SaleItem(
                position=position,
                product_id=product.id,
                quantity=item['quantity']
            ))
        return total

    def _require_customer(self, customer_id: int, owner_id: int) -> Customer:
        customer = self.db.query(Customer).filter(
            and_(
                Customer.id == customer_id,
                Customer.owner_id == owner_id
            )
        ).first()
        if not customer:
            raise NotFoundError(f"Customer not found: {customer_id}")
        return customer

    @staticmethod
    def _with_references(query):
        return query.options(
            selectinload(Sale.items).joinedload(SaleItem.product),
            joinedload(Sale.customer)
        )
