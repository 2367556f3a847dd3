# app/modules/sales/service.py
from sqlalchemy.orm import Session
from typing import Optional, Union
import logging

from .repository import SalesRepository
from .schemas import (
    SaleCreateRequest, SaleUpdateRequest, SaleItemOut, SaleOut,
    SaleResponse, SaleListResponse, SaleDeleteResponse
)
from app.config.settings import settings
from app.core.exceptions import NotFoundError
from app.modules.customers.schemas import CustomerSummary
from app.modules.products.schemas import ProductSummary
from app.shared.database.models import Sale, SaleItem
from app.shared.schemas.common import Reference, Resolved

logger = logging.getLogger(__name__)


class SalesService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)

    async def create_sale(self, sale_data: SaleCreateRequest, owner_id: int) -> SaleResponse:
        """
        Registrar venta.

        Responsabilidades:
        - Pasar los datos ya normalizados al repository
        - Delegar la transacción (stock + venta) al repository
        - Construir respuesta
        """
        logger.info(f"Iniciando venta - Dueño: {owner_id}, items: {len(sale_data.items)}")

        sale = self.repository.create_sale_atomic(
            sale_data={
                'items': self._items_payload(sale_data),
                'customer_id': sale_data.customer_id.id if sale_data.customer_id else None,
                'payment_method': sale_data.payment_method,
                'total_price': sale_data.total_price
            },
            owner_id=owner_id
        )

        logger.info(f"Venta {sale.id} completada exitosamente")
        return SaleResponse(
            success=True,
            message="Sale created successfully.",
            sale=self._build_sale(sale, owner_id)
        )

    async def get_sales(self, owner_id: int) -> SaleListResponse:
        sales = self.repository.get_sales(owner_id)
        return SaleListResponse(
            success=True,
            message="Sales fetched successfully.",
            sales=[self._build_sale(sale, owner_id) for sale in sales],
            count=len(sales)
        )

    async def get_sale(self, sale_id: int, owner_id: int) -> SaleResponse:
        sale = self.repository.get_sale(sale_id, owner_id)
        if not sale:
            raise NotFoundError("Sale not found.")

        return SaleResponse(
            success=True,
            message="Sale fetched successfully.",
            sale=self._build_sale(sale, owner_id)
        )

    async def update_sale(
        self,
        sale_id: int,
        owner_id: int,
        update_data: SaleUpdateRequest
    ) -> SaleResponse:
        sale = self.repository.update_sale_atomic(
            sale_id,
            owner_id,
            {
                'items': self._items_payload(update_data),
                'payment_method': update_data.payment_method,
                'total_price': update_data.total_price
            }
        )

        return SaleResponse(
            success=True,
            message="Sale updated successfully.",
            sale=self._build_sale(sale, owner_id)
        )

    async def delete_sale(
        self,
        sale_id: int,
        owner_id: int,
        restock: Optional[bool] = None
    ) -> SaleDeleteResponse:
        """
        Eliminar venta.

        `restock` explícito manda; si no viene se usa
        RESTORE_STOCK_ON_SALE_DELETE (por defecto la venta se elimina sin
        devolver stock).
        """
        restore_stock = settings.restore_stock_on_sale_delete if restock is None else restock

        self.repository.delete_sale(sale_id, owner_id, restore_stock)

        return SaleDeleteResponse(
            success=True,
            message="Sale deleted successfully.",
            sale_id=sale_id,
            stock_restored=restore_stock
        )

    # MÉTODOS PRIVADOS HELPERS

    @staticmethod
    def _items_payload(request: Union[SaleCreateRequest, SaleUpdateRequest]) -> list:
        return [
            {'product_id': item.product_id.id, 'quantity': item.quantity}
            for item in request.items
        ]

    @staticmethod
    def _resolve_product(item: SaleItem, owner_id: int) -> Union[Reference, Resolved[ProductSummary], None]:
        if item.product_id is None:
            return None
        product = item.product
        if product is None or product.owner_id != owner_id:
            return Reference(id=item.product_id)
        return Resolved[ProductSummary](id=product.id, record=ProductSummary.model_validate(product))

    @staticmethod
    def _resolve_customer(sale: Sale, owner_id: int) -> Union[Reference, Resolved[CustomerSummary], None]:
        if sale.customer_id is None:
            return None
        customer = sale.customer
        if customer is None or customer.owner_id != owner_id:
            return Reference(id=sale.customer_id)
        return Resolved[CustomerSummary](id=customer.id, record=CustomerSummary.model_validate(customer))

    def _build_sale(self, sale: Sale, owner_id: int) -> SaleOut:
        """Construir respuesta con las referencias resueltas explícitamente"""
        items = []
        for item in sale.items:
            ref = self._resolve_product(item, owner_id)
            items.append(SaleItemOut(
                position=item.position,
                product_id=item.product_id,
                quantity=item.quantity,
                product=ref.record if isinstance(ref, Resolved) else None
            ))

        customer_ref = self._resolve_customer(sale, owner_id)

        return SaleOut(
            id=sale.id,
            customer_id=sale.customer_id,
            customer=customer_ref.record if isinstance(customer_ref, Resolved) else None,
            payment_method=sale.payment_method,
            total_price=sale.total_price,
            date=sale.sale_date,
            items=items,
            created_at=sale.created_at,
            updated_at=sale.updated_at
        )
