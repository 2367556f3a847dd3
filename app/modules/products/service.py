# app/modules/products/service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.shared.database.models import Product
from .repository import ProductsRepository
from .schemas import (
    ProductCreate, ProductUpdate, ProductOut, ProductResponse,
    ProductListResponse, InventoryChangeOut, StockHistoryResponse
)

logger = logging.getLogger(__name__)

PRODUCT_ALREADY_EXISTS = "Product already exists."
PRODUCT_NOT_FOUND = "Product not found."


class ProductsService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductsRepository(db)

    async def create_product(self, product_data: ProductCreate, owner_id: int) -> ProductResponse:
        if self.repository.name_exists(product_data.name, owner_id):
            raise ConflictError(PRODUCT_ALREADY_EXISTS)

        try:
            product = self.repository.create_product(product_data.model_dump(), owner_id)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(PRODUCT_ALREADY_EXISTS)

        logger.info(f"Producto {product.id} creado - dueño {owner_id}")
        return ProductResponse(
            success=True,
            message="Product created successfully.",
            product=ProductOut.model_validate(product)
        )

    async def get_products(self, owner_id: int) -> ProductListResponse:
        products = self.repository.get_products(owner_id)
        return ProductListResponse(
            success=True,
            message="Products fetched successfully.",
            products=[ProductOut.model_validate(p) for p in products],
            total=len(products)
        )

    async def get_product(self, product_id: int, owner_id: int) -> ProductResponse:
        product = self._get_or_404(product_id, owner_id)
        return ProductResponse(
            success=True,
            message="Product fetched successfully.",
            product=ProductOut.model_validate(product)
        )

    async def update_product(self, product_id: int, owner_id: int, update_data: ProductUpdate) -> ProductResponse:
        product = self._get_or_404(product_id, owner_id)

        if update_data.name and self.repository.name_exists(update_data.name, owner_id, exclude_id=product_id):
            raise ConflictError(PRODUCT_ALREADY_EXISTS)

        try:
            product = self.repository.update_product(product, update_data.model_dump(exclude_unset=True))
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(PRODUCT_ALREADY_EXISTS)

        return ProductResponse(
            success=True,
            message="Product updated successfully.",
            product=ProductOut.model_validate(product)
        )

    async def delete_product(self, product_id: int, owner_id: int) -> ProductResponse:
        product = self._get_or_404(product_id, owner_id)
        snapshot = ProductOut.model_validate(product)

        self.repository.delete_product(product)
        logger.info(f"Producto {product_id} eliminado - dueño {owner_id}")

        return ProductResponse(
            success=True,
            message="Product deleted successfully.",
            product=snapshot
        )

    async def get_stock_history(self, product_id: int, owner_id: int) -> StockHistoryResponse:
        product = self._get_or_404(product_id, owner_id)
        changes = self.repository.get_stock_history(product_id, owner_id)

        return StockHistoryResponse(
            success=True,
            message=f"{len(changes)} stock movements",
            product_id=product.id,
            current_quantity=product.quantity,
            changes=[InventoryChangeOut.model_validate(c) for c in changes]
        )

    def _get_or_404(self, product_id: int, owner_id: int) -> Product:
        product = self.repository.get_product(product_id, owner_id)
        if not product:
            raise NotFoundError(PRODUCT_NOT_FOUND)
        return product
