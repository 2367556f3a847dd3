# app/shared/database/models.py
import enum

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Numeric, ForeignKey,
    UniqueConstraint, CheckConstraint, Enum, func
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    ONLINE = "Online"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"


class InventoryChangeType(str, enum.Enum):
    SALE = "sale"
    SALE_UPDATE = "sale_update"
    SALE_UPDATE_RESTORE = "sale_update_restore"
    SALE_DELETE_RESTORE = "sale_delete_restore"
    MANUAL_ADJUSTMENT = "manual_adjustment"


# =====================================================
# USUARIOS (TENANTS)
# =====================================================

class User(Base, TimestampMixin):
    """Usuario dueño de su propio catálogo, clientes y ventas"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    products = relationship("Product", back_populates="owner", cascade="all, delete-orphan")
    customers = relationship("Customer", back_populates="owner", cascade="all, delete-orphan")
    sales = relationship("Sale", back_populates="owner", cascade="all, delete-orphan")


# =====================================================
# CATÁLOGO Y CLIENTES
# =====================================================

class Product(Base, TimestampMixin):
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_products_owner_name"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    owner = relationship("User", back_populates="products")
    inventory_changes = relationship("InventoryChange", back_populates="product", cascade="all, delete-orphan")


class Customer(Base, TimestampMixin):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("owner_id", "email", name="uq_customers_owner_email"),
        UniqueConstraint("owner_id", "mobile_number", name="uq_customers_owner_mobile"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    mobile_number = Column(String(20), nullable=False)

    # Dirección
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)

    owner = relationship("User", back_populates="customers")
    sales = relationship("Sale", back_populates="customer")


class InventoryChange(Base):
    """Bitácora de movimientos de stock, escrita en la misma transacción que el movimiento"""
    __tablename__ = "inventory_changes"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    change_type = Column(
        Enum(InventoryChangeType, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    quantity_before = Column(Integer, nullable=False)
    quantity_after = Column(Integer, nullable=False)
    reference_id = Column(Integer)
    notes = Column(String(255))
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    product = relationship("Product", back_populates="inventory_changes")


# =====================================================
# VENTAS
# =====================================================

class Sale(Base, TimestampMixin):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    payment_method = Column(
        Enum(PaymentMethod, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    total_price = Column(Numeric(12, 2), nullable=False)
    sale_date = Column(DateTime, nullable=False, server_default=func.current_timestamp(), index=True)

    owner = relationship("User", back_populates="sales")
    customer = relationship("Customer", back_populates="sales")
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.position"
    )


class SaleItem(Base):
    __tablename__ = "sale_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    position = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)

    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")
