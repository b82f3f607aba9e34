# backend/storefront/db/models/order_model.py
"""
Este archivo contiene el modelo de pedido para la aplicación.

Una vez creado, el contenido de un pedido (items y precios) es inmutable;
solo cambian status, payment_status, tracking_number y notes.
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Numeric, ForeignKey, Text, CheckConstraint, DateTime
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base


class OrderStatus(str, enum.Enum):
    """Define los posibles estados de una orden."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    """Define los posibles estados del pago de una orden."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


def _in_enum(column: str, enum_cls) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"


class Order(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True)
    order_date = Column(DateTime(timezone=True), server_default=func.now())
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, server_default=OrderStatus.PENDING.value)
    # Copia de la dirección en el momento del pedido, independiente del perfil
    shipping_address = Column(Text, nullable=False)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, server_default=PaymentStatus.PENDING.value)
    payment_method = Column(String(50), nullable=True)
    tracking_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        passive_deletes=True,
        order_by="OrderItem.order_item_id",
    )

    __table_args__ = (
        CheckConstraint(_in_enum("status", OrderStatus), name="ck_orders_status"),
        CheckConstraint(_in_enum("payment_status", PaymentStatus), name="ck_orders_payment_status"),
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
    )

    def __repr__(self):
        return f"<Order(id={self.order_id}, user_id={self.user_id}, status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    order_item_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True)
    # El historial sobrevive al borrado del producto: la referencia pasa a NULL
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price_non_negative"),
    )

    @property
    def line_total(self):
        return self.quantity * self.unit_price

    def __repr__(self):
        return f"<OrderItem(id={self.order_item_id}, order_id={self.order_id}, product_id={self.product_id})>"
