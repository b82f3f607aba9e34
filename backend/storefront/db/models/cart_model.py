# backend/storefront/db/models/cart_model.py
"""
Modelo de líneas del carrito: una por pareja (usuario, producto).
"""

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base

class CartItem(Base):
    __tablename__ = "cart"

    cart_item_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="cart_items")
    product = relationship("Product", back_populates="cart_items")

    __table_args__ = (
        # Un producto solo puede aparecer una vez en el carrito de cada usuario
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_quantity_positive"),
    )

    def __repr__(self):
        return f"<CartItem(id={self.cart_item_id}, user_id={self.user_id}, product_id={self.product_id}, quantity={self.quantity})>"
