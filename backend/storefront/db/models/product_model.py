# backend/storefront/db/models/product_model.py
from sqlalchemy import (
    Column, Integer, String, ForeignKey, Text, Numeric, Boolean, DateTime,
    CheckConstraint, Index, text, true, false
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base

class Product(Base):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    discount_price = Column(Numeric(10, 2), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0, server_default="0")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        passive_deletes=True,
        order_by=lambda: [ProductImage.is_primary.desc(), ProductImage.image_id],
    )
    reviews = relationship("Review", back_populates="product", passive_deletes=True)
    cart_items = relationship("CartItem", back_populates="product", passive_deletes=True)
    order_items = relationship("OrderItem", back_populates="product", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint(
            "discount_price IS NULL OR (discount_price >= 0 AND discount_price <= price)",
            name="ck_products_discount_le_price",
        ),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    @property
    def effective_price(self):
        """Precio de venta: el precio con descuento si existe."""
        return self.discount_price if self.discount_price is not None else self.price

    def __repr__(self):
        return f"<Product(id={self.product_id}, name='{self.name}', stock={self.stock_quantity})>"


class ProductImage(Base):
    __tablename__ = "product_images"

    image_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    image_url = Column(String(255), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="images")

    __table_args__ = (
        # Como mucho una imagen principal por producto
        Index(
            "uq_product_images_one_primary",
            "product_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )
