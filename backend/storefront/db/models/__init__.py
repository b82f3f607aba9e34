# backend/storefront/db/models/__init__.py
# Importa todos los modelos para que Base.metadata conozca las ocho tablas
# y las relaciones por nombre se resuelvan al configurar los mappers.

from storefront.db.models.category_model import Category
from storefront.db.models.user_model import User
from storefront.db.models.product_model import Product, ProductImage
from storefront.db.models.order_model import Order, OrderItem, OrderStatus, PaymentStatus
from storefront.db.models.review_model import Review
from storefront.db.models.cart_model import CartItem

__all__ = [
    "Category",
    "User",
    "Product",
    "ProductImage",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Review",
    "CartItem",
]
