# backend/storefront/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from decimal import Decimal
from typing import List
from pydantic import BaseModel, ConfigDict, Field

class CartItemCreate(BaseModel):
    """Esquema para añadir un item al carrito."""
    product_id: int
    quantity: int = Field(1, gt=0)

class CartLine(BaseModel):
    """Una línea del carrito con los datos actuales del producto."""
    cart_item_id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)

class CartResponse(BaseModel):
    """Esquema que representa el estado completo del carrito."""
    user_id: int
    items: List[CartLine] = []
    total_price: Decimal = Decimal("0.00")

    @property
    def is_empty(self) -> bool:
        return not self.items
