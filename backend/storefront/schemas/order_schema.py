# backend/storefront/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para los modelos Order y OrderItem.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from storefront.db.models.order_model import OrderStatus, PaymentStatus

class OrderItem(BaseModel):
    """Esquema de respuesta para un item de orden con su precio congelado."""
    order_item_id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)

class CheckoutResult(BaseModel):
    """Resultado de un checkout correcto."""
    order_id: int
    total_amount: Decimal

class Order(BaseModel):
    """Esquema completo de respuesta para una orden."""
    order_id: int
    user_id: Optional[int] = None
    order_date: Optional[datetime] = None
    total_amount: Decimal
    status: OrderStatus
    shipping_address: str
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = []

    model_config = ConfigDict(from_attributes=True)
