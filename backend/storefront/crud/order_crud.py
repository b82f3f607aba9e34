# backend/storefront/crud/order_crud.py
"""
Este archivo contiene las operaciones CRUD para los modelos Order y OrderItem.

Este módulo proporciona funciones para crear pedidos a partir de líneas ya
validadas, consultar el historial y actualizar los campos mutables (estado,
estado del pago, número de seguimiento y notas).
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.models.order_model import Order, OrderItem, OrderStatus, PaymentStatus

async def create_order(
    db: AsyncSession,
    user_id: int,
    shipping_address: str,
    total_amount: Decimal,
    items: List[dict],
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
) -> Order:
    """
    Inserta la cabecera del pedido y sus items con el precio congelado.

    Cada item es un diccionario con product_id, product_name, quantity y
    unit_price. El commit se gestionará en la transacción de nivel superior.
    """
    db_order = Order(
        user_id=user_id,
        shipping_address=shipping_address,
        total_amount=total_amount,
        status=OrderStatus.PENDING.value,
        payment_status=PaymentStatus.PENDING.value,
        payment_method=payment_method,
        notes=notes,
    )
    db.add(db_order)
    await db.flush()

    for item_data in items:
        db.add(OrderItem(order_id=db_order.order_id, **item_data))
    await db.flush()
    return db_order

async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Obtiene un pedido con sus items.
    """
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .filter(Order.order_id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()

async def get_orders_by_user(db: AsyncSession, user_id: int, skip: int = 0, limit: int = 10) -> List[Order]:
    """
    Obtiene el historial de pedidos de un usuario, el más reciente primero.
    """
    query = (
        select(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == user_id)
        .order_by(Order.order_date.desc(), Order.order_id.desc())
        .offset(skip)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalars().all()

async def update_order_fields(db: AsyncSession, db_order: Order, **fields) -> Order:
    """
    Actualiza los campos mutables de un pedido. Quien llama decide qué campos
    están permitidos.
    """
    for key, value in fields.items():
        setattr(db_order, key, value)
    await db.flush()
    # updated_at lo genera la base de datos: se recarga el pedido con sus items
    return await get_order(db, db_order.order_id)
