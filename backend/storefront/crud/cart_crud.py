# backend/storefront/crud/cart_crud.py
"""
Operaciones CRUD para el carrito (tabla cart).

El alta de productos es un upsert atómico sobre la restricción única
(user_id, product_id): dos llamadas concurrentes de "añadir 1" nunca pierden
una actualización ni duplican la fila.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.database import dialect_insert
from storefront.db.models.cart_model import CartItem
from storefront.db.models.product_model import Product

async def get_cart_item(db: AsyncSession, cart_item_id: int) -> Optional[CartItem]:
    return await db.get(CartItem, cart_item_id, populate_existing=True)

async def upsert_cart_item(db: AsyncSession, user_id: int, product_id: int, quantity: int) -> CartItem:
    """
    INSERT ... ON CONFLICT (user_id, product_id) DO UPDATE: si la línea existe,
    suma la cantidad en la misma sentencia.
    """
    stmt = dialect_insert(db, CartItem).values(user_id=user_id, product_id=product_id, quantity=quantity)
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "product_id"],
        set_={"quantity": CartItem.quantity + stmt.excluded.quantity},
    ).returning(CartItem.cart_item_id)

    result = await db.execute(stmt)
    cart_item_id = result.scalar_one()
    return await get_cart_item(db, cart_item_id)

async def get_cart_lines(db: AsyncSession, user_id: int) -> List[Tuple[CartItem, Product]]:
    """
    Líneas del carrito con los datos actuales de cada producto.
    """
    result = await db.execute(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.product_id)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.cart_item_id)
        .execution_options(populate_existing=True)
    )
    return result.all()

async def lock_cart_lines(db: AsyncSession, user_id: int) -> List[Tuple[CartItem, Product]]:
    """
    Igual que get_cart_lines pero bloqueando (FOR UPDATE) las filas del carrito
    y de los productos hasta el final de la transacción. El orden por
    product_id hace que checkouts concurrentes bloqueen en el mismo orden.
    """
    result = await db.execute(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.product_id)
        .filter(CartItem.user_id == user_id)
        .order_by(Product.product_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.all()

async def set_quantity(db: AsyncSession, db_item: CartItem, quantity: int) -> CartItem:
    db_item.quantity = quantity
    await db.flush()
    return db_item

async def delete_cart_item(db: AsyncSession, cart_item_id: int, user_id: int) -> bool:
    result = await db.execute(
        delete(CartItem).where(CartItem.cart_item_id == cart_item_id, CartItem.user_id == user_id)
    )
    return result.rowcount > 0

async def clear_cart(db: AsyncSession, user_id: int) -> int:
    """Vacía el carrito del usuario. Devuelve el número de líneas borradas."""
    result = await db.execute(delete(CartItem).where(CartItem.user_id == user_id))
    return result.rowcount
