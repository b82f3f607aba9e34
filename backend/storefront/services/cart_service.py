# backend/storefront/services/cart_service.py
"""
Servicio de Carrito de Compras.

Este servicio se encarga de gestionar el carrito de compras de cada usuario,
persistido en la tabla cart. El carrito es efímero: cambia con cada alta,
modificación o borrado y se consume entero en el checkout.
"""

import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from storefront.crud import cart_crud, product_crud, user_crud
from storefront.db.database import transaction
from storefront.db.models.cart_model import CartItem
from storefront.schemas.cart_schema import CartLine, CartResponse

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

class CartService:
    """
    Servicio para gestionar el carrito de compras de un usuario.
    """

    def _validate_quantity(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError(
                "La cantidad debe ser mayor que cero", quantity=quantity
            )

    async def add_to_cart(self, db: AsyncSession, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        """
        Añade un producto al carrito de un usuario.
        Si el producto ya está en el carrito, suma la cantidad (upsert atómico).

        Raises:
            ValidationError: si quantity <= 0
            NotFoundError: si el producto no existe o está inactivo, o el usuario no existe
        """
        self._validate_quantity(quantity)
        try:
            async with transaction(db):
                product = await product_crud.get_product(db, product_id)
                if product is None or not product.is_active:
                    raise NotFoundError(
                        f"Producto {product_id} no encontrado o no disponible", product_id=product_id
                    )
                if await user_crud.get_user(db, user_id) is None:
                    raise NotFoundError(f"Usuario {user_id} no encontrado", user_id=user_id)
                item = await cart_crud.upsert_cart_item(db, user_id, product_id, quantity)
        except IntegrityError as exc:
            # El producto o el usuario desaparecieron entre la comprobación y el upsert
            raise NotFoundError(
                "El producto o el usuario ya no existen", product_id=product_id, user_id=user_id
            ) from exc
        return item

    async def update_cart_item(self, db: AsyncSession, cart_item_id: int, user_id: int, quantity: int) -> CartItem:
        """
        Sustituye la cantidad de una línea del carrito.

        Raises:
            ValidationError: si quantity <= 0 (para quitar la línea usar remove_cart_item)
            NotFoundError: si la línea no existe
            AuthorizationError: si la línea es de otro usuario
        """
        self._validate_quantity(quantity)
        async with transaction(db):
            item = await cart_crud.get_cart_item(db, cart_item_id)
            if item is None:
                raise NotFoundError(f"Línea de carrito {cart_item_id} no encontrada", cart_item_id=cart_item_id)
            if item.user_id != user_id:
                raise AuthorizationError(
                    "La línea de carrito pertenece a otro usuario", cart_item_id=cart_item_id
                )
            item = await cart_crud.set_quantity(db, item, quantity)
        return item

    async def remove_cart_item(self, db: AsyncSession, cart_item_id: int, user_id: int) -> bool:
        """
        Elimina una línea del carrito. Idempotente: si la línea ya no existe
        devuelve False sin error.

        Raises:
            AuthorizationError: si la línea existe pero es de otro usuario
        """
        async with transaction(db):
            item = await cart_crud.get_cart_item(db, cart_item_id)
            if item is None:
                return False
            if item.user_id != user_id:
                raise AuthorizationError(
                    "La línea de carrito pertenece a otro usuario", cart_item_id=cart_item_id
                )
            return await cart_crud.delete_cart_item(db, cart_item_id, user_id)

    async def clear_cart(self, db: AsyncSession, user_id: int) -> int:
        """
        Vacía completamente el carrito de un usuario. Devuelve las líneas borradas.
        """
        async with transaction(db):
            return await cart_crud.clear_cart(db, user_id)

    async def get_cart(self, db: AsyncSession, user_id: int) -> CartResponse:
        """
        Obtiene el carrito con el precio vigente de cada producto (el de
        descuento si existe) y el total.
        """
        lines = []
        total_price = Decimal("0.00")
        for item, product in await cart_crud.get_cart_lines(db, user_id):
            unit_price = product.effective_price
            line_total = (unit_price * item.quantity).quantize(CENT)
            total_price += line_total
            lines.append(
                CartLine(
                    cart_item_id=item.cart_item_id,
                    product_id=product.product_id,
                    product_name=product.name,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    line_total=line_total,
                )
            )
        return CartResponse(user_id=user_id, items=lines, total_price=total_price.quantize(CENT))


cart_service = CartService()
