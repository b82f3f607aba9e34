# backend/storefront/services/order_service.py
"""
Servicio de pedidos: checkout del carrito y ciclo de vida del pedido.

El checkout es la operación crítica del dominio. Todo ocurre en una única
transacción:
1. Se leen y bloquean (FOR UPDATE) las líneas del carrito y sus productos.
2. Si no hay líneas, EmptyCartError.
3. Si alguna línea supera el stock, InsufficientStockError con todas ellas.
4. Se descuenta el stock, se crean el pedido y sus items con el precio
   congelado y se vacía el carrito.
Cualquier fallo revierte todos los cambios: nunca queda stock descontado sin
pedido ni carrito lleno con el pedido confirmado.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import (
    AuthorizationError,
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from storefront.crud import cart_crud, order_crud
from storefront.db.database import transaction
from storefront.db.models.order_model import Order, OrderStatus, PaymentStatus
from storefront.schemas.order_schema import CheckoutResult

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Transiciones permitidas; repetir el estado actual no es un cambio
ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

PAYMENT_STATUS_TRANSITIONS: Dict[PaymentStatus, Set[PaymentStatus]] = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


def _coerce_status(enum_cls, value):
    """Acepta el miembro del enum o su valor en texto."""
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Estado no válido: {value!r}", value=str(value)) from exc


class OrderService:

    # ========================================
    # CHECKOUT
    # ========================================

    async def checkout(
        self,
        db: AsyncSession,
        user_id: int,
        shipping_address: str,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CheckoutResult:
        """
        Convierte el carrito del usuario en un pedido de forma atómica.

        Returns:
            CheckoutResult con el ID del pedido y su total

        Raises:
            ValidationError: si la dirección de envío está vacía
            EmptyCartError: si el carrito no tiene líneas
            InsufficientStockError: si alguna línea supera el stock disponible
        """
        if not shipping_address or not shipping_address.strip():
            raise ValidationError("La dirección de envío es obligatoria", user_id=user_id)

        async with transaction(db):
            lines = await cart_crud.lock_cart_lines(db, user_id)
            if not lines:
                raise EmptyCartError(user_id)

            shortages = []
            for item, product in lines:
                # Un producto desactivado no tiene unidades a la venta
                available = product.stock_quantity if product.is_active else 0
                if item.quantity > available:
                    shortages.append({
                        "product_id": product.product_id,
                        "product_name": product.name,
                        "requested": item.quantity,
                        "available": available,
                    })
            if shortages:
                logger.warning("Checkout rechazado para el usuario %s: %s", user_id, shortages)
                raise InsufficientStockError(shortages)

            order_items: List[dict] = []
            total_amount = Decimal("0.00")
            for item, product in lines:
                unit_price = product.effective_price
                total_amount += unit_price * item.quantity
                # Las filas están bloqueadas: nadie más puede cambiar este stock
                product.stock_quantity -= item.quantity
                order_items.append({
                    "product_id": product.product_id,
                    "product_name": product.name,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                })
            total_amount = total_amount.quantize(CENT)

            order = await order_crud.create_order(
                db,
                user_id=user_id,
                shipping_address=shipping_address.strip(),
                total_amount=total_amount,
                items=order_items,
                payment_method=payment_method,
                notes=notes,
            )
            await cart_crud.clear_cart(db, user_id)

        logger.info(
            "Pedido %s creado para el usuario %s: %s líneas, total %s",
            order.order_id, user_id, len(order_items), total_amount,
        )
        return CheckoutResult(order_id=order.order_id, total_amount=total_amount)

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_order(self, db: AsyncSession, order_id: int) -> Optional[Order]:
        return await order_crud.get_order(db, order_id)

    async def get_order_for_user(self, db: AsyncSession, order_id: int, user_id: int) -> Order:
        """
        Raises:
            NotFoundError: si el pedido no existe
            AuthorizationError: si el pedido es de otro usuario
        """
        order = await order_crud.get_order(db, order_id)
        if order is None:
            raise NotFoundError(f"Pedido {order_id} no encontrado", order_id=order_id)
        if order.user_id != user_id:
            raise AuthorizationError("El pedido pertenece a otro usuario", order_id=order_id)
        return order

    async def list_orders_for_user(self, db: AsyncSession, user_id: int, skip: int = 0, limit: int = 10) -> List[Order]:
        return await order_crud.get_orders_by_user(db, user_id, skip=skip, limit=limit)

    # ========================================
    # CAMPOS MUTABLES DEL PEDIDO
    # ========================================

    async def _get_or_raise(self, db: AsyncSession, order_id: int) -> Order:
        order = await order_crud.get_order(db, order_id)
        if order is None:
            raise NotFoundError(f"Pedido {order_id} no encontrado", order_id=order_id)
        return order

    async def update_order_status(self, db: AsyncSession, order_id: int, status: OrderStatus) -> Order:
        """
        Raises:
            NotFoundError: si el pedido no existe
            ValidationError: si la transición no está permitida
        """
        status = _coerce_status(OrderStatus, status)
        async with transaction(db):
            order = await self._get_or_raise(db, order_id)
            current = OrderStatus(order.status)
            if status != current:
                if status not in ORDER_STATUS_TRANSITIONS[current]:
                    raise ValidationError(
                        f"No se puede pasar de {current.value} a {status.value}",
                        order_id=order_id, current=current.value, requested=status.value,
                    )
                order = await order_crud.update_order_fields(db, order, status=status.value)
        logger.info("Pedido %s: estado %s", order_id, status.value)
        return order

    async def update_payment_status(self, db: AsyncSession, order_id: int, payment_status: PaymentStatus) -> Order:
        """
        Raises:
            NotFoundError: si el pedido no existe
            ValidationError: si la transición no está permitida
        """
        payment_status = _coerce_status(PaymentStatus, payment_status)
        async with transaction(db):
            order = await self._get_or_raise(db, order_id)
            current = PaymentStatus(order.payment_status)
            if payment_status != current:
                if payment_status not in PAYMENT_STATUS_TRANSITIONS[current]:
                    raise ValidationError(
                        f"No se puede pasar el pago de {current.value} a {payment_status.value}",
                        order_id=order_id, current=current.value, requested=payment_status.value,
                    )
                order = await order_crud.update_order_fields(db, order, payment_status=payment_status.value)
        logger.info("Pedido %s: pago %s", order_id, payment_status.value)
        return order

    async def set_tracking_number(self, db: AsyncSession, order_id: int, tracking_number: Optional[str]) -> Order:
        async with transaction(db):
            order = await self._get_or_raise(db, order_id)
            order = await order_crud.update_order_fields(db, order, tracking_number=tracking_number)
        return order

    async def update_notes(self, db: AsyncSession, order_id: int, notes: Optional[str]) -> Order:
        async with transaction(db):
            order = await self._get_or_raise(db, order_id)
            order = await order_crud.update_order_fields(db, order, notes=notes)
        return order


order_service = OrderService()
