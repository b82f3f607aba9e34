# backend/storefront/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Responsabilidades principales:
- Validar la categoría y la coherencia precio/descuento antes de escribir
- Gestionar el stock con actualizaciones condicionadas (nunca negativo)
- Mantener como mucho una imagen principal por producto
- Aplicar la política de borrado: imágenes, carrito y reseñas desaparecen;
  los items de pedidos históricos se conservan sin referencia al producto
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.crud import category_crud, product_crud
from storefront.db.database import transaction
from storefront.db.models.product_model import Product, ProductImage
from storefront.schemas import product_schema

# Configurar logger
logger = logging.getLogger(__name__)

# Columnas NOT NULL que una actualización parcial no puede vaciar
REQUIRED_FIELDS = ("name", "price", "stock_quantity", "is_active")

class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product(self, db: AsyncSession, product_id: int) -> Optional[Product]:
        return await product_crud.get_product(db, product_id)

    async def list_products(
        self,
        db: AsyncSession,
        category_id: Optional[int] = None,
        include_inactive: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Product]:
        """
        Lista productos; el filtro de categoría incluye sus subcategorías.
        """
        max_limit = 1000  # Prevenir consultas excesivamente grandes
        if limit > max_limit:
            limit = max_limit
        return await product_crud.get_products(
            db, skip=skip, limit=limit, category_id=category_id, include_inactive=include_inactive
        )

    async def list_images(self, db: AsyncSession, product_id: int) -> List[ProductImage]:
        return await product_crud.get_images(db, product_id)

    # ========================================
    # ESCRITURA
    # ========================================

    async def _ensure_category_exists(self, db: AsyncSession, category_id: Optional[int]) -> None:
        if category_id is not None and await category_crud.get_category(db, category_id) is None:
            raise ValidationError(f"La categoría {category_id} no existe", category_id=category_id)

    async def _get_or_raise(self, db: AsyncSession, product_id: int) -> Product:
        product = await product_crud.get_product(db, product_id)
        if product is None:
            raise NotFoundError(f"Producto {product_id} no encontrado", product_id=product_id)
        return product

    async def _lock_or_raise(self, db: AsyncSession, product_id: int) -> Product:
        product = await product_crud.lock_product(db, product_id)
        if product is None:
            raise NotFoundError(f"Producto {product_id} no encontrado", product_id=product_id)
        return product

    async def create_product(self, db: AsyncSession, product_in: product_schema.ProductCreate) -> Product:
        """
        Crea un producto.

        Raises:
            ValidationError: si la categoría no existe o el descuento supera al precio
        """
        if product_in.discount_price is not None and product_in.discount_price > product_in.price:
            raise ValidationError(
                "El precio con descuento no puede superar al precio",
                price=str(product_in.price),
                discount_price=str(product_in.discount_price),
            )
        async with transaction(db):
            await self._ensure_category_exists(db, product_in.category_id)
            product = await product_crud.create_product(db, product_in)
        logger.info("Producto creado: %s (ID %s)", product.name, product.product_id)
        return product

    async def update_product(
        self, db: AsyncSession, product_id: int, product_in: product_schema.ProductUpdate
    ) -> Product:
        """
        Actualización parcial. La regla descuento <= precio se comprueba con
        los valores resultantes, combinando los nuevos con los guardados.

        Raises:
            NotFoundError: si el producto no existe
            ValidationError: si se vacía un campo obligatorio o el descuento supera al precio
            ValidationError: si la nueva categoría no existe
        """
        update_data = product_in.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValidationError(f"El campo {field} es obligatorio", product_id=product_id, field=field)

        async with transaction(db):
            db_product = await self._get_or_raise(db, product_id)

            if "category_id" in update_data:
                await self._ensure_category_exists(db, update_data["category_id"])

            price = update_data.get("price", db_product.price)
            discount_price = update_data.get("discount_price", db_product.discount_price)
            if discount_price is not None and discount_price > price:
                raise ValidationError(
                    "El precio con descuento no puede superar al precio",
                    product_id=product_id,
                    price=str(price),
                    discount_price=str(discount_price),
                )

            product = await product_crud.update_product(db, db_product, update_data)
        return product

    async def adjust_stock(self, db: AsyncSession, product_id: int, delta: int) -> int:
        """
        Suma (o resta) unidades al stock de forma atómica.

        Returns:
            El nuevo stock

        Raises:
            NotFoundError: si el producto no existe
            ValidationError: si el stock quedaría negativo
        """
        async with transaction(db):
            product = await self._get_or_raise(db, product_id)
            new_stock = await product_crud.adjust_stock(db, product_id, delta)
            if new_stock is None:
                raise ValidationError(
                    f"El stock de {product.name} no puede quedar negativo",
                    product_id=product_id,
                    delta=delta,
                )
        return new_stock

    async def delete_product(self, db: AsyncSession, product_id: int) -> bool:
        """
        Elimina un producto. Idempotente: devuelve False si ya no existía.
        """
        async with transaction(db):
            deleted = await product_crud.delete_product(db, product_id)
        if deleted:
            logger.info("Producto %s eliminado", product_id)
        return deleted

    # ========================================
    # IMÁGENES
    # ========================================

    async def add_image(
        self, db: AsyncSession, product_id: int, image_in: product_schema.ProductImageCreate
    ) -> ProductImage:
        """
        Añade una imagen. Si se marca como principal, la principal anterior
        deja de serlo en la misma transacción.
        La fila del producto queda bloqueada para que dos cambios de imagen
        principal simultáneos se apliquen uno detrás de otro.
        """
        async with transaction(db):
            await self._lock_or_raise(db, product_id)
            if image_in.is_primary:
                await product_crud.clear_primary_image(db, product_id)
            image = await product_crud.create_image(db, product_id, image_in)
        return image

    async def set_primary_image(self, db: AsyncSession, product_id: int, image_id: int) -> ProductImage:
        """
        Marca una imagen existente del producto como principal.

        Raises:
            NotFoundError: si el producto no existe
            NotFoundError: si la imagen no existe o es de otro producto
        """
        async with transaction(db):
            await self._lock_or_raise(db, product_id)
            image = await product_crud.get_image(db, image_id)
            if image is None or image.product_id != product_id:
                raise NotFoundError(
                    f"Imagen {image_id} no encontrada para el producto {product_id}",
                    product_id=product_id,
                    image_id=image_id,
                )
            await product_crud.clear_primary_image(db, product_id)
            await product_crud.mark_primary_image(db, image_id)
        return image

    async def delete_image(self, db: AsyncSession, image_id: int) -> bool:
        async with transaction(db):
            return await product_crud.delete_image(db, image_id)


product_service = ProductService()
