# backend/storefront/crud/product_crud.py

"""
Operaciones CRUD para los modelos Product y ProductImage.

Este módulo es el corazón del catálogo. Maneja las relaciones con categorías,
imágenes, carrito, reseñas e ítems de pedido.

Estrategias implementadas:
- selectinload() para cargar relaciones sin consultas N+1 (y sin lazy loading,
  que no está permitido con sesiones asíncronas)
- Filtro por categoría que incluye toda la descendencia
- Actualización de stock con una única sentencia condicionada
"""

from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.models.product_model import Product, ProductImage
from storefront.schemas import product_schema
from . import category_crud

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    """Obtiene un producto por su ID, con categoría e imágenes precargadas."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.images))
        .filter(Product.product_id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def lock_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    """
    Bloquea (FOR UPDATE) la fila del producto hasta el final de la
    transacción. Serializa los cambios de imagen principal de un mismo producto.
    """
    result = await db.execute(
        select(Product)
        .filter(Product.product_id == product_id)
        .with_for_update()
    )
    return result.scalars().first()


async def get_products(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 10,
    category_id: Optional[int] = None,
    include_inactive: bool = False,
) -> List[Product]:
    """
    Obtiene una lista filtrada y paginada de productos.
    El filtro de categoría incluye todas sus subcategorías.
    """
    query = select(Product).options(
        selectinload(Product.category),
        selectinload(Product.images)
    )

    if category_id is not None:
        all_category_ids = await category_crud.get_category_and_all_children_ids(db, category_id)
        if all_category_ids:
            query = query.filter(Product.category_id.in_(all_category_ids))
        else:
            return []

    if not include_inactive:
        query = query.filter(Product.is_active.is_(True))

    query = query.order_by(Product.product_id).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, product: product_schema.ProductCreate) -> Product:
    """Crea un producto. El servicio valida antes la categoría y el descuento."""
    db_product = Product(**product.model_dump())
    db.add(db_product)
    await db.flush()
    return await get_product(db, db_product.product_id)


async def update_product(db: AsyncSession, db_product: Product, update_data: dict) -> Product:
    for key, value in update_data.items():
        setattr(db_product, key, value)
    await db.flush()
    return await get_product(db, db_product.product_id)


async def adjust_stock(db: AsyncSession, product_id: int, delta: int) -> Optional[int]:
    """
    Suma delta al stock en una única sentencia, solo si el resultado no es
    negativo. Devuelve el nuevo stock, o None si no se aplicó el cambio.
    """
    result = await db.execute(
        update(Product)
        .where(Product.product_id == product_id, Product.stock_quantity + delta >= 0)
        .values(stock_quantity=Product.stock_quantity + delta)
        .returning(Product.stock_quantity)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()


async def delete_product(db: AsyncSession, product_id: int) -> bool:
    """
    Elimina un producto. Efectos colaterales (foreign keys):
        - product_images, cart y reviews: se borran en cascada
        - order_items: product_id pasa a NULL, el historial se conserva
    """
    result = await db.execute(delete(Product).where(Product.product_id == product_id))
    return result.rowcount > 0


# ========================================
# IMÁGENES
# ========================================

async def get_image(db: AsyncSession, image_id: int) -> Optional[ProductImage]:
    result = await db.execute(select(ProductImage).filter(ProductImage.image_id == image_id))
    return result.scalars().first()


async def get_images(db: AsyncSession, product_id: int) -> List[ProductImage]:
    """Imágenes de un producto, la principal primero."""
    result = await db.execute(
        select(ProductImage)
        .filter(ProductImage.product_id == product_id)
        .order_by(ProductImage.is_primary.desc(), ProductImage.image_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def clear_primary_image(db: AsyncSession, product_id: int) -> None:
    await db.execute(
        update(ProductImage)
        .where(ProductImage.product_id == product_id, ProductImage.is_primary.is_(True))
        .values(is_primary=False)
        .execution_options(synchronize_session="fetch")
    )


async def create_image(db: AsyncSession, product_id: int, image: product_schema.ProductImageCreate) -> ProductImage:
    db_image = ProductImage(product_id=product_id, image_url=image.image_url, is_primary=image.is_primary)
    db.add(db_image)
    await db.flush()
    return db_image


async def mark_primary_image(db: AsyncSession, image_id: int) -> None:
    await db.execute(
        update(ProductImage)
        .where(ProductImage.image_id == image_id)
        .values(is_primary=True)
        .execution_options(synchronize_session="fetch")
    )


async def delete_image(db: AsyncSession, image_id: int) -> bool:
    result = await db.execute(delete(ProductImage).where(ProductImage.image_id == image_id))
    return result.rowcount > 0
