# backend/storefront/crud/category_crud.py

"""
Operaciones CRUD para el modelo Category.

Este módulo implementa el acceso a datos de categorías, proporcionando una
capa de abstracción entre los servicios y la base de datos.

Funcionalidades principales:
- Consultas básicas por ID
- Manejo de jerarquías (categorías padre/hijo) con CTE recursivas
- Operaciones de paginación

Ninguna función hace commit: la transacción pertenece al servicio que llama.
"""

from typing import List, Optional
from sqlalchemy import select, update, delete, func, literal_column
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models.category_model import Category
from storefront.schemas import category_schema

# Profundidad máxima que recorre la CTE de ancestros
MAX_TREE_DEPTH = 100

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    """
    Obtiene una categoría por su ID.

    Args:
        db: Sesión asíncrona de SQLAlchemy
        category_id: ID único de la categoría

    Returns:
        Objeto Category si existe, None si no se encuentra
    """
    result = await db.execute(select(Category).filter(Category.category_id == category_id))
    return result.scalars().first()


async def get_categories(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[Category]:
    """
    Obtiene una lista paginada de todas las categorías, ordenada por ID.
    """
    result = await db.execute(select(Category).order_by(Category.category_id).offset(skip).limit(limit))
    return result.scalars().all()


async def get_root_categories(db: AsyncSession) -> List[Category]:
    """
    Obtiene las categorías principales (aquellas sin un padre).
    """
    result = await db.execute(
        select(Category).filter(Category.parent_id.is_(None)).order_by(Category.category_id)
    )
    return result.scalars().all()


async def get_subcategories(db: AsyncSession, parent_id: int) -> List[Category]:
    """
    Obtiene las subcategorías directas de una categoría padre.
    """
    result = await db.execute(
        select(Category)
        .filter(Category.parent_id == parent_id)
        .order_by(Category.category_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def get_category_and_all_children_ids(db: AsyncSession, category_id: int) -> List[int]:
    """
    Obtiene el ID de la categoría dada y los IDs de toda su descendencia.
    Utiliza una consulta recursiva (CTE) para recorrer la jerarquía.
    """
    category_cte = (
        select(Category.category_id)
        .filter(Category.category_id == category_id)
        .cte(name="category_cte", recursive=True)
    )

    recursive_part = select(Category.category_id).join(
        category_cte, Category.parent_id == category_cte.c.category_id
    )

    # UNION descarta repetidos: la recursión termina aunque hubiera un ciclo
    full_cte = category_cte.union(recursive_part)

    result = await db.execute(select(full_cte.c.category_id))

    return [r[0] for r in result.fetchall()]


async def get_ancestor_ids(db: AsyncSession, category_id: int) -> List[int]:
    """
    Obtiene la cadena de IDs desde la categoría dada hasta la raíz
    (la propia categoría primero). CTE recursiva hacia arriba.
    """
    ancestors_cte = (
        select(Category.category_id, Category.parent_id, literal_column("0").label("depth"))
        .filter(Category.category_id == category_id)
        .cte(name="ancestors_cte", recursive=True)
    )

    recursive_part = select(
        Category.category_id, Category.parent_id, (ancestors_cte.c.depth + 1).label("depth")
    ).join(ancestors_cte, Category.category_id == ancestors_cte.c.parent_id).filter(
        ancestors_cte.c.depth < MAX_TREE_DEPTH
    )

    full_cte = ancestors_cte.union_all(recursive_part)

    result = await db.execute(select(full_cte.c.category_id).order_by(full_cte.c.depth))
    return [r[0] for r in result.fetchall()]


async def get_categories_by_ids(db: AsyncSession, category_ids: List[int]) -> List[Category]:
    if not category_ids:
        return []
    result = await db.execute(select(Category).filter(Category.category_id.in_(category_ids)))
    return result.scalars().all()


async def get_total_categories(db: AsyncSession) -> int:
    """
    Obtiene el número total de categorías en la base de datos.
    """
    result = await db.execute(select(func.count(Category.category_id)))
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def lock_category_tree(db: AsyncSession) -> None:
    """
    Bloquea (FOR UPDATE) todas las filas de categorías hasta el final de la
    transacción, siempre en orden de ID.

    Serializa las operaciones que cambian la forma del árbol (mover o borrar
    categorías): sin el bloqueo, dos movimientos cruzados (A bajo B y B bajo
    A) pasarían ambos la comprobación de ciclos.
    """
    await db.execute(select(Category.category_id).order_by(Category.category_id).with_for_update())


async def create_category(db: AsyncSession, category: category_schema.CategoryCreate) -> Category:
    """
    Crea una nueva categoría. El ID lo genera la base de datos y queda
    disponible tras el flush.

    Es responsabilidad del servicio validar antes que el padre existe.
    """
    db_category = Category(
        name=category.name,
        description=category.description,
        image_url=category.image_url,
        parent_id=category.parent_id,
    )
    db.add(db_category)
    await db.flush()
    await db.refresh(db_category)
    return db_category


async def update_category(db: AsyncSession, db_category: Category, category_update: category_schema.CategoryUpdate) -> Category:
    """
    Actualiza una categoría existente con el patrón "exclude_unset":
    solo se modifican los campos proporcionados.
    """
    update_data = category_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_category, key, value)

    db.add(db_category)
    await db.flush()
    await db.refresh(db_category)
    return db_category


async def reparent_children(db: AsyncSession, category_id: int, new_parent_id: Optional[int]) -> int:
    """
    Mueve las subcategorías directas de category_id bajo new_parent_id.
    Devuelve el número de categorías movidas.
    """
    result = await db.execute(
        update(Category)
        .where(Category.parent_id == category_id)
        .values(parent_id=new_parent_id)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


async def delete_category(db: AsyncSession, category_id: int) -> bool:
    """
    Elimina una categoría. Los productos asociados quedan con category_id a
    NULL por la foreign key (ON DELETE SET NULL).

    Returns:
        True si se eliminó alguna fila
    """
    result = await db.execute(delete(Category).where(Category.category_id == category_id))
    return result.rowcount > 0
