# backend/storefront/services/category_service.py
"""
Servicio para operaciones de negocio relacionadas con categorías.

Este servicio se encarga de gestionar la lógica de negocio del árbol de
categorías: existencia del padre, prevención de ciclos y política de borrado.

Política de borrado: las subcategorías directas de una categoría eliminada
pasan a colgar de su abuelo (o quedan como raíz si la eliminada lo era), y los
productos asociados pierden su categoría.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.crud import category_crud
from storefront.db.database import transaction
from storefront.db.models.category_model import Category
from storefront.schemas import category_schema

logger = logging.getLogger(__name__)

class CategoryService:
    """
    Servicio para operaciones de negocio relacionadas con categorías.

    Características:
    - Verificación de integridad referencial padre-hijo
    - Prevención de ciclos en la jerarquía (una FK no puede garantizarla)
    - Borrado con re-asignación de subcategorías
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_category(self, db: AsyncSession, category_id: int) -> Optional[Category]:
        return await category_crud.get_category(db, category_id=category_id)

    async def list_categories(self, db: AsyncSession, skip: int = 0, limit: int = 100) -> List[Category]:
        if limit > 1000: # Prevenir consultas excesivamente grandes
            limit = 1000
        return await category_crud.get_categories(db, skip=skip, limit=limit)

    async def get_root_categories(self, db: AsyncSession) -> List[Category]:
        return await category_crud.get_root_categories(db)

    async def get_subcategories(self, db: AsyncSession, parent_id: int) -> List[Category]:
        return await category_crud.get_subcategories(db, parent_id=parent_id)

    async def get_descendant_ids(self, db: AsyncSession, category_id: int) -> List[int]:
        """IDs de la categoría y de toda su descendencia."""
        return await category_crud.get_category_and_all_children_ids(db, category_id)

    async def get_category_path(self, db: AsyncSession, category_id: int) -> List[Category]:
        """
        Ruta completa desde la raíz hasta la categoría indicada.

        Raises:
            NotFoundError: si la categoría no existe
        """
        ancestor_ids = await category_crud.get_ancestor_ids(db, category_id)
        if not ancestor_ids:
            raise NotFoundError(f"Categoría {category_id} no encontrada", category_id=category_id)
        by_id = {c.category_id: c for c in await category_crud.get_categories_by_ids(db, ancestor_ids)}
        return [by_id[cid] for cid in reversed(ancestor_ids)]

    # ========================================
    # OPERACIONES DE ESCRITURA CON LÓGICA DE NEGOCIO
    # ========================================

    async def _ensure_parent_exists(self, db: AsyncSession, parent_id: int) -> None:
        if await category_crud.get_category(db, category_id=parent_id) is None:
            raise ValidationError(
                f"La categoría padre {parent_id} no existe", parent_id=parent_id
            )

    async def create_category(self, db: AsyncSession, category_in: category_schema.CategoryCreate) -> Category:
        """
        Crea una nueva categoría.

        Una categoría nueva no tiene descendientes, así que basta con
        comprobar que el padre existe para que no se forme un ciclo.

        Raises:
            ValidationError: si el padre no existe
        """
        async with transaction(db):
            if category_in.parent_id is not None:
                await self._ensure_parent_exists(db, category_in.parent_id)
            category = await category_crud.create_category(db, category_in)
        logger.info("Categoría creada: %s (ID %s)", category.name, category.category_id)
        return category

    async def update_category(
        self, db: AsyncSession, category_id: int, category_in: category_schema.CategoryUpdate
    ) -> Category:
        """
        Actualiza una categoría, validando que el nuevo padre no cree un ciclo.

        Raises:
            NotFoundError: si la categoría no existe
            ValidationError: si se vacía el nombre
            ValidationError: si el nuevo padre no existe, es ella misma o uno de sus descendientes
        """
        if "name" in category_in.model_fields_set and category_in.name is None:
            raise ValidationError("El nombre de la categoría es obligatorio", category_id=category_id)

        new_parent_id = category_in.parent_id
        moving = "parent_id" in category_in.model_fields_set and new_parent_id is not None

        async with transaction(db):
            if moving:
                # Los ciclos se comprueban con el árbol bloqueado
                await category_crud.lock_category_tree(db)
            db_category = await category_crud.get_category(db, category_id=category_id)
            if db_category is None:
                raise NotFoundError(f"Categoría {category_id} no encontrada", category_id=category_id)

            if moving:
                await self._ensure_parent_exists(db, new_parent_id)
                descendants = await category_crud.get_category_and_all_children_ids(db, category_id)
                if new_parent_id in descendants:
                    raise ValidationError(
                        f"La categoría {new_parent_id} no puede ser padre de {category_id}: se formaría un ciclo",
                        category_id=category_id,
                        parent_id=new_parent_id,
                    )

            category = await category_crud.update_category(db, db_category, category_in)
        return category

    async def delete_category(self, db: AsyncSession, category_id: int) -> bool:
        """
        Elimina una categoría aplicando la política de borrado.

        Returns:
            True si existía y se eliminó; False si ya no existía
        """
        async with transaction(db):
            await category_crud.lock_category_tree(db)
            db_category = await category_crud.get_category(db, category_id=category_id)
            if db_category is None:
                return False
            moved = await category_crud.reparent_children(db, category_id, db_category.parent_id)
            await category_crud.delete_category(db, category_id)
        logger.info(
            "Categoría %s eliminada; %s subcategorías re-asignadas a %s",
            category_id, moved, db_category.parent_id,
        )
        return True


category_service = CategoryService()
