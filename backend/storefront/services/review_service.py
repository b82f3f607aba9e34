# backend/storefront/services/review_service.py
"""
Servicio de reseñas de productos.

Cada usuario tiene como mucho una reseña por producto; enviar otra sustituye
la anterior con un único upsert.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.crud import product_crud, review_crud, user_crud
from storefront.db.database import transaction
from storefront.db.models.review_model import Review
from storefront.schemas.review_schema import RatingSummary

logger = logging.getLogger(__name__)

class ReviewService:

    async def submit_review(
        self, db: AsyncSession, product_id: int, user_id: int, rating: int, comment: Optional[str] = None
    ) -> Review:
        """
        Crea o sustituye la reseña del usuario sobre el producto.

        Raises:
            ValidationError: si la valoración no es un entero entre 1 y 5
            NotFoundError: si el producto o el usuario no existen
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("La valoración debe estar entre 1 y 5", rating=rating)

        try:
            async with transaction(db):
                if await product_crud.get_product(db, product_id) is None:
                    raise NotFoundError(f"Producto {product_id} no encontrado", product_id=product_id)
                if await user_crud.get_user(db, user_id) is None:
                    raise NotFoundError(f"Usuario {user_id} no encontrado", user_id=user_id)
                review = await review_crud.upsert_review(db, product_id, user_id, rating, comment)
        except IntegrityError as exc:
            raise NotFoundError(
                "El producto o el usuario ya no existen", product_id=product_id, user_id=user_id
            ) from exc
        logger.info("Reseña de usuario %s sobre producto %s: %s", user_id, product_id, rating)
        return review

    async def delete_review(self, db: AsyncSession, product_id: int, user_id: int) -> bool:
        async with transaction(db):
            return await review_crud.delete_review(db, product_id, user_id)

    async def list_reviews_for_product(
        self, db: AsyncSession, product_id: int, skip: int = 0, limit: int = 20
    ) -> List[Review]:
        return await review_crud.get_reviews_for_product(db, product_id, skip=skip, limit=limit)

    async def get_rating_summary(self, db: AsyncSession, product_id: int) -> RatingSummary:
        count, average = await review_crud.get_rating_stats(db, product_id)
        if average is not None:
            average = round(average, 2)
        return RatingSummary(product_id=product_id, review_count=count, average_rating=average)


review_service = ReviewService()
