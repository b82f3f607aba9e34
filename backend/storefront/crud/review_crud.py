# backend/storefront/crud/review_crud.py
"""
Operaciones CRUD para las reseñas.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.database import dialect_insert
from storefront.db.models.review_model import Review

async def get_review(db: AsyncSession, product_id: int, user_id: int) -> Optional[Review]:
    result = await db.execute(
        select(Review)
        .filter(Review.product_id == product_id, Review.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()

async def upsert_review(db: AsyncSession, product_id: int, user_id: int, rating: int, comment: Optional[str]) -> Review:
    """
    INSERT ... ON CONFLICT (product_id, user_id) DO UPDATE: la segunda reseña
    del mismo usuario sustituye valoración y comentario de la primera.
    """
    stmt = dialect_insert(db, Review).values(
        product_id=product_id, user_id=user_id, rating=rating, comment=comment
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["product_id", "user_id"],
        set_={
            "rating": stmt.excluded.rating,
            "comment": stmt.excluded.comment,
            "updated_at": func.now(),
        },
    )
    await db.execute(stmt)
    return await get_review(db, product_id, user_id)

async def get_reviews_for_product(db: AsyncSession, product_id: int, skip: int = 0, limit: int = 20) -> List[Review]:
    result = await db.execute(
        select(Review)
        .filter(Review.product_id == product_id)
        .order_by(Review.updated_at.desc(), Review.review_id.desc())
        .offset(skip)
        .limit(limit)
    )
    return result.scalars().all()

async def get_rating_stats(db: AsyncSession, product_id: int) -> Tuple[int, Optional[float]]:
    """Número de reseñas y media de valoración de un producto."""
    result = await db.execute(
        select(func.count(Review.review_id), func.avg(Review.rating)).filter(Review.product_id == product_id)
    )
    count, average = result.one()
    return count, (float(average) if average is not None else None)

async def delete_review(db: AsyncSession, product_id: int, user_id: int) -> bool:
    result = await db.execute(
        delete(Review).where(Review.product_id == product_id, Review.user_id == user_id)
    )
    return result.rowcount > 0
