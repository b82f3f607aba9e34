# backend/storefront/schemas/review_schema.py
"""
Esquemas Pydantic para las reseñas de productos.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewResponse(ReviewCreate):
    review_id: int
    product_id: int
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RatingSummary(BaseModel):
    """Número de reseñas y valoración media de un producto."""
    product_id: int
    review_count: int
    average_rating: Optional[float] = None
