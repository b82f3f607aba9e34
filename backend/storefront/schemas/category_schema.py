# backend/storefront/schemas/category_schema.py

"""
Esquemas Pydantic para el modelo Category.

Patrón de esquemas utilizado:
- CategoryBase: Propiedades comunes compartidas
- CategoryCreate: Para crear nuevas categorías
- CategoryUpdate: Para actualizaciones parciales
- CategoryResponse: Para lecturas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# ========================================
# ESQUEMA BASE
# ========================================

class CategoryBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de categoría."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=255)
    parent_id: Optional[int] = None


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class CategoryCreate(CategoryBase):
    """Esquema para crear una nueva categoría. El ID lo asigna la base de datos."""
    pass


class CategoryUpdate(BaseModel):
    """Esquema para actualizar una categoría. Todos los campos son opcionales."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=255)
    parent_id: Optional[int] = None


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class CategoryResponse(CategoryBase):
    """Esquema para las lecturas de categorías."""
    category_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
