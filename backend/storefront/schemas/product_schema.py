# backend/storefront/schemas/product_schema.py
"""
Esquemas Pydantic para los modelos Product y ProductImage.

Los precios usan Decimal con dos decimales; el precio con descuento, si
existe, no puede superar al precio.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .category_schema import CategoryResponse

# ========================================
# ESQUEMAS DE IMÁGENES
# ========================================

class ProductImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=255)
    is_primary: bool = False


class ProductImageResponse(ProductImageCreate):
    image_id: int
    product_id: int

    model_config = ConfigDict(from_attributes=True)


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    discount_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    is_active: bool = True
    category_id: Optional[int] = None


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto."""

    @model_validator(mode="after")
    def check_discount(self) -> "ProductCreate":
        if self.discount_price is not None and self.discount_price > self.price:
            raise ValueError("discount_price no puede ser mayor que price")
        return self


class ProductUpdate(BaseModel):
    """
    Esquema para actualizar un producto. Todos los campos son opcionales;
    la coherencia descuento/precio se valida en el servicio contra los valores
    ya guardados.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    discount_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    category_id: Optional[int] = None


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """
    Esquema de respuesta para un producto, incluyendo relaciones anidadas
    como categoría e imágenes.
    """
    product_id: int
    category: Optional[CategoryResponse] = None
    images: List[ProductImageResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
