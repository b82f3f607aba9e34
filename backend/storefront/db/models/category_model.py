# backend/storefront/db/models/category_model.py
"""
Se encarga de definir el modelo de categoría jerárquica.

La jerarquía se representa con una referencia explícita al padre (parent_id)
indexada para buscar hijos; la aciclicidad la comprueba CategoryService,
ya que una foreign key no puede garantizarla.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base

class Category(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(255), nullable=True)
    # parent_id permite crear jerarquías: categorías pueden tener una categoría padre
    parent_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Sin cascade: al borrar una categoría sus hijas se re-asignan al abuelo
    children = relationship("Category", back_populates="parent", passive_deletes=True)
    parent = relationship("Category", remote_side=[category_id], back_populates="children")
    products = relationship("Product", back_populates="category", passive_deletes=True)

    def __repr__(self):
        return f"<Category(id={self.category_id}, name='{self.name}', parent_id={self.parent_id})>"
