# backend/storefront/db/models/user_model.py
"""
Se encarga de definir el modelo de usuario.

Política de mayúsculas: el username conserva su forma original pero es único
sin distinguir mayúsculas (índice único sobre lower(username)); el email se
normaliza a minúsculas antes de guardarse.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.db.database import Base

class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    shipping_address = Column(Text, nullable=True)
    phone_number = Column(String(20), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    email_verified = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Los pedidos sobreviven al borrado de la cuenta (user_id pasa a NULL)
    orders = relationship("Order", back_populates="user", passive_deletes=True)
    reviews = relationship("Review", back_populates="user", passive_deletes=True)
    cart_items = relationship("CartItem", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.user_id}, username='{self.username}')>"


Index("uq_users_username_lower", func.lower(User.username), unique=True)
