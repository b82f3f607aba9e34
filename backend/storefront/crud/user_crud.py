# backend/storefront/crud/user_crud.py
"""
Este archivo contiene las operaciones CRUD para el modelo User.

Las búsquedas por username no distinguen mayúsculas; los emails se guardan
y se buscan en minúsculas.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models.user_model import User
from storefront.schemas import user_schema

async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).filter(User.user_id == user_id))
    return result.scalars().first()

async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    """
    Busca un usuario por nombre sin distinguir mayúsculas.
    """
    result = await db.execute(select(User).filter(func.lower(User.username) == username.lower()))
    return result.scalars().first()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Busca un usuario por su dirección de correo electrónico.
    """
    result = await db.execute(select(User).filter(User.email == email.strip().lower()))
    return result.scalars().first()

async def create_user(db: AsyncSession, user: user_schema.UserCreate, password_hash: str) -> User:
    """
    Inserta un usuario con la contraseña ya hasheada.
    Las violaciones de unicidad llegan como IntegrityError al hacer flush.
    """
    db_user = User(
        username=user.username,
        email=user.email,
        password_hash=password_hash,
        full_name=user.full_name,
        shipping_address=user.shipping_address,
        phone_number=user.phone_number,
        is_admin=user.is_admin,
    )
    db.add(db_user)
    await db.flush()
    await db.refresh(db_user)
    return db_user

async def update_user(db: AsyncSession, db_user: User, user_update: user_schema.UserUpdate) -> User:
    for key, value in user_update.model_dump(exclude_unset=True).items():
        setattr(db_user, key, value)
    await db.flush()
    return db_user

async def touch_last_login(db: AsyncSession, db_user: User) -> User:
    db_user.last_login = datetime.now(timezone.utc)
    await db.flush()
    return db_user

async def delete_user(db: AsyncSession, user_id: int) -> bool:
    """
    Elimina un usuario. Las foreign keys se encargan del resto:
    pedidos con user_id a NULL, carrito y reseñas en cascada.
    """
    result = await db.execute(delete(User).where(User.user_id == user_id))
    return result.rowcount > 0
