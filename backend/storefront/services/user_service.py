# backend/storefront/services/user_service.py
"""
Servicio de usuarios: registro, perfil y baja.

La autenticación la resuelve un servicio externo; aquí solo se guarda el hash
de la contraseña y se mantiene la unicidad de username y email.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.core.security import hash_password, password_too_long
from storefront.crud import user_crud
from storefront.db.database import transaction
from storefront.db.models.user_model import User
from storefront.schemas import user_schema

logger = logging.getLogger(__name__)

class UserService:

    async def get_user(self, db: AsyncSession, user_id: int) -> Optional[User]:
        return await user_crud.get_user(db, user_id)

    async def get_user_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        return await user_crud.get_user_by_username(db, username)

    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await user_crud.get_user_by_email(db, email)

    async def _get_or_raise(self, db: AsyncSession, user_id: int) -> User:
        user = await user_crud.get_user(db, user_id)
        if user is None:
            raise NotFoundError(f"Usuario {user_id} no encontrado", user_id=user_id)
        return user

    async def register_user(self, db: AsyncSession, user_in: user_schema.UserCreate) -> User:
        """
        Registra un usuario nuevo.

        Las comprobaciones previas dan un mensaje claro; la restricción única
        de la base de datos cubre la carrera entre dos registros simultáneos.

        Raises:
            ValidationError: si la contraseña ocupa más de 72 bytes
            ConflictError: si el username (sin distinguir mayúsculas) o el email ya existen
        """
        if password_too_long(user_in.password):
            raise ValidationError("La contraseña es demasiado larga", username=user_in.username)
        password_hash = hash_password(user_in.password)

        try:
            async with transaction(db):
                if await user_crud.get_user_by_username(db, user_in.username) is not None:
                    raise ConflictError(
                        f"El nombre de usuario '{user_in.username}' ya está en uso", field="username"
                    )
                if await user_crud.get_user_by_email(db, user_in.email) is not None:
                    raise ConflictError(f"El email '{user_in.email}' ya está registrado", field="email")
                user = await user_crud.create_user(db, user_in, password_hash)
        except IntegrityError as exc:
            raise ConflictError("El nombre de usuario o el email ya existen") from exc
        logger.info("Usuario registrado: %s (ID %s)", user.username, user.user_id)
        return user

    async def update_profile(self, db: AsyncSession, user_id: int, user_in: user_schema.UserUpdate) -> User:
        async with transaction(db):
            user = await self._get_or_raise(db, user_id)
            user = await user_crud.update_user(db, user, user_in)
        return user

    async def mark_email_verified(self, db: AsyncSession, user_id: int) -> User:
        async with transaction(db):
            user = await self._get_or_raise(db, user_id)
            user.email_verified = True
        return user

    async def record_login(self, db: AsyncSession, user_id: int) -> User:
        async with transaction(db):
            user = await self._get_or_raise(db, user_id)
            user = await user_crud.touch_last_login(db, user)
        return user

    async def delete_user(self, db: AsyncSession, user_id: int) -> bool:
        """
        Da de baja a un usuario. Sus pedidos se conservan sin referencia al
        usuario; su carrito y sus reseñas se eliminan. Idempotente.
        """
        async with transaction(db):
            deleted = await user_crud.delete_user(db, user_id)
        if deleted:
            logger.info("Usuario %s eliminado", user_id)
        return deleted


user_service = UserService()
