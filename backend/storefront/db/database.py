# backend/storefront/db/database.py

"""
Configuración principal de la base de datos para la capa de datos.

Este módulo establece la conexión con PostgreSQL usando SQLAlchemy y define
los componentes básicos que serán utilizados por todos los servicios:
- Motor de base de datos (engine) con su pool de conexiones
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)
- Helpers de sesión y transacción

Las funciones CRUD nunca hacen commit: la transacción la abre y la cierra el
servicio que orquesta la operación mediante transaction().
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from storefront.core.config import settings # Importamos nuestra configuración

logger = logging.getLogger(__name__)

# Crear el motor de base de datos asíncrono
engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
)

# Crear un sessionmaker asíncrono
# expire_on_commit=False es importante para que los objetos sigan siendo utilizables
# después de que la transacción se haya confirmado.
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Obtiene una sesión del pool y garantiza su cierre (y la devolución de la
    conexión) en cualquier salida, incluidas las excepciones.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Ejecuta el bloque como una única transacción: commit si termina bien,
    rollback completo y re-lanzamiento si algo falla.

    El rollback expira todas las instancias de la sesión, también las que el
    llamante obtuvo antes de abrir la transacción. Con AsyncSession leer un
    atributo expirado provoca una carga implícita que falla (MissingGreenlet),
    así que tras un error hay que usar IDs guardados antes de la llamada o
    volver a leer las entidades con una consulta. Por eso los servicios
    validan la entrada antes de entrar aquí siempre que pueden.
    """
    try:
        yield db
        await db.commit()
    except Exception as exc:
        logger.warning("Transacción revertida: %s", exc)
        await db.rollback()
        raise


def dialect_insert(db: AsyncSession, model):
    """
    Devuelve el INSERT específico del dialecto en uso, que soporta
    ON CONFLICT DO UPDATE para los upserts atómicos.
    """
    dialect_name = db.get_bind().dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(model)
    if dialect_name == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert no soportado para el dialecto '{dialect_name}'")
