# backend/storefront/core/security.py
"""
Hash de contraseñas con bcrypt. La contraseña en claro nunca llega a la base
de datos; users.password_hash guarda el resultado de hash_password().
"""

import bcrypt

from storefront.core.config import settings

# bcrypt rechaza contraseñas de más de 72 bytes (no caracteres)
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Genera el hash bcrypt (con sal propia) de una contraseña."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True si la contraseña coincide con el hash guardado."""
    if not plain_password or not hashed_password:
        return False
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Hash con formato inválido
        return False
