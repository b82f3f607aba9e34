# backend/storefront/core/exceptions.py
"""
Excepciones de dominio de la capa de datos.

Los servicios lanzan estas excepciones en lugar de errores del driver para que
quien los invoque pueda mostrar un mensaje al usuario sin conocer SQLAlchemy:

- ValidationError: entrada mal formada (cantidades, valoraciones, precios...)
- NotFoundError: la entidad referenciada no existe o está inactiva
- AuthorizationError: el recurso pertenece a otro usuario
- ConflictError: violación de unicidad que no resuelve un upsert
- InsufficientStockError: falta de stock en el checkout
- EmptyCartError: checkout de un carrito vacío
"""

from typing import Any, Dict, List


class StorefrontError(Exception):
    """Base de todas las excepciones de dominio."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Representación estructurada del error, apta para una respuesta de usuario."""
        return {"error": type(self).__name__, "message": self.message, **self.context}


class ValidationError(StorefrontError):
    pass


class NotFoundError(StorefrontError):
    pass


class AuthorizationError(StorefrontError):
    pass


class ConflictError(StorefrontError):
    pass


class EmptyCartError(StorefrontError):
    def __init__(self, user_id: int):
        super().__init__(f"El carrito del usuario {user_id} está vacío", user_id=user_id)


class InsufficientStockError(StorefrontError):
    """
    Stock insuficiente para uno o más productos del carrito.

    `shortages` es una lista de diccionarios con las claves
    product_id, product_name, requested y available.
    """

    def __init__(self, shortages: List[Dict[str, Any]]):
        self.shortages = shortages
        detail = ", ".join(
            f"{s['product_name']} (ID: {s['product_id']}). Solicitado: {s['requested']}, Disponible: {s['available']}"
            for s in shortages
        )
        super().__init__(f"Stock insuficiente para {detail}", shortages=shortages)

    @property
    def product_ids(self) -> List[int]:
        return [s["product_id"] for s in self.shortages]
