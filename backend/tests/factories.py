# backend/tests/factories.py
"""
Creación rápida de datos de prueba a través de los servicios.
"""

from decimal import Decimal
from itertools import count
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.schemas.category_schema import CategoryCreate
from storefront.schemas.product_schema import ProductCreate
from storefront.schemas.user_schema import UserCreate
from storefront.services.category_service import category_service
from storefront.services.product_service import product_service
from storefront.services.user_service import user_service

_sequence = count(1)


def make_session_factory(bind):
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def make_user(db, username: Optional[str] = None, **overrides):
    n = next(_sequence)
    data = {
        "username": username or f"user{n}",
        "email": overrides.pop("email", None) or f"user{n}@example.com",
        "password": "s3cret-password",
        "shipping_address": "1 Test Street",
    }
    data.update(overrides)
    return await user_service.register_user(db, UserCreate(**data))


async def make_category(db, name: Optional[str] = None, parent_id: Optional[int] = None):
    return await category_service.create_category(
        db, CategoryCreate(name=name or f"Category {next(_sequence)}", parent_id=parent_id)
    )


async def make_product(
    db,
    name: Optional[str] = None,
    price: str = "10.00",
    discount_price: Optional[str] = None,
    stock_quantity: int = 10,
    category_id: Optional[int] = None,
    is_active: bool = True,
):
    return await product_service.create_product(
        db,
        ProductCreate(
            name=name or f"Product {next(_sequence)}",
            price=Decimal(price),
            discount_price=Decimal(discount_price) if discount_price is not None else None,
            stock_quantity=stock_quantity,
            category_id=category_id,
            is_active=is_active,
        ),
    )
