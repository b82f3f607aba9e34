# backend/storefront/db/init_db.py
"""
Creación del esquema, datos de ejemplo y comprobaciones de mantenimiento.

Lo usan los scripts de scripts/ (import_schema, verify_schema,
check_connection) y los tests:
- create_schema: crea (y opcionalmente recrea) todas las tablas e índices
- seed_sample_data: carga el catálogo de ejemplo si la base está vacía
- describe_schema: columnas, tipos, nulabilidad y defaults de cada tabla
- smoke_test: inserta y borra una categoría y un producto de prueba
- check_connection: hora actual según el servidor de base de datos
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func, inspect, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from storefront.core.security import hash_password
from storefront.db.database import Base, transaction
from storefront.db.models import Category, Product, ProductImage, User

logger = logging.getLogger(__name__)

# ========================================
# DATOS DE EJEMPLO
# ========================================

ROOT_CATEGORIES = [
    ("Electronics", "Electronic devices and accessories"),
    ("Clothing", "Apparel and fashion items"),
    ("Home & Living", "Furniture and home decor"),
    ("Beauty & Personal Care", "Cosmetics and personal care products"),
    ("Books & Media", "Books, movies, and music"),
]

SUBCATEGORIES = {
    "Electronics": [
        ("Smartphones & Accessories", "Mobile phones and related accessories"),
        ("Laptops & Computers", "Laptops, desktops, and computing devices"),
        ("Audio & Headphones", "Speakers, headphones, and audio equipment"),
        ("Wearable Technology", "Smartwatches and fitness trackers"),
    ],
    "Clothing": [
        ("Men's Clothing", "Clothing for men"),
        ("Women's Clothing", "Clothing for women"),
        ("Kid's Clothing", "Clothing for children"),
        ("Accessories", "Fashion accessories"),
    ],
}

# (nombre, descripción, categoría, precio, descuento, stock, extensiones de las 5 imágenes)
SAMPLE_PRODUCTS = [
    ("iPhone 14 Pro", "Latest iPhone with A16 Bionic chip, 48MP camera",
     "Smartphones & Accessories", "999.00", "949.00", 87, ["jpg"] * 5),
    ('MacBook Pro 14" M2', '14.2" Liquid Retina XDR display, M2 Pro chip',
     "Laptops & Computers", "1999.00", "1899.00", 42, ["jpg"] * 5),
    ("Premium Cotton T-Shirt", "100% organic cotton, pre-shrunk",
     "Men's Clothing", "29.99", "24.99", 156, ["jpg"] + ["jpeg"] * 4),
    ("The Midnight Library", "Novel by Matt Haig about life choices",
     "Books & Media", "15.99", "12.99", 231, ["avif"] * 5),
    ("Vitamin C Brightening Serum", "20% Vitamin C with Ferulic Acid",
     "Beauty & Personal Care", "34.99", "29.99", 78, ["webp"] + ["jpg"] * 4),
]

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "password123"


# ========================================
# ESQUEMA
# ========================================

async def create_schema(engine: AsyncEngine, reset: bool = False) -> List[str]:
    """
    Crea todas las tablas, restricciones e índices. Con reset=True borra
    antes las existentes (se pierden los datos).

    Returns:
        Nombres de las tablas del esquema, ordenados
    """
    async with engine.begin() as conn:
        if reset:
            logger.warning("Eliminando todas las tablas antes de recrearlas")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    tables = sorted(Base.metadata.tables.keys())
    logger.info("Esquema creado: %s", ", ".join(tables))
    return tables


def _inspect_columns(sync_conn) -> Dict[str, List[Dict[str, Any]]]:
    inspector = inspect(sync_conn)
    schema = {}
    for table_name in sorted(inspector.get_table_names()):
        schema[table_name] = [
            {
                "column": column["name"],
                "type": str(column["type"]),
                "nullable": column["nullable"],
                "default": column.get("default"),
            }
            for column in inspector.get_columns(table_name)
        ]
    return schema


async def describe_schema(engine: AsyncEngine) -> Dict[str, List[Dict[str, Any]]]:
    """
    Devuelve {tabla: [{column, type, nullable, default}, ...]} tal como lo
    ve la base de datos, en el orden de las columnas.
    """
    async with engine.connect() as conn:
        return await conn.run_sync(_inspect_columns)


async def check_connection(engine: AsyncEngine):
    """Ejecuta una consulta trivial y devuelve la hora del servidor."""
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT CURRENT_TIMESTAMP"))
        return result.scalar_one()


# ========================================
# DATOS
# ========================================

async def seed_sample_data(db: AsyncSession) -> bool:
    """
    Carga el catálogo de ejemplo: categorías raíz y subcategorías, cinco
    productos con cinco imágenes cada uno (la primera principal) y un usuario
    administrador.

    Returns:
        True si se cargaron los datos; False si ya había categorías
    """
    existing = await db.execute(select(func.count(Category.category_id)))
    if existing.scalar_one() > 0:
        logger.info("La base de datos ya tiene categorías; no se cargan datos de ejemplo")
        return False

    async with transaction(db):
        categories: Dict[str, Category] = {}
        for name, description in ROOT_CATEGORIES:
            categories[name] = Category(name=name, description=description)
            db.add(categories[name])
        await db.flush()

        for parent_name, children in SUBCATEGORIES.items():
            parent_id = categories[parent_name].category_id
            for name, description in children:
                categories[name] = Category(name=name, description=description, parent_id=parent_id)
                db.add(categories[name])
        await db.flush()

        for name, description, category_name, price, discount, stock, extensions in SAMPLE_PRODUCTS:
            product = Product(
                name=name,
                description=description,
                category_id=categories[category_name].category_id,
                price=Decimal(price),
                discount_price=Decimal(discount),
                stock_quantity=stock,
                is_active=True,
            )
            db.add(product)
            await db.flush()
            for position, extension in enumerate(extensions, start=1):
                db.add(ProductImage(
                    product_id=product.product_id,
                    image_url=f"/images/products/{product.product_id}/{position}.{extension}",
                    is_primary=position == 1,
                ))

        db.add(User(
            username=ADMIN_USERNAME,
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            is_admin=True,
        ))
        await db.flush()

    logger.info(
        "Datos de ejemplo cargados: %s categorías, %s productos",
        len(categories), len(SAMPLE_PRODUCTS),
    )
    return True


async def smoke_test(db: AsyncSession) -> Dict[str, int]:
    """
    Inserta una categoría y un producto de prueba y los borra en la misma
    operación. Sirve para comprobar que el esquema acepta escrituras.

    Returns:
        Los IDs generados: {"category_id": ..., "product_id": ...}
    """
    async with transaction(db):
        category = Category(name="Test Category", description="A test category")
        db.add(category)
        await db.flush()

        product = Product(
            name="Test Product",
            description="A test product",
            price=Decimal("99.99"),
            stock_quantity=10,
            category_id=category.category_id,
        )
        db.add(product)
        await db.flush()
        ids = {"category_id": category.category_id, "product_id": product.product_id}
        logger.info("Datos de prueba insertados: %s", ids)

        await db.delete(product)
        await db.delete(category)
        await db.flush()
    logger.info("Datos de prueba eliminados")
    return ids
