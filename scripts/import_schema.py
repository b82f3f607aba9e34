# scripts/import_schema.py

"""
Script de importación del esquema de la base de datos.

Propósito:
Crea todas las tablas, restricciones e índices de la capa de datos en la base
de datos configurada (DATABASE_URL o variables POSTGRES_*) y, opcionalmente,
carga el catálogo de ejemplo.

Uso:
    python scripts/import_schema.py             # crea las tablas que falten
    python scripts/import_schema.py --reset     # borra y recrea todas las tablas
    python scripts/import_schema.py --seed      # además carga los datos de ejemplo
"""
import argparse
import asyncio
import logging
import os
import sys

# Añadir el directorio backend/ al PYTHONPATH
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
sys.path.insert(0, project_root)

from storefront.core.logging_config import configure_logging
from storefront.db.database import engine, session_scope
from storefront.db.init_db import create_schema, seed_sample_data

logger = logging.getLogger("import_schema")


async def main(reset: bool, seed: bool) -> int:
    try:
        tables = await create_schema(engine, reset=reset)
        logger.info("Tablas creadas:")
        for table in tables:
            logger.info("  - %s", table)

        if seed:
            async with session_scope() as db:
                if await seed_sample_data(db):
                    logger.info("Datos de ejemplo cargados")
        return 0
    except Exception as e:
        logger.error("Error importando el esquema: %s", e, exc_info=True)
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crea el esquema de la base de datos de la tienda.")
    parser.add_argument("--reset", action="store_true", help="Borra las tablas existentes antes de crearlas (se pierden los datos).")
    parser.add_argument("--seed", action="store_true", help="Carga el catálogo de ejemplo si la base de datos está vacía.")
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(main(args.reset, args.seed)))
