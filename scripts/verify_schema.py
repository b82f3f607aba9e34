# scripts/verify_schema.py

"""
Script de verificación del esquema.

Muestra las tablas y columnas (tipo, nulabilidad y default) tal como las ve la
base de datos y después inserta y borra una categoría y un producto de prueba
para comprobar que el esquema acepta escrituras.
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
from storefront.db.init_db import describe_schema, smoke_test

logger = logging.getLogger("verify_schema")


def print_schema(schema: dict) -> None:
    print("Tablas y columnas:")
    print("======================")
    for table, columns in schema.items():
        print(f"\n{table.upper()}:")
        for column in columns:
            nullable = "NULL" if column["nullable"] else "NOT NULL"
            default = f" DEFAULT {column['default']}" if column["default"] is not None else ""
            print(f"  {column['column']:<20} {column['type']:<25} {nullable}{default}")


async def main(skip_insert: bool) -> int:
    try:
        schema = await describe_schema(engine)
        if not schema:
            logger.error("La base de datos no tiene tablas. Ejecuta antes scripts/import_schema.py")
            return 1
        print_schema(schema)

        if not skip_insert:
            async with session_scope() as db:
                ids = await smoke_test(db)
            logger.info("Inserción de prueba correcta: %s", ids)
        return 0
    except Exception as e:
        logger.error("Error verificando el esquema: %s", e, exc_info=True)
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Verifica el esquema de la base de datos de la tienda.")
    parser.add_argument("--skip-insert", action="store_true", help="Solo muestra el esquema, sin la inserción de prueba.")
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(main(args.skip_insert)))
