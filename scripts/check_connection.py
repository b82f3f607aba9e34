# scripts/check_connection.py

"""
Comprueba que la base de datos configurada es accesible y muestra su hora.
"""
import asyncio
import logging
import os
import sys

# Añadir el directorio backend/ al PYTHONPATH
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
sys.path.insert(0, project_root)

from storefront.core.logging_config import configure_logging
from storefront.db.database import engine
from storefront.db.init_db import check_connection

logger = logging.getLogger("check_connection")


async def main() -> int:
    logger.info("Conectando a %s", engine.url.render_as_string(hide_password=True))
    try:
        now = await check_connection(engine)
        logger.info("Conexión correcta. Hora del servidor: %s", now)
        return 0
    except Exception as e:
        logger.error("Error de conexión con la base de datos: %s", e)
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    sys.exit(asyncio.run(main()))
