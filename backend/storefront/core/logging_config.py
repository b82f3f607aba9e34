# backend/storefront/core/logging_config.py
"""
Configuración del logging de la aplicación a partir de Settings.
"""

import logging
from pathlib import Path

from storefront.core.config import Settings, settings as default_settings


def configure_logging(settings: Settings = default_settings) -> None:
    """
    Configura el logger raíz con el nivel y formato definidos en la configuración.
    Si LOG_FILE_PATH está definido se añade además un fichero de log.
    """
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE_PATH:
        log_path = Path(settings.LOG_FILE_PATH)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # El eco de SQL lo controla DB_ECHO; evitamos duplicarlo aquí
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
