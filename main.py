# main.py
# Punto de entrada: valida config -> recorre todos los buzones IMAP -> un CSV de contactos por buzón
from __future__ import annotations
import logging
import sys
from config.settings import ConfigError, Settings
from interface_adapters.controllers.extraction_controller import ExtractionController

logger = logging.getLogger(__name__)


def main() -> int:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        settings.validate()
    except ConfigError as exc:
        logger.error("Configuración inválida: %s", exc)
        return 1

    logger.info("=== Mailbox Contacts ===")
    logger.info("IMAP host=%s port=%s user=%s", settings.IMAP_HOST, settings.port(), settings.IMAP_USER)
    try:
        ExtractionController(settings=settings).run_once()
    except Exception:
        logger.exception("Error en la ejecución")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
