# main.py
# Punto de entrada: carga cuentas -> expone GET /?p=<token> con el resumen de no leídos
from __future__ import annotations
import logging
import uvicorn
from config.accounts import load_accounts
from config.settings import Settings
from interface_adapters.controllers.http_controller import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    accounts = load_accounts(settings.accounts_path())
    if not settings.SCAN_SECRET:
        logger.warning("SCAN_SECRET vacío: todas las peticiones serán rechazadas")

    logger.info("=== Unread Mail Digest ===")
    logger.info("HTTP %s:%s cuentas=%d workers=%d", settings.HTTP_HOST, settings.HTTP_PORT, len(accounts), settings.SCAN_WORKERS)
    app = create_app(settings, accounts)
    uvicorn.run(app, host=settings.HTTP_HOST, port=settings.HTTP_PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
