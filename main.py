"""
Punto de entrada principal del servicio.
Carga la configuracion, arranca un ciclo de sync y se reprograma cada CYCLE_INTERVAL_S.
"""
from loguru import logger
from pydantic import ValidationError

from ibsync.core.config import Settings
from ibsync.core.events import startup
from ibsync.infrastructure.external.ops_console.sync_service import build_from_settings
from ibsync.shared.exceptions.base import AppException


def main() -> int:
    """
    Construye Settings una sola vez y la pasa al servicio.

    Returns:
        int: codigo de salida (solo retorna si falla el arranque)
    """
    try:
        settings = Settings()
        startup(settings)
        service = build_from_settings(settings)
    except ValidationError as e:
        logger.error(f"Configuracion invalida: {e}")
        return 1
    except AppException as e:
        logger.error(f"Error durante startup: {e.message}")
        return 1

    service.run_forever()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
