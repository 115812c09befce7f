"""
Arranque del servicio: logging y validacion de configuracion.
"""
import sys

from loguru import logger

from ibsync.core.config import Settings, validate_settings


def configure_logging(settings: Settings) -> None:
    """
    Configura los sinks de loguru.

    - stderr siempre, con LOG_LEVEL
    - archivo LOG_FILE con rotacion (si LOG_FILE no esta vacio)
    """
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            level=settings.LOG_LEVEL
        )


def startup(settings: Settings) -> None:
    """
    Inicializa logging y valida la configuracion critica.

    Raises:
        SyncConfigError: si la configuracion no permite ejecutar el ciclo.
    """
    configure_logging(settings)
    logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Entorno: {settings.ENVIRONMENT}")

    for warning in validate_settings(settings):
        logger.warning(f"CONFIG: {warning}")

    logger.info(
        f"Lista maestra: {settings.MASTER_LIST_BUCKET}/{settings.MASTER_LIST_KEY} | "
        f"Ops Console: {settings.OPS_CONSOLE_BASE_URL} | "
        f"intervalo={settings.CYCLE_INTERVAL_S}s, espaciado={settings.IDENTIFIER_DELAY_S}s"
    )
