"""
Configuracion central del servicio.
Gestiona variables de entorno (o .env) para ECS, Ops Console y el ciclo de sync.

A diferencia de una instancia global, Settings se construye una sola vez
en el arranque (main.py / scripts) y se pasa explicitamente a quien la necesita.
"""
from pydantic_settings import BaseSettings
from pydantic import Field

from ibsync.shared.exceptions.sync import SyncConfigError


class Settings(BaseSettings):
    """
    Clase de configuracion del servicio.
    Lee variables de entorno y proporciona valores por defecto.

    Grupos:
    - ECS_*: endpoint y credenciales del object store (API S3)
    - MASTER_LIST_*: ubicacion de la lista maestra de GDUNs
    - *_BUCKET: bucket destino de cada feed
    - OPS_CONSOLE_*: API de reportes de origen
    - CYCLE_INTERVAL_S / IDENTIFIER_DELAY_S: ritmo del ciclo
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="install-base-sync")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="production")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/install_base_sync.log")

    # Object store (ECS, compatible con S3)
    ECS_ENDPOINT: str = Field(default="http://localhost:9020")
    ECS_REGION: str = Field(default="us-east-1")
    ECS_ACCESS_KEY_ID: str = Field(default="")
    ECS_SECRET_ACCESS_KEY: str = Field(default="")
    # Archivo JSON de credenciales (formato ECSconfig.json). Si se define, tiene prioridad.
    ECS_CONFIG_PATH: str = Field(default="")
    ECS_FORCE_PATH_STYLE: bool = Field(default=True)
    STORAGE_TIMEOUT_S: int = Field(default=30)

    # Lista maestra
    MASTER_LIST_BUCKET: str = Field(default="testSRS")
    MASTER_LIST_KEY: str = Field(default="PNWandNCAcustomers.json")
    MASTER_LIST_ID_FIELD: str = Field(default="gduns")

    # Buckets destino por feed
    INSTALLS_BUCKET: str = Field(default="testInstalls")
    SRS_BUCKET: str = Field(default="testSRS")

    # Ops Console
    OPS_CONSOLE_BASE_URL: str = Field(default="http://pnwreport.bellevuelab.isus.emc.com")
    OPS_CONSOLE_TIMEOUT_S: int = Field(default=30)

    # Ritmo del ciclo
    CYCLE_INTERVAL_S: float = Field(default=86400)
    IDENTIFIER_DELAY_S: float = Field(default=5.0)
    STOP_ON_FIRST_ERROR: bool = Field(default=False)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def validate_settings(settings: Settings) -> list[str]:
    """
    Valida la configuracion antes de arrancar.

    Returns:
        Lista de advertencias (configuracion usable pero sospechosa).

    Raises:
        SyncConfigError: si algun valor hace imposible ejecutar el ciclo.
    """
    if settings.CYCLE_INTERVAL_S < 0:
        raise SyncConfigError("CYCLE_INTERVAL_S no puede ser negativo", field="CYCLE_INTERVAL_S")
    if settings.IDENTIFIER_DELAY_S < 0:
        raise SyncConfigError("IDENTIFIER_DELAY_S no puede ser negativo", field="IDENTIFIER_DELAY_S")
    if settings.OPS_CONSOLE_TIMEOUT_S <= 0:
        raise SyncConfigError("OPS_CONSOLE_TIMEOUT_S debe ser mayor que 0", field="OPS_CONSOLE_TIMEOUT_S")
    if settings.STORAGE_TIMEOUT_S <= 0:
        raise SyncConfigError("STORAGE_TIMEOUT_S debe ser mayor que 0", field="STORAGE_TIMEOUT_S")

    for name in ("MASTER_LIST_BUCKET", "MASTER_LIST_KEY", "MASTER_LIST_ID_FIELD", "INSTALLS_BUCKET", "SRS_BUCKET"):
        if not getattr(settings, name).strip():
            raise SyncConfigError(f"{name} no puede estar vacio", field=name)

    for name in ("OPS_CONSOLE_BASE_URL", "ECS_ENDPOINT"):
        url = getattr(settings, name)
        if not url.startswith(("http://", "https://")):
            raise SyncConfigError(f"{name} debe empezar con http:// o https://: {url}", field=name)

    warnings = []
    if not settings.ECS_CONFIG_PATH and not (settings.ECS_ACCESS_KEY_ID and settings.ECS_SECRET_ACCESS_KEY):
        warnings.append("Credenciales ECS no configuradas - se usara la cadena por defecto de boto3")
    if settings.IDENTIFIER_DELAY_S == 0:
        warnings.append("IDENTIFIER_DELAY_S=0 - las llamadas a Ops Console no tendran espaciado")
    return warnings
