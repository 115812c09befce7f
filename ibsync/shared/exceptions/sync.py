"""
Excepciones del pipeline de sincronización Ops Console -> ECS.
"""
from typing import Any, Optional

from ibsync.shared.exceptions.base import AppException


class SyncConfigError(AppException):
    """Error de configuración del servicio (settings o credenciales)."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            error_code="CONFIG_ERROR",
            details=details
        )


class SyncError(AppException):
    """Excepción base para errores durante un ciclo de sync."""

    def __init__(self, message: str, error_code: str = "SYNC_ERROR", details=None):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class ListLoadError(SyncError):
    """La lista maestra de GDUNs no se pudo leer o no tiene la forma esperada."""

    def __init__(self, bucket: str, key: str, reason: str):
        super().__init__(
            message=f"No se pudo cargar la lista maestra {bucket}/{key}: {reason}",
            error_code="LIST_LOAD_ERROR",
            details={"bucket": bucket, "key": key}
        )


class FetchError(SyncError):
    """Falló la lectura de un feed en Ops Console."""

    def __init__(self, gdun: str, feed_path: str, reason: str, status_code: Optional[int] = None):
        details: dict[str, Any] = {"gdun": gdun, "feed": feed_path}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=f"Error obteniendo feed '{feed_path}' para GDUN {gdun}: {reason}",
            error_code="FETCH_ERROR",
            details=details
        )
        self.status_code = status_code


class StoreError(SyncError):
    """Falló una lectura o escritura en el object store."""

    def __init__(self, bucket: str, key: str, reason: str):
        super().__init__(
            message=f"Error en object store {bucket}/{key}: {reason}",
            error_code="STORE_ERROR",
            details={"bucket": bucket, "key": key}
        )


class InvalidIdentifier(SyncError):
    """El GDUN no tiene 7, 8 o 9 dígitos y no se puede normalizar."""

    def __init__(self, identifier: Any):
        super().__init__(
            message=f"GDUN inválido '{identifier}': se esperan 7, 8 o 9 dígitos",
            error_code="INVALID_IDENTIFIER",
            details={"identifier": str(identifier)}
        )
        self.identifier = identifier
