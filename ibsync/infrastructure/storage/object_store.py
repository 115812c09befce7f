"""
Repositorio de objetos en ECS (API compatible con S3) vía boto3.

Responsabilidades:
- Leer la lista maestra (get_object)
- Escribir un objeto JSON por GDUN y feed (put_object)
- Traducir errores de botocore a StoreError

No hay operaciones batch ni transaccionales: cada llamada es independiente.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ibsync.core.config import Settings
from ibsync.shared.exceptions.sync import StoreError, SyncConfigError


@dataclass(frozen=True)
class EcsCredentials:
    access_key_id: str
    secret_access_key: str
    region: Optional[str] = None


def load_credentials_file(path: str) -> EcsCredentials:
    """
    Lee credenciales desde un JSON con el formato de ECSconfig.json:

        {"accessKeyId": "...", "secretAccessKey": "...", "region": "..."}
    """
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SyncConfigError(f"No existe el archivo de credenciales ECS: {path}", field="ECS_CONFIG_PATH") from e
    except (OSError, ValueError) as e:
        raise SyncConfigError(f"Archivo de credenciales ECS ilegible ({path}): {e}", field="ECS_CONFIG_PATH") from e

    if not isinstance(raw, dict):
        raise SyncConfigError(f"El archivo de credenciales ECS debe ser un objeto JSON: {path}", field="ECS_CONFIG_PATH")

    access_key = raw.get("accessKeyId")
    secret_key = raw.get("secretAccessKey")
    if not access_key or not secret_key:
        raise SyncConfigError(
            f"El archivo {path} debe contener 'accessKeyId' y 'secretAccessKey'",
            field="ECS_CONFIG_PATH",
        )
    return EcsCredentials(access_key_id=access_key, secret_access_key=secret_key, region=raw.get("region"))


def resolve_credentials(settings: Settings) -> Optional[EcsCredentials]:
    """
    Credenciales efectivas: archivo (ECS_CONFIG_PATH) > variables ECS_* > None.

    None deja que boto3 use su cadena de credenciales por defecto.
    """
    if settings.ECS_CONFIG_PATH:
        return load_credentials_file(settings.ECS_CONFIG_PATH)
    if settings.ECS_ACCESS_KEY_ID and settings.ECS_SECRET_ACCESS_KEY:
        return EcsCredentials(
            access_key_id=settings.ECS_ACCESS_KEY_ID,
            secret_access_key=settings.ECS_SECRET_ACCESS_KEY,
        )
    return None


def _strip_etag(etag: str) -> str:
    # S3 devuelve el ETag entre comillas dobles.
    return etag.strip('"')


class EcsObjectStore:
    """
    Acceso a buckets ECS.

    El cliente boto3 se inyecta (tests) o se construye con build_s3_client().
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
            return resp["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise StoreError(bucket, key, f"get_object falló: {e}") from e

    def put_object(self, bucket: str, key: str, body: bytes) -> str:
        """
        Escribe (o sobreescribe) un objeto JSON. Retorna el ETag sin comillas.
        """
        try:
            resp = self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as e:
            raise StoreError(bucket, key, f"put_object falló: {e}") from e

        etag = _strip_etag(resp.get("ETag", ""))
        logger.debug(f"Objeto guardado en ECS {bucket}/{key} ETag={etag}")
        return etag


def build_s3_client(settings: Settings) -> Any:
    """
    Cliente boto3 apuntando al endpoint ECS.

    - path-style (ECS no resuelve buckets como subdominio)
    - timeouts de conexión/lectura
    - sin reintentos: los errores se reportan tal cual al ciclo
    """
    creds = resolve_credentials(settings)
    config = Config(
        connect_timeout=settings.STORAGE_TIMEOUT_S,
        read_timeout=settings.STORAGE_TIMEOUT_S,
        retries={"total_max_attempts": 1},
        s3={"addressing_style": "path" if settings.ECS_FORCE_PATH_STYLE else "auto"},
    )
    kwargs: dict[str, Any] = {
        "endpoint_url": settings.ECS_ENDPOINT,
        "region_name": settings.ECS_REGION,
        "config": config,
    }
    if creds is not None:
        kwargs["aws_access_key_id"] = creds.access_key_id
        kwargs["aws_secret_access_key"] = creds.secret_access_key
        if creds.region:
            kwargs["region_name"] = creds.region

    logger.info(f"Cliente ECS: endpoint={settings.ECS_ENDPOINT}, path_style={settings.ECS_FORCE_PATH_STYLE}")
    return boto3.client("s3", **kwargs)
