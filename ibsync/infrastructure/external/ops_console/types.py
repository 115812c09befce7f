"""
Tipos y utilidades puras para el pipeline Ops Console -> ECS.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from ibsync.shared.exceptions.sync import InvalidIdentifier

GDUN_LENGTH = 9
VALID_GDUN_LENGTHS = (7, 8, 9)

Gdun = Union[int, str]


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def normalize_gdun(identifier: Gdun) -> str:
    """
    Normaliza un GDUN al formato de 9 dígitos que espera Ops Console.

    Los GDUN de la lista maestra a veces pierden los ceros a la izquierda
    (vienen como número), así que se rellenan hasta 9 caracteres.

    Raises:
        InvalidIdentifier: si no son 7, 8 o 9 dígitos decimales.
    """
    raw = str(identifier).strip()
    if not (raw.isascii() and raw.isdigit()) or len(raw) not in VALID_GDUN_LENGTHS:
        raise InvalidIdentifier(identifier)
    return raw.zfill(GDUN_LENGTH)


def object_key_for(identifier: Gdun) -> str:
    """
    Key del objeto en ECS: '<GDUN>.json', igual para todos los feeds.

    Usa el GDUN de la lista maestra sin rellenar, con el mismo strip() que normalize_gdun.
    """
    return f"{str(identifier).strip()}.json"


def serialize_feed_body(body: str) -> bytes:
    """
    Serializa el body crudo como string JSON.

    El payload no se parsea: se guarda tal cual, entrecomillado y escapado.
    ensure_ascii=False deja los caracteres no ASCII sin escapar.
    """
    return json.dumps(body, ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True)
class FeedType:
    """
    Un feed de Ops Console.

    - name: nombre lógico (installs, srs)
    - api_path: segmento de ruta en /api/<api_path>/<gdun>
    - bucket: bucket ECS donde se guarda el resultado
    """

    name: str
    api_path: str
    bucket: str


@dataclass(frozen=True)
class StoreReceipt:
    """Resultado de guardar un feed en ECS."""

    bucket: str
    key: str
    etag: str
