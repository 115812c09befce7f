"""
Configuración de feeds (Ops Console -> bucket ECS).

Aquí se decide:
- qué feeds se piden por cada GDUN
- en qué orden
- a qué bucket va cada uno

Este módulo no realiza I/O: solo define configuración.
"""

from __future__ import annotations

from dataclasses import dataclass

from ibsync.core.config import Settings

from .types import FeedType


@dataclass(frozen=True)
class MasterListLocation:
    """Ubicación de la lista maestra de GDUNs en ECS."""

    bucket: str
    key: str
    id_field: str = "gduns"


def feed_types_from_settings(settings: Settings) -> list[FeedType]:
    """
    Feeds del ciclo, en el orden en que se piden para cada GDUN.

    NOTA: el orden importa. Si falla el primero, el segundo no se pide.
    """
    return [
        FeedType(name="installs", api_path="installs", bucket=settings.INSTALLS_BUCKET),
        FeedType(name="srs", api_path="srs", bucket=settings.SRS_BUCKET),
    ]


def master_list_from_settings(settings: Settings) -> MasterListLocation:
    return MasterListLocation(
        bucket=settings.MASTER_LIST_BUCKET,
        key=settings.MASTER_LIST_KEY,
        id_field=settings.MASTER_LIST_ID_FIELD,
    )
