"""
Servicio de sincronización Ops Console -> ECS.

Diseño (resumen):
- Carga la lista maestra de GDUNs desde ECS (se relee en cada ciclo)
- Para cada GDUN, en orden y de a uno: pide cada feed y lo guarda en su bucket
- Espera IDENTIFIER_DELAY_S entre GDUNs para no saturar Ops Console
- Al terminar el ciclo espera CYCLE_INTERVAL_S y vuelve a empezar

Política de errores:
- Lista maestra ilegible: se aborta el ciclo (nunca se usa una lista parcial).
- Falla un feed de un GDUN: se omiten los feeds restantes de ese GDUN.
  Lo ya guardado queda guardado.
- stop_on_first_error=False (default): se registra el error y se sigue con el
  siguiente GDUN. Con True se detiene el resto del ciclo.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from loguru import logger

from ibsync.core.config import Settings
from ibsync.infrastructure.storage.object_store import EcsObjectStore, build_s3_client
from ibsync.shared.exceptions.sync import ListLoadError, StoreError, SyncError

from .feed_client import OpsConsoleClient
from .feed_config import MasterListLocation, feed_types_from_settings, master_list_from_settings
from .types import FeedType, Gdun, StoreReceipt, normalize_gdun, object_key_for, serialize_feed_body, utc_now


@dataclass(frozen=True)
class CycleOutcome:
    identifiers_total: int
    synced: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    halted: bool = False
    list_error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.list_error is None and not self.failed and not self.halted


def parse_master_list(raw: bytes, *, location: MasterListLocation) -> list[Gdun]:
    """
    Extrae los GDUNs de la lista maestra.

    Formato esperado: array JSON de objetos, cada uno con el campo location.id_field.
    Cualquier desviación es ListLoadError: o la lista entera o nada.
    """
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise ListLoadError(location.bucket, location.key, f"JSON inválido: {e}") from e

    if not isinstance(payload, list):
        raise ListLoadError(location.bucket, location.key, f"se esperaba un array, llegó {type(payload).__name__}")

    gduns: list[Gdun] = []
    for i, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise ListLoadError(location.bucket, location.key, f"elemento {i} no es un objeto")
        value = entry.get(location.id_field)
        if value is None or value == "":
            raise ListLoadError(location.bucket, location.key, f"elemento {i} sin campo '{location.id_field}'")
        gduns.append(value)
    return gduns


class InstallBaseSync:
    """
    Orquestador del ciclo de sync. Estrictamente secuencial.
    """

    def __init__(
        self,
        *,
        store: EcsObjectStore,
        ops_console: OpsConsoleClient,
        master_list: MasterListLocation,
        feeds: list[FeedType],
        identifier_delay_s: float = 5.0,
        cycle_interval_s: float = 86400,
        stop_on_first_error: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._ops = ops_console
        self._master_list = master_list
        self._feeds = list(feeds)
        self._identifier_delay_s = identifier_delay_s
        self._cycle_interval_s = cycle_interval_s
        self._stop_on_first_error = stop_on_first_error
        self._sleep = sleep

    def load_master_list(self) -> list[Gdun]:
        loc = self._master_list
        try:
            raw = self._store.get_object(loc.bucket, loc.key)
        except StoreError as e:
            raise ListLoadError(loc.bucket, loc.key, e.message) from e

        gduns = parse_master_list(raw, location=loc)
        logger.info(f"Lista maestra {loc.bucket}/{loc.key}: {len(gduns)} GDUNs")
        return gduns

    def store_feed_result(self, identifier: Gdun, feed: FeedType, body: str) -> StoreReceipt:
        key = object_key_for(identifier)
        etag = self._store.put_object(feed.bucket, key, serialize_feed_body(body))
        return StoreReceipt(bucket=feed.bucket, key=key, etag=etag)

    def sync_identifier(self, identifier: Gdun, feeds: Optional[list[FeedType]] = None) -> list[StoreReceipt]:
        """
        Pide y guarda cada feed de un GDUN, en orden.

        El primer error corta los feeds restantes y se propaga (SyncError).
        """
        receipts: list[StoreReceipt] = []
        if feeds is None:
            feeds = self._feeds
        for feed in feeds:
            nine_digit = normalize_gdun(identifier)
            body = self._ops.fetch_feed(nine_digit, feed.api_path)
            receipts.append(self.store_feed_result(identifier, feed, body))
        return receipts

    def run_cycle(self) -> CycleOutcome:
        """
        Ejecuta un ciclo completo sobre la lista maestra.
        """
        started_at = utc_now()
        logger.info("Ciclo de sync iniciado: cargando lista maestra...")

        try:
            gduns = self.load_master_list()
        except ListLoadError as e:
            logger.error(f"Ciclo abortado: {e.message}")
            return CycleOutcome(
                identifiers_total=0,
                list_error=e.message,
                started_at=started_at,
                finished_at=utc_now(),
            )

        synced: list[str] = []
        failed: dict[str, str] = {}
        halted = False

        for i, gdun in enumerate(gduns):
            if i > 0 and self._identifier_delay_s > 0:
                logger.debug(f"Esperando {self._identifier_delay_s}s para espaciar llamadas a Ops Console")
                self._sleep(self._identifier_delay_s)

            try:
                receipts = self.sync_identifier(gdun)
            except SyncError as e:
                failed[str(gdun)] = e.message
                logger.error(f"Error sincronizando GDUN {gdun}: {e.message}")
                if self._stop_on_first_error:
                    logger.warning(
                        f"stop_on_first_error activo: se omiten {len(gduns) - i - 1} GDUNs restantes"
                    )
                    halted = True
                    break
                continue

            synced.append(str(gdun))
            etags = ", ".join(f"{r.bucket}={r.etag}" for r in receipts)
            logger.info(f"GDUN {gdun} sincronizado ({etags})")

        outcome = CycleOutcome(
            identifiers_total=len(gduns),
            synced=synced,
            failed=failed,
            halted=halted,
            started_at=started_at,
            finished_at=utc_now(),
        )
        logger.info(
            f"Ciclo terminado. total={outcome.identifiers_total}, ok={len(synced)}, "
            f"errores={len(failed)}, detenido={halted}"
        )
        return outcome

    def run_forever(self, *, max_cycles: Optional[int] = None) -> list[CycleOutcome]:
        """
        Ejecuta un ciclo al arrancar y luego uno cada cycle_interval_s.

        Un error inesperado dentro de un ciclo se registra y no detiene los siguientes.
        max_cycles limita la cantidad de ciclos (None = infinito).
        """
        outcomes: list[CycleOutcome] = []
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                outcomes.append(self.run_cycle())
            except Exception:
                logger.exception("Error inesperado durante el ciclo de sync")
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break

            next_run = utc_now() + timedelta(seconds=self._cycle_interval_s)
            logger.info(f"Esperando {self._cycle_interval_s}s; próximo ciclo ~{next_run.isoformat()}")
            self._sleep(self._cycle_interval_s)
        return outcomes


def build_from_settings(settings: Settings, **overrides: Any) -> InstallBaseSync:
    """
    Constructor “oficial” del servicio a partir de Settings.

    overrides permite inyectar store / ops_console / sleep (tests, scripts).
    """
    kwargs: dict[str, Any] = {
        "master_list": master_list_from_settings(settings),
        "feeds": feed_types_from_settings(settings),
        "identifier_delay_s": settings.IDENTIFIER_DELAY_S,
        "cycle_interval_s": settings.CYCLE_INTERVAL_S,
        "stop_on_first_error": settings.STOP_ON_FIRST_ERROR,
    }
    kwargs.update(overrides)
    if "store" not in kwargs:
        kwargs["store"] = EcsObjectStore(build_s3_client(settings))
    if "ops_console" not in kwargs:
        kwargs["ops_console"] = OpsConsoleClient(
            settings.OPS_CONSOLE_BASE_URL,
            timeout_s=settings.OPS_CONSOLE_TIMEOUT_S,
        )
    return InstallBaseSync(**kwargs)
