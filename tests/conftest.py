"""
Configuración de fixtures para pytest.

Los colaboradores externos (ECS y Ops Console) se reemplazan por dobles en
memoria que registran cada operación en un log compartido, para poder
verificar el orden exacto de fetch/store.
"""
from __future__ import annotations

import json
from typing import Callable, Union

import pytest

from ibsync.core.config import Settings
from ibsync.infrastructure.external.ops_console.feed_config import MasterListLocation
from ibsync.infrastructure.external.ops_console.sync_service import InstallBaseSync
from ibsync.infrastructure.external.ops_console.types import FeedType
from ibsync.shared.exceptions.sync import FetchError, StoreError


INSTALLS = FeedType(name="installs", api_path="installs", bucket="installsBucket")
SRS = FeedType(name="srs", api_path="srs", bucket="srsBucket")
MASTER = MasterListLocation(bucket="masterBucket", key="customers.json", id_field="gduns")


class InMemoryObjectStore:
    """Object store falso: dict (bucket, key) -> bytes."""

    def __init__(self, events: list) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.events = events
        self.fail_puts: set[tuple[str, str]] = set()
        self._etag_counter = 0

    def get_object(self, bucket: str, key: str) -> bytes:
        self.events.append(("get", bucket, key))
        if (bucket, key) not in self.objects:
            raise StoreError(bucket, key, "NoSuchKey")
        return self.objects[(bucket, key)]

    def put_object(self, bucket: str, key: str, body: bytes) -> str:
        self.events.append(("put", bucket, key))
        if (bucket, key) in self.fail_puts:
            raise StoreError(bucket, key, "AccessDenied")
        self.objects[(bucket, key)] = body
        self._etag_counter += 1
        return f"etag-{self._etag_counter}"


Scripted = Union[str, Exception]


class ScriptedFeedClient:
    """
    Cliente Ops Console falso.

    responses: (gdun de 9 dígitos, feed_path) -> body o excepción a lanzar.
    Si no hay entrada, responde 'OK-<feed_path>'.
    """

    def __init__(self, events: list) -> None:
        self.responses: dict[tuple[str, str], Scripted] = {}
        self.events = events

    def fetch_feed(self, nine_digit_gdun: str, feed_path: str) -> str:
        self.events.append(("fetch", nine_digit_gdun, feed_path))
        result = self.responses.get((nine_digit_gdun, feed_path), f"OK-{feed_path}")
        if isinstance(result, Exception):
            raise result
        return result

    def fail(self, nine_digit_gdun: str, feed_path: str, status_code: int = 500) -> None:
        self.responses[(nine_digit_gdun, feed_path)] = FetchError(
            nine_digit_gdun, feed_path, f"Ops Console respondió {status_code}", status_code=status_code
        )


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def store(events) -> InMemoryObjectStore:
    return InMemoryObjectStore(events)


@pytest.fixture
def feed_client(events) -> ScriptedFeedClient:
    return ScriptedFeedClient(events)


@pytest.fixture
def sleeps() -> list:
    """Registro de llamadas a sleep (nunca se espera de verdad en tests)."""
    return []


@pytest.fixture
def make_sync(store, feed_client, sleeps) -> Callable[..., InstallBaseSync]:
    """Factory de InstallBaseSync con dobles en memoria."""

    def _make(**kwargs) -> InstallBaseSync:
        params = {
            "store": store,
            "ops_console": feed_client,
            "master_list": MASTER,
            "feeds": [INSTALLS, SRS],
            "identifier_delay_s": 0,
            "cycle_interval_s": 0,
            "stop_on_first_error": False,
            "sleep": sleeps.append,
        }
        params.update(kwargs)
        return InstallBaseSync(**params)

    return _make


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Settings sin leer .env, con overrides por keyword."""

    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def seed_master_list(store) -> Callable[[list], None]:
    """Guarda una lista maestra (lista de GDUNs) en masterBucket/customers.json."""
    def _seed(gduns: list, id_field: str = "gduns") -> None:
        payload = [{id_field: g} for g in gduns]
        store.objects[(MASTER.bucket, MASTER.key)] = json.dumps(payload).encode("utf-8")

    return _seed
