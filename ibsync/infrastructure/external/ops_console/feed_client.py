"""
Cliente mínimo de la API de reportes de Ops Console (sin SDKs externos).

Requisitos cubiertos:
- requests
- una request por feed, sin reintentos (si se quieren, van aquí y no en el sync)
- timeout por request
- status HTTP != 2xx se reporta como FetchError tipado
"""

from __future__ import annotations

from typing import Optional

import requests
from loguru import logger

from ibsync.shared.exceptions.sync import FetchError

# El gateway de Ops Console a veces responde 200 con la página de error del proxy.
GATEWAY_ERROR_MARKER = "502"


def build_feed_url(base_url: str, feed_path: str, nine_digit_gdun: str) -> str:
    """
    URL de un feed: <base>/api/<feed_path>/<gdun de 9 dígitos>.
    """
    return f"{base_url.rstrip('/')}/api/{feed_path.strip('/')}/{nine_digit_gdun}"


def decode_body(resp: requests.Response) -> str:
    """
    Texto del body. Sin charset declarado se asume UTF-8
    (requests usaría ISO-8859-1 para text/*).
    """
    content_type = resp.headers.get("Content-Type", "")
    if "charset=" not in content_type.lower():
        resp.encoding = "utf-8"
    return resp.text


def looks_like_gateway_error(body: str) -> bool:
    """True si el body es una respuesta de error del gateway disfrazada de 200."""
    return body.startswith(GATEWAY_ERROR_MARKER)


class OpsConsoleClient:
    """
    Cliente HTTP de Ops Console.

    Importante:
    - No parsea el body: se retorna el texto crudo del feed.
    - No reintenta. Un error se propaga como FetchError al caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: int = 30,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def fetch_feed(self, nine_digit_gdun: str, feed_path: str) -> str:
        """
        Trae un feed para un GDUN ya normalizado.

        Raises:
            FetchError: error de red/timeout, status no exitoso o body de error del gateway.
        """
        url = build_feed_url(self._base_url, feed_path, nine_digit_gdun)
        logger.debug(f"GET {url}")

        try:
            resp = self._session.get(url, timeout=self._timeout_s)
        except requests.RequestException as e:
            raise FetchError(nine_digit_gdun, feed_path, f"request falló: {e}") from e

        body = decode_body(resp)
        if not 200 <= resp.status_code < 300:
            raise FetchError(
                nine_digit_gdun,
                feed_path,
                f"Ops Console respondió {resp.status_code}: {body[:200]}",
                status_code=resp.status_code,
            )

        if looks_like_gateway_error(body):
            raise FetchError(
                nine_digit_gdun,
                feed_path,
                f"body con error de gateway: {body[:200]}",
                status_code=resp.status_code,
            )
        return body
