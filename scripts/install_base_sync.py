"""
CLI: Ops Console -> ECS (one-way sync).

Uso recomendado:
  - Como servicio: sin flags, corre un ciclo y se reprograma cada CYCLE_INTERVAL_S.
  - Como job (cron/systemd timer): --once ejecuta un solo ciclo y termina.

Variables de entorno (ver ibsync/core/config.py):
  - ECS_ENDPOINT, ECS_ACCESS_KEY_ID, ECS_SECRET_ACCESS_KEY o ECS_CONFIG_PATH
  - MASTER_LIST_BUCKET, MASTER_LIST_KEY
  - INSTALLS_BUCKET, SRS_BUCKET
  - OPS_CONSOLE_BASE_URL

Ejecución:
  python scripts/install_base_sync.py
  python scripts/install_base_sync.py --once
  python scripts/install_base_sync.py --check-config
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv
from pydantic import ValidationError

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

# Cargar variables desde .env de la raiz del proyecto si existe.
load_dotenv(_PROJECT_ROOT / ".env", override=False)

from ibsync.core.config import Settings
from ibsync.core.events import startup
from ibsync.infrastructure.external.ops_console.sync_service import build_from_settings
from ibsync.shared.exceptions.base import AppException


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--once",
        action="store_true",
        help="Ejecuta un solo ciclo y termina (exit 1 si hubo errores).",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Solo valida la configuracion y termina.",
    )
    args = parser.parse_args()

    try:
        settings = Settings()
        startup(settings)
    except ValidationError as e:
        logger.error(f"Configuracion invalida: {e}")
        return 1
    except AppException as e:
        logger.error(f"Configuracion invalida: {e.message}")
        return 1

    if args.check_config:
        logger.info("Configuracion OK")
        return 0

    try:
        service = build_from_settings(settings)
    except AppException as e:
        logger.error(f"No se pudo construir el servicio: {e.message}")
        return 1

    if args.once:
        outcome = service.run_cycle()
        logger.info(f"Ciclo unico: ok={len(outcome.synced)}, errores={len(outcome.failed)}")
        return 0 if outcome.ok else 1

    service.run_forever()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
