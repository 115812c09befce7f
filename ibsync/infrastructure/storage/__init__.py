"""
Almacenamiento de objetos (ECS).

Expone el repositorio y la construcción del cliente boto3.
"""
from ibsync.infrastructure.storage.object_store import (
    EcsCredentials,
    EcsObjectStore,
    build_s3_client,
    resolve_credentials,
)
