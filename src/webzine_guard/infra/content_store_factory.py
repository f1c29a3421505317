"""Factory para criar o ContentStore conforme settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from webzine_guard.domain.content import ContentStore
from webzine_guard.infra.content_store_memory import InMemoryContentStore
from webzine_guard.observability.logging import get_logger

if TYPE_CHECKING:
    from webzine_guard.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_content_store(settings: Settings, firestore_client=None) -> ContentStore:
    """Cria o store de conteúdo apropriado.

    - "memory": InMemoryContentStore (dev/testes)
    - "firestore": FirestoreContentStore (produção)

    Raises:
        ValueError: Backend não reconhecido ou sem projeto configurado
    """
    backend = settings.content_store_backend.lower()

    if backend == "memory":
        logger.info("Usando InMemoryContentStore (apenas dev/testes)")
        return InMemoryContentStore()

    if backend == "firestore":
        project_id = settings.firestore_project_id or settings.gcp_project
        if not project_id:
            raise ValueError(
                "FIRESTORE_PROJECT_ID ou GCP_PROJECT é obrigatório para content_store=firestore"
            )

        from webzine_guard.infra.content_store_firestore import FirestoreContentStore

        if firestore_client is None:
            from google.cloud import firestore

            firestore_client = firestore.Client(
                project=project_id, database=settings.firestore_database_id
            )

        logger.info("Usando FirestoreContentStore", extra={"project_id": project_id})
        return FirestoreContentStore(
            client=firestore_client,
            contents_collection=settings.contents_collection,
            comments_collection=settings.comments_collection,
        )

    raise ValueError(f"Backend de content store não reconhecido: {backend}")
