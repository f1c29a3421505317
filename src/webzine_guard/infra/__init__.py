"""Camada de infraestrutura: adapters para serviços externos.

- Store: InMemoryContentStore, create_content_store (Firestore sob demanda)
- Dedup: create_like_dedup_cache, create_view_dedup_cache
- Senhas: CredentialHasher (Argon2id)

Infraestrutura não decide regra de negócio.
"""

from webzine_guard.infra.content_store_factory import create_content_store
from webzine_guard.infra.content_store_memory import InMemoryContentStore
from webzine_guard.infra.dedup_factory import create_like_dedup_cache, create_view_dedup_cache
from webzine_guard.infra.password import CredentialHasher

__all__ = [
    "CredentialHasher",
    "InMemoryContentStore",
    "create_content_store",
    "create_like_dedup_cache",
    "create_view_dedup_cache",
]
