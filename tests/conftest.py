from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webzine_guard.api.app import create_app
from webzine_guard.config.settings import get_settings
from webzine_guard.domain.content import ContentRow
from webzine_guard.infra.content_store_memory import InMemoryContentStore
from webzine_guard.infra.password import CredentialHasher

ADMIN_TOKEN = "test-admin-token"


class FakeClock:
    """Relógio manual em milissegundos."""

    def __init__(self, start_ms: float = 1_000_000.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fast_hasher() -> CredentialHasher:
    # Parâmetros mínimos aceitos pelo argon2 (testes rápidos)
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture()
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore(
        [
            ContentRow(id="post-1", title="봄의 시", is_published=True, likes_count=5, view_count=10),
            ContentRow(id="post-2", title="여름 사진", is_published=True),
            ContentRow(id="draft-1", title="초안", is_published=False),
        ]
    )


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, content_store, clock, fast_hasher):
    monkeypatch.setenv("ADMIN_TOKEN", ADMIN_TOKEN)
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    app = create_app(content_store=content_store, clock=clock, hasher=fast_hasher)
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
