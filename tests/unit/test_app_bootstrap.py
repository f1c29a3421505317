"""Testes para bootstrap da aplicação FastAPI.

Valida que configurações críticas (store, janelas de dedup) são validadas no boot.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from webzine_guard.api.app import create_app
from webzine_guard.application.comments import CommentIngestService
from webzine_guard.application.counters import CounterService
from webzine_guard.config.settings import Settings
from webzine_guard.infra.content_store_memory import InMemoryContentStore


class TestAppBootstrap:
    def test_create_app_with_memory_in_dev(self, fast_hasher) -> None:
        app = create_app(Settings(environment="development"), hasher=fast_hasher)

        assert isinstance(app.state.content_store, InMemoryContentStore)
        assert isinstance(app.state.counter_service, CounterService)
        assert isinstance(app.state.comment_service, CommentIngestService)
        assert app.state.like_cache.ttl_ms == 60_000
        assert app.state.view_cache.ttl_ms == 86_400_000

    def test_dedup_windows_come_from_settings(self, fast_hasher) -> None:
        settings = Settings(like_dedup_ttl_ms=1_000, like_dedup_sweep_ms=2_000)
        app = create_app(settings, hasher=fast_hasher)
        assert app.state.like_cache.ttl_ms == 1_000
        assert app.state.like_cache.sweep_threshold_ms == 2_000

    def test_memory_backend_in_production_fails(self) -> None:
        settings = Settings(environment="production", content_store_backend="memory")
        with pytest.raises(ValueError, match="Configuração inválida"):
            create_app(settings)

    def test_invalid_dedup_window_fails(self) -> None:
        settings = Settings(like_dedup_ttl_ms=60_000, like_dedup_sweep_ms=1_000)
        with pytest.raises(ValueError, match="LIKE_DEDUP_SWEEP_MS"):
            create_app(settings)

    def test_injected_store_skips_backend_validation(self, fast_hasher) -> None:
        store = InMemoryContentStore()
        settings = Settings(environment="production", content_store_backend="memory")
        app = create_app(settings, content_store=store, hasher=fast_hasher)
        assert app.state.content_store is store

    def test_firestore_backend_in_production(self, fast_hasher) -> None:
        settings = Settings(
            environment="production",
            content_store_backend="firestore",
            gcp_project="webzine-prod",
        )
        with patch("google.cloud.firestore.Client", return_value=MagicMock()) as client_cls:
            app = create_app(settings, hasher=fast_hasher)

        client_cls.assert_called_once_with(project="webzine-prod", database="(default)")
        assert type(app.state.content_store).__name__ == "FirestoreContentStore"
