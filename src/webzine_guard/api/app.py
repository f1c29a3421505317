"""Fábrica da aplicação FastAPI."""

from __future__ import annotations

from fastapi import FastAPI

from webzine_guard.adapters.auth import BearerTokenAuthVerifier
from webzine_guard.adapters.validators import CommentInputValidator
from webzine_guard.api.routes import router
from webzine_guard.application.comments import CommentIngestService
from webzine_guard.application.counters import CounterService
from webzine_guard.config.settings import Settings, get_settings
from webzine_guard.domain.auth import AuthVerifier
from webzine_guard.domain.content import ContentStore
from webzine_guard.domain.dedup import Clock
from webzine_guard.domain.spam import SpamClassifier, default_rules
from webzine_guard.infra.content_store_factory import create_content_store
from webzine_guard.infra.dedup_factory import create_like_dedup_cache, create_view_dedup_cache
from webzine_guard.infra.password import CredentialHasher
from webzine_guard.observability.logging import configure_logging, get_logger
from webzine_guard.observability.middleware import CorrelationIdMiddleware

logger = get_logger(__name__)


def _build_comment_service(
    settings: Settings, store: ContentStore, hasher: CredentialHasher
) -> CommentIngestService:
    """Monta pipeline de comentários com limites vindos de Settings."""
    classifier = SpamClassifier(
        default_rules(
            min_length=settings.comment_min_length,
            repeated_char_threshold=settings.comment_repeated_char_threshold,
        )
    )
    return CommentIngestService(
        store=store,
        classifier=classifier,
        hasher=hasher,
        validator=CommentInputValidator.from_settings(settings),
        default_page_limit=settings.comments_page_default_limit,
        max_page_limit=settings.comments_page_max_limit,
        reported_page_limit=settings.reported_page_default_limit,
    )


def create_app(
    settings: Settings | None = None,
    content_store: ContentStore | None = None,
    auth_verifier: AuthVerifier | None = None,
    clock: Clock | None = None,
    hasher: CredentialHasher | None = None,
) -> FastAPI:
    """Cria a aplicação FastAPI.

    Store, verificador de autenticação, relógio dos caches e hasher são
    injetáveis (testes e provedores externos).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.service_name, settings.log_format)

    validation_errors: list[str] = []
    validation_errors.extend(settings.validate_dedup_windows())
    validation_errors.extend(settings.validate_comment_limits())
    if content_store is None:
        validation_errors.extend(settings.validate_content_store_backend())

    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")

    app = FastAPI(title=settings.service_name, version=settings.version)
    app.add_middleware(CorrelationIdMiddleware, header_name=settings.correlation_id_header)
    app.include_router(router)

    store = content_store if content_store is not None else create_content_store(settings)
    like_cache = create_like_dedup_cache(settings, clock=clock)
    view_cache = create_view_dedup_cache(settings, clock=clock)

    app.state.settings = settings
    app.state.content_store = store
    app.state.like_cache = like_cache
    app.state.view_cache = view_cache
    app.state.counter_service = CounterService(
        store,
        like_cache,
        view_cache,
        atomic_increment=settings.counter_atomic_increment,
    )
    app.state.comment_service = _build_comment_service(
        settings, store, hasher or CredentialHasher()
    )
    app.state.auth_verifier = auth_verifier or BearerTokenAuthVerifier(settings.admin_token)

    logger.info(
        "Application created",
        extra={
            "environment": settings.environment,
            "content_store_backend": type(store).__name__,
            "atomic_increment": settings.counter_atomic_increment,
        },
    )
    return app


app = create_app()
