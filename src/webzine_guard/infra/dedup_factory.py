"""Factories dos caches de dedup de like e view a partir de Settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from webzine_guard.domain.dedup import Clock, DedupCache
from webzine_guard.observability.logging import get_logger

if TYPE_CHECKING:
    from webzine_guard.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_like_dedup_cache(settings: Settings, clock: Clock | None = None) -> DedupCache:
    """Cache de likes: janela curta por IP + conteúdo."""
    logger.info(
        "Criando cache de dedup de likes",
        extra={
            "ttl_ms": settings.like_dedup_ttl_ms,
            "sweep_ms": settings.like_dedup_sweep_ms,
        },
    )
    return DedupCache(
        ttl_ms=settings.like_dedup_ttl_ms,
        sweep_threshold_ms=settings.like_dedup_sweep_ms,
        clock=clock,
        name="like",
    )


def create_view_dedup_cache(settings: Settings, clock: Clock | None = None) -> DedupCache:
    """Cache de views: janela longa por sessão + conteúdo."""
    logger.info(
        "Criando cache de dedup de views",
        extra={
            "ttl_ms": settings.view_dedup_ttl_ms,
            "sweep_ms": settings.view_dedup_sweep_ms,
        },
    )
    return DedupCache(
        ttl_ms=settings.view_dedup_ttl_ms,
        sweep_threshold_ms=settings.view_dedup_sweep_ms,
        clock=clock,
        name="view",
    )
