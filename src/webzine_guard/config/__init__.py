"""Configurações centralizadas do webzine_guard.

Uso típico:
    from webzine_guard.config import get_settings
"""

from webzine_guard.config.settings import (
    LIKE_DEDUP_SWEEP_MS,
    LIKE_DEDUP_TTL_MS,
    VIEW_DEDUP_SWEEP_MS,
    VIEW_DEDUP_TTL_MS,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "LIKE_DEDUP_TTL_MS",
    "LIKE_DEDUP_SWEEP_MS",
    "VIEW_DEDUP_TTL_MS",
    "VIEW_DEDUP_SWEEP_MS",
]
