"""Dependências injetadas nas rotas."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from webzine_guard.application.comments import CommentIngestService
from webzine_guard.application.counters import CounterService
from webzine_guard.config.settings import Settings
from webzine_guard.domain.auth import AuthResult


def get_settings(request: Request) -> Settings:
    """Retorna settings da aplicação."""

    return request.app.state.settings


def get_counter_service(request: Request) -> CounterService:
    """Retorna o serviço de contadores (likes/views)."""

    return request.app.state.counter_service


def get_comment_service(request: Request) -> CommentIngestService:
    """Retorna o serviço de comentários."""

    return request.app.state.comment_service


def get_auth(request: Request) -> AuthResult:
    """Resolve autenticação via verificador configurado."""

    return request.app.state.auth_verifier(request.headers)


def require_admin(request: Request) -> AuthResult:
    """Exige administrador (403 caso contrário)."""

    auth = get_auth(request)
    if not auth.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin_required")
    return auth
