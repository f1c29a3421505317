"""Rotas HTTP: likes, views e comentários de convidados."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from webzine_guard.adapters.client_identity import client_ip_from_headers
from webzine_guard.api.dependencies import (
    get_auth,
    get_comment_service,
    get_counter_service,
    get_settings,
    require_admin,
)
from webzine_guard.application.comments import CommentIngestService
from webzine_guard.application.counters import CounterService
from webzine_guard.config.settings import Settings
from webzine_guard.domain.auth import AuthResult
from webzine_guard.domain.errors import (
    CommentNotFoundError,
    CommentStateError,
    CommentValidationError,
    ContentNotFoundError,
    CredentialHashingError,
    CredentialMismatchError,
    GuardError,
    SpamRejectedError,
    StoreError,
)
from webzine_guard.observability.logging import get_logger, mask_identifier
from webzine_guard.observability.middleware import get_correlation_id
from webzine_guard.utils.ids import new_session_id

logger = get_logger(__name__)

router = APIRouter()

LIKE_ACCEPTED_MESSAGE = "좋아요가 추가되었습니다!"
LIKE_SUPPRESSED_MESSAGE = "잠시 후 다시 시도해주세요. (1분 내 중복 좋아요 방지)"
VIEW_ACCEPTED_MESSAGE = "조회수가 증가되었습니다"
VIEW_SUPPRESSED_MESSAGE = "이미 조회된 콘텐츠입니다"

# Acima disso o corpo é rejeitado com 422
SESSION_ID_MAX_LENGTH = 128

_STATUS_BY_ERROR: dict[type[GuardError], int] = {
    ContentNotFoundError: status.HTTP_404_NOT_FOUND,
    CommentNotFoundError: status.HTTP_404_NOT_FOUND,
    CommentValidationError: status.HTTP_400_BAD_REQUEST,
    CommentStateError: status.HTTP_400_BAD_REQUEST,
    CredentialMismatchError: status.HTTP_401_UNAUTHORIZED,
    # Spam vira 429 para não diferenciar de "tente mais tarde"
    SpamRejectedError: status.HTTP_429_TOO_MANY_REQUESTS,
    CredentialHashingError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CommentCreateRequest(BaseModel):
    """Campos opcionais: a validação de negócio responde 400, não 422."""

    user_name: str | None = None
    password: str | None = None
    body: str | None = None


class ViewRequest(BaseModel):
    """Corpo opcional do registro de view; session_id limitado (fica no cache)."""

    session_id: str | None = Field(
        default=None,
        max_length=SESSION_ID_MAX_LENGTH,
        validation_alias=AliasChoices("session_id", "sessionId"),
    )


class CommentDeleteRequest(BaseModel):
    """Senha do convidado; admin pode omitir o corpo."""

    password: str | None = None


def _raise_http(exc: GuardError) -> NoReturn:
    """Traduz erro de domínio em HTTPException com detail estável."""
    status_code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail: dict[str, Any] = {
        "error": exc.code,
        "message": str(exc),
        "correlation_id": get_correlation_id(),
    }
    if isinstance(exc, CommentValidationError):
        detail["field"] = exc.field
        detail["message"] = exc.reason
    elif isinstance(exc, SpamRejectedError):
        detail["reason"] = exc.verdict.reason.value
    elif isinstance(exc, StoreError):
        logger.error("Store failure", extra={"error_type": type(exc.__cause__).__name__})
        detail["message"] = "internal_store_error"
    elif isinstance(exc, CredentialHashingError):
        logger.error(
            "Credential hashing failure",
            extra={"error_type": type(exc.__cause__).__name__},
        )
        detail["message"] = "internal_hashing_error"
    raise HTTPException(status_code=status_code, detail=detail) from exc


def _client_ip(request: Request) -> str:
    peer_host = request.client.host if request.client else None
    return client_ip_from_headers(request.headers, peer_host)


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.post("/api/contents/{content_id}/like")
def like_content(
    content_id: str,
    request: Request,
    counters: CounterService = Depends(get_counter_service),
) -> JSONResponse:
    """Like deduplicado por IP (1 por minuto por conteúdo)."""
    client_ip = _client_ip(request)
    logger.info(
        "Like requested",
        extra={"content_id": content_id, "client": mask_identifier(client_ip)},
    )
    try:
        result = counters.like(content_id, client_ip)
    except GuardError as exc:
        _raise_http(exc)

    if not result.accepted:
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "success": False,
                "accepted": False,
                "error": "rate_limited",
                "message": LIKE_SUPPRESSED_MESSAGE,
                "likes_count": result.count,
                "content_id": content_id,
            },
        )

    return JSONResponse(
        content={
            "success": True,
            "accepted": True,
            "message": LIKE_ACCEPTED_MESSAGE,
            "likes_count": result.count,
            "content_id": content_id,
        }
    )


@router.post("/api/contents/{content_id}/view")
def view_content(
    content_id: str,
    payload: ViewRequest | None = None,
    counters: CounterService = Depends(get_counter_service),
) -> dict[str, Any]:
    """View deduplicada por sessão do cliente (24h por conteúdo).

    Sem session_id no corpo, gera um novo e devolve para o cliente persistir.
    """
    session_id = payload.session_id if payload is not None else None
    if not session_id or not session_id.strip():
        session_id = new_session_id()

    try:
        result = counters.view(content_id, session_id)
    except GuardError as exc:
        _raise_http(exc)

    return {
        "success": True,
        "accepted": result.accepted,
        "counted": result.accepted,
        "message": VIEW_ACCEPTED_MESSAGE if result.accepted else VIEW_SUPPRESSED_MESSAGE,
        "view_count": result.count,
        "content_id": content_id,
        "session_id": session_id,
    }


@router.get("/api/contents/{content_id}/comments")
def list_comments(
    content_id: str,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, Any]:
    """Lista comentários visíveis (sem password_hash)."""
    try:
        result = comments.list_comments(content_id, page=page, limit=limit)
    except GuardError as exc:
        _raise_http(exc)

    return {
        "data": [item.model_dump(mode="json") for item in result.items],
        "error": None,
        "count": result.meta.total,
        "meta": result.meta.model_dump(),
    }


@router.post("/api/contents/{content_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    content_id: str,
    payload: CommentCreateRequest,
    request: Request,
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, Any]:
    """Cria comentário de convidado após validação e filtro de spam."""
    try:
        view = comments.submit(
            content_id,
            raw_body=payload.body,
            raw_author_name=payload.user_name,
            raw_credential=payload.password,
            client_identity=_client_ip(request),
        )
    except GuardError as exc:
        _raise_http(exc)

    return {"data": view.model_dump(mode="json"), "error": None}


@router.delete("/api/contents/{content_id}/comments/{comment_id}")
def delete_comment(
    content_id: str,
    comment_id: str,
    payload: CommentDeleteRequest | None = None,
    auth: AuthResult = Depends(get_auth),
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, str]:
    """Remoção lógica com senha do convidado (admin dispensa)."""
    password = payload.password if payload is not None else None
    try:
        comments.delete_comment(
            comment_id,
            password,
            auth,
            content_id=content_id,
        )
    except GuardError as exc:
        _raise_http(exc)

    return {"message": "댓글이 삭제되었습니다."}


@router.post("/api/contents/{content_id}/comments/{comment_id}/report")
def report_comment(
    content_id: str,
    comment_id: str,
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, str]:
    """Denuncia comentário para revisão administrativa."""
    try:
        comments.report_comment(comment_id, content_id=content_id)
    except GuardError as exc:
        _raise_http(exc)

    return {"message": "댓글이 신고되었습니다. 관리자가 검토 후 조치하겠습니다."}


@router.get("/api/admin/comments/reported")
def list_reported_comments(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    _admin: AuthResult = Depends(require_admin),
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, Any]:
    """Lista comentários denunciados (admin)."""
    try:
        result = comments.list_reported(page=page, limit=limit)
    except GuardError as exc:
        _raise_http(exc)

    return {
        "data": [item.model_dump(mode="json") for item in result.items],
        "error": None,
        "count": result.meta.total,
        "meta": result.meta.model_dump(),
    }


@router.post("/api/admin/comments/{comment_id}/approve")
def approve_comment(
    comment_id: str,
    _admin: AuthResult = Depends(require_admin),
    comments: CommentIngestService = Depends(get_comment_service),
) -> dict[str, str]:
    """Remove a denúncia de um comentário (admin)."""
    try:
        comments.approve_comment(comment_id)
    except GuardError as exc:
        _raise_http(exc)

    return {"message": "댓글 신고가 해제되었습니다."}
