"""Contratos de domínio para conteúdo, comentários e o store externo."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel, Field

from webzine_guard.domain.enums import CounterField


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ContentRow(BaseModel):
    """Linha de conteúdo (artigo, poesia, foto...) vista por este motor."""

    id: str
    title: str = ""
    is_published: bool = False
    likes_count: int = Field(default=0, ge=0)
    view_count: int = Field(default=0, ge=0)
    updated_at: datetime | None = None

    def counter(self, field: CounterField) -> int:
        return int(getattr(self, field.value))


class CommentView(BaseModel):
    """Projeção pública de um comentário (sem password_hash)."""

    id: str
    content_id: str
    user_id: str
    user_name: str
    user_email: str
    user_avatar: str | None = None
    body: str
    created_at: datetime
    updated_at: datetime
    is_reported: bool = False
    is_deleted: bool = False


class CommentRecord(CommentView):
    """Linha persistida, incluindo o hash da senha do convidado."""

    password_hash: str

    def to_view(self) -> CommentView:
        return CommentView(**self.model_dump(exclude={"password_hash"}))


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> PaginationMeta:
        offset = (page - 1) * limit
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            has_next=offset + limit < total,
            has_prev=page > 1,
        )


class CommentPage(BaseModel):
    """Página de comentários."""

    items: list[CommentView] = Field(default_factory=list)
    meta: PaginationMeta


class ContentStore(Protocol):
    """Porta do store externo de conteúdo e comentários.

    Toda falha do backend deve sair como StoreError.
    """

    def get_content(self, content_id: str) -> ContentRow | None:
        """Lê conteúdo por id (None se inexistente)."""

    def update_content_field(
        self, content_id: str, field: CounterField, value: int
    ) -> ContentRow | None:
        """Grava valor absoluto em um contador (read-then-write).

        Retorna None quando a escrita foi aceita mas a linha não pôde ser relida.
        """

    def increment_content_field(
        self, content_id: str, field: CounterField, delta: int = 1
    ) -> ContentRow:
        """Incremento atômico executado no próprio store."""

    def insert_comment(self, record: CommentRecord) -> CommentRecord:
        """Insere comentário e retorna a linha persistida."""

    def get_comment(self, comment_id: str) -> CommentRecord | None:
        """Lê comentário por id (None se inexistente)."""

    def update_comment(self, comment_id: str, changes: dict[str, Any]) -> CommentRecord:
        """Atualiza campos de um comentário e retorna a linha."""

    def list_comments(
        self,
        *,
        content_id: str | None = None,
        reported_only: bool = False,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
    ) -> tuple[list[CommentRecord], int]:
        """Lista comentários não removidos, mais recentes primeiro, com total."""
