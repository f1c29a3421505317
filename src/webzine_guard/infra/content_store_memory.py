"""ContentStore em memória, para desenvolvimento e testes.

⚠️ Não usar em produção! Dados são perdidos ao reiniciar.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from webzine_guard.domain.content import CommentRecord, ContentRow, utc_now
from webzine_guard.domain.enums import CounterField
from webzine_guard.domain.errors import StoreError
from webzine_guard.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class InMemoryContentStore:
    """Implementa a porta ContentStore com dicts protegidos por lock."""

    def __init__(self, contents: list[ContentRow] | None = None) -> None:
        self._lock = threading.Lock()
        self._contents: dict[str, ContentRow] = {}
        self._comments: dict[str, CommentRecord] = {}
        for row in contents or []:
            self._contents[row.id] = row

    def add_content(self, row: ContentRow) -> None:
        """Semeia/substitui uma linha de conteúdo."""
        with self._lock:
            self._contents[row.id] = row

    def get_content(self, content_id: str) -> ContentRow | None:
        with self._lock:
            row = self._contents.get(content_id)
            return row.model_copy() if row else None

    def update_content_field(
        self, content_id: str, field: CounterField, value: int
    ) -> ContentRow | None:
        with self._lock:
            row = self._require_content(content_id)
            updated = row.model_copy(update={field.value: value, "updated_at": utc_now()})
            self._contents[content_id] = updated
            return updated.model_copy()

    def increment_content_field(
        self, content_id: str, field: CounterField, delta: int = 1
    ) -> ContentRow:
        with self._lock:
            row = self._require_content(content_id)
            updated = row.model_copy(
                update={field.value: row.counter(field) + delta, "updated_at": utc_now()}
            )
            self._contents[content_id] = updated
            return updated.model_copy()

    def insert_comment(self, record: CommentRecord) -> CommentRecord:
        with self._lock:
            if record.id in self._comments:
                raise StoreError(f"Comentário duplicado: {record.id}")
            self._comments[record.id] = record.model_copy()
            return record.model_copy()

    def get_comment(self, comment_id: str) -> CommentRecord | None:
        with self._lock:
            record = self._comments.get(comment_id)
            return record.model_copy() if record else None

    def update_comment(self, comment_id: str, changes: dict[str, Any]) -> CommentRecord:
        with self._lock:
            record = self._comments.get(comment_id)
            if record is None:
                raise StoreError(f"Comentário inexistente: {comment_id}")
            updated = record.model_copy(update=changes)
            self._comments[comment_id] = updated
            return updated.model_copy()

    def list_comments(
        self,
        *,
        content_id: str | None = None,
        reported_only: bool = False,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
    ) -> tuple[list[CommentRecord], int]:
        with self._lock:
            matches = [
                record
                for record in self._comments.values()
                if not record.is_deleted
                and (content_id is None or record.content_id == content_id)
                and (not reported_only or record.is_reported)
            ]
        matches.sort(key=lambda record: getattr(record, order_by), reverse=True)
        page = matches[offset : offset + limit]
        return [record.model_copy() for record in page], len(matches)

    def _require_content(self, content_id: str) -> ContentRow:
        row = self._contents.get(content_id)
        if row is None:
            raise StoreError(f"Conteúdo inexistente: {content_id}")
        return row
