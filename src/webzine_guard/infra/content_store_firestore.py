"""Implementação Firestore do ContentStore.

Coleções: contents/{content_id} e comments/{comment_id}.
increment_content_field usa firestore.Increment (atômico no servidor),
eliminando a janela de lost update do read-then-write.
"""

from __future__ import annotations

import logging
from typing import Any

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import ValidationError

from webzine_guard.domain.content import CommentRecord, ContentRow
from webzine_guard.domain.enums import CounterField
from webzine_guard.domain.errors import StoreError
from webzine_guard.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


def _to_content(snapshot: Any) -> ContentRow:
    """Documento de conteúdo fora do schema vira StoreError, não 500 cru."""
    try:
        return ContentRow(**{**(snapshot.to_dict() or {}), "id": snapshot.id})
    except ValidationError as e:
        logger.error(
            "Malformed content document",
            extra={"content_id": snapshot.id, "error_count": e.error_count()},
        )
        raise StoreError(f"Documento de conteúdo inválido: {snapshot.id}") from e


def _to_comment(snapshot: Any) -> CommentRecord:
    try:
        return CommentRecord(**{**(snapshot.to_dict() or {}), "id": snapshot.id})
    except ValidationError as e:
        logger.error(
            "Malformed comment document",
            extra={"comment_id": snapshot.id, "error_count": e.error_count()},
        )
        raise StoreError(f"Documento de comentário inválido: {snapshot.id}") from e


class FirestoreContentStore:
    """Store de conteúdo e comentários usando Firestore."""

    def __init__(
        self,
        client: firestore.Client,
        contents_collection: str = "contents",
        comments_collection: str = "comments",
    ) -> None:
        self._client = client
        self._contents_collection = contents_collection
        self._comments_collection = comments_collection

    def _content_ref(self, content_id: str) -> firestore.DocumentReference:
        return self._client.collection(self._contents_collection).document(content_id)

    def _comment_ref(self, comment_id: str) -> firestore.DocumentReference:
        return self._client.collection(self._comments_collection).document(comment_id)

    def get_content(self, content_id: str) -> ContentRow | None:
        try:
            snapshot = self._content_ref(content_id).get()
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao ler conteúdo {content_id}: {type(e).__name__}") from e
        if not snapshot.exists:
            return None
        return _to_content(snapshot)

    def update_content_field(
        self, content_id: str, field: CounterField, value: int
    ) -> ContentRow | None:
        ref = self._content_ref(content_id)
        try:
            ref.update({field.value: value, "updated_at": firestore.SERVER_TIMESTAMP})
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao atualizar {field.value}: {type(e).__name__}") from e

        try:
            snapshot = ref.get()
        except GoogleAPICallError as e:
            # Escrita aceita; chamador usa o valor esperado
            logger.warning(
                "Content re-read failed after update",
                extra={"content_id": content_id, "error_type": type(e).__name__},
            )
            return None
        if not snapshot.exists:
            return None
        return _to_content(snapshot)

    def increment_content_field(
        self, content_id: str, field: CounterField, delta: int = 1
    ) -> ContentRow:
        ref = self._content_ref(content_id)
        try:
            ref.update(
                {field.value: firestore.Increment(delta), "updated_at": firestore.SERVER_TIMESTAMP}
            )
            snapshot = ref.get()
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao incrementar {field.value}: {type(e).__name__}") from e
        return _to_content(snapshot)

    def insert_comment(self, record: CommentRecord) -> CommentRecord:
        try:
            self._comment_ref(record.id).create(record.model_dump())
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao inserir comentário: {type(e).__name__}") from e
        return record

    def get_comment(self, comment_id: str) -> CommentRecord | None:
        try:
            snapshot = self._comment_ref(comment_id).get()
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao ler comentário: {type(e).__name__}") from e
        if not snapshot.exists:
            return None
        return _to_comment(snapshot)

    def update_comment(self, comment_id: str, changes: dict[str, Any]) -> CommentRecord:
        ref = self._comment_ref(comment_id)
        try:
            ref.update(changes)
            snapshot = ref.get()
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao atualizar comentário: {type(e).__name__}") from e
        return _to_comment(snapshot)

    def list_comments(
        self,
        *,
        content_id: str | None = None,
        reported_only: bool = False,
        offset: int = 0,
        limit: int = 20,
        order_by: str = "created_at",
    ) -> tuple[list[CommentRecord], int]:
        query = self._client.collection(self._comments_collection).where(
            filter=FieldFilter("is_deleted", "==", False)
        )
        if content_id is not None:
            query = query.where(filter=FieldFilter("content_id", "==", content_id))
        if reported_only:
            query = query.where(filter=FieldFilter("is_reported", "==", True))
        query = query.order_by(order_by, direction=firestore.Query.DESCENDING)

        try:
            aggregate = query.count(alias="total").get()
            total = int(aggregate[0][0].value) if aggregate else 0
            docs = list(query.offset(offset).limit(limit).stream())
        except GoogleAPICallError as e:
            raise StoreError(f"Falha ao listar comentários: {type(e).__name__}") from e

        items = [_to_comment(doc) for doc in docs]
        return items, total
