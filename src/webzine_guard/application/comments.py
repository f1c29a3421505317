"""Ingestão e moderação de comentários de convidados.

Pipeline de submissão (por chamada, sem retries automáticos):

    RECEIVED → VALIDATING → CLASSIFYING → HASHING → PERSISTING → ACCEPTED
                   ↓             ↓            ↓            ↓
       REJECTED_VALIDATION  REJECTED_SPAM     ↓   REJECTED_STORE_ERROR
                                    REJECTED_HASHING_ERROR

Também expõe listagem paginada, remoção lógica (senha do convidado ou
admin), denúncia e aprovação de comentários denunciados.

Nunca logar senha nem corpo do comentário.
"""

from __future__ import annotations

import logging
from typing import Any

from webzine_guard.adapters.validators import CommentInputValidator
from webzine_guard.domain.auth import AuthResult
from webzine_guard.domain.content import (
    CommentPage,
    CommentRecord,
    CommentView,
    ContentStore,
    PaginationMeta,
    utc_now,
)
from webzine_guard.domain.enums import SubmissionState
from webzine_guard.domain.errors import (
    CommentNotFoundError,
    CommentStateError,
    CommentValidationError,
    CredentialHashingError,
    CredentialMismatchError,
    SpamRejectedError,
    StoreError,
)
from webzine_guard.domain.spam import SpamClassifier
from webzine_guard.infra.password import CredentialHasher
from webzine_guard.observability.logging import get_logger, mask_identifier
from webzine_guard.observability.timing import timed
from webzine_guard.utils.ids import (
    guest_avatar_url,
    guest_email,
    new_comment_id,
    new_guest_user_id,
)

logger: logging.Logger = get_logger(__name__)


class CommentIngestService:
    """Orquestra validação, classificação e persistência de comentários."""

    def __init__(
        self,
        store: ContentStore,
        classifier: SpamClassifier,
        hasher: CredentialHasher,
        validator: CommentInputValidator | None = None,
        default_page_limit: int = 20,
        max_page_limit: int = 100,
        reported_page_limit: int = 50,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._hasher = hasher
        self._validator = validator or CommentInputValidator()
        self._default_page_limit = default_page_limit
        self._max_page_limit = max_page_limit
        self._reported_page_limit = reported_page_limit

    def submit(
        self,
        content_id: str,
        raw_body: str | None,
        raw_author_name: str | None,
        raw_credential: str | None,
        client_identity: str = "unknown",
    ) -> CommentView:
        """Valida, classifica, aplica hash e persiste um comentário.

        Raises:
            CommentValidationError: Campo inválido
            SpamRejectedError: Veredito de spam (motivo em .verdict)
            CredentialHashingError: Falha ao gerar o hash da senha
            StoreError: Falha ao persistir
        """
        with timed("comment_ingest", content_id=content_id):
            self._transition(SubmissionState.RECEIVED, content_id, client_identity)

            self._transition(SubmissionState.VALIDATING, content_id, client_identity)
            try:
                candidate = self._validator.validate(raw_author_name, raw_body, raw_credential)
            except CommentValidationError as exc:
                self._transition(
                    SubmissionState.REJECTED_VALIDATION,
                    content_id,
                    client_identity,
                    field=exc.field,
                )
                raise

            self._transition(SubmissionState.CLASSIFYING, content_id, client_identity)
            verdict = self._classifier.classify(candidate.body, client_identity)
            if verdict.is_spam:
                self._transition(
                    SubmissionState.REJECTED_SPAM,
                    content_id,
                    client_identity,
                    reason=verdict.reason.value,
                )
                raise SpamRejectedError(verdict)

            self._transition(SubmissionState.HASHING, content_id, client_identity)
            try:
                password_hash = self._hasher.hash(candidate.credential)
            except CredentialHashingError:
                self._transition(
                    SubmissionState.REJECTED_HASHING_ERROR, content_id, client_identity
                )
                raise

            self._transition(SubmissionState.PERSISTING, content_id, client_identity)
            now = utc_now()
            record = CommentRecord(
                id=new_comment_id(),
                content_id=content_id,
                user_id=new_guest_user_id(),
                user_name=candidate.author_name,
                user_email=guest_email(candidate.author_name),
                user_avatar=guest_avatar_url(candidate.author_name),
                body=candidate.body,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            try:
                stored = self._store.insert_comment(record)
            except StoreError:
                self._transition(
                    SubmissionState.REJECTED_STORE_ERROR, content_id, client_identity
                )
                raise

            self._transition(
                SubmissionState.ACCEPTED, content_id, client_identity, comment_id=stored.id
            )
            return stored.to_view()

    def list_comments(
        self, content_id: str, page: int = 1, limit: int | None = None
    ) -> CommentPage:
        """Comentários visíveis de um conteúdo, mais recentes primeiro."""
        page, limit = self._page_bounds(page, limit, self._default_page_limit)
        records, total = self._store.list_comments(
            content_id=content_id, offset=(page - 1) * limit, limit=limit
        )
        return CommentPage(
            items=[record.to_view() for record in records],
            meta=PaginationMeta.build(page, limit, total),
        )

    def list_reported(self, page: int = 1, limit: int | None = None) -> CommentPage:
        """Comentários denunciados e não removidos (uso administrativo)."""
        page, limit = self._page_bounds(page, limit, self._reported_page_limit)
        records, total = self._store.list_comments(
            reported_only=True,
            offset=(page - 1) * limit,
            limit=limit,
            order_by="updated_at",
        )
        return CommentPage(
            items=[record.to_view() for record in records],
            meta=PaginationMeta.build(page, limit, total),
        )

    def delete_comment(
        self,
        comment_id: str,
        credential: str | None,
        auth: AuthResult,
        content_id: str | None = None,
    ) -> CommentView:
        """Remoção lógica; admin dispensa a senha do convidado.

        Raises:
            CommentValidationError: Senha ausente (não-admin)
            CommentNotFoundError: Comentário inexistente ou já removido
            CredentialMismatchError: Senha não confere
        """
        if not auth.is_admin and (not credential or not credential.strip()):
            raise CommentValidationError("password", "비밀번호를 입력해주세요.")

        record = self._get_visible(comment_id, content_id)

        if auth.is_admin:
            logger.info(
                "Comment delete by admin",
                extra={"comment_id": comment_id, "admin_id": auth.user_id},
            )
        elif not self._hasher.verify(record.password_hash, credential or ""):
            logger.info("Comment delete credential mismatch", extra={"comment_id": comment_id})
            raise CredentialMismatchError("비밀번호가 일치하지 않습니다.")

        updated = self._update(comment_id, {"is_deleted": True})
        logger.info("Comment soft-deleted", extra={"comment_id": comment_id})
        return updated.to_view()

    def report_comment(self, comment_id: str, content_id: str | None = None) -> CommentView:
        """Marca comentário como denunciado (uma única vez)."""
        record = self._get_visible(comment_id, content_id)
        if record.is_reported:
            raise CommentStateError("이미 신고된 댓글입니다.")

        updated = self._update(comment_id, {"is_reported": True})
        logger.info("Comment reported", extra={"comment_id": comment_id})
        return updated.to_view()

    def approve_comment(self, comment_id: str) -> CommentView:
        """Remove a denúncia de um comentário (uso administrativo)."""
        record = self._get_visible(comment_id)
        if not record.is_reported:
            raise CommentStateError("신고되지 않은 댓글입니다.")

        updated = self._update(comment_id, {"is_reported": False})
        logger.info("Comment report cleared", extra={"comment_id": comment_id})
        return updated.to_view()

    def _get_visible(self, comment_id: str, content_id: str | None = None) -> CommentRecord:
        record = self._store.get_comment(comment_id)
        if record is None or record.is_deleted:
            raise CommentNotFoundError(comment_id)
        if content_id is not None and record.content_id != content_id:
            raise CommentNotFoundError(comment_id)
        return record

    def _update(self, comment_id: str, changes: dict[str, Any]) -> CommentRecord:
        return self._store.update_comment(comment_id, {**changes, "updated_at": utc_now()})

    def _page_bounds(self, page: int, limit: int | None, default: int) -> tuple[int, int]:
        page = max(page, 1)
        limit = default if limit is None else limit
        limit = min(max(limit, 1), self._max_page_limit)
        return page, limit

    @staticmethod
    def _transition(
        state: SubmissionState, content_id: str, client_identity: str, **fields: Any
    ) -> None:
        level = logging.INFO if state.is_terminal else logging.DEBUG
        logger.log(
            level,
            "Comment submission state",
            extra={
                "submission_state": state.value,
                "content_id": content_id,
                "client": mask_identifier(client_identity),
                **fields,
            },
        )
