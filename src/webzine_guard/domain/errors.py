"""Taxonomia de erros do motor anti-abuso.

Serviços traduzem falhas de store e de validação para estas exceções;
exceções específicas do backend (Firestore etc.) nunca vazam da camada infra.
Supressão por dedup NÃO é erro (ver IncrementStatus.SUPPRESSED).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from webzine_guard.domain.spam import ClassificationVerdict


class GuardError(Exception):
    """Base de todos os erros do domínio; `code` é estável para clientes."""

    code: str = "INTERNAL_ERROR"


class ContentNotFoundError(GuardError):
    """Conteúdo inexistente ou não publicado."""

    code = "NOT_FOUND"

    def __init__(self, content_id: str) -> None:
        super().__init__(f"Conteúdo não encontrado ou não publicado: {content_id}")
        self.content_id = content_id


class CommentNotFoundError(GuardError):
    """Comentário inexistente ou já removido."""

    code = "NOT_FOUND"

    def __init__(self, comment_id: str) -> None:
        super().__init__(f"Comentário não encontrado: {comment_id}")
        self.comment_id = comment_id


class StoreError(GuardError):
    """Falha transitória ou permanente do store externo."""

    code = "STORE_ERROR"


class CommentValidationError(GuardError):
    """Entrada malformada; recuperável reenviando dados corrigidos."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class SpamRejectedError(GuardError):
    """Comentário rejeitado pelo classificador de spam."""

    code = "SPAM_REJECTED"

    def __init__(self, verdict: ClassificationVerdict) -> None:
        super().__init__(verdict.message)
        self.verdict = verdict


class CredentialMismatchError(GuardError):
    """Senha informada não confere com o hash do comentário."""

    code = "CREDENTIAL_MISMATCH"


class CommentStateError(GuardError):
    """Transição de moderação inválida (ex.: denunciar duas vezes)."""

    code = "INVALID_STATE"


class CredentialHashingError(GuardError):
    """Falha interna ao gerar o hash da senha (ex.: recursos do Argon2)."""

    code = "HASHING_ERROR"
