"""Enums de domínio para contadores, veredito de spam e estados de submissão."""

from __future__ import annotations

from enum import StrEnum


class CounterField(StrEnum):
    """Contadores públicos protegidos por dedup.

    O valor é o nome da coluna persistida no store de conteúdo.
    """

    LIKES = "likes_count"
    VIEWS = "view_count"


class IncrementStatus(StrEnum):
    """Resultado não-erro de uma tentativa de incremento."""

    ACCEPTED = "ACCEPTED"
    SUPPRESSED = "SUPPRESSED"


class SpamReason(StrEnum):
    """Motivo do veredito do classificador (exatamente um por veredito)."""

    TOO_SHORT = "TOO_SHORT"
    BANNED_WORD = "BANNED_WORD"
    REPEATED_CHARS = "REPEATED_CHARS"
    CONTAINS_URL = "CONTAINS_URL"
    CONTAINS_PHONE = "CONTAINS_PHONE"
    NONE = "NONE"


class SubmissionState(StrEnum):
    """Estados do pipeline de ingestão de um comentário.

    Terminais: ACCEPTED e REJECTED_*.
    """

    RECEIVED = "RECEIVED"
    VALIDATING = "VALIDATING"
    CLASSIFYING = "CLASSIFYING"
    HASHING = "HASHING"
    PERSISTING = "PERSISTING"
    ACCEPTED = "ACCEPTED"
    REJECTED_VALIDATION = "REJECTED_VALIDATION"
    REJECTED_SPAM = "REJECTED_SPAM"
    REJECTED_HASHING_ERROR = "REJECTED_HASHING_ERROR"
    REJECTED_STORE_ERROR = "REJECTED_STORE_ERROR"

    @property
    def is_terminal(self) -> bool:
        """Retorna True para estados finais."""
        return self is SubmissionState.ACCEPTED or self.value.startswith("REJECTED_")
