"""Classificador de spam determinístico baseado em regras.

Cadeia ordenada de regras independentes; a primeira que casar decide
(short-circuit). A ordem é contrato: reordenar muda o motivo reportado
para comentários limítrofes (ex.: 4 caracteres com palavra proibida →
TOO_SHORT, não BANNED_WORD).

Ordem:
1. MinLengthRule        → TOO_SHORT
2. BannedWordRule       → BANNED_WORD
3. RepeatedCharRule     → REPEATED_CHARS
4. UrlRule              → CONTAINS_URL
5. PhoneNumberRule      → CONTAINS_PHONE

Sem estado mutável compartilhado: seguro sob concorrência.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from re import Pattern

from webzine_guard.domain.enums import SpamReason
from webzine_guard.observability.logging import get_logger, mask_identifier

logger: logging.Logger = get_logger(__name__)

MIN_LENGTH: int = 5
REPEATED_CHAR_THRESHOLD: int = 10

# Substring, sem fronteira de token. Marcadores de URL e de telefone ficam
# fora da lista: as regras 4 e 5 reportam o motivo específico.
BANNED_WORDS: tuple[str, ...] = (
    "스팸",
    "광고",
    "홍보",
    "도박",
    "수익보장",
    "fuck",
    "shit",
    "병신",
    "씨발",
    "닥쳐",
    "보지",
    "자지",
    "같은걸 다",
    "주소:",
    "카카오톡",
    "이메일",
)

URL_PATTERN: Pattern[str] = re.compile(
    r"(https?://[^\s]+)|(www\.[^\s]+)|([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})",
    re.IGNORECASE,
)
PHONE_PATTERN: Pattern[str] = re.compile(r"\d{2,3}[.-]?\d{3,4}[.-]?\d{4}")

# Mensagens exibidas ao usuário (texto fixo por regra)
MESSAGE_TOO_SHORT = "댓글은 최소 {min_length}자 이상 작성해주세요."
MESSAGE_BANNED_WORD = "부적절한 내용이 포함되어 있습니다. 다시 작성해주세요."
MESSAGE_REPEATED_CHARS = "비정상적인 패턴의 문자가 반복되고 있습니다."
MESSAGE_CONTAINS_URL = "URL이나 링크를 포함한 댓글은 작성할 수 없습니다."
MESSAGE_CONTAINS_PHONE = "연락처 정보를 포함한 댓글은 작성할 수 없습니다."


@dataclass(slots=True, frozen=True)
class ClassificationVerdict:
    """Resultado estruturado do classificador."""

    is_spam: bool
    reason: SpamReason
    message: str = ""

    def __post_init__(self) -> None:
        if self.is_spam == (self.reason is SpamReason.NONE):
            raise ValueError("reason NONE se e somente se is_spam=False")

    @classmethod
    def accepted(cls) -> ClassificationVerdict:
        return cls(is_spam=False, reason=SpamReason.NONE)


class SpamRule(ABC):
    """Predicado independente da cadeia; `text` já vem normalizado."""

    reason: SpamReason
    message: str

    @abstractmethod
    def matches(self, text: str) -> bool:
        """Retorna True se o texto viola a regra."""
        ...

    def verdict(self) -> ClassificationVerdict:
        return ClassificationVerdict(is_spam=True, reason=self.reason, message=self.message)


class MinLengthRule(SpamRule):
    reason = SpamReason.TOO_SHORT

    def __init__(self, min_length: int = MIN_LENGTH) -> None:
        self.min_length = min_length
        self.message = MESSAGE_TOO_SHORT.format(min_length=min_length)

    def matches(self, text: str) -> bool:
        return len(text) < self.min_length


class BannedWordRule(SpamRule):
    """Contenção de substring; O(len(texto) × len(lista)), lista pequena."""

    reason = SpamReason.BANNED_WORD
    message = MESSAGE_BANNED_WORD

    def __init__(self, banned_words: Iterable[str] = BANNED_WORDS) -> None:
        self.banned_words = tuple(word.lower() for word in banned_words if word)

    def matches(self, text: str) -> bool:
        return any(word in text for word in self.banned_words)


class RepeatedCharRule(SpamRule):
    """Sinaliza qualquer caractere repetido consecutivamente > threshold vezes."""

    reason = SpamReason.REPEATED_CHARS
    message = MESSAGE_REPEATED_CHARS

    def __init__(self, threshold: int = REPEATED_CHAR_THRESHOLD) -> None:
        self.threshold = threshold

    def matches(self, text: str) -> bool:
        run_length = 0
        previous: str | None = None
        for char in text:
            run_length = run_length + 1 if char == previous else 1
            if run_length > self.threshold:
                return True
            previous = char
        return False


class PatternRule(SpamRule):
    """Regra baseada em regex (search em qualquer posição)."""

    def __init__(self, reason: SpamReason, pattern: Pattern[str], message: str) -> None:
        self.reason = reason
        self.pattern = pattern
        self.message = message

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


class UrlRule(PatternRule):
    def __init__(self, pattern: Pattern[str] = URL_PATTERN) -> None:
        super().__init__(SpamReason.CONTAINS_URL, pattern, MESSAGE_CONTAINS_URL)


class PhoneNumberRule(PatternRule):
    def __init__(self, pattern: Pattern[str] = PHONE_PATTERN) -> None:
        super().__init__(SpamReason.CONTAINS_PHONE, pattern, MESSAGE_CONTAINS_PHONE)


def default_rules(
    min_length: int = MIN_LENGTH,
    repeated_char_threshold: int = REPEATED_CHAR_THRESHOLD,
    banned_words: Iterable[str] = BANNED_WORDS,
) -> list[SpamRule]:
    """Cadeia padrão, na ordem de precedência."""
    return [
        MinLengthRule(min_length),
        BannedWordRule(banned_words),
        RepeatedCharRule(repeated_char_threshold),
        UrlRule(),
        PhoneNumberRule(),
    ]


class SpamClassifier:
    """Aplica a cadeia de regras a um corpo de comentário."""

    def __init__(self, rules: Sequence[SpamRule] | None = None) -> None:
        self._rules: tuple[SpamRule, ...] = tuple(rules if rules is not None else default_rules())

    @property
    def rules(self) -> tuple[SpamRule, ...]:
        return self._rules

    @staticmethod
    def normalize(body: str) -> str:
        """Normalização aplicada antes das regras: trim + lower-case."""
        return body.strip().lower()

    def classify(self, body: str, client_identity: str | None = None) -> ClassificationVerdict:
        """Retorna o veredito da primeira regra violada, ou aceito."""
        text = self.normalize(body)

        for rule in self._rules:
            if rule.matches(text):
                logger.info(
                    "Comment classified as spam",
                    extra={
                        "reason": rule.reason.value,
                        "client": mask_identifier(client_identity),
                        "length": len(text),
                    },
                )
                return rule.verdict()

        return ClassificationVerdict.accepted()
