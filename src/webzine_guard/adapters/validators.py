"""Validadores de entrada de comentários de convidados.

Qualidade de entrada, não fronteira de segurança. Cada falha levanta
CommentValidationError com o campo e a mensagem exibida ao usuário.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from webzine_guard.adapters.sanitizer import sanitize_text
from webzine_guard.config.settings import Settings
from webzine_guard.domain.errors import CommentValidationError

# Hangul, letras ASCII, dígitos e espaço
AUTHOR_NAME_PATTERN = re.compile(r"^[가-힣a-zA-Z0-9\s]+$")


@dataclass(slots=True, frozen=True)
class SanitizedComment:
    """Entrada já sanitizada e validada."""

    author_name: str
    body: str
    credential: str


@dataclass(slots=True, frozen=True)
class CommentInputValidator:
    """Limites de tamanho por campo (injetados via Settings)."""

    author_min_length: int = 2
    author_max_length: int = 20
    body_min_length: int = 2
    body_max_length: int = 2000
    password_min_length: int = 4
    password_max_length: int = 50

    @classmethod
    def from_settings(cls, settings: Settings) -> CommentInputValidator:
        return cls(
            author_min_length=settings.comment_author_min_length,
            author_max_length=settings.comment_author_max_length,
            body_min_length=settings.comment_body_min_length,
            body_max_length=settings.comment_body_max_length,
            password_min_length=settings.comment_password_min_length,
            password_max_length=settings.comment_password_max_length,
        )

    def validate_author(self, raw: str | None) -> str:
        name = sanitize_text(raw)
        if not (self.author_min_length <= len(name) <= self.author_max_length):
            raise CommentValidationError(
                "user_name",
                f"사용자명은 {self.author_min_length}-{self.author_max_length}자로 입력해주세요.",
            )
        if not AUTHOR_NAME_PATTERN.match(name):
            raise CommentValidationError(
                "user_name", "사용자명은 한글/영문/숫자만 사용할 수 있습니다."
            )
        return name

    def validate_body(self, raw: str | None) -> str:
        body = sanitize_text(raw)
        if not (self.body_min_length <= len(body) <= self.body_max_length):
            raise CommentValidationError(
                "body",
                f"댓글 내용은 {self.body_min_length}-{self.body_max_length}자로 입력해주세요.",
            )
        return body

    def validate_password(self, raw: str | None) -> str:
        """Senha não é sanitizada (vai direto para o hash)."""
        if not raw or not isinstance(raw, str):
            raise CommentValidationError("password", "비밀번호를 입력해주세요.")
        if len(raw) < self.password_min_length:
            raise CommentValidationError(
                "password", f"비밀번호는 최소 {self.password_min_length}자 이상이어야 합니다."
            )
        if len(raw) > self.password_max_length:
            raise CommentValidationError(
                "password", f"비밀번호는 최대 {self.password_max_length}자까지 입력 가능합니다."
            )
        return raw

    def validate(
        self, raw_author_name: str | None, raw_body: str | None, raw_credential: str | None
    ) -> SanitizedComment:
        """Valida na ordem do formulário: autor, senha, corpo."""
        author_name = self.validate_author(raw_author_name)
        credential = self.validate_password(raw_credential)
        body = self.validate_body(raw_body)
        return SanitizedComment(author_name=author_name, body=body, credential=credential)
