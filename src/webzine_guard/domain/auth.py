"""Contrato opaco de autenticação (sessão/usuário verificados fora do motor)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class AuthResult:
    """Resultado da verificação de autenticação."""

    authenticated: bool = False
    is_admin: bool = False
    user_id: str | None = None


ANONYMOUS = AuthResult()

# Recebe os headers da requisição; implementação é externa ao motor.
AuthVerifier = Callable[[Mapping[str, str]], AuthResult]
