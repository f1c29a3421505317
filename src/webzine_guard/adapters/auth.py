"""Verificador de autenticação padrão (Bearer token administrativo).

Provedores reais (sessão, OAuth) podem substituir este verificador em
create_app(auth_verifier=...); o motor só consome AuthResult.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping

from webzine_guard.domain.auth import ANONYMOUS, AuthResult

ADMIN_USER_ID = "admin"


class BearerTokenAuthVerifier:
    """Trata `Authorization: Bearer <admin_token>` como administrador."""

    def __init__(self, admin_token: str | None) -> None:
        self._admin_token = admin_token

    def __call__(self, headers: Mapping[str, str]) -> AuthResult:
        if not self._admin_token:
            return ANONYMOUS

        header = headers.get("authorization") or ""
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return ANONYMOUS

        if hmac.compare_digest(token.strip().encode(), self._admin_token.encode()):
            return AuthResult(authenticated=True, is_admin=True, user_id=ADMIN_USER_ID)
        return ANONYMOUS
