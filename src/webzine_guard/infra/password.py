"""Hash de senhas de comentários de convidados (Argon2id).

A senha em texto puro nunca é persistida nem logada.
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from webzine_guard.domain.errors import CredentialHashingError


class CredentialHasher:
    """Hash salgado de via única + verificação."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,  # 64 MB em KB
        parallelism: int = 4,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=32,
            salt_len=16,
        )

    def hash(self, credential: str) -> str:
        """Hash Argon2id com salt aleatório.

        Raises:
            CredentialHashingError: argon2 falhou ao gerar o hash
        """
        try:
            return self._hasher.hash(credential)
        except HashingError as exc:
            raise CredentialHashingError("Falha ao gerar hash da senha") from exc

    def verify(self, stored_hash: str, credential: str) -> bool:
        """True se a senha confere; hash malformado conta como não conferente."""
        try:
            return self._hasher.verify(stored_hash, credential)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
