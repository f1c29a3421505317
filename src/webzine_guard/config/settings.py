"""Configurações da aplicação via variáveis de ambiente.

Janelas de deduplicação e limites do classificador de spam são
injetáveis (nunca hardcoded nos serviços).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# -----------------------------------------------------------------------------
# Janelas padrão de deduplicação (milissegundos)
# -----------------------------------------------------------------------------
LIKE_DEDUP_TTL_MS: int = 60_000  # 1 minuto
LIKE_DEDUP_SWEEP_MS: int = 300_000  # 5 minutos
VIEW_DEDUP_TTL_MS: int = 86_400_000  # 24 horas
VIEW_DEDUP_SWEEP_MS: int = 172_800_000  # 48 horas


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "webzine_guard"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Observabilidade
    log_format: str = "json"  # json | text
    correlation_id_header: str = "X-Correlation-ID"

    # Deduplicação de likes (por IP + conteúdo) e views (por sessão + conteúdo)
    like_dedup_ttl_ms: int = LIKE_DEDUP_TTL_MS
    like_dedup_sweep_ms: int = LIKE_DEDUP_SWEEP_MS
    view_dedup_ttl_ms: int = VIEW_DEDUP_TTL_MS
    view_dedup_sweep_ms: int = VIEW_DEDUP_SWEEP_MS

    # Incremento atômico no store (Firestore Increment) em vez de read-then-write
    counter_atomic_increment: bool = False

    # Classificador de spam
    comment_min_length: int = 5
    comment_repeated_char_threshold: int = 10

    # Validação de entrada de comentários
    comment_author_min_length: int = 2
    comment_author_max_length: int = 20
    comment_body_min_length: int = 2
    comment_body_max_length: int = 2000
    comment_password_min_length: int = 4
    comment_password_max_length: int = 50

    # Paginação
    comments_page_default_limit: int = 20
    comments_page_max_limit: int = 100
    reported_page_default_limit: int = 50

    # Store de conteúdo/comentários
    content_store_backend: str = "memory"  # memory | firestore
    firestore_project_id: str | None = None
    firestore_database_id: str = "(default)"
    gcp_project: str | None = None
    contents_collection: str = "contents"
    comments_collection: str = "comments"

    # Autenticação administrativa (verificador padrão via Bearer token)
    admin_token: str | None = None

    def validate_dedup_windows(self) -> list[str]:
        """Valida janelas de dedup (sweep nunca menor que o TTL)."""
        errors: list[str] = []
        windows = {
            "LIKE": (self.like_dedup_ttl_ms, self.like_dedup_sweep_ms),
            "VIEW": (self.view_dedup_ttl_ms, self.view_dedup_sweep_ms),
        }
        for name, (ttl_ms, sweep_ms) in windows.items():
            if ttl_ms <= 0:
                errors.append(f"{name}_DEDUP_TTL_MS deve ser > 0")
            if sweep_ms < ttl_ms:
                errors.append(f"{name}_DEDUP_SWEEP_MS deve ser >= {name}_DEDUP_TTL_MS")
        return errors

    def validate_comment_limits(self) -> list[str]:
        """Valida limites do classificador e da validação de comentários."""
        errors: list[str] = []
        if self.comment_min_length < 1:
            errors.append("COMMENT_MIN_LENGTH deve ser >= 1")
        if self.comment_repeated_char_threshold < 1:
            errors.append("COMMENT_REPEATED_CHAR_THRESHOLD deve ser >= 1")

        pairs = {
            "COMMENT_AUTHOR": (self.comment_author_min_length, self.comment_author_max_length),
            "COMMENT_BODY": (self.comment_body_min_length, self.comment_body_max_length),
            "COMMENT_PASSWORD": (
                self.comment_password_min_length,
                self.comment_password_max_length,
            ),
        }
        for name, (min_len, max_len) in pairs.items():
            if min_len < 1 or max_len < min_len:
                errors.append(f"{name}_MIN_LENGTH/{name}_MAX_LENGTH inconsistentes")

        if self.comments_page_default_limit > self.comments_page_max_limit:
            errors.append("COMMENTS_PAGE_DEFAULT_LIMIT deve ser <= COMMENTS_PAGE_MAX_LIMIT")
        return errors

    def validate_content_store_backend(self) -> list[str]:
        """Valida backend do store de conteúdo por ambiente."""
        errors: list[str] = []
        backend = self.content_store_backend.lower()
        valid_backends = {"memory", "firestore"}

        if backend not in valid_backends:
            errors.append(
                f"CONTENT_STORE_BACKEND '{backend}' inválido. Valores válidos: {valid_backends}"
            )

        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append(
                "CONTENT_STORE_BACKEND=memory é proibido em staging/production. "
                "Configure 'firestore'."
            )

        if backend == "firestore" and not (self.firestore_project_id or self.gcp_project):
            errors.append(
                "CONTENT_STORE_BACKEND=firestore requer FIRESTORE_PROJECT_ID ou GCP_PROJECT"
            )
        return errors

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        """Retorna True se ambiente é staging."""
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings."""
    return Settings()
