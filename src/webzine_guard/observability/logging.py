"""Configuração de logging estruturado (JSON)."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from pythonjsonlogger.json import JsonFormatter

from webzine_guard.observability.middleware import get_correlation_id


class CorrelationIdFilter(logging.Filter):
    """Insere correlation_id e service no record de log.

    Importante: nunca adicionar senhas, corpo de comentário ou IP completo nos logs.
    """

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else get_correlation_id()
        record.service = self._service_name
        return True


def configure_logging(level: str, service_name: str, log_format: str = "json") -> None:
    """Configura logging do serviço (JSON por padrão, texto para dev local)."""

    if log_format.lower() == "text":
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"
        )
    else:
        formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(correlation_id)s %(service)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger simples; o filtro injeta service/correlation_id."""

    return logging.getLogger(name)


MASK_DIGEST_LENGTH = 12

# Chave por processo; impressões estáveis só enquanto o processo vive
_MASK_KEY = secrets.token_bytes(16)


def mask_identifier(value: str | None) -> str:
    """Impressão digital HMAC-SHA256 de identificadores (IP, session_id, chave de dedup).

    Nenhum trecho do valor original aparece no log; o mesmo valor gera a
    mesma impressão dentro do processo, então eventos continuam correlacionáveis.

    Exemplo:
        >>> mask_identifier("203.0.113.77:post-1")  # doctest: +SKIP
        'id:3f9a1c0b7e2d'
    """
    if not value:
        return "<empty>"
    digest = hmac.new(_MASK_KEY, value.encode("utf-8"), hashlib.sha256).hexdigest()
    return f"id:{digest[:MASK_DIGEST_LENGTH]}"
