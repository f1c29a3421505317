"""Incremento deduplicado de contadores públicos (likes e views).

Protocolo por requisição:
1. Lê o conteúdo no store (inexistente/não publicado → ContentNotFoundError,
   sem tocar no cache de dedup)
2. check_and_record no cache do campo (suprimido → contagem atual)
3. Persiste current + 1 e retorna o valor autoritativo

Limitações aceitas:
- read-then-write não é linearizável entre processos (lost update).
  Com atomic_increment=True, o incremento vai para o store.
- Falha de persistência após o registro no cache deixa a chave consumida
  até o TTL expirar (abuso > disponibilidade). Sempre logado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from webzine_guard.domain.content import ContentStore
from webzine_guard.domain.dedup import DedupCache
from webzine_guard.domain.enums import CounterField, IncrementStatus
from webzine_guard.domain.errors import ContentNotFoundError, StoreError
from webzine_guard.observability.logging import get_logger, mask_identifier

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class IncrementResult:
    """Resultado não-erro: aceito (novo valor) ou suprimido (valor atual)."""

    status: IncrementStatus
    count: int
    content_id: str
    field: CounterField

    @property
    def accepted(self) -> bool:
        return self.status is IncrementStatus.ACCEPTED


def like_dedup_key(client_ip: str, content_id: str) -> str:
    """Chave de dedup de like: origem de rede + conteúdo."""
    return f"{client_ip}:{content_id}"


def view_dedup_key(session_id: str, content_id: str) -> str:
    """Chave de dedup de view: token de sessão do cliente + conteúdo."""
    return f"{session_id}:{content_id}"


class CounterService:
    """Envolve contadores persistidos com dedup em memória."""

    def __init__(
        self,
        store: ContentStore,
        like_cache: DedupCache,
        view_cache: DedupCache,
        atomic_increment: bool = False,
    ) -> None:
        self._store = store
        self._caches = {CounterField.LIKES: like_cache, CounterField.VIEWS: view_cache}
        self._atomic_increment = atomic_increment

    def cache_for(self, field: CounterField) -> DedupCache:
        return self._caches[field]

    def try_increment(
        self, content_id: str, dedup_key: str, field: CounterField
    ) -> IncrementResult:
        """Incrementa o contador se a chave não estiver suprimida.

        Raises:
            ContentNotFoundError: Conteúdo ausente ou não publicado
            StoreError: Falha do store na leitura ou escrita
        """
        content = self._store.get_content(content_id)
        if content is None or not content.is_published:
            logger.info(
                "Counter target not found",
                extra={"content_id": content_id, "field": field.value},
            )
            raise ContentNotFoundError(content_id)

        current = content.counter(field)

        if not self.cache_for(field).check_and_record(dedup_key):
            logger.info(
                "Counter increment suppressed",
                extra={
                    "content_id": content_id,
                    "field": field.value,
                    "dedup_key": mask_identifier(dedup_key),
                    "count": current,
                },
            )
            return IncrementResult(
                status=IncrementStatus.SUPPRESSED,
                count=current,
                content_id=content_id,
                field=field,
            )

        expected = current + 1
        try:
            if self._atomic_increment:
                updated = self._store.increment_content_field(content_id, field, 1)
            else:
                updated = self._store.update_content_field(content_id, field, expected)
        except StoreError:
            logger.warning(
                "Counter persist failed after dedup record; key stays consumed until TTL",
                extra={
                    "content_id": content_id,
                    "field": field.value,
                    "dedup_key": mask_identifier(dedup_key),
                    "dedup_consumed": True,
                },
            )
            raise

        # Sem linha de volta do store, usa o valor esperado (pode divergir
        # sob escritores concorrentes).
        new_count = updated.counter(field) if updated is not None else expected

        logger.info(
            "Counter incremented",
            extra={"content_id": content_id, "field": field.value, "count": new_count},
        )
        return IncrementResult(
            status=IncrementStatus.ACCEPTED,
            count=new_count,
            content_id=content_id,
            field=field,
        )

    def like(self, content_id: str, client_ip: str) -> IncrementResult:
        """Like deduplicado por IP do cliente."""
        return self.try_increment(
            content_id, like_dedup_key(client_ip, content_id), CounterField.LIKES
        )

    def view(self, content_id: str, session_id: str) -> IncrementResult:
        """View deduplicada por sessão do cliente."""
        return self.try_increment(
            content_id, view_dedup_key(session_id, content_id), CounterField.VIEWS
        )
