"""Cache de deduplicação em memória com janela TTL e varredura oportunista.

Usado para suprimir repetições de ações públicas (like/view) dentro de uma
janela de tempo, sem round-trip a store externo.

Garantias:
- check_and_record é atômico por instância (lock único sobre o mapa)
- Repetição suprimida NÃO renova o timestamp da entrada
- Varredura roda no ramo de aceitação, limitando memória ao tráfego recente
- Nunca levanta exceção para chaves válidas (função total)

⚠️ Best-effort e single-process: não coordena múltiplas instâncias.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from webzine_guard.observability.logging import get_logger, mask_identifier

logger: logging.Logger = get_logger(__name__)

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    """Relógio de parede em milissegundos."""
    return time.time() * 1000


@dataclass(slots=True)
class DedupEntry:
    """Última ação aceita para uma chave."""

    key: str
    recorded_at: float  # ms


class DedupCache:
    """Mapa chave → timestamp com TTL e varredura amortizada.

    Args:
        ttl_ms: Janela durante a qual uma repetição é suprimida
        sweep_threshold_ms: Idade mínima para remoção na varredura (>= ttl_ms)
        clock: Fonte de tempo em ms (injetável para testes)
        name: Rótulo usado nos logs (ex.: "like", "view")
    """

    def __init__(
        self,
        ttl_ms: int,
        sweep_threshold_ms: int,
        clock: Clock | None = None,
        name: str = "dedup",
    ) -> None:
        if ttl_ms <= 0:
            raise ValueError("ttl_ms deve ser > 0")
        if sweep_threshold_ms < ttl_ms:
            raise ValueError("sweep_threshold_ms deve ser >= ttl_ms")

        self._ttl_ms = ttl_ms
        self._sweep_threshold_ms = sweep_threshold_ms
        self._clock = clock or wall_clock_ms
        self._name = name
        self._entries: dict[str, DedupEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def sweep_threshold_ms(self) -> int:
        return self._sweep_threshold_ms

    @property
    def name(self) -> str:
        return self._name

    def check_and_record(self, key: str) -> bool:
        """Retorna True e registra a ação se não houver entrada viva.

        Returns:
            True se a ação é permitida agora (entrada criada/renovada)
            False se há entrada viva (ação suprimida, timestamp inalterado)
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)

            if entry is not None:
                if now - entry.recorded_at < self._ttl_ms:
                    logger.debug(
                        "Dedup hit",
                        extra={
                            "cache": self._name,
                            "key": mask_identifier(key),
                            "age_ms": round(now - entry.recorded_at),
                        },
                    )
                    return False
                # Entrada vencida encontrada na consulta: remoção preguiçosa
                del self._entries[key]

            self._entries[key] = DedupEntry(key=key, recorded_at=now)
            removed = self._sweep_locked(now)

        logger.debug(
            "Dedup miss",
            extra={
                "cache": self._name,
                "key": mask_identifier(key),
                "swept": removed,
            },
        )
        return True

    def sweep(self, now: float | None = None) -> int:
        """Remove entradas com idade > sweep_threshold_ms.

        Chamado automaticamente por check_and_record; exposto para
        manutenção e testes.

        Returns:
            Quantidade de entradas removidas
        """
        with self._lock:
            return self._sweep_locked(self._clock() if now is None else now)

    def _sweep_locked(self, now: float) -> int:
        """Varredura O(entradas vivas); deve ser chamada com o lock adquirido."""
        expired = [
            k
            for k, entry in self._entries.items()
            if now - entry.recorded_at > self._sweep_threshold_ms
        ]
        for k in expired:
            del self._entries[k]
        return len(expired)

    def __contains__(self, key: object) -> bool:
        """True se a chave tem entrada viva (não registra nada)."""
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and self._clock() - entry.recorded_at < self._ttl_ms

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def snapshot(self) -> dict[str, float]:
        """Cópia de {chave: recorded_at} para diagnóstico."""
        with self._lock:
            return {k: entry.recorded_at for k, entry in self._entries.items()}

    def clear(self) -> None:
        """Remove todas as entradas."""
        with self._lock:
            self._entries.clear()
