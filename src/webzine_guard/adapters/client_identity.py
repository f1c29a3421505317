"""Extração da identidade de rede do cliente a partir dos headers.

Usada apenas para dedup de likes e para telemetria. Pode ser compartilhada
por vários usuários legítimos atrás de NAT/proxy (limitação conhecida).
"""

from __future__ import annotations

from collections.abc import Mapping

UNKNOWN_CLIENT = "unknown"


def client_ip_from_headers(headers: Mapping[str, str], peer_host: str | None = None) -> str:
    """Resolve o IP do cliente.

    Precedência: x-forwarded-for (primeiro da lista) → cf-connecting-ip →
    x-real-ip → endereço do peer → "unknown".
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    for header in ("cf-connecting-ip", "x-real-ip"):
        value = headers.get(header)
        if value and value.strip():
            return value.strip()

    return peer_host or UNKNOWN_CLIENT
