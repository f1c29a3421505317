"""Sanitização de texto de entrada (remoção completa de HTML).

Responsabilidade:
- Remover blocos <script>/<style> com conteúdo
- Remover demais tags mantendo o texto interno
- Decodificar entidades HTML (&amp; → &)
- Remover caracteres de controle (exceto quebra de linha e tab)
- Garantir determinismo (mesma entrada = mesma saída)

Só casa trechos com forma de tag: "3 < 5" continua intacto.
Escapar na renderização continua sendo responsabilidade da camada de UI.
"""

from __future__ import annotations

import html
import re
from re import Pattern

_PATTERNS: dict[str, Pattern[str]] = {
    "script_style": re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL),
    "comment": re.compile(r"<!--.*?-->", re.DOTALL),
    "tag": re.compile(r"<[A-Za-z/!][^>]*>"),
    "control": re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]"),
}


def sanitize_text(text: str | None) -> str:
    """Remove todo HTML, decodifica entidades e retorna texto puro aparado.

    Exemplos:
        >>> sanitize_text("<b>좋은 글</b> 감사합니다")
        '좋은 글 감사합니다'

        >>> sanitize_text("<script>alert(1)</script>안녕")
        '안녕'

        >>> sanitize_text("A &amp; B")
        'A & B'
    """
    if not text or not isinstance(text, str):
        return ""

    result = _PATTERNS["script_style"].sub("", text)
    result = _PATTERNS["comment"].sub("", result)
    result = _PATTERNS["tag"].sub("", result)
    # Decodifica uma única vez, depois das tags: "&lt;b&gt;" vira texto "<b>"
    result = html.unescape(result)
    result = _PATTERNS["control"].sub("", result)
    return result.strip()
