"""Geradores de identificadores."""

from __future__ import annotations

import re
import uuid
from urllib.parse import quote

GUEST_EMAIL_DOMAIN = "guest.local"
AVATAR_BASE_URL = "https://ui-avatars.com/api/"


def new_session_id() -> str:
    """Gera um session_id de visualização (cliente persiste e reenvia)."""

    return uuid.uuid4().hex


def new_comment_id() -> str:
    """Gera id de comentário."""

    return str(uuid.uuid4())


def new_guest_user_id() -> str:
    """Identidade sintética e não enumerável para convidados."""

    return f"guest-{uuid.uuid4().hex}"


def guest_email(display_name: str) -> str:
    """E-mail placeholder derivado do nome de exibição (não é contato real)."""

    local_part = re.sub(r"\s+", "", display_name.strip().lower()) or "guest"
    return f"{local_part}@{GUEST_EMAIL_DOMAIN}"


def guest_avatar_url(display_name: str) -> str:
    """URL de avatar gerado a partir do nome."""

    return f"{AVATAR_BASE_URL}?name={quote(display_name.strip())}&background=random"
