# application/services/mailbox_lister.py
from __future__ import annotations
import logging

logger = logging.getLogger(__name__)


def list_mailboxes(session) -> list[str]:
    """
    Nombres de buzón en el orden que devuelve el servidor.
    Si el LIST falla se registra y se devuelve [] (igual que una cuenta sin buzones).
    """
    mailboxes: list[str] = []
    try:
        for entry in session.list():
            mailboxes.append(entry.path)
    except Exception:
        logger.exception("Error listando buzones")
        return []
    return mailboxes
