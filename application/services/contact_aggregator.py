# application/services/contact_aggregator.py
from __future__ import annotations
import logging
from typing import Iterable

from domain.models import Contact, MailboxResult, MessageEnvelope, Sender

logger = logging.getLogger(__name__)

MAILBOX_NOT_FOUND = "Mailbox not found"
MAILBOX_EMPTY = "Mailbox is empty"
UNKNOWN_ERROR = "Unknown error"


def merge_sender(contacts: dict[str, Contact], sender: Sender) -> None:
    """
    Último nombre no vacío gana; un mensaje sin nombre nunca borra el guardado.
    """
    if not sender.address:
        return
    previous = contacts.get(sender.address)
    name = sender.name or (previous.name if previous else None)
    contacts[sender.address] = Contact(email=sender.address, name=name)


def aggregate_senders(envelopes: Iterable[MessageEnvelope]) -> dict[str, Contact]:
    contacts: dict[str, Contact] = {}
    for envelope in envelopes:
        for sender in envelope.senders:
            merge_sender(contacts, sender)
    return contacts


def fetch_and_process_messages(session, mailbox: str = "INBOX") -> MailboxResult:
    """
    Recorre todos los mensajes de un buzón y devuelve sus remitentes únicos.

    Nunca lanza: cualquier fallo del buzón se devuelve como MailboxResult con error,
    para que el resto de buzones se procese igualmente.
    """
    try:
        # 1) Existe el buzón
        if not session.status(mailbox):
            return MailboxResult.failure(mailbox, MAILBOX_NOT_FOUND)

        # 2) Lock exclusivo mientras dura el recorrido
        lock = session.get_mailbox_lock(mailbox)
        try:
            # 3) Buzón vacío → no se hace fetch
            info = session.mailbox_open(mailbox)
            if info.exists == 0:
                return MailboxResult.failure(mailbox, MAILBOX_EMPTY)

            # 4) Solo ENVELOPE de 1:*
            contacts = aggregate_senders(session.fetch("1:*"))
        finally:
            lock.release()
    except Exception as exc:
        logger.debug("Fallo procesando buzón %s", mailbox, exc_info=True)
        return MailboxResult.failure(mailbox, str(exc) or UNKNOWN_ERROR)

    return MailboxResult.success(mailbox, contacts.values())
