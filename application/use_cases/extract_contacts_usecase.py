# application/use_cases/extract_contacts_usecase.py
from __future__ import annotations
import logging
from typing import Callable, Iterable

from domain.models import Contact, MailboxResult
from application.services.contact_aggregator import fetch_and_process_messages
from application.services.mailbox_lister import list_mailboxes

logger = logging.getLogger(__name__)

Exporter = Callable[[Iterable[Contact], str], object]


class ExtractContactsUseCase:
    def __init__(self, *, exporter: Exporter) -> None:
        self.exporter = exporter

    def run(self, session) -> list[MailboxResult]:
        """
        Procesa los buzones uno a uno (una sola sesión → un solo lock a la vez)
        y exporta solo los que terminaron sin error y con contactos.
        """
        mailboxes = list_mailboxes(session)
        if not mailboxes:
            logger.info("No se encontraron buzones.")
            return []

        logger.info("Procesando %d buzones…", len(mailboxes))
        results = [fetch_and_process_messages(session, mb) for mb in mailboxes]

        for result in results:
            if not result.ok:
                logger.error("Error procesando %s: %s", result.mailbox, result.error)
                continue
            if not result.contacts:
                logger.info("Sin contactos en %s", result.mailbox)
                continue
            try:
                self.exporter(result.contacts, result.mailbox)
                logger.info("CSV creado para %s con %d contactos", result.mailbox, len(result.contacts))
            except Exception:
                logger.exception("Error escribiendo CSV para %s", result.mailbox)

        return results
