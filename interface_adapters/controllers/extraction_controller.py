# interface_adapters/controllers/extraction_controller.py
from __future__ import annotations
import logging
from config.settings import Settings
from infrastructure.email.imap_client import IMAPSession
from infrastructure.filesystem.storage import ContactCsvStorage
from application.use_cases.extract_contacts_usecase import ExtractContactsUseCase
from domain.models import MailboxResult

logger = logging.getLogger(__name__)


class ExtractionController:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.storage = ContactCsvStorage(base=settings.output_path())
        self.uc = ExtractContactsUseCase(exporter=self.storage.write_contacts)

    def _session(self) -> IMAPSession:
        st = self.settings
        return IMAPSession(st.IMAP_HOST, st.port(), st.IMAP_USER, st.IMAP_PASS, st.use_ssl())

    def run_once(self) -> list[MailboxResult]:
        with self._session() as session:
            results = self.uc.run(session)
        logger.info("Procesamiento completado (%d buzones, salida en %s)", len(results), self.storage.base)
        return results
