# infrastructure/email/imap_client.py
from __future__ import annotations
import logging
import threading
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from typing import Iterator
from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientAbortError, IMAPClientError
from domain.models import FolderEntry, MailboxInfo, MessageEnvelope, Sender

logger = logging.getLogger(__name__)

FETCH_BATCH_SIZE = 500


def _text(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def decode_display_name(raw: bytes | str | None) -> str | None:
    """
    Decodifica el nombre visible del remitente ('=?UTF-8?B?...?=' incluido).
    Devuelve None si no hay nombre.
    """
    text = _text(raw).strip()
    if not text:
        return None
    try:
        text = str(make_header(decode_header(text)))
    except (HeaderParseError, LookupError, ValueError):
        logger.debug("Nombre no decodificable, se usa tal cual: %r", text)
    text = text.replace("\r\n", "").replace("\n", "").strip()
    return text or None


def to_message_envelope(envelope) -> MessageEnvelope:
    """Convierte un imapclient.response_types.Envelope en MessageEnvelope."""
    senders: list[Sender] = []
    for addr in (getattr(envelope, "from_", None) or ()):
        mailbox = _text(addr.mailbox)
        host = _text(addr.host)
        # host None → marcador de grupo (RFC 3501), sin dirección real
        address = f"{mailbox}@{host}" if mailbox and host else ""
        senders.append(Sender(address=address, name=decode_display_name(addr.name)))
    return MessageEnvelope(senders=tuple(senders))


class MailboxLock:
    """
    Bloqueo exclusivo de un buzón dentro de la sesión.
    release() es idempotente: solo la primera llamada libera.
    """
    def __init__(self, mailbox: str, lock: threading.Lock) -> None:
        self.mailbox = mailbox
        self._lock = lock
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lock.release()
        logger.debug("Lock liberado: %s", self.mailbox)

    def __enter__(self) -> "MailboxLock":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class IMAPSession:
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        ssl: bool = True,
        batch_size: int = FETCH_BATCH_SIZE,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.batch_size = batch_size
        self.client: IMAPClient | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> "IMAPSession":
        self.client = IMAPClient(self.host, port=self.port, ssl=self.ssl)
        self.client.login(self.user, self.password)
        logger.info("Conectado a %s:%s como %s", self.host, self.port, self.user)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.logout()
        except Exception:
            logger.exception("Error cerrando IMAP")

    def logout(self) -> None:
        if self.client:
            client, self.client = self.client, None
            client.logout()

    def status(self, mailbox: str) -> dict | None:
        """
        None si el servidor rechaza el STATUS (NO/BAD: buzón inexistente o \\Noselect).
        Los cortes de conexión sí se propagan.
        """
        assert self.client
        try:
            return self.client.folder_status(mailbox, [b"MESSAGES"]) or None
        except IMAPClientAbortError:
            raise
        except IMAPClientError as exc:
            logger.warning("STATUS rechazado para %s: %s", mailbox, exc)
            return None

    def get_mailbox_lock(self, mailbox: str) -> MailboxLock:
        self._lock.acquire()
        logger.debug("Lock adquirido: %s", mailbox)
        return MailboxLock(mailbox, self._lock)

    def mailbox_open(self, mailbox: str) -> MailboxInfo:
        assert self.client
        info = self.client.select_folder(mailbox, readonly=True)
        return MailboxInfo(path=mailbox, exists=int(info.get(b"EXISTS", 0)))

    def fetch(self, messages: str = "1:*") -> Iterator[MessageEnvelope]:
        """
        Solo ENVELOPE (sin cuerpo), en orden ascendente de UID.
        Se pide por lotes de batch_size para no cargar todo el buzón en memoria.
        """
        assert self.client
        uids = sorted(self.client.search(["UID", messages]))
        for start in range(0, len(uids), self.batch_size):
            batch = uids[start:start + self.batch_size]
            resp = self.client.fetch(batch, [b"ENVELOPE"])
            for uid in batch:
                # Un mensaje expurgado entre SEARCH y FETCH no vuelve en la respuesta
                envelope = (resp.get(uid) or {}).get(b"ENVELOPE")
                if envelope is None:
                    continue
                yield to_message_envelope(envelope)

    def list(self) -> list[FolderEntry]:
        assert self.client
        return [
            FolderEntry(
                path=_text(name),
                delimiter=_text(delimiter) or None,
                flags=tuple(_text(f) for f in (flags or ())),
            )
            for flags, delimiter, name in self.client.list_folders()
        ]
