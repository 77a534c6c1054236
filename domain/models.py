# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

@dataclass(frozen=True)
class Sender:
    address: str
    name: str | None = None

@dataclass(frozen=True)
class MessageEnvelope:
    senders: tuple[Sender, ...] = ()

@dataclass(frozen=True)
class Contact:
    email: str
    name: str | None = None

@dataclass(frozen=True)
class FolderEntry:
    path: str
    delimiter: str | None = None
    flags: tuple[str, ...] = ()

@dataclass(frozen=True)
class MailboxInfo:
    path: str
    exists: int

@dataclass(frozen=True)
class MailboxResult:
    """
    Resultado de procesar un buzón: o bien contactos, o bien un error.
    Con error, el conjunto de contactos siempre está vacío.
    """
    mailbox: str
    contacts: frozenset[Contact] = field(default_factory=frozenset)
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.contacts:
            raise ValueError("MailboxResult con error no puede tener contactos")

    @classmethod
    def success(cls, mailbox: str, contacts: Iterable[Contact]) -> "MailboxResult":
        return cls(mailbox=mailbox, contacts=frozenset(contacts))

    @classmethod
    def failure(cls, mailbox: str, error: str) -> "MailboxResult":
        return cls(mailbox=mailbox, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
