"""
In-memory stand-in for IMAPSession used across the tests.
"""

from __future__ import annotations

from domain.models import FolderEntry, MailboxInfo, MessageEnvelope, Sender


def envelope(*senders: tuple[str, str | None]) -> MessageEnvelope:
    return MessageEnvelope(senders=tuple(Sender(address=a, name=n) for a, n in senders))


class FakeLock:
    def __init__(self, session: "FakeSession", mailbox: str) -> None:
        self.session = session
        self.mailbox = mailbox

    def release(self) -> None:
        self.session.calls.append(("release", self.mailbox))
        self.session.releases += 1


class FakeSession:
    """Records every call; per-mailbox behaviour comes from plain dicts."""

    def __init__(
        self,
        mailboxes: dict[str, list[MessageEnvelope]] | None = None,
        *,
        status_errors: dict[str, Exception] | None = None,
        lock_errors: dict[str, Exception] | None = None,
        open_errors: dict[str, Exception] | None = None,
        fetch_errors: dict[str, Exception] | None = None,
        missing: set[str] | None = None,
        list_error: Exception | None = None,
    ) -> None:
        self.mailboxes = mailboxes or {}
        self.status_errors = status_errors or {}
        self.lock_errors = lock_errors or {}
        self.open_errors = open_errors or {}
        self.fetch_errors = fetch_errors or {}
        self.missing = missing or set()
        self.list_error = list_error
        self.calls: list[tuple[str, str]] = []
        self.releases = 0
        self._selected: str | None = None

    def list(self) -> list[FolderEntry]:
        self.calls.append(("list", ""))
        if self.list_error:
            raise self.list_error
        return [FolderEntry(path=name, delimiter="/") for name in self.mailboxes]

    def status(self, mailbox: str):
        self.calls.append(("status", mailbox))
        if mailbox in self.status_errors:
            raise self.status_errors[mailbox]
        if mailbox in self.missing or mailbox not in self.mailboxes:
            return None
        return {b"MESSAGES": len(self.mailboxes[mailbox])}

    def get_mailbox_lock(self, mailbox: str) -> FakeLock:
        self.calls.append(("lock", mailbox))
        if mailbox in self.lock_errors:
            raise self.lock_errors[mailbox]
        return FakeLock(self, mailbox)

    def mailbox_open(self, mailbox: str) -> MailboxInfo:
        self.calls.append(("open", mailbox))
        if mailbox in self.open_errors:
            raise self.open_errors[mailbox]
        self._selected = mailbox
        return MailboxInfo(path=mailbox, exists=len(self.mailboxes[mailbox]))

    def fetch(self, messages: str = "1:*"):
        mailbox = self._selected or ""
        self.calls.append(("fetch", mailbox))
        for env in self.mailboxes[mailbox]:
            yield env
        if mailbox in self.fetch_errors:
            raise self.fetch_errors[mailbox]

    def called(self, op: str) -> list[str]:
        return [mb for name, mb in self.calls if name == op]
