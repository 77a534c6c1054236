# infrastructure/filesystem/storage.py
from __future__ import annotations
import csv
import io
import json
import re
from pathlib import Path
from typing import Iterable

from domain.models import Contact

CSV_HEADER = ("email", "name", "attributes")
_UNSAFE_CHARS = re.compile(r'[/\\?%*:|"<>]')


def sanitize_mailbox_name(mailbox: str) -> str:
    return _UNSAFE_CHARS.sub("-", mailbox)


def format_contacts_csv(contacts: Iterable[Contact], mailbox: str) -> str:
    """
    Cabecera "email","name","attributes" y una fila por contacto, todo entrecomillado.
    attributes = {"list": <buzón>} en JSON (comillas internas dobladas por csv).
    """
    attributes = json.dumps({"list": mailbox}, ensure_ascii=False, separators=(",", ":"))
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for contact in sorted(contacts, key=lambda c: c.email):
        writer.writerow((contact.email, contact.name or "", attributes))
    return buf.getvalue().rstrip("\n")


class ContactCsvStorage:
    def __init__(self, base: Path) -> None:
        self.base = base.resolve()
        self.base.mkdir(parents=True, exist_ok=True)

    def write_contacts(self, contacts: Iterable[Contact], mailbox: str) -> Path:
        fp = self.base / f"{sanitize_mailbox_name(mailbox)}.csv"
        fp.write_text(format_contacts_csv(contacts, mailbox), encoding="utf-8")
        return fp
