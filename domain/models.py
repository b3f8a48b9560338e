# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field

INBOX = "INBOX"
TRASH = "Trash"


@dataclass
class Attachment:
    filename: str | None
    content: bytes
    content_type: str

    def has_prefix(self, prefix: str) -> bool:
        # attachments without a filename never match
        return self.filename is not None and self.filename.startswith(prefix)


@dataclass
class MailItem:
    uid: int
    subject: str
    from_addr: str
    date_str: str
    attachments: list[Attachment] = field(default_factory=list)
    mailbox: str = INBOX
