"""Message builders and an in-memory bridge shared by the test modules."""

from __future__ import annotations

from email.message import EmailMessage
from typing import Iterable

from domain.models import Attachment, MailItem

BANK = "kontakt@mbank.pl"
ME = "me@proton.me"
RECIPIENT = "invoices@example.com"


def raw_mail(
    attachments: Iterable[tuple[str | None, bytes, str]] = (),
    subject: str = "elektroniczne zestawienie operacji za 09/2026",
    from_addr: str = BANK,
) -> bytes:
    """Build an RFC 822 message with a text body and the given (filename, data, type) parts."""
    msg = EmailMessage()
    msg["From"] = from_addr
    msg["To"] = ME
    msg["Subject"] = subject
    msg["Date"] = "Thu, 01 Oct 2026 08:00:00 +0200"
    msg.set_content("W załączeniu zestawienie.")
    for filename, data, ctype in attachments:
        maintype, subtype = ctype.split("/")
        if filename is None:
            msg.add_attachment(data, maintype=maintype, subtype=subtype)
        else:
            msg.add_attachment(data, maintype=maintype, subtype=subtype, filename=filename)
    return msg.as_bytes()


def pdf(name: str | None, body: bytes = b"%PDF-1.4 statement") -> Attachment:
    return Attachment(filename=name, content=body, content_type="application/pdf")


def mail(uid: int, *attachments: Attachment, mailbox: str = "INBOX") -> MailItem:
    return MailItem(
        uid=uid,
        subject="elektroniczne zestawienie operacji za 09/2026",
        from_addr=BANK,
        date_str="",
        attachments=list(attachments),
        mailbox=mailbox,
    )


class FakeBridge:
    """In-memory bridge: mailbox name -> messages, records every call."""

    def __init__(self, boxes: dict[str, list[MailItem]] | None = None) -> None:
        self.boxes = boxes or {}
        self.searches: list[tuple[str, str]] = []
        self.peeks: list[tuple[str, set[int]]] = []
        self.sent: list[tuple[bytes, str, list[str]]] = []
        self.closed = False

    def __enter__(self) -> "FakeBridge":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def search(self, mailbox: str, query: str) -> set[int]:
        self.searches.append((mailbox, query))
        return {m.uid for m in self.boxes.get(mailbox, [])}

    def peek_messages(self, mailbox: str, uids: Iterable[int]) -> list[MailItem]:
        wanted = set(uids)
        self.peeks.append((mailbox, wanted))
        return sorted((m for m in self.boxes[mailbox] if m.uid in wanted), key=lambda m: m.uid)

    def send_message(self, payload: bytes, from_addr: str, to_addrs: Iterable[str]) -> None:
        self.sent.append((payload, from_addr, list(to_addrs)))


class FakeBuilder:
    def __init__(self, bridge: FakeBridge) -> None:
        self.bridge = bridge
        self.builds = 0

    def build(self) -> FakeBridge:
        self.builds += 1
        return self.bridge

