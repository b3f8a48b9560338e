# infrastructure/email/bridge.py
# One handle over the two sessions a mail bridge exposes for a single account.
from __future__ import annotations
import logging
from typing import Iterable, Protocol
from domain.models import MailItem
from infrastructure.email.imap_client import IMAPInbox
from infrastructure.email.smtp_client import SMTPOutbox

logger = logging.getLogger(__name__)


class MessageRetriever(Protocol):
    def search(self, mailbox: str, query: str) -> set[int]: ...

    def peek_messages(self, mailbox: str, uids: Iterable[int]) -> list[MailItem]: ...


class MessageSender(Protocol):
    def send_message(self, payload: bytes, from_addr: str, to_addrs: Iterable[str]) -> None: ...


class MailBridge:
    """
    Retrieval (IMAP) and sending (SMTP) for one account behind one object.
    Built by MailBridgeBuilder.build(); both sessions are already logged in.
    """

    def __init__(self, inbox: IMAPInbox, outbox: SMTPOutbox) -> None:
        self.inbox = inbox
        self.outbox = outbox

    def __enter__(self) -> "MailBridge":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        try:
            self.inbox.close()
        finally:
            self.outbox.close()
        logger.debug("Bridge closed")

    # ───────── MessageRetriever ─────────
    def search(self, mailbox: str, query: str) -> set[int]:
        return self.inbox.search(mailbox, query)

    def peek_messages(self, mailbox: str, uids: Iterable[int]) -> list[MailItem]:
        return self.inbox.peek_messages(mailbox, uids)

    # ───────── MessageSender ─────────
    def send_message(self, payload: bytes, from_addr: str, to_addrs: Iterable[str]) -> None:
        self.outbox.send_message(payload, from_addr, to_addrs)


class MailBridgeBuilder:
    """Collects connection settings; no network I/O happens until build()."""

    def __init__(
        self,
        host: str,
        imap_port: int,
        smtp_port: int,
        user: str,
        password: str,
        *,
        imap_ssl: bool = False,
        smtp_ssl: bool = True,
        verify_certs: bool = False,
    ) -> None:
        self.host = host
        self.imap_port = imap_port
        self.smtp_port = smtp_port
        self.user = user
        self.password = password
        self.imap_ssl = imap_ssl
        self.smtp_ssl = smtp_ssl
        self.verify_certs = verify_certs

    @classmethod
    def from_settings(cls, settings) -> "MailBridgeBuilder":
        return cls(
            settings.MAIL_HOST,
            settings.IMAP_PORT,
            settings.SMTP_PORT,
            settings.MAIL_USER,
            settings.MAIL_PASSWORD,
            imap_ssl=settings.IMAP_SSL,
            smtp_ssl=settings.SMTP_SSL,
            verify_certs=settings.VERIFY_CERTS,
        )

    def _inbox(self) -> IMAPInbox:
        return IMAPInbox(self.host, self.imap_port, self.user, self.password,
                         ssl=self.imap_ssl, verify_certs=self.verify_certs)

    def _outbox(self) -> SMTPOutbox:
        return SMTPOutbox(self.host, self.smtp_port, self.user, self.password,
                          ssl=self.smtp_ssl, verify_certs=self.verify_certs)

    def build(self) -> MailBridge:
        """
        Connects and authenticates both sessions.
        Raises BridgeConnectionError or AuthError; on SMTP failure the IMAP session is closed first.
        """
        inbox = self._inbox().connect()
        try:
            outbox = self._outbox().connect()
        except Exception:
            inbox.close()
            raise
        logger.info("Bridge ready at %s (imap=%s, smtp=%s)", self.host, self.imap_port, self.smtp_port)
        return MailBridge(inbox, outbox)
