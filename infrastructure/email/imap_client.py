# infrastructure/email/imap_client.py
# Retrieval half of the bridge: select + UID SEARCH + BODY.PEEK[] fetch over IMAPClient.
from __future__ import annotations
import logging
import threading
from typing import Iterable
from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError, LoginError
import pyzmail
from domain.errors import AuthError, BridgeConnectionError, ProtocolError
from domain.models import MailItem, Attachment
from infrastructure.email.tls import client_context

logger = logging.getLogger(__name__)

PEEK = b"BODY.PEEK[]"
BODY = b"BODY[]"


def parse_mail(uid: int, mailbox: str, raw: bytes) -> MailItem:
    """Turn a raw RFC 822 message into a MailItem; body parts are not attachments."""
    msg = pyzmail.PyzMessage.factory(raw)

    subject = msg.get_subject() or ""
    from_addr = msg.get_addresses("from")[0][1] if msg.get_addresses("from") else ""
    date_str = str(msg.get_decoded_header("date") or "")

    atts: list[Attachment] = []
    for part in msg.mailparts:
        if part.is_body:
            continue
        ctype = part.type or "application/octet-stream"
        payload = part.get_payload()
        if isinstance(payload, bytes):
            atts.append(Attachment(filename=part.filename or None, content=payload, content_type=ctype))

    return MailItem(uid=uid, subject=subject, from_addr=from_addr, date_str=date_str,
                    attachments=atts, mailbox=mailbox)


class IMAPInbox:
    def __init__(self, host: str, port: int, user: str, password: str,
                 ssl: bool = False, verify_certs: bool = False) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.verify_certs = verify_certs
        self.client: IMAPClient | None = None
        # the selected mailbox is session state: select and the command after it go together
        self._lock = threading.Lock()

    def connect(self) -> "IMAPInbox":
        try:
            client = IMAPClient(
                self.host,
                port=self.port,
                ssl=self.ssl,
                ssl_context=client_context(self.verify_certs) if self.ssl else None,
            )
        except (IMAPClientError, OSError) as exc:
            raise BridgeConnectionError(f"IMAP connect to {self.host}:{self.port} failed: {exc}") from exc
        try:
            client.login(self.user, self.password)
        except LoginError as exc:
            self._quiet_logout(client)
            raise AuthError(f"IMAP login rejected for {self.user}: {exc}") from exc
        except (IMAPClientError, OSError) as exc:
            self._quiet_logout(client)
            raise BridgeConnectionError(f"IMAP login to {self.host}:{self.port} failed: {exc}") from exc
        self.client = client
        logger.debug("IMAP session open %s@%s:%s", self.user, self.host, self.port)
        return self

    def __enter__(self) -> "IMAPInbox":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self.client is None:
            return
        client, self.client = self.client, None
        self._quiet_logout(client)

    @staticmethod
    def _quiet_logout(client: IMAPClient) -> None:
        try:
            client.logout()
        except (IMAPClientError, OSError):
            logger.warning("IMAP logout failed; session already gone", exc_info=True)

    def _require_client(self) -> IMAPClient:
        if self.client is None:
            raise ProtocolError("IMAP session is not connected")
        return self.client

    # ───────── retrieval ─────────
    def search(self, mailbox: str, query: str) -> set[int]:
        client = self._require_client()
        with self._lock:
            try:
                client.select_folder(mailbox, readonly=True)
            except (IMAPClientError, OSError) as exc:
                raise ProtocolError(str(exc), mailbox=mailbox, operation="select") from exc
            try:
                uids = client.search(query)
            except (IMAPClientError, OSError) as exc:
                raise ProtocolError(str(exc), mailbox=mailbox, operation="search") from exc
        logger.debug("%s: %d message(s) match", mailbox, len(uids))
        return set(uids)

    def peek_messages(self, mailbox: str, uids: Iterable[int]) -> list[MailItem]:
        wanted = sorted(set(uids))
        if not wanted:
            raise ValueError("peek_messages needs at least one UID")
        client = self._require_client()
        with self._lock:
            try:
                client.select_folder(mailbox, readonly=True)
            except (IMAPClientError, OSError) as exc:
                raise ProtocolError(str(exc), mailbox=mailbox, operation="select") from exc
            try:
                resp = client.fetch(wanted, [PEEK])
            except (IMAPClientError, OSError) as exc:
                raise ProtocolError(str(exc), mailbox=mailbox, operation="fetch") from exc

        mails: list[MailItem] = []
        for uid in wanted:
            data = resp.get(uid)
            if not data or BODY not in data:
                # deleted between search and fetch
                logger.warning("%s: UID %s vanished before fetch, skipping", mailbox, uid)
                continue
            mails.append(parse_mail(uid, mailbox, data[BODY]))
        return mails
