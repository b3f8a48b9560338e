# infrastructure/email/smtp_client.py
# Send half of the bridge: one authenticated SMTP session, used once per run.
from __future__ import annotations
import logging
import smtplib
from typing import Iterable
from domain.errors import AuthError, BridgeConnectionError, ProtocolError
from infrastructure.email.tls import client_context

logger = logging.getLogger(__name__)


class SMTPOutbox:
    def __init__(self, host: str, port: int, user: str, password: str,
                 ssl: bool = True, verify_certs: bool = False) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.verify_certs = verify_certs
        self.conn: smtplib.SMTP | None = None

    def _open(self) -> smtplib.SMTP:
        if self.ssl:
            return smtplib.SMTP_SSL(self.host, self.port, context=client_context(self.verify_certs))
        return smtplib.SMTP(self.host, self.port)

    def connect(self) -> "SMTPOutbox":
        try:
            conn = self._open()
        except (smtplib.SMTPException, OSError) as exc:
            raise BridgeConnectionError(f"SMTP connect to {self.host}:{self.port} failed: {exc}") from exc
        try:
            conn.login(self.user, self.password)
        except smtplib.SMTPAuthenticationError as exc:
            self._quiet_quit(conn)
            raise AuthError(f"SMTP login rejected for {self.user}: {exc}") from exc
        except (smtplib.SMTPException, OSError) as exc:
            self._quiet_quit(conn)
            raise BridgeConnectionError(f"SMTP login to {self.host}:{self.port} failed: {exc}") from exc
        self.conn = conn
        logger.debug("SMTP session open %s@%s:%s", self.user, self.host, self.port)
        return self

    def __enter__(self) -> "SMTPOutbox":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self.conn is None:
            return
        conn, self.conn = self.conn, None
        self._quiet_quit(conn)

    @staticmethod
    def _quiet_quit(conn: smtplib.SMTP) -> None:
        try:
            conn.quit()
        except (smtplib.SMTPException, OSError):
            logger.warning("SMTP quit failed; session already gone", exc_info=True)

    def send_message(self, payload: bytes, from_addr: str, to_addrs: Iterable[str]) -> None:
        """Hand a serialized message to the server. Every call sends a real email."""
        if self.conn is None:
            raise ProtocolError("SMTP session is not connected", operation="send")
        rcpts = list(to_addrs)
        try:
            refused = self.conn.sendmail(from_addr, rcpts, payload)
        except (smtplib.SMTPException, OSError) as exc:
            raise ProtocolError(str(exc), operation="send") from exc
        if refused:
            raise ProtocolError(f"recipients refused: {refused}", operation="send")
        logger.info("Sent %d bytes to %s", len(payload), ", ".join(rcpts))
