# domain/errors.py
from __future__ import annotations


class AccountingError(Exception):
    """Base class for every failure the run reports to the operator."""


class ConfigError(AccountingError):
    """Missing or unparseable environment value."""


class BridgeConnectionError(AccountingError):
    """The bridge could not be reached (socket or TLS failure)."""


class AuthError(AccountingError):
    """The bridge rejected the credentials."""


class ProtocolError(AccountingError):
    """An IMAP or SMTP command failed on an established session."""

    def __init__(self, message: str, *, mailbox: str | None = None, operation: str | None = None) -> None:
        self.mailbox = mailbox
        self.operation = operation
        where = ", ".join(
            f"{k}={v}" for k, v in (("operation", operation), ("mailbox", mailbox)) if v
        )
        super().__init__(f"{message} ({where})" if where else message)


class ValidationError(AccountingError):
    """The outgoing message cannot be built from the collected attachments."""
