# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
import os
from typing import Mapping
from dotenv import load_dotenv

from domain.errors import ConfigError

load_dotenv()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value is None or value.strip() == "":
        raise ConfigError(f"{name} is not set")
    return value.strip()


def _port(env: Mapping[str, str], name: str) -> int:
    raw = _required(env, name)
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"{name} out of range: {port}")
    return port


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _mailboxes(raw: str) -> list[str]:
    boxes = [m.strip() for m in raw.split(",") if m.strip()]
    if not boxes:
        raise ConfigError("ACCOUNTING_MAILBOXES must name at least one mailbox")
    return boxes


@dataclass(frozen=True)
class Settings:
    # Bridge account (required)
    MAIL_HOST: str
    MAIL_USER: str
    MAIL_PASSWORD: str
    IMAP_PORT: int
    SMTP_PORT: int
    INVOICE_RECIPIENT: str

    # Statement search
    BANK_SENDER: str = "kontakt@mbank.pl"
    STATEMENT_SUBJECT: str = "elektroniczne zestawienie operacji za"
    ATTACHMENT_PREFIX: str = "mBiznes"
    OUTGOING_SUBJECT: str = "Wyciągi"
    MAILBOXES: str = "INBOX,Trash"

    # Transport; defaults match a local Proton Mail Bridge
    IMAP_SSL: bool = False
    SMTP_SSL: bool = True
    VERIFY_CERTS: bool = False

    LOG_LEVEL: str = "DEBUG"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            MAIL_HOST=_required(env, "ACCOUNTING_MAIL_HOST"),
            MAIL_USER=_required(env, "ACCOUNTING_MAIL_USER"),
            MAIL_PASSWORD=_required(env, "ACCOUNTING_MAIL_PASSWORD"),
            IMAP_PORT=_port(env, "ACCOUNTING_IMAP_PORT"),
            SMTP_PORT=_port(env, "ACCOUNTING_SMTP_PORT"),
            INVOICE_RECIPIENT=_required(env, "ACCOUNTING_INVOICE_RECIPIENT"),
            BANK_SENDER=env.get("ACCOUNTING_BANK_SENDER", cls.BANK_SENDER),
            STATEMENT_SUBJECT=env.get("ACCOUNTING_STATEMENT_SUBJECT", cls.STATEMENT_SUBJECT),
            ATTACHMENT_PREFIX=env.get("ACCOUNTING_ATTACHMENT_PREFIX", cls.ATTACHMENT_PREFIX),
            OUTGOING_SUBJECT=env.get("ACCOUNTING_OUTGOING_SUBJECT", cls.OUTGOING_SUBJECT),
            MAILBOXES=",".join(_mailboxes(env.get("ACCOUNTING_MAILBOXES", cls.MAILBOXES))),
            IMAP_SSL=_flag(env, "ACCOUNTING_IMAP_SSL", cls.IMAP_SSL),
            SMTP_SSL=_flag(env, "ACCOUNTING_SMTP_SSL", cls.SMTP_SSL),
            VERIFY_CERTS=_flag(env, "ACCOUNTING_VERIFY_CERTS", cls.VERIFY_CERTS),
            LOG_LEVEL=env.get("ACCOUNTING_LOG_LEVEL", cls.LOG_LEVEL).upper(),
        )

    # ───────── helpers ─────────
    def mailboxes(self) -> list[str]:
        return _mailboxes(self.MAILBOXES)

    def redacted(self) -> dict[str, object]:
        """Settings as a dict with the password masked, for debug logging."""
        return {
            "host": self.MAIL_HOST,
            "user": self.MAIL_USER,
            "password": "***",
            "imap_port": self.IMAP_PORT,
            "smtp_port": self.SMTP_PORT,
            "recipient": self.INVOICE_RECIPIENT,
            "mailboxes": self.MAILBOXES,
        }
