"""Tests for Settings.from_env: required values, port parsing, flags and defaults."""

from __future__ import annotations

from dataclasses import replace

import pytest

from config.settings import Settings
from domain.errors import ConfigError

BASE_ENV = {
    "ACCOUNTING_MAIL_HOST": "127.0.0.1",
    "ACCOUNTING_MAIL_USER": "me@proton.me",
    "ACCOUNTING_MAIL_PASSWORD": "bridge-pass",
    "ACCOUNTING_IMAP_PORT": "1143",
    "ACCOUNTING_SMTP_PORT": "1025",
    "ACCOUNTING_INVOICE_RECIPIENT": "invoices@example.com",
}


def _env(**overrides: str | None) -> dict[str, str]:
    env = dict(BASE_ENV)
    for key, value in overrides.items():
        if value is None:
            env.pop(key, None)
        else:
            env[key] = value
    return env


class TestRequired:
    def test_loads_required_values(self) -> None:
        s = Settings.from_env(_env())

        assert s.MAIL_HOST == "127.0.0.1"
        assert s.MAIL_USER == "me@proton.me"
        assert s.IMAP_PORT == 1143
        assert s.SMTP_PORT == 1025
        assert s.INVOICE_RECIPIENT == "invoices@example.com"

    @pytest.mark.parametrize("name", sorted(BASE_ENV))
    def test_missing_value_names_variable(self, name: str) -> None:
        with pytest.raises(ConfigError, match=name):
            Settings.from_env(_env(**{name: None}))

    def test_blank_value_is_missing(self) -> None:
        with pytest.raises(ConfigError, match="ACCOUNTING_MAIL_PASSWORD"):
            Settings.from_env(_env(ACCOUNTING_MAIL_PASSWORD="   "))

    def test_non_integer_port(self) -> None:
        with pytest.raises(ConfigError, match="ACCOUNTING_IMAP_PORT must be an integer"):
            Settings.from_env(_env(ACCOUNTING_IMAP_PORT="imap"))

    def test_port_out_of_range(self) -> None:
        with pytest.raises(ConfigError, match="out of range"):
            Settings.from_env(_env(ACCOUNTING_SMTP_PORT="70000"))


class TestOptional:
    def test_defaults(self) -> None:
        s = Settings.from_env(_env())

        assert s.BANK_SENDER == "kontakt@mbank.pl"
        assert s.STATEMENT_SUBJECT == "elektroniczne zestawienie operacji za"
        assert s.ATTACHMENT_PREFIX == "mBiznes"
        assert s.OUTGOING_SUBJECT == "Wyciągi"
        assert s.mailboxes() == ["INBOX", "Trash"]
        assert s.IMAP_SSL is False
        assert s.SMTP_SSL is True
        assert s.VERIFY_CERTS is False
        assert s.LOG_LEVEL == "DEBUG"

    def test_overrides(self) -> None:
        s = Settings.from_env(
            _env(
                ACCOUNTING_MAILBOXES=" INBOX , Archive,,",
                ACCOUNTING_IMAP_SSL="yes",
                ACCOUNTING_VERIFY_CERTS="1",
                ACCOUNTING_LOG_LEVEL="info",
            )
        )

        assert s.mailboxes() == ["INBOX", "Archive"]
        assert s.IMAP_SSL is True
        assert s.VERIFY_CERTS is True
        assert s.LOG_LEVEL == "INFO"

    def test_bad_flag(self) -> None:
        with pytest.raises(ConfigError, match="ACCOUNTING_SMTP_SSL"):
            Settings.from_env(_env(ACCOUNTING_SMTP_SSL="maybe"))

    @pytest.mark.parametrize("raw", [",", " , ", "   "])
    def test_empty_mailbox_list_rejected_on_load(self, raw: str) -> None:
        with pytest.raises(ConfigError, match="ACCOUNTING_MAILBOXES"):
            Settings.from_env(_env(ACCOUNTING_MAILBOXES=raw))

    def test_mailbox_list_normalised_on_load(self) -> None:
        s = Settings.from_env(_env(ACCOUNTING_MAILBOXES=" INBOX , Archive,,"))

        assert s.MAILBOXES == "INBOX,Archive"

    def test_redacted_does_not_validate(self) -> None:
        s = replace(Settings.from_env(_env()), MAILBOXES=",")

        assert s.redacted()["mailboxes"] == ","

    def test_redacted_hides_password(self) -> None:
        s = Settings.from_env(_env())

        assert s.redacted()["password"] == "***"
        assert "bridge-pass" not in repr(s.redacted())
