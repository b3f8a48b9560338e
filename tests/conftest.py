"""Shared pytest fixtures for the statement forwarder test suite."""

from __future__ import annotations

import pytest

from config.settings import Settings
from tests.helpers import ME, RECIPIENT


@pytest.fixture
def settings() -> Settings:
    return Settings(
        MAIL_HOST="127.0.0.1",
        MAIL_USER=ME,
        MAIL_PASSWORD="bridge-pass",
        IMAP_PORT=1143,
        SMTP_PORT=1025,
        INVOICE_RECIPIENT=RECIPIENT,
    )
