# application/services/message_builder.py
from __future__ import annotations
from email.message import EmailMessage
from email.policy import SMTP
from email.utils import formatdate, make_msgid
from typing import Sequence

from domain.errors import ValidationError
from domain.models import Attachment

DEFAULT_TYPE = ("application", "octet-stream")


def _split_type(content_type: str) -> tuple[str, str]:
    maintype, _, subtype = (content_type or "").partition("/")
    if not maintype or not subtype:
        return DEFAULT_TYPE
    return maintype.strip().lower(), subtype.split(";")[0].strip().lower()


def build_message(
    *,
    from_addr: str,
    to_addr: str,
    subject: str,
    attachments: Sequence[Attachment],
) -> EmailMessage:
    """One multipart message carrying every attachment with its original type and filename."""
    if not attachments:
        raise ValidationError("no attachments to send")
    for idx, att in enumerate(attachments):
        if not att.filename:
            raise ValidationError(f"attachment #{idx} ({att.content_type}) has no filename")

    msg = EmailMessage()
    msg["From"] = from_addr
    msg["To"] = to_addr
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid()

    for att in attachments:
        maintype, subtype = _split_type(att.content_type)
        msg.add_attachment(att.content, maintype=maintype, subtype=subtype, filename=att.filename)
    return msg


def serialize(msg: EmailMessage) -> bytes:
    return msg.as_bytes(policy=SMTP)
