# application/use_cases/forward_statements_usecase.py
from __future__ import annotations
import logging
from typing import Sequence

from domain.models import Attachment
from application.services.message_builder import build_message, serialize
from infrastructure.email.bridge import MessageSender

logger = logging.getLogger(__name__)


class ForwardStatementsUseCase:
    def __init__(self, *, sender: MessageSender, from_addr: str, recipient: str, subject: str) -> None:
        self.sender = sender
        self.from_addr = from_addr
        self.recipient = recipient
        self.subject = subject

    def forward(self, attachments: Sequence[Attachment]) -> None:
        # ValidationError here means nothing was sent
        msg = build_message(
            from_addr=self.from_addr,
            to_addr=self.recipient,
            subject=self.subject,
            attachments=attachments,
        )
        payload = serialize(msg)
        logger.info("Forwarding %d attachment(s) to %s (%d bytes)", len(attachments), self.recipient, len(payload))
        self.sender.send_message(payload, self.from_addr, [self.recipient])
