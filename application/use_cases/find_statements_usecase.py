# application/use_cases/find_statements_usecase.py
from __future__ import annotations
import logging
from datetime import date
from typing import Callable, Iterable

from domain.models import Attachment, MailItem, INBOX, TRASH
from application.services.search_query import build_search_query, utc_today
from infrastructure.email.bridge import MessageRetriever

logger = logging.getLogger(__name__)


def matching_attachments(mails: Iterable[MailItem], prefix: str) -> list[Attachment]:
    """Attachments whose filename starts with prefix, in message then part order."""
    return [att for mail in mails for att in mail.attachments if att.has_prefix(prefix)]


class FindStatementsUseCase:
    def __init__(
        self,
        *,
        retriever: MessageRetriever,
        sender: str,
        subject: str,
        prefix: str,
        mailboxes: Iterable[str] = (INBOX, TRASH),
        echo: Callable[[str], None] = print,
    ) -> None:
        self.retriever = retriever
        self.sender = sender
        self.subject = subject
        self.prefix = prefix
        self.mailboxes = list(mailboxes)
        self.echo = echo

    def find(self, today: date | None = None) -> list[Attachment]:
        """
        Searches every mailbox in order and returns the statement attachments found.
        Results are concatenated across mailboxes without deduplication.
        Without an explicit date the current UTC date decides the month.
        """
        query = build_search_query(self.sender, self.subject, today or utc_today())
        self.echo(query)
        logger.debug("Search query: %s", query)

        results: list[Attachment] = []
        for mailbox in self.mailboxes:
            uids = self.retriever.search(mailbox, query)
            if not uids:
                logger.info("%s: no matching messages", mailbox)
                continue

            mails = self.retriever.peek_messages(mailbox, uids)
            found = matching_attachments(mails, self.prefix)
            logger.info("%s: %d message(s), %d statement(s)", mailbox, len(mails), len(found))
            results.extend(found)

        return results
