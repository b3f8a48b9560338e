# interface_adapters/controllers/interactive_controller.py
from __future__ import annotations
import logging
import sys
from datetime import date
from enum import Enum
from typing import Callable, Literal

from config.settings import Settings
from domain.models import Attachment
from application.use_cases.find_statements_usecase import FindStatementsUseCase
from application.use_cases.forward_statements_usecase import ForwardStatementsUseCase
from infrastructure.email.bridge import MailBridge, MailBridgeBuilder

logger = logging.getLogger(__name__)

Outcome = Literal["empty", "declined", "sent", "dry_run"]


class RunState(str, Enum):
    INIT = "init"
    CONNECTING = "connecting"
    SEARCHING = "searching"
    EMPTY = "empty"
    FOUND = "found"
    CONFIRMING = "confirming"
    DECLINED = "declined"
    ACCEPTED = "accepted"
    SENDING = "sending"
    DONE = "done"


def confirmed(answer: str) -> bool:
    # no trimming: the answer itself must begin with y
    return answer.lower().startswith("y")


def _stdin_line() -> str:
    # EOF reads as "" and counts as a decline
    return sys.stdin.readline()


class InteractiveController:
    def __init__(
        self,
        settings: Settings,
        *,
        builder: MailBridgeBuilder | None = None,
        read_line: Callable[[], str] = _stdin_line,
        echo: Callable[[str], None] = print,
        dry_run: bool = False,
        today: date | None = None,
    ) -> None:
        self.settings = settings
        self.builder = builder or MailBridgeBuilder.from_settings(settings)
        self.read_line = read_line
        self.echo = echo
        self.dry_run = dry_run
        self.today = today
        self.mailboxes = settings.mailboxes()
        self.states: list[RunState] = [RunState.INIT]

    @property
    def state(self) -> RunState:
        return self.states[-1]

    def _enter(self, state: RunState) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.states.append(state)

    # ───────────────────────── run ─────────────────────────
    def run(self) -> Outcome:
        self._enter(RunState.CONNECTING)
        with self.builder.build() as bridge:
            outcome = self.run_with(bridge)
        self._enter(RunState.DONE)
        return outcome

    def run_with(self, bridge: MailBridge) -> Outcome:
        st = self.settings
        self._enter(RunState.SEARCHING)
        finder = FindStatementsUseCase(
            retriever=bridge,
            sender=st.BANK_SENDER,
            subject=st.STATEMENT_SUBJECT,
            prefix=st.ATTACHMENT_PREFIX,
            mailboxes=self.mailboxes,
            echo=self.echo,
        )
        statements = finder.find(self.today)

        if not statements:
            self._enter(RunState.EMPTY)
            self.echo("Nothing to do, exiting")
            return "empty"

        self._enter(RunState.FOUND)
        for att in statements:
            self.echo(f"Found: {att.filename}")

        if self.dry_run:
            self.echo("Dry run, not sending")
            return "dry_run"

        if not self._confirm(st.INVOICE_RECIPIENT):
            self._enter(RunState.DECLINED)
            logger.info("Operator declined, nothing sent")
            return "declined"

        self._enter(RunState.ACCEPTED)
        self._send(bridge, statements)
        return "sent"

    def _confirm(self, recipient: str) -> bool:
        self._enter(RunState.CONFIRMING)
        self.echo(f"Send to {recipient}?")
        return confirmed(self.read_line() or "")

    def _send(self, bridge: MailBridge, statements: list[Attachment]) -> None:
        st = self.settings
        self._enter(RunState.SENDING)
        self.echo("Sending")
        ForwardStatementsUseCase(
            sender=bridge,
            from_addr=st.MAIL_USER,
            recipient=st.INVOICE_RECIPIENT,
            subject=st.OUTGOING_SUBJECT,
        ).forward(statements)
