# main.py
# Entry point: connect to the mail bridge -> find this month's statements -> confirm -> forward
from __future__ import annotations
import argparse
import logging
import sys
from config.settings import Settings
from domain.errors import AccountingError, ConfigError
from interface_adapters.controllers.interactive_controller import InteractiveController

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Forward this month's bank statements to the invoice inbox.")
    parser.add_argument("--dry-run", action="store_true", help="List statements without prompting or sending")
    parser.add_argument("--log-level", help="Override ACCOUNTING_LOG_LEVEL (DEBUG, INFO, ...)")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.DEBUG),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        # no network I/O happens before run()
        controller = InteractiveController(settings=settings, dry_run=args.dry_run)
    except ConfigError as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG

    configure_logging(args.log_level or settings.LOG_LEVEL)
    logger.debug("Settings: %s", settings.redacted())

    try:
        outcome = controller.run()
    except AccountingError as exc:
        logger.error("Run failed in state %s: %s", controller.state.value, exc)
        return EXIT_FAILURE

    logger.info("=== Done: %s ===", outcome)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
