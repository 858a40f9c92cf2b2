from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from argus.app import lock_channels, unlock_channels
from argus.config import configure_logging
from argus.domain.channel_lock import LockStatus, UnlockStatus

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_SUCCESS = {LockStatus.LOCKED, UnlockStatus.UNLOCKED}
_NOT_CONVERGED = {LockStatus.NOT_CONVERGED, UnlockStatus.NOT_CONVERGED}


def _snowflake(value: str) -> str:
    stripped = value.strip().removeprefix("<#").removesuffix(">")
    if not stripped.isdigit():
        raise argparse.ArgumentTypeError(f"Invalid Discord id: {value}")
    return stripped


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Argus moderation commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("lock", "Stop @everyone from posting in channels"),
        ("unlock", "Restore @everyone's permissions in locked channels"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--guild-id",
            type=_snowflake,
            required=True,
            help="Guild (server) id; also the id of its @everyone role",
        )
        sub.add_argument(
            "--message",
            type=str,
            help="Optional text appended to the channel announcement",
        )
        sub.add_argument(
            "channels",
            nargs="+",
            type=_snowflake,
            help="Channel ids or <#id> mentions",
        )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "lock":
            results = asyncio.run(
                lock_channels(
                    parsed_args.channels,
                    guild_id=parsed_args.guild_id,
                    message=parsed_args.message,
                )
            )
        elif parsed_args.command == "unlock":
            results = asyncio.run(
                unlock_channels(
                    parsed_args.channels,
                    guild_id=parsed_args.guild_id,
                    message=parsed_args.message,
                )
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    changed = [result.channel_id for result in results if result.status in _SUCCESS]
    if changed:
        log.info("%sed %s", parsed_args.command.capitalize(), ", ".join(changed))
    else:
        log.info("No channels to %s!", parsed_args.command)
    if any(result.status in _NOT_CONVERGED for result in results):
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
