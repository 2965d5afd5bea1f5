"""Headless attendance client: run one session, or replay parked uploads.

    classroom-attendance-client --subject Physics --section 1 --source webcam
    classroom-attendance-client --retry-pending
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ..common.logging_setup import configure_logging
from ..config import load_settings
from ..core.enums import VideoSourceKind
from ..core.exceptions import AuthenticationError, DomainError, SubmissionFailed
from .container import ClientContainer, build_client

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="classroom-attendance-client", description=__doc__.splitlines()[0])
    parser.add_argument("--subject", help="Subject being taught")
    parser.add_argument("--section", help="Section id (see SECTIONS)")
    parser.add_argument(
        "--source",
        choices=[k.value for k in VideoSourceKind],
        default=VideoSourceKind.WEBCAM.value,
        help="Video source to sample",
    )
    parser.add_argument("--username", help="Login name (skipped when omitted)")
    parser.add_argument("--password", default="", help="Login password")
    parser.add_argument("--retry-pending", action="store_true", help="Upload locally saved sessions and exit")
    return parser


def retry_pending(client: ClientContainer) -> int:
    outcomes = client.sync.retry_pending()
    if not outcomes:
        print("No pending sessions.")
        return 0

    for outcome in outcomes:
        if outcome.ok:
            summary = outcome.result.summary
            print(f"{outcome.session_id}: uploaded ({summary.successful}/{summary.total} students)")
        else:
            print(f"{outcome.session_id}: still pending ({outcome.error})")
    return 0 if all(o.ok for o in outcomes) else 1


def print_records(client: ClientContainer) -> None:
    controller = client.controller
    summary = controller.summary()
    print(
        f"Captures {summary.capture_count}/{summary.total_captures} | "
        f"present {summary.present} | partial {summary.partial} | absent {summary.absent} | total {summary.total}"
    )
    for record in controller.ordered_records():
        print(f"  {record.name:<24} {record.id_number:<14} {record.detection_count:>2}  {record.status.value}")


async def run_session(client: ClientContainer, *, subject: str, section_id: str, source: str) -> int:
    controller = client.controller

    try:
        client.roster.load()
        await controller.select_source(source)
        controller.start(subject, section_id)
    except DomainError as e:
        print(f"Cannot start session: {e}", file=sys.stderr)
        controller.logout()
        return 2

    try:
        await controller.wait_ended()
    except asyncio.CancelledError:
        # Ctrl+C ends the session early; what was captured so far is still uploaded.
        logger.info("Interrupted, ending session")
        controller.end()

    print_records(client)
    try:
        result = await controller.upload()
    except SubmissionFailed as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        controller.logout()

    print(f"Uploaded: {result.summary.successful}/{result.summary.total} students processed")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    client = build_client(settings)
    if args.retry_pending:
        return retry_pending(client)

    if not args.subject or not args.section:
        print("--subject and --section are required to run a session", file=sys.stderr)
        return 2

    if args.username:
        try:
            client.auth.login(args.username, args.password)
        except AuthenticationError as e:
            print(str(e), file=sys.stderr)
            return 2

    return asyncio.run(run_session(client, subject=args.subject, section_id=args.section, source=args.source))


if __name__ == "__main__":
    sys.exit(main())
