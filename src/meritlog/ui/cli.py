# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import os
import sys
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from meritlog.adapters.api import serialize_claim
from meritlog.adapters.identity import JwtIdentityProvider, issue_token
from meritlog.app import (
    build_http_gateway,
    build_local_gateway,
    list_achievements,
    review_achievement,
    submit_achievement,
)
from meritlog.config import ConfigurationError, configure_logging, get_identity_config
from meritlog.domain.errors import MeritlogError, ValidationError
from meritlog.domain.model import Actor, ClaimStatus, Role
from meritlog.domain.review import parse_decision
from meritlog.domain.submission import EvidenceUpload, SubmissionRequest
from meritlog.ui.dashboard import ActorSession, Dashboard

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from meritlog.domain.model import AchievementClaim
    from meritlog.domain.notifications import Notification
    from meritlog.domain.ports import ClaimGateway

log = logging.getLogger(__name__)

TOKEN_ENV_VAR = "MERITLOG_TOKEN"
EXIT_USAGE = 2
EXIT_CONFLICT = 3
_DEFAULT_MIME_TYPE = "application/octet-stream"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Submit, review and watch achievement claims")
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help=f"Bearer credential (defaults to ${TOKEN_ENV_VAR})",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Talk to a remote claims API instead of the local store",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Submit an achievement for verification")
    submit.add_argument("--title", type=str, required=True)
    submit.add_argument("--description", type=str, required=True)
    submit.add_argument("--date", type=str, required=True, help="Date of the achievement")
    submit.add_argument(
        "--category",
        type=str,
        help="academic, extracurricular, certification, project, award or other",
    )
    submit.add_argument(
        "--evidence",
        type=Path,
        action="append",
        default=[],
        help="Evidence file to attach (repeatable)",
    )

    listing = subparsers.add_parser("list", help="List the claims visible to you")
    listing.add_argument(
        "--status",
        type=str,
        choices=[status.value for status in ClaimStatus],
        help="Only list claims in this status",
    )

    review = subparsers.add_parser("review", help="Verify or reject a pending claim")
    review.add_argument("claim_id", type=str, help="Claim id")
    review.add_argument("decision", type=str, help="verify or reject")
    review.add_argument("--comments", type=str, help="Optional review comments")

    watch = subparsers.add_parser("watch", help="Poll your dashboard and log notifications")
    watch.add_argument(
        "--ticks",
        type=int,
        help="Stop after this many reconciliation ticks (default: run until interrupted)",
    )

    token = subparsers.add_parser("token", help="Issue a development bearer token")
    token.add_argument("--actor-id", type=str, required=True)
    token.add_argument(
        "--role",
        type=str,
        required=True,
        choices=[role.value for role in Role],
    )
    token.add_argument("--institution", type=str, default="")
    token.add_argument("--name", type=str, default="")
    token.add_argument("--email", type=str, default="")
    token.add_argument("--hours", type=float, default=24.0, help="Token lifetime in hours")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid claim id: {value}") from exc


def _resolve_credential(args: argparse.Namespace) -> str | None:
    return args.token or os.getenv(TOKEN_ENV_VAR)


def _read_evidence(paths: Sequence[Path]) -> tuple[EvidenceUpload, ...]:
    uploads: list[EvidenceUpload] = []
    for path in paths:
        mime_type, _ = mimetypes.guess_type(path.name)
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise ValueError(f"Cannot read evidence file {path}: {exc}") from exc
        uploads.append(
            EvidenceUpload(
                original_name=path.name,
                mime_type=mime_type or _DEFAULT_MIME_TYPE,
                content=content,
            )
        )
    return tuple(uploads)


def _build_submission(args: argparse.Namespace) -> SubmissionRequest:
    return SubmissionRequest(
        title=args.title,
        description=args.description,
        date=args.date,
        category=args.category,
        evidence=_read_evidence(args.evidence),
    )


def _print_claims(claims: Sequence[AchievementClaim]) -> None:
    print(json.dumps([serialize_claim(claim) for claim in claims], indent=2))


def _print_claim(claim: AchievementClaim) -> None:
    print(json.dumps(serialize_claim(claim), indent=2))


def _issue_token(args: argparse.Namespace) -> str:
    if args.hours <= 0:
        raise ValueError("Token lifetime must be positive")
    actor = Actor(
        actor_id=args.actor_id,
        role=Role(args.role),
        institution=args.institution,
        display_name=args.name,
        email=args.email,
    )
    return issue_token(get_identity_config(), actor, lifetime=timedelta(hours=args.hours))


async def _run_remote(args: argparse.Namespace, credential: str) -> int:
    async with build_http_gateway(credential, base_url=args.api_url) as gateway:
        if args.command == "submit":
            _print_claim(await gateway.submit(_build_submission(args)))
        elif args.command == "list":
            status = ClaimStatus(args.status) if args.status else None
            _print_claims(await gateway.list_claims(status))
        elif args.command == "review":
            outcome = await gateway.review(
                _parse_uuid(args.claim_id),
                parse_decision(args.decision),
                args.comments,
            )
            _print_claim(outcome.claim)
            if outcome.conflict:
                log.warning("Claim was already %s", outcome.claim.status.value)
                return EXIT_CONFLICT
        elif args.command == "watch":
            session = ActorSession(JwtIdentityProvider())
            session.login(credential)
            await _watch(session, gateway, ticks=args.ticks)
        else:
            raise ValueError(f"Unsupported command: {args.command}")
    return 0


def _run_local(args: argparse.Namespace, credential: str | None) -> int:
    if args.command == "submit":
        _print_claim(submit_achievement(credential, _build_submission(args)))
    elif args.command == "list":
        status = ClaimStatus(args.status) if args.status else None
        _print_claims(list_achievements(credential, status).claims)
    elif args.command == "review":
        outcome = review_achievement(
            credential,
            _parse_uuid(args.claim_id),
            parse_decision(args.decision),
            args.comments,
        )
        _print_claim(outcome.claim)
        if outcome.conflict:
            return EXIT_CONFLICT
    elif args.command == "watch":
        session = ActorSession(JwtIdentityProvider())
        actor = session.login(credential or "")
        asyncio.run(_watch(session, build_local_gateway(actor), ticks=args.ticks))
    else:
        raise ValueError(f"Unsupported command: {args.command}")
    return 0


def _log_notification(notification: Notification) -> None:
    log.info("[%s] %s", notification.level.value, notification.message)


async def _watch(session: ActorSession, gateway: ClaimGateway, *, ticks: int | None) -> None:
    dashboard = Dashboard(session, gateway, on_notification=_log_notification)
    if ticks is None:
        async with dashboard:
            await asyncio.Event().wait()
        return
    try:
        for index in range(ticks):
            if index:
                await asyncio.sleep(dashboard.loop.interval)
            await dashboard.refresh()
            log.info("Showing %d claims", len(dashboard.listing.claims))
    finally:
        await dashboard.logout()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "token":
            print(_issue_token(parsed_args))
            return
        credential = _resolve_credential(parsed_args)
        if parsed_args.api_url:
            if not credential:
                raise ValueError(f"Missing --token or ${TOKEN_ENV_VAR}")  # noqa: TRY301
            exit_code = asyncio.run(_run_remote(parsed_args, credential))
        else:
            exit_code = _run_local(parsed_args, credential)
    except ValidationError as exc:
        for field_name, message in sorted(exc.fields.items()):
            log.error("%s: %s", field_name, message)  # noqa: TRY400
        sys.exit(EXIT_USAGE)
    except ValueError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(EXIT_USAGE)
    except (MeritlogError, ConfigurationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
