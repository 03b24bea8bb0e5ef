"""
Command-line inspection of a barter exchange store.

Reads the store configured through the environment (STORAGE_TYPE,
STORE_BASE_DIR, REDIS_URL, ...) and prints trust scores, barter requests
or notifications for a user.
"""

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from barter_exchange.config import get_app_settings
from barter_exchange.error_handling import BarterExchangeError
from barter_exchange.models import BarterRequest, Notification, TrustScoreBreakdown
from barter_exchange.negotiation import BarterService
from barter_exchange.notifications import NotificationService
from barter_exchange.store import create_store
from barter_exchange.trust import TrustScoreEngine


logger = logging.getLogger(__name__)


def format_trust_score(user_id: str, score: TrustScoreBreakdown) -> str:
    """
    Format a trust score breakdown for console output.

    Args:
        user_id: Scored user
        score: Breakdown to format

    Returns:
        Multi-line string
    """
    lines = [f"Trust score for {user_id}: {score.total}/100"]
    for name in ("verification", "endorsement", "reputation", "dispute", "behavior"):
        lines.append(f"   {name.capitalize():<13} {getattr(score, name):>3}")
    return "\n".join(lines)


def format_request(request: BarterRequest, viewer_id: str) -> str:
    """Format one barter request from the viewer's side."""
    role = "owner" if request.owner_id == viewer_id else "requester"
    lines = [
        f"🔁 {request.listing.title} [{request.status.value}]",
        f"   ID: {request.id}",
        f"   {request.requester_name} offers: {request.offer_description}",
        f"   You are the {role}",
    ]

    own_code = request.owner_confirmation_code if role == "owner" else request.requester_confirmation_code
    if own_code and request.status.value == "both_accepted":
        lines.append(f"   Your confirmation code: {own_code}")
    if request.chat_messages:
        lines.append(f"   Chat messages: {len(request.chat_messages)}")
    if request.completed_at:
        lines.append(f"   Completed: {request.completed_at.isoformat()}")

    lines.append("")
    return "\n".join(lines)


def format_notifications(notifications: List[Notification]) -> str:
    if not notifications:
        return "No notifications."
    lines = []
    for n in notifications:
        marker = " " if n.is_read else "*"
        lines.append(f"{marker} {n.created_at:%Y-%m-%d %H:%M} {n.title}: {n.message}")
    return "\n".join(lines)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Inspect barter exchange data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s trust u123
  %(prog)s requests u123
  %(prog)s notifications u123 --unread
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    trust = subparsers.add_parser('trust', help='Show a trust score breakdown')
    trust.add_argument('user_id')

    requests = subparsers.add_parser('requests', help='List barter requests for a user')
    requests.add_argument('user_id')

    notifications = subparsers.add_parser('notifications', help='List notifications for a user')
    notifications.add_argument('user_id')
    notifications.add_argument('--unread', action='store_true', help='Only unread notifications')

    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> str:
    settings = get_app_settings()
    store = create_store(settings.store)

    if args.command == 'trust':
        score = TrustScoreEngine(store).calculate(args.user_id)
        return format_trust_score(args.user_id, score)

    if args.command == 'requests':
        service = BarterService(store, settings=settings)
        made = await service.get_my_requests(args.user_id)
        received = await service.get_requests_for_my_listings(args.user_id)
        if not made and not received:
            return "No barter requests."
        parts = []
        if made:
            parts.append(f"Requests made ({len(made)}):\n")
            parts.extend(format_request(r, args.user_id) for r in made)
        if received:
            parts.append(f"Requests received ({len(received)}):\n")
            parts.extend(format_request(r, args.user_id) for r in received)
        return "\n".join(parts)

    notifications = NotificationService(store).get_notifications(args.user_id, unread_only=args.unread)
    return format_notifications(notifications)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI."""
    load_dotenv()
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        print(asyncio.run(run(args)))
    except BarterExchangeError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
