#!/usr/bin/env python3
"""
main.py

Command-line control center for the Mailchimp audience client.

USAGE:
    python -m mailchimp_subscribe.main subscribe jane@example.com --interests "Membership:Free"
    python -m mailchimp_subscribe.main unsubscribe jane@example.com
    python -m mailchimp_subscribe.main tag jane@example.com VIP Webinar --create
    python -m mailchimp_subscribe.main untag jane@example.com Webinar
    python -m mailchimp_subscribe.main tags jane@example.com
    python -m mailchimp_subscribe.main interests
    python -m mailchimp_subscribe.main import contacts.csv --interests "Membership:Paid"
"""

import argparse
import csv
import json
import logging
import os
import sys
from collections import defaultdict
from typing import Dict, List, Optional

from tqdm import tqdm

from . import config
from .client import MailchimpSubscribe
from .errors import MailchimpSubscribeError

logger = logging.getLogger(__name__)


def setup_logging(level: str = None) -> None:
    """Log to logs/mailchimp_subscribe.log and the console"""
    level = (level or config.LOG_LEVEL).upper()
    os.makedirs(config.LOG_DIR, exist_ok=True)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.FileHandler(os.path.join(config.LOG_DIR, "mailchimp_subscribe.log")),
            logging.StreamHandler()
        ]
    )

    # Quiet noisy libs
    logging.getLogger("urllib3").setLevel(logging.INFO)
    logging.getLogger("requests").setLevel(logging.INFO)


def parse_merge_fields(pairs: Optional[List[str]]) -> Optional[Dict[str, str]]:
    """Turn ["FNAME=Jane", "LNAME=Doe"] into {"FNAME": "Jane", "LNAME": "Doe"}"""
    if not pairs:
        return None

    merge_fields = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Merge field must look like KEY=VALUE, got '{pair}'")
        merge_fields[key.strip().upper()] = value.strip()
    return merge_fields


def import_subscribers(client: MailchimpSubscribe, csv_path: str,
                       interests: str = None, list_id: str = None) -> Dict[str, List[str]]:
    """
    Subscribe every row of a CSV file with an "email" column.

    Other columns whose header is upper-case are sent as merge fields.
    Interests are resolved once and reused for every row.

    Returns:
        {"successful": [emails], "errors": [emails]}
    """
    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = [row for row in csv.DictReader(f) if (row.get("email") or "").strip()]

    resolved = client.parse_interests(interests, list_id=list_id) if interests else None

    stats = defaultdict(list)
    with tqdm(rows,
              desc="Subscribing contacts",
              unit="contact",
              ncols=80,
              leave=True) as bar:
        for row in bar:
            email = row["email"].strip()
            merge_fields = {k: v for k, v in row.items() if k and k.isupper() and v} or None
            try:
                client.subscribe(email, resolved, merge_fields, list_id=list_id)
                stats["successful"].append(email)
            except MailchimpSubscribeError as e:
                logger.warning(f"⚠️ Failed to subscribe {email}: {e}")
                stats["errors"].append(email)

    logger.info(f"Summary for {csv_path}:")
    logger.info(f"  • {len(stats['successful'])} successful subscriptions")
    if stats["errors"]:
        logger.info(f"  • {len(stats['errors'])} errors")
    return dict(stats)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mailchimp audience client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--list-id", default=None,
                        help="Mailchimp audience id (defaults to MAILCHIMP_LIST_ID)")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    commands = parser.add_subparsers(dest="command", required=True)

    sub = commands.add_parser("subscribe", help="Subscribe or update a member")
    sub.add_argument("email")
    sub.add_argument("--interests", help='Interest spec, e.g. "Membership:Free,Topics:News:Sport"')
    sub.add_argument("--merge", nargs="*", metavar="KEY=VALUE", help="Merge fields")

    unsub = commands.add_parser("unsubscribe", help="Unsubscribe a member")
    unsub.add_argument("email")

    tag = commands.add_parser("tag", help="Add tags to a member")
    tag.add_argument("email")
    tag.add_argument("names", nargs="+")
    tag.add_argument("--create", action="store_true", help="Create tags that do not exist yet")

    untag = commands.add_parser("untag", help="Remove tags from a member")
    untag.add_argument("email")
    untag.add_argument("names", nargs="+")

    tags = commands.add_parser("tags", help="Show a member's tags")
    tags.add_argument("email")

    commands.add_parser("interests", help="Show every interest of the audience")

    imp = commands.add_parser("import", help="Bulk subscribe from a CSV file")
    imp.add_argument("csv_path")
    imp.add_argument("--interests", help="Interest spec applied to every row")

    return parser


def run(args: argparse.Namespace, client: MailchimpSubscribe) -> int:
    """Execute one parsed command, returning the process exit code"""
    list_id = args.list_id

    if args.command == "subscribe":
        result = client.subscribe(args.email, args.interests, parse_merge_fields(args.merge), list_id=list_id)
        print(f"✅ {result.get('email_address', args.email)} is {result.get('status', 'subscribed')}")
    elif args.command == "unsubscribe":
        client.unsubscribe(args.email, list_id=list_id)
        print(f"✅ {args.email} unsubscribed")
    elif args.command == "tag":
        result = client.assign_tags_to_user(args.email, args.names, args.create, list_id=list_id)
        print(f"🏷️ Tagged {args.email}: {len(result['updated'])} existing, {len(result['created'])} created")
    elif args.command == "untag":
        removed = client.remove_tags(args.email, args.names, list_id=list_id)
        print(f"🧹 Removed {args.email} from {len(removed)} tag(s)")
    elif args.command == "tags":
        for name in client.get_tags_by_user(args.email, list_id=list_id):
            print(name)
    elif args.command == "interests":
        print(json.dumps(client.list_all_interests(list_id), indent=2))
    elif args.command == "import":
        stats = import_subscribers(client, args.csv_path, args.interests, list_id=list_id)
        return 1 if stats.get("errors") else 0
    return 0


def main(argv: List[str] = None) -> int:
    """Main execution function"""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        client = MailchimpSubscribe(list_id=args.list_id)
        return run(args, client)
    except (MailchimpSubscribeError, ValueError) as e:
        logger.error(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
