#!/usr/bin/env python3
"""
Catalog feed reconciliation.

Features:
- Collect the storefront feed with size filter tags (JSON)
- Reconcile a partner feed against the storefront and export the import CSV
- Post the export to Slack for the catalog team
- Sync the subscriber cohort spreadsheet with the user store

Usage:
    # Storefront feed with size tags
    feed-reconciler storefront --output data/feed.json

    # Partner export
    feed-reconciler partner --partner wantherdress --output output/export_wantherdress.csv

    # Cohort sheet sync
    feed-reconciler cohorts --users data/users.json
"""

import argparse
import asyncio
import logging
import os
import sys

from .cohorts import load_users, run_cohort_sync
from .common import load_reconciler_config, setup_logging
from .common.config_loader import PARTNER_STORE
from .notify import SlackNotifier
from .reconcile import GCSImageStore, run_partner_export, run_storefront_feed

logger = logging.getLogger(__name__)

TRUNCATED_WARNING = "  warning: a feed request failed, export may be incomplete"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-reconciler",
        description="Reconcile partner catalog feeds with the storefront",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect storefront feed
  feed-reconciler storefront --output data/feed.json

  # Export a partner feed without posting it to Slack
  feed-reconciler partner --partner bewearcy --output output/export_bewearcy.csv --no-notify

  # Sync cohorts
  feed-reconciler cohorts --users data/users.json
"""
    )
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='YAML config file (default: config/reconciler.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Warnings and errors only')

    sub = parser.add_subparsers(dest='command', required=True)

    storefront = sub.add_parser('storefront', help='Collect the storefront feed with size tags')
    storefront.add_argument('--output', '-o', type=str, default='data/feed.json',
                            help='Output JSON file (default: data/feed.json)')

    partner = sub.add_parser('partner', help='Export a partner feed for import')
    partner.add_argument('--partner', '-p', type=str, required=True,
                         help='Partner name from the config')
    partner.add_argument('--output', '-o', type=str, default=None,
                         help='Output CSV file (default: output/export_<partner>.csv)')
    partner.add_argument('--no-notify', action='store_true',
                         help='Do not post the export to Slack')

    cohorts = sub.add_parser('cohorts', help='Sync the cohort spreadsheet')
    cohorts.add_argument('--users', '-u', type=str, required=True,
                         help='User store export (JSON list)')

    return parser


def _require_store_token(config) -> None:
    if not config.store_auth_token:
        raise ValueError("STORE_AUTH_TOKEN is not set (see .env.example)")


def _run_storefront(config, args) -> int:
    _require_store_token(config)
    count, truncated = asyncio.run(run_storefront_feed(config, args.output))
    if count is None:
        return 1
    print(f"Storefront feed: {count} products -> {args.output}")
    if truncated:
        print(TRUNCATED_WARNING)
    return 0


def _run_partner(config, args) -> int:
    partner = config.get_partner(args.partner)
    _require_store_token(config)
    if partner.kind == PARTNER_STORE and not partner.auth_token:
        raise ValueError(f"No API token configured for partner {partner.name}")
    output = args.output or os.path.join('output', f'export_{partner.name}.csv')

    image_store = None
    if partner.rehost_images and config.image_bucket:
        image_store = GCSImageStore(config.image_bucket)

    notifier = None
    if not args.no_notify:
        if config.slack_token and config.slack_channel:
            notifier = SlackNotifier(config.slack_token, config.slack_channel)
        else:
            logger.warning("Slack token or channel not configured, skipping notification")

    result = asyncio.run(run_partner_export(
        config, partner.name, output, image_store=image_store, notifier=notifier,
    ))

    if not result.success:
        print(f"Error: export to {output} failed")
        return 1

    print(f"{partner.display_name}: {result.rows_written} rows -> {output}")
    if result.duplicates_dropped:
        print(f"  duplicates dropped: {result.duplicates_dropped}")
    if result.carried_over:
        print(f"  hidden (no longer in feed): {result.carried_over}")
    if result.feed_truncated:
        print(TRUNCATED_WARNING)
    return 0


def _run_cohorts(config, args) -> int:
    if not os.path.exists(args.users):
        print(f"Error: users file not found: {args.users}")
        return 1
    if not config.sheet.sheet_id:
        print("Error: cohorts.sheet_id is not configured")
        return 1

    users = load_users(args.users)
    return 0 if run_cohort_sync(config, users) else 1


COMMANDS = {
    'storefront': _run_storefront,
    'partner': _run_partner,
    'cohorts': _run_cohorts,
}


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = load_reconciler_config(args.config)
        return COMMANDS[args.command](config, args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
