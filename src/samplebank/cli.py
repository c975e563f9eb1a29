"""CLI entrypoint for the Sample-Bank service."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from samplebank.api.accounts_api import get_account, list_accounts
from samplebank.api.events_api import events_metadata, list_events, list_events_by_category
from samplebank.api.transactions_api import list_transactions
from samplebank.capabilities import MalformedQuery
from samplebank.config.loader import get_sqlite_path, load_config
from samplebank.database.sqlite_client import get_engine, session_context
from samplebank.runners.seed_demo import seed_demo
from samplebank.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_BAD_REQUEST = 2
EXIT_NOT_FOUND = 3


def _config(args: argparse.Namespace) -> Dict[str, Any]:
    config = load_config(Path(args.config) if args.config else None)
    if not args.log_level:
        configure_logging(config.get("logging", {}).get("level"))
    return config


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False))


def _not_found(what: str) -> None:
    print(f"Error: {what} not found", file=sys.stderr)
    sys.exit(EXIT_NOT_FOUND)


def _split_account(account: str) -> tuple[str, str]:
    """Split '<regNo>-<accountNo>' into its parts."""
    reg_no, sep, account_no = account.partition("-")
    if not sep or not reg_no or not account_no:
        raise ValueError(f"Account must look like <regNo>-<accountNo>, got {account!r}")
    return reg_no, account_no


def cmd_init(args: argparse.Namespace) -> None:
    """Create the database schema."""
    config = _config(args)
    sqlite_path = get_sqlite_path(config)
    get_engine(sqlite_path)
    logger.info(f"Database ready at {sqlite_path}")


def cmd_demo(args: argparse.Namespace) -> None:
    """Seed demo accounts, transactions and events."""
    config = _config(args)
    sqlite_path = get_sqlite_path(config)
    with session_context(sqlite_path) as session:
        counts = seed_demo(session)
        session.commit()
    logger.info(f"Seeded {counts['accounts']} accounts and {counts['transactions']} transactions")


def cmd_accounts_list(args: argparse.Namespace) -> None:
    config = _config(args)
    with session_context(get_sqlite_path(config)) as session:
        result = list_accounts(
            session,
            select=args.select,
            sort=args.sort,
            elements=args.elements,
            filter=args.filter,
            embed=args.embed,
            config=config,
        )
    _print_json(result)


def cmd_accounts_get(args: argparse.Namespace) -> None:
    config = _config(args)
    reg_no, account_no = _split_account(args.account)
    with session_context(get_sqlite_path(config)) as session:
        result = get_account(session, reg_no, account_no, filter=args.filter, embed=args.embed)
    if result is None:
        _not_found(f"Account {args.account}")
    _print_json(result)


def cmd_transactions_list(args: argparse.Namespace) -> None:
    config = _config(args)
    reg_no, account_no = _split_account(args.account)
    with session_context(get_sqlite_path(config)) as session:
        result = list_transactions(
            session,
            reg_no,
            account_no,
            select=args.select,
            sort=args.sort,
            interval=args.interval,
            elements=args.elements,
            config=config,
        )
    if result is None:
        _not_found(f"Account {args.account}")
    _print_json(result)


def cmd_events_list(args: argparse.Namespace) -> None:
    config = _config(args)
    if args.metadata:
        _print_json(events_metadata())
        return
    with session_context(get_sqlite_path(config)) as session:
        if args.category:
            result = list_events_by_category(
                session,
                args.category,
                sort=args.sort,
                interval=args.interval,
                elements=args.elements,
                config=config,
            )
        else:
            result = list_events(
                session,
                sort=args.sort,
                interval=args.interval,
                elements=args.elements,
                config=config,
            )
    _print_json(result)


def _add_capability_args(parser: argparse.ArgumentParser, *names: str) -> None:
    helps = {
        "select": 'Selection, e.g. "balance::100+|balance::1000-"',
        "sort": 'Sorting, e.g. "balance|lastUpdate-"',
        "interval": 'Temporal window, e.g. "from::-14d|to::now"',
        "elements": 'Inclusive element range, e.g. "10|30" (max 500)',
        "filter": 'Projection, e.g. "balance::+|name::+"',
        "embed": 'Related objects, e.g. "transaction::list"',
    }
    for name in names:
        parser.add_argument(f"--{name}", type=str, default=None, help=helps[name])


def main() -> None:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        prog="samplebank",
        description="Sample-Bank service with select/sort/interval/elements/filter/embed capabilities",
    )
    parser.add_argument("--config", type=str, help="Path to samplebank.config.yaml")
    parser.add_argument("--log-level", type=str, help="Log level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Create the database schema")
    init_parser.set_defaults(func=cmd_init)

    demo_parser = subparsers.add_parser("demo", help="Seed demo accounts and transactions")
    demo_parser.set_defaults(func=cmd_demo)

    # accounts command
    accounts_parser = subparsers.add_parser("accounts", help="Account queries")
    accounts_subparsers = accounts_parser.add_subparsers(dest="accounts_subcommand", required=True)
    accounts_list_parser = accounts_subparsers.add_parser("list", help="List accounts")
    _add_capability_args(accounts_list_parser, "select", "sort", "elements", "filter", "embed")
    accounts_list_parser.set_defaults(func=cmd_accounts_list)
    accounts_get_parser = accounts_subparsers.add_parser("get", help="Show one account")
    accounts_get_parser.add_argument("account", help="<regNo>-<accountNo>")
    _add_capability_args(accounts_get_parser, "filter", "embed")
    accounts_get_parser.set_defaults(func=cmd_accounts_get)

    # transactions command
    tx_parser = subparsers.add_parser("transactions", help="Transaction queries")
    tx_subparsers = tx_parser.add_subparsers(dest="transactions_subcommand", required=True)
    tx_list_parser = tx_subparsers.add_parser("list", help="List an account's transactions")
    tx_list_parser.add_argument("account", help="<regNo>-<accountNo>")
    _add_capability_args(tx_list_parser, "select", "sort", "interval", "elements")
    tx_list_parser.set_defaults(func=cmd_transactions_list)

    # events command
    events_parser = subparsers.add_parser("events", help="Event queries")
    events_subparsers = events_parser.add_subparsers(dest="events_subcommand", required=True)
    events_list_parser = events_subparsers.add_parser("list", help="List events")
    events_list_parser.add_argument("--category", type=str, help="Only events of this category")
    events_list_parser.add_argument("--metadata", action="store_true", help="Show events metadata instead")
    _add_capability_args(events_list_parser, "sort", "interval", "elements")
    events_list_parser.set_defaults(func=cmd_events_list)

    args = parser.parse_args()
    if args.log_level:
        configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except MalformedQuery as e:
        logger.error(f"Malformed query: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_BAD_REQUEST)
    except ValueError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
