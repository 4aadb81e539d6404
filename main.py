"""Trading journal command line entry point."""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from tradejournal.app import Application
from tradejournal.config import Settings, load_settings
from tradejournal.errors import (
    InvalidStateError,
    JournalError,
    NotFoundError,
)
from tradejournal.monitor.logger import LogContext
from tradejournal.networth.types import TransactionType
from tradejournal.platforms.service import UNKNOWN_PLATFORM
from tradejournal.trades.types import (
    Direction,
    JournalType,
    OpenTradeRequest,
    TradeStatus,
    TradeType,
)

EXIT_OK = 0
EXIT_VALIDATION = 1
EXIT_NOT_FOUND = 2
EXIT_INVALID_STATE = 3


def _datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO date: {value}")


def _tags(value: str) -> list[str]:
    return [t for t in value.split(",") if t.strip()]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Trading journal")

    parser.add_argument("--db", type=str, default=None, help="Database path (default: from config)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: from config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    def command(name: str, help: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help)
        p.add_argument("--user", required=True, help="Owner id of the journal")
        return p

    def journal_option(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--journal",
            choices=[j.value for j in JournalType],
            default=None,
            help="Journal type (default: from config)",
        )

    p = command("platform-add", "Register a trading platform")
    p.add_argument("--name", required=True)
    p.add_argument("--type", required=True, help="exchange, broker or wallet")
    p.add_argument("--currency", default=None)

    command("platforms", "List platforms")

    p = command("platform-update", "Rename or retype a platform")
    p.add_argument("platform_id")
    p.add_argument("--name", default=None)
    p.add_argument("--type", default=None, help="exchange, broker or wallet")
    p.add_argument("--currency", default=None)

    p = command("platform-delete", "Delete a platform (its trades are kept)")
    p.add_argument("platform_id")

    p = command("open", "Open a trade")
    journal_option(p)
    p.add_argument("--platform", required=True)
    p.add_argument("--symbol", required=True)
    p.add_argument("--direction", choices=[d.value for d in Direction], required=True)
    p.add_argument("--trade-type", choices=[t.value for t in TradeType], default=TradeType.SPOT.value)
    p.add_argument("--entry-price", type=float, required=True)
    p.add_argument("--size", type=float, required=True)
    p.add_argument("--entry-date", type=_datetime, default=None, help="ISO date (default: now)")
    p.add_argument("--currency", default=None)
    p.add_argument("--leverage", type=float, default=None)
    p.add_argument("--fee", type=float, default=0.0)
    for i in range(1, 6):
        p.add_argument(f"--tp{i}", type=float, default=None)
    p.add_argument("--stop-loss", type=float, default=None)
    p.add_argument("--notes", default=None)
    p.add_argument("--tags", type=_tags, default=[], help="Comma separated")

    p = command("close", "Close a running trade")
    p.add_argument("trade_id")
    p.add_argument("--exit-price", type=float, required=True)
    p.add_argument("--exit-date", type=_datetime, default=None, help="ISO date (default: now)")

    p = command("trades", "List trades, newest entry first")
    journal_option(p)
    p.add_argument("--trade-type", choices=[t.value for t in TradeType], default=None)
    p.add_argument("--status", choices=[s.value for s in TradeStatus], default=None)

    p = command("notes", "Replace a trade's notes and/or tags")
    p.add_argument("trade_id")
    p.add_argument("--notes", default=None)
    p.add_argument("--tags", type=_tags, default=None, help="Comma separated")

    p = command("delete", "Delete a trade")
    p.add_argument("trade_id")

    p = command("calendar", "Daily summaries, newest first")
    journal_option(p)
    p.add_argument("--limit", type=int, default=None)

    p = command("analytics", "Performance report over closed trades")
    journal_option(p)

    for kind in TransactionType:
        p = command(kind.value, f"Record a {kind.value} on a platform")
        p.add_argument("--platform", required=True)
        if kind == TransactionType.TRANSFER:
            p.add_argument("--to-platform", required=True)
        p.add_argument("--amount", type=float, required=True)
        p.add_argument("--currency", default=None, help="Default: the platform's currency")
        p.add_argument("--date", type=_datetime, default=None, help="ISO date (default: now)")
        p.add_argument("--description", default=None)

    command("transactions", "List deposits, withdrawals and transfers, newest first")

    p = command("transaction-delete", "Delete a transaction")
    p.add_argument("transaction_id")

    command("networth", "Platform balances and total net worth in USD and IDR")

    p = command("convert", "Convert an amount between currencies")
    p.add_argument("amount", type=float)
    p.add_argument("from_currency")
    p.add_argument("to_currency")

    return parser.parse_args(argv)


def apply_args_to_settings(args: argparse.Namespace, settings: Settings) -> Settings:
    """Apply command line arguments to settings."""
    if args.db:
        settings.database.path = Path(args.db)

    if args.log_level:
        settings.logging.level = args.log_level

    return settings


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def _render(value: Any) -> str:
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    elif isinstance(value, list):
        value = [asdict(v) if is_dataclass(v) else v for v in value]
    elif is_dataclass(value):
        value = asdict(value)
    return json.dumps(value, default=_json_default, ensure_ascii=False, indent=2)


def exit_code_for(error: JournalError) -> int:
    """Map a domain error to a process exit status."""
    if isinstance(error, NotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(error, InvalidStateError):
        return EXIT_INVALID_STATE
    # ValidationError and anything unclassified
    return EXIT_VALIDATION


def _fail(error: JournalError) -> int:
    print(json.dumps({"error": error.code, "message": error.message}), file=sys.stderr)
    return exit_code_for(error)


async def run_command(app: Application, args: argparse.Namespace) -> int:
    """Dispatch one subcommand. Prints JSON on success."""
    owner = args.user
    journal = JournalType(
        getattr(args, "journal", None) or app.settings.journal.default_journal_type
    )

    if args.command == "platform-add":
        result = await app.platforms.create_platform(owner, args.name, args.type, args.currency)
        if not result.ok:
            return _fail(result.error)
        print(_render(result.platform))

    elif args.command == "platforms":
        result = await app.platforms.list_platforms(owner)
        print(_render(result.platforms))

    elif args.command == "platform-update":
        result = await app.platforms.update_platform(
            owner, args.platform_id, args.name, args.type, args.currency
        )
        if not result.ok:
            return _fail(result.error)
        print(_render(result.platform))

    elif args.command == "platform-delete":
        result = await app.platforms.delete_platform(owner, args.platform_id)
        if not result.ok:
            return _fail(result.error)
        print(_render({"deleted": args.platform_id}))

    elif args.command == "open":
        request = OpenTradeRequest(
            platform_id=args.platform,
            symbol=args.symbol,
            entry_price=args.entry_price,
            size=args.size,
            direction=Direction(args.direction),
            entry_date=args.entry_date or datetime.now(),
            journal_type=journal,
            trade_type=TradeType(args.trade_type),
            currency=args.currency,
            leverage=args.leverage,
            fee=args.fee,
            tp1=args.tp1,
            tp2=args.tp2,
            tp3=args.tp3,
            tp4=args.tp4,
            tp5=args.tp5,
            stop_loss=args.stop_loss,
            notes=args.notes,
            tags=args.tags,
        )
        result = await app.trades.open_trade(owner, request)
        if not result.ok:
            return _fail(result.error)
        print(_render(result.trade))

    elif args.command == "close":
        result = await app.trades.close_trade(owner, args.trade_id, args.exit_price, args.exit_date)
        if not result.ok:
            return _fail(result.error)
        print(_render({"trade": asdict(result.trade), "summary": asdict(result.summary)}))

    elif args.command == "trades":
        result = await app.trades.list_trades(
            owner,
            journal_type=journal,
            trade_type=TradeType(args.trade_type) if args.trade_type else None,
            status=TradeStatus(args.status) if args.status else None,
        )
        print(_render(result.trades))

    elif args.command == "notes":
        result = await app.trades.update_notes(owner, args.trade_id, args.notes, args.tags)
        if not result.ok:
            return _fail(result.error)
        print(_render(result.trade))

    elif args.command == "delete":
        result = await app.trades.delete_trade(owner, args.trade_id)
        if not result.ok:
            return _fail(result.error)
        print(_render({"deleted": result.trade.trade_id}))

    elif args.command == "calendar":
        summaries = await app.summaries.list_summaries(owner, journal, args.limit)
        print(_render(summaries))

    elif args.command == "analytics":
        report = await app.analytics.build_report(owner, journal)
        print(_render(report))

    elif args.command in {t.value for t in TransactionType}:
        result = await app.networth.add_transaction(
            owner,
            args.command,
            args.platform,
            args.amount,
            currency=args.currency,
            date=args.date,
            to_platform_id=getattr(args, "to_platform", None),
            description=args.description,
        )
        if not result.ok:
            return _fail(result.error)
        print(_render(result.transaction))

    elif args.command == "transactions":
        result = await app.networth.list_transactions(owner)
        names = result.platform_names
        rows = []
        for tx in result.transactions:
            row = asdict(tx)
            row["platform_name"] = names.get(tx.platform_id, UNKNOWN_PLATFORM)
            if tx.to_platform_id:
                row["to_platform_name"] = names.get(tx.to_platform_id, UNKNOWN_PLATFORM)
            rows.append(row)
        print(_render(rows))

    elif args.command == "transaction-delete":
        result = await app.networth.delete_transaction(owner, args.transaction_id)
        if not result.ok:
            return _fail(result.error)
        print(_render({"deleted": args.transaction_id}))

    elif args.command == "networth":
        result = await app.networth.net_worth(owner)
        print(_render(result.net_worth))

    elif args.command == "convert":
        converted = await app.currency.convert(args.amount, args.from_currency, args.to_currency)
        print(_render({
            "original": {"amount": args.amount, "currency": args.from_currency.upper()},
            "converted": {"amount": converted, "currency": args.to_currency.upper()},
        }))

    return EXIT_OK


async def async_main(settings: Settings, args: argparse.Namespace) -> int:
    """Async main entry point."""
    async with Application(settings) as app:
        with LogContext(args.user, command=args.command):
            return await run_command(app, args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    settings = load_settings()
    settings = apply_args_to_settings(args, settings)

    return asyncio.run(async_main(settings, args))


if __name__ == "__main__":
    sys.exit(main())
