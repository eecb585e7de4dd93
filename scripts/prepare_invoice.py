#!/usr/bin/env python3
"""Prepare payment reminders for an invoice from the command line.

Reads invoice text from a file (or stdin) and prints the prepared result
as JSON, or a single email body with --email.

Usage:
    python scripts/prepare_invoice.py invoice.txt --today 2025-12-15
    cat invoice.txt | python scripts/prepare_invoice.py - --email firm
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from invoicechaser.mcp.protocol import format_validation_error
from invoicechaser.prepare.service import prepare

TONES = ("friendly", "neutral", "firm")


def read_invoice_text(source: str) -> str:
    """Read invoice text from a path, or stdin for '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Draft payment reminders from invoice text")
    parser.add_argument("source", help="Invoice text file, or '-' for stdin")
    parser.add_argument("--currency", help="Currency override (e.g. EUR)")
    parser.add_argument("--tone", choices=TONES, help="Preferred tone (all are generated)")
    parser.add_argument("--today", help="Reference date, ISO format (default: now)")
    parser.add_argument("--email", choices=TONES, help="Print only this email body")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        result = prepare(
            read_invoice_text(args.source),
            currency=args.currency,
            tone=args.tone,
            today=args.today,
        )
    except ValidationError as e:
        print(f"Invalid arguments: {format_validation_error(e)}", file=sys.stderr)
        return 2

    if args.email:
        print(getattr(result.follow_up_emails, args.email), end="")
    else:
        print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
