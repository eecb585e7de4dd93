"""Deterministic field extractors for free-form invoice text.

Each extractor is an independent pure function: it scans the raw text and
returns a normalized value or None. None of them raise on odd input
(binary-looking or very long text included), and none depend on the
result of another.

Patterns run in ASCII mode so that digit classes and word boundaries behave
the same regardless of the scripts present in the text. Whitespace is the
exception: text pasted from PDFs or HTML often separates labels with
no-break spaces, so separators match any Unicode whitespace.
"""

import re

from invoicechaser.extraction.schema import ExtractionResult

VENDOR_MAX_LENGTH = 120

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "INR", "AUD", "CAD")

_FLAGS = re.IGNORECASE | re.ASCII

# Any Unicode whitespace (U+00A0 included) inside an ASCII-mode pattern.
_WS = r"(?u:\s)"

_LINE_BREAK = re.compile(r"\r?\n")
_INVOICE_LABEL_LINE = re.compile(r"^invoice\b", _FLAGS)

# "Invoice", "Invoice No.", "Invoice #", "Invoice Number", "Inv", "Inv No.", "Inv #".
# Whitespace runs are possessive so long blank stretches stay linear.
_INVOICE_NUMBER = re.compile(
    rf"\b(?:invoice{_WS}*+(?:no\.|#|number)?|inv{_WS}*+(?:no\.|#)?)"
    rf"{_WS}*+[:#]?{_WS}*+([A-Za-z0-9-]+)\b",
    _FLAGS,
)

_ISO_DATE = re.compile(r"\b(20\d{2}-\d{2}-\d{2})\b", re.ASCII)
_US_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(20\d{2})\b", re.ASCII)

_CURRENCY = re.compile(rf"\b({'|'.join(SUPPORTED_CURRENCIES)})\b", _FLAGS)
# 1,234.56 | 1234.56 | 1234
_AMOUNT = re.compile(r"\b(\d{1,3}(?:,\d{3})*(?:\.\d{2})?|\d+(?:\.\d{2})?)\b", re.ASCII)

_NET_TERMS = re.compile(rf"\bnet{_WS}*([0-9]{{1,3}})\b", _FLAGS)
_DUE_ON_RECEIPT = re.compile(rf"\bdue{_WS}+on{_WS}+receipt\b", _FLAGS)


def extract_vendor(text: str) -> str | None:
    """Return the first non-blank line unless it is an invoice label line."""
    for line in _LINE_BREAK.split(text):
        first_line = line.strip()
        if not first_line:
            continue
        if _INVOICE_LABEL_LINE.match(first_line):
            return None
        return first_line[:VENDOR_MAX_LENGTH]
    return None


def extract_invoice_number(text: str) -> str | None:
    """Return the token following the first invoice label."""
    match = _INVOICE_NUMBER.search(text)
    return match.group(1) if match else None


def extract_due_date(text: str) -> str | None:
    """Return the first ISO date, else the first US date, as YYYY-MM-DD.

    The result is textual only: a calendar-invalid value such as
    2025-02-30 is returned as is; overdue arithmetic rolls the extra days
    into the following month.
    """
    iso = _ISO_DATE.search(text)
    if iso:
        return iso.group(1)

    us = _US_DATE.search(text)
    if us:
        month, day, year = us.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return None


def extract_currency(text: str) -> str | None:
    """Return the first whitelisted currency code, uppercased."""
    match = _CURRENCY.search(text)
    return match.group(1).upper() if match else None


def extract_amount(text: str) -> str | None:
    """Return the first numeric token with grouping commas stripped.

    Not anchored to a "Total" label: the first qualifying number in the
    text wins, even when it belongs to an invoice number or a date.
    """
    match = _AMOUNT.search(text)
    return match.group(1).replace(",", "") if match else None


def extract_money(text: str) -> tuple[str | None, str | None]:
    """Return (amount, currency), each detected independently."""
    return extract_amount(text), extract_currency(text)


def extract_payment_terms(text: str) -> str | None:
    """Return 'Net N' or 'Due on receipt' when recognized."""
    net = _NET_TERMS.search(text)
    if net:
        return f"Net {net.group(1)}"
    if _DUE_ON_RECEIPT.search(text):
        return "Due on receipt"
    return None


def extract_fields(text: str) -> ExtractionResult:
    """Run every extractor over the text.

    Args:
        text: Raw invoice text

    Returns:
        ExtractionResult with each field normalized or None
    """
    amount, currency = extract_money(text)
    return ExtractionResult(
        vendor=extract_vendor(text),
        invoice_number=extract_invoice_number(text),
        due_date=extract_due_date(text),
        amount=amount,
        currency=currency,
        payment_terms=extract_payment_terms(text),
    )
