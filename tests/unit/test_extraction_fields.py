"""Unit tests for the invoice field extractors.

Tests cover:
- Vendor line selection and label rejection
- Invoice number label variants
- ISO and US due dates
- Amount normalization and currency detection
- Payment terms
- Robustness against odd input
"""

import pytest

from invoicechaser.extraction.fields import (
    VENDOR_MAX_LENGTH,
    extract_amount,
    extract_currency,
    extract_due_date,
    extract_fields,
    extract_invoice_number,
    extract_money,
    extract_payment_terms,
    extract_vendor,
)
from invoicechaser.extraction.schema import ExtractionResult

SCENARIO_A = (
    "Acme Supplies Ltd\n"
    "Total Due: USD 2,450.00\n"
    "INVOICE #INV-1042\n"
    "Due Date: 2025-11-30\n"
    "Payment terms: Net 15\n"
)


class TestExtractVendor:
    """Test vendor extraction."""

    def test_first_non_blank_line(self) -> None:
        """Should skip blank lines and trim whitespace."""
        assert extract_vendor("\n\n   Acme Supplies Ltd   \nInvoice #1") == "Acme Supplies Ltd"

    def test_crlf_line_endings(self) -> None:
        """Should split on Windows line endings."""
        assert extract_vendor("Globex Corp\r\nInvoice 7") == "Globex Corp"

    def test_invoice_label_line_rejected(self) -> None:
        """Should return None when the first line is an invoice label."""
        assert extract_vendor("INVOICE\nAcme Supplies Ltd") is None
        assert extract_vendor("Invoice #123") is None

    def test_word_starting_with_invoice_is_not_a_label(self) -> None:
        """Should keep lines where 'invoice' is only a prefix of a longer word."""
        assert extract_vendor("Invoicely Inc") == "Invoicely Inc"

    def test_truncated(self) -> None:
        """Should cap the vendor at the maximum length."""
        vendor = extract_vendor("A" * 500)

        assert vendor is not None
        assert len(vendor) == VENDOR_MAX_LENGTH

    def test_blank_text(self) -> None:
        """Should return None for whitespace-only text."""
        assert extract_vendor("  \n\t\n ") is None


class TestExtractInvoiceNumber:
    """Test invoice number extraction."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("INVOICE #INV-1042", "INV-1042"),
            ("Invoice No. NW-7781", "NW-7781"),
            ("Invoice Number: GX-2201", "GX-2201"),
            ("invoice: 889", "889"),
            ("Inv # 3391", "3391"),
            ("Inv No. A-1", "A-1"),
            ("Ref inv#77-B due soon", "77-B"),
        ],
    )
    def test_label_variants(self, text: str, expected: str) -> None:
        """Should capture the identifier after each supported label."""
        assert extract_invoice_number(text) == expected

    def test_trailing_hyphen_dropped(self) -> None:
        """Should end the identifier on a word boundary."""
        assert extract_invoice_number("Invoice # ABC- paid") == "ABC"

    def test_no_label(self) -> None:
        """Should return None without an invoice label."""
        assert extract_invoice_number("Receipt 12345") is None

    def test_long_whitespace_after_label(self) -> None:
        """Should handle long blank runs after the label."""
        assert extract_invoice_number("Inv" + " " * 50_000 + "!") is None

    def test_bare_label_falls_back_to_inv_prefix(self) -> None:
        """Should read 'invoice' with nothing after it as 'inv' plus a token."""
        assert extract_invoice_number("Please find the invoice") == "oice"


class TestExtractDueDate:
    """Test due date extraction."""

    def test_iso_date(self) -> None:
        """Should return an ISO date as-is."""
        assert extract_due_date("Due Date: 2025-11-30") == "2025-11-30"

    def test_us_date_zero_padded(self) -> None:
        """Should convert M/D/YYYY to zero-padded YYYY-MM-DD."""
        assert extract_due_date("Due: 3/7/2025") == "2025-03-07"
        assert extract_due_date("Due: 12/25/2025") == "2025-12-25"

    def test_iso_preferred_over_us(self) -> None:
        """Should prefer an ISO date even when a US date appears first."""
        assert extract_due_date("Issued 1/2/2025, due 2025-02-01") == "2025-02-01"

    def test_year_outside_2000s_ignored(self) -> None:
        """Should only accept years 2000-2099."""
        assert extract_due_date("Due 1999-12-31 or 12/31/1999") is None

    def test_no_date(self) -> None:
        """Should return None without a date."""
        assert extract_due_date("Please pay soon") is None

    def test_calendar_invalid_date_kept_textually(self) -> None:
        """Should not validate the calendar, only the pattern."""
        assert extract_due_date("Due 2025-02-30") == "2025-02-30"


class TestExtractMoney:
    """Test amount and currency extraction."""

    def test_grouped_amount_normalized(self) -> None:
        """Should strip thousands separators."""
        assert extract_amount("Total Due: USD 2,450.00") == "2450.00"

    def test_plain_amount(self) -> None:
        """Should keep a plain integer."""
        assert extract_amount("Total 2450") == "2450"

    def test_large_grouped_amount(self) -> None:
        """Should handle several groups."""
        assert extract_amount("EUR 1,234,567.89") == "1234567.89"

    def test_first_number_wins(self) -> None:
        """Should match the first qualifying number, whatever its label."""
        assert extract_amount("INVOICE #INV-1042\nTotal Due: USD 2,450.00") == "1042"

    def test_currency_case_insensitive(self) -> None:
        """Should uppercase a lowercase currency code."""
        assert extract_currency("total: eur 100") == "EUR"

    def test_currency_whitelist(self) -> None:
        """Should ignore codes outside the whitelist."""
        assert extract_currency("Total JPY 5000") is None

    def test_currency_needs_word_boundary(self) -> None:
        """Should not match a code embedded in a word."""
        assert extract_currency("USDA grant") is None

    def test_independent_detection(self) -> None:
        """Should detect amount and currency independently."""
        assert extract_money("Total: 99.99") == ("99.99", None)
        assert extract_money("Paid in GBP") == (None, "GBP")


class TestExtractPaymentTerms:
    """Test payment terms extraction."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Payment terms: Net 15", "Net 15"),
            ("TERMS: NET30", "Net 30"),
            ("net 120 days", "Net 120"),
            ("Due on receipt", "Due on receipt"),
            ("Payment DUE   ON   RECEIPT please", "Due on receipt"),
        ],
    )
    def test_recognized_terms(self, text: str, expected: str) -> None:
        """Should normalize recognized terms."""
        assert extract_payment_terms(text) == expected

    def test_net_preferred_over_receipt(self) -> None:
        """Should prefer Net terms when both appear."""
        assert extract_payment_terms("Due on receipt, otherwise Net 7") == "Net 7"

    def test_more_than_three_digits_rejected(self) -> None:
        """Should not match Net with four digits."""
        assert extract_payment_terms("Net 1000") is None

    def test_net_inside_word_ignored(self) -> None:
        """Should not match 'net' inside another word."""
        assert extract_payment_terms("Internet 30 Mbps") is None


class TestExtractFields:
    """Test the combined extractor."""

    def test_complete_invoice(self) -> None:
        """Should extract every field from a complete invoice."""
        result = extract_fields(SCENARIO_A)

        assert result == ExtractionResult(
            vendor="Acme Supplies Ltd",
            invoice_number="INV-1042",
            due_date="2025-11-30",
            amount="2450.00",
            currency="USD",
            payment_terms="Net 15",
        )

    def test_nothing_recognizable(self) -> None:
        """Should return only a vendor for unstructured text."""
        result = extract_fields("Thanks for your business!")

        assert result.vendor == "Thanks for your business!"
        assert result.invoice_number is None
        assert result.due_date is None
        assert result.amount is None
        assert result.currency is None
        assert result.payment_terms is None

    def test_binary_looking_input(self) -> None:
        """Should not raise on control characters and odd bytes."""
        text = "\x00\x01\xff�" * 1000 + "\x07invoice"

        result = extract_fields(text)

        assert isinstance(result, ExtractionResult)

    def test_no_empty_strings(self) -> None:
        """Should never report an empty string as a found value."""
        result = extract_fields("   \n\n\t")

        assert all(value is None for value in result.model_dump().values())

    def test_non_ascii_digits_ignored(self) -> None:
        """Should only treat ASCII digits as numbers."""
        assert extract_amount("Total ٣٤٥") is None

    def test_no_break_space_separators(self) -> None:
        """Should treat no-break spaces from pasted PDF or HTML text as whitespace."""
        text = "Acme Ltd\nInvoice\u00a0#\u00a0INV-77\nTerms: Net\u00a030\n"

        result = extract_fields(text)

        assert result.invoice_number == "INV-77"
        assert result.payment_terms == "Net 30"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Invoice\u00a0No.\u00a0NW-7781", "NW-7781"),
            ("Inv\u2009#\u202fA-12", "A-12"),
            ("Invoice\u3000Number:\u00a0GX-2201", "GX-2201"),
        ],
    )
    def test_unicode_spaces_in_invoice_label(self, text: str, expected: str) -> None:
        """Should read the identifier across Unicode space separators."""
        assert extract_invoice_number(text) == expected

    def test_unicode_spaces_in_due_on_receipt(self) -> None:
        """Should match 'due on receipt' separated by no-break spaces."""
        assert extract_payment_terms("Payment due\u00a0on\u00a0receipt") == "Due on receipt"

    def test_non_ascii_digits_not_terms(self) -> None:
        """Should only accept ASCII digits after Net."""
        assert extract_payment_terms("Net \u0663\u0660 days") is None
