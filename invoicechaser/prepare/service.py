"""Invoice preparation service.

Runs the field extractors, overdue arithmetic, red-flag evaluation, email
composition and next-step planning for one invoice and assembles the
result. Pure with respect to its inputs: the only time source is the
injected clock, consulted when no reference date is supplied.
"""

import logging

from invoicechaser.extraction.fields import extract_fields
from invoicechaser.prepare.schema import ExtractedFields, PrepareArgs, PreparedResult, Tone
from invoicechaser.reminders.emails import compose_emails
from invoicechaser.reminders.next_steps import plan_next_steps
from invoicechaser.reminders.overdue import (
    Clock,
    compute_days_overdue,
    resolve_reference_date,
    utc_now,
)
from invoicechaser.reminders.red_flags import evaluate_red_flags
from invoicechaser.shared.config import Settings

logger = logging.getLogger(__name__)


def resolve_currency(override: str | None, detected: str | None, default: str) -> str:
    """Pick the caller's currency, else the detected one, else the default."""
    return (override or detected or default).upper()


def build_summary(
    invoice_number: str | None,
    amount: str | None,
    currency: str,
    due_date: str | None,
    days_overdue: int | None,
) -> list[str]:
    """Three human-readable lines describing what was found."""
    invoice = f"invoice {invoice_number}" if invoice_number else "an invoice"
    detected_amount = f"{currency} {amount}" if amount else "unknown"
    overdue = f" (days overdue: {days_overdue})" if days_overdue is not None else ""
    return [
        f"Prepared follow-up emails for {invoice}.",
        f"Detected amount: {detected_amount}.",
        f"Due date: {due_date or 'unknown'}{overdue}.",
    ]


class PrepareService:
    """Turns raw invoice text into reminder emails and a follow-up plan."""

    def __init__(self, settings: Settings, clock: Clock = utc_now) -> None:
        """Initialize service.

        Args:
            settings: Application settings (default currency)
            clock: Source of "now" when the caller gives no reference date
        """
        self.settings = settings
        self.clock = clock

    def prepare(self, args: PrepareArgs) -> PreparedResult:
        """Prepare reminders for already-validated arguments.

        Args:
            args: Validated prepare arguments

        Returns:
            PreparedResult; never raises for unparseable invoice content
        """
        extraction = extract_fields(args.invoice_text)

        currency = resolve_currency(
            args.currency, extraction.currency, self.settings.default_currency
        )
        reference = resolve_reference_date(args.today, self.clock)
        days_overdue = compute_days_overdue(extraction.due_date, reference)

        red_flags = evaluate_red_flags(extraction)
        emails = compose_emails(
            vendor=extraction.vendor,
            invoice_number=extraction.invoice_number,
            amount=extraction.amount,
            currency=currency,
            due_date=extraction.due_date,
            days_overdue=days_overdue,
        )
        next_steps = plan_next_steps(extraction, days_overdue)

        logger.debug(
            f"Prepared invoice reminders: {len(red_flags)} red flags, "
            f"days_overdue={days_overdue}"
        )

        return PreparedResult(
            summary=build_summary(
                extraction.invoice_number,
                extraction.amount,
                currency,
                extraction.due_date,
                days_overdue,
            ),
            extracted=ExtractedFields(
                vendor=extraction.vendor,
                amount=extraction.amount,
                currency=currency,
                invoice_number=extraction.invoice_number,
                due_date=extraction.due_date,
                days_overdue=days_overdue,
                payment_terms=extraction.payment_terms,
            ),
            follow_up_emails=emails,
            next_steps=next_steps,
            red_flags=red_flags,
        )


def prepare(
    invoice_text: str,
    currency: str | None = None,
    tone: Tone | None = None,
    today: str | None = None,
    *,
    settings: Settings | None = None,
    clock: Clock = utc_now,
) -> PreparedResult:
    """Validate arguments and prepare reminders in one call.

    Raises:
        pydantic.ValidationError: If the arguments violate the input schema
    """
    args = PrepareArgs(invoice_text=invoice_text, currency=currency, tone=tone, today=today)
    return PrepareService(settings or Settings(), clock).prepare(args)
