"""Payment-reminder email templates.

All three tones are rendered for every request; tone wording is fixed
template text with only the invoice details substituted.
"""

from pydantic import BaseModel

VENDOR_PLACEHOLDER = "there"
INVOICE_PLACEHOLDER = "the invoice"
AMOUNT_PLACEHOLDER = "[amount]"
SIGNATURE = "[Your Name]"

FRIENDLY_TEMPLATE = (
    "Subject: {subject}\n"
    "\n"
    "Hi {vendor},\n"
    "\n"
    "Hope you’re doing well. Just a quick reminder that {invoice} for {amount} was "
    "{due}{overdue}.\n"
    "\n"
    "Could you confirm the payment status and the expected payment date? If you need "
    "anything from my side (PO, banking details, or a copy of the invoice), I’m happy "
    "to help.\n"
    "\n"
    "Thanks so much,\n"
    "{signature}\n"
)

NEUTRAL_TEMPLATE = (
    "Subject: {subject}\n"
    "\n"
    "Hi {vendor},\n"
    "\n"
    "Following up on {invoice} for {amount}, which was {due}{overdue}.\n"
    "\n"
    "Please share an update on payment status and the planned payment date.\n"
    "\n"
    "Best regards,\n"
    "{signature}\n"
)

FIRM_TEMPLATE = (
    "Subject: {invoice} - Overdue payment\n"
    "\n"
    "Hi {vendor},\n"
    "\n"
    "{invoice} for {amount} is {due}{overdue}.\n"
    "\n"
    "Please arrange payment immediately or confirm the exact payment date today. If "
    "payment has already been sent, please reply with the remittance details.\n"
    "\n"
    "Regards,\n"
    "{signature}\n"
)


class FollowUpEmails(BaseModel):
    """Complete email bodies keyed by tone."""

    friendly: str
    neutral: str
    firm: str


def compose_emails(
    *,
    vendor: str | None,
    invoice_number: str | None,
    amount: str | None,
    currency: str,
    due_date: str | None,
    days_overdue: int | None,
) -> FollowUpEmails:
    """Render the friendly, neutral and firm reminders.

    Args:
        vendor: Greeting name, "there" when unknown
        invoice_number: Identifier, "the invoice" when unknown
        amount: Normalized amount, "[amount]" when unknown
        currency: Already-resolved currency code
        due_date: YYYY-MM-DD or None for "now due"
        days_overdue: Appended as "(N days overdue)" only when positive

    Returns:
        FollowUpEmails with all three bodies
    """
    invoice = f"Invoice {invoice_number}" if invoice_number else INVOICE_PLACEHOLDER
    is_overdue = days_overdue is not None and days_overdue > 0
    values = {
        "vendor": vendor or VENDOR_PLACEHOLDER,
        "invoice": invoice,
        "subject": f"{invoice} - Payment reminder",
        "amount": f"{currency} {amount or AMOUNT_PLACEHOLDER}",
        "due": f"due on {due_date}" if due_date else "now due",
        "overdue": f" ({days_overdue} days overdue)" if is_overdue else "",
        "signature": SIGNATURE,
    }
    return FollowUpEmails(
        friendly=FRIENDLY_TEMPLATE.format(**values),
        neutral=NEUTRAL_TEMPLATE.format(**values),
        firm=FIRM_TEMPLATE.format(**values),
    )
