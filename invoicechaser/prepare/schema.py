"""Request and response models for the invoice preparation operation.

Attributes are snake_case; the wire format uses the camelCase aliases.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from invoicechaser.reminders.emails import FollowUpEmails

Tone = Literal["friendly", "neutral", "firm"]


class PrepareArgs(BaseModel):
    """Validated arguments of a prepare call.

    ``tone`` is accepted for future filtering; every tone is still generated.
    """

    model_config = ConfigDict(populate_by_name=True)

    invoice_text: str = Field(..., alias="invoiceText", min_length=1)
    currency: str | None = Field(None, min_length=1)
    tone: Tone | None = None
    today: str | None = Field(
        None, min_length=1, description="ISO date like 2025-12-23 (optional)"
    )


class ExtractedFields(BaseModel):
    """Extraction result enriched with the overdue count and resolved currency."""

    model_config = ConfigDict(populate_by_name=True)

    vendor: str | None = None
    amount: str | None = None
    currency: str | None = None
    invoice_number: str | None = Field(None, alias="invoiceNumber")
    due_date: str | None = Field(None, alias="dueDate")
    days_overdue: int | None = Field(None, alias="daysOverdue", ge=0)
    payment_terms: str | None = Field(None, alias="paymentTerms")


class PreparedResult(BaseModel):
    """Everything returned for one invoice."""

    model_config = ConfigDict(populate_by_name=True)

    summary: list[str] = Field(..., min_length=3, max_length=3)
    extracted: ExtractedFields
    follow_up_emails: FollowUpEmails = Field(..., alias="followUpEmails")
    next_steps: list[str] = Field(..., alias="nextSteps")
    red_flags: list[str] = Field(..., alias="redFlags", max_length=4)

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON-ready representation."""
        return self.model_dump(by_alias=True)
