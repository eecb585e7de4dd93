"""Invoice field models produced by the text extractors.

Every field is either a normalized value or None; extractors never emit
empty strings as found values.
"""

from pydantic import BaseModel, ConfigDict, Field


class ExtractionResult(BaseModel):
    """Structured fields pulled out of free-form invoice text."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vendor: str | None = Field(None, description="First non-label line, at most 120 chars")
    invoice_number: str | None = Field(
        None, alias="invoiceNumber", description="Alphanumeric-with-hyphens identifier"
    )
    due_date: str | None = Field(None, alias="dueDate", description="Due date as YYYY-MM-DD")
    amount: str | None = Field(
        None, description="Decimal string with grouping separators stripped"
    )
    currency: str | None = Field(None, description="Uppercase 3-letter currency code")
    payment_terms: str | None = Field(
        None, alias="paymentTerms", description="'Net N' or 'Due on receipt'"
    )
