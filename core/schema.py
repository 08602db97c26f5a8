"""
Pydantic schemas for parsed statement entries and API payloads.
A parsed entry is a tagged union discriminated on ``entry_type``.
"""
import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Bucket = Literal["Needs", "Wants", "Savings", "Avoids", "Uncategorized"]
IncomeType = Literal["Salary", "Freelance", "Investment", "Gift", "Other"]
WealthType = Literal["Investment", "Liability"]
WealthCategory = Literal[
    "Savings", "Pension", "Gold", "Cash", "Investment",
    "CreditCard", "PersonalLoan", "HomeLoan", "Overdraft", "GoldLoan", "Other",
]
TransactionKind = Literal["Expense", "Income", "Transfer", "BillPayment"]

BUCKETS: List[str] = ["Needs", "Wants", "Savings", "Avoids", "Uncategorized"]


def validate_iso_date(v: str) -> str:
    """Ensure value is a canonical YYYY-MM-DD calendar date."""
    parsed = datetime.date.fromisoformat(v)
    if parsed.isoformat() != v:
        raise ValueError(f"Date must be in YYYY-MM-DD form: {v!r}")
    return v


class _EntryBase(BaseModel):
    """Immutable base with camelCase wire names."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TransactionEntry(_EntryBase):
    """Expense, income, transfer or bill payment parsed from one row."""
    entry_type: TransactionKind
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Positive, currency-agnostic magnitude")
    merchant_or_source: str = Field(default="General", min_length=1)
    date: str
    bucket: Bucket = "Uncategorized"
    category: str = "General"
    sub_category: str = "General"
    raw_content: str = ""
    income_type: Optional[IncomeType] = None
    account_hint: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        """Reject anything but a canonical ISO date."""
        return validate_iso_date(v)


class AccountEntry(_EntryBase):
    """Account balance snapshot parsed from one row."""
    entry_type: Literal["Account"] = "Account"
    name: str = Field(default="Imported Account", min_length=1)
    value: float = Field(..., ge=0, allow_inf_nan=False)
    wealth_type: WealthType
    wealth_category: WealthCategory
    date: str
    raw_content: str = ""

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        """Reject anything but a canonical ISO date."""
        return validate_iso_date(v)


ParsedEntry = Annotated[
    Union[TransactionEntry, AccountEntry],
    Field(discriminator="entry_type"),
]


class TextImportRequest(BaseModel):
    """Pasted statement text."""
    text: str = Field(..., description="Raw statement export, CSV dump or SMS lines")


class ImportResponse(BaseModel):
    """Result of an import request."""
    status: Literal["success"] = "success"
    count: int
    transaction_count: int
    account_count: int
    message: str
    entries: List[ParsedEntry] = Field(default_factory=list)
