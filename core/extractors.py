"""
Row extractors turning tokenized rows into parsed entries.

Structured extraction maps header columns to roles by synonym. Generic
extraction guesses date, amount and description per row when no header
was recognised. Each row is independent: a row that fails is dropped and
the batch continues.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from core.categories import BILL_PAYMENT_MATCH, TRANSFER_MATCH, CategoryMatch, resolve_category
from core.exceptions import RowExtractionError
from core.logger import setup_logger
from core.normalize import clean_amount, is_date_like, normalize_date, today_iso
from core.rules import (
    AMOUNT_PATTERN,
    ACCOUNT_TYPE_MARKERS,
    ASSET_CATEGORY_RULES,
    LIABILITY_CATEGORY_RULES,
    LIABILITY_MARKERS,
    MERCHANT_PATTERN,
    income_type_for,
    is_bill_payment,
    is_credit_type,
    is_noise,
    is_received,
    is_transfer,
    match_rule,
)
from core.schema import AccountEntry, ParsedEntry, TransactionEntry
from core.taxonomy import Taxonomy

logger = setup_logger(__name__)

DEFAULT_MERCHANT = "General"
DEFAULT_ACCOUNT_NAME = "Imported Account"
DEFAULT_DESCRIPTION = "Imported Item"
TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")

DATE_SYNONYMS = ["DATE", "TIMESTAMP", "TIME", "TXN DATE", "PERIOD"]
DESCRIPTION_SYNONYMS = [
    "PLACE", "MERCHANT", "DESCRIPTION", "NOTE", "PAYEE", "PARTICULAR",
    "NARRATION", "REMARKS", "DESC", "ACCOUNT NAME", "DETAILS",
]
AMOUNT_SYNONYMS = ["AMOUNT", "VALUE", "TOTAL", "TRANSACTION AMT", "SUM"]
BALANCE_SYNONYMS = ["BALANCE", "BAL", "CURRENT BAL", "OUTSTANDING", "AVAILABLE"]
TYPE_SYNONYMS = ["DR/CR", "TYPE", "MODE", "TRANSACTION TYPE"]
ACCOUNT_SYNONYMS = ["ACCOUNT", "BANK", "SOURCE", "ACC"]


@dataclass(frozen=True)
class ColumnMap:
    """Header column index per role; None when the role is absent."""
    date: Optional[int] = None
    description: Optional[int] = None
    amount: Optional[int] = None
    balance: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None
    type: Optional[int] = None
    account: Optional[int] = None

    @property
    def has_debit_credit(self) -> bool:
        return self.debit is not None and self.credit is not None


def _find_column(headers: Sequence[str], synonyms: Sequence[str]) -> Optional[int]:
    for idx, header in enumerate(headers):
        if any(name in header for name in synonyms):
            return idx
    return None


def _find_flow_column(headers: Sequence[str], exact: Sequence[str], partial: Sequence[str]) -> Optional[int]:
    for idx, header in enumerate(headers):
        if header in exact or any(name in header for name in partial):
            return idx
    return None


def resolve_columns(header: Sequence[str]) -> ColumnMap:
    """
    Resolve column roles from a header row.

    Args:
        header: Header row fields

    Returns:
        ColumnMap with the first matching column per role
    """
    headers = [h.upper() for h in header]
    return ColumnMap(
        date=_find_column(headers, DATE_SYNONYMS),
        description=_find_column(headers, DESCRIPTION_SYNONYMS),
        amount=_find_column(headers, AMOUNT_SYNONYMS),
        balance=_find_column(headers, BALANCE_SYNONYMS),
        debit=_find_flow_column(headers, ("DEBIT", "DR"), ("WITHDRAW", "OUT")),
        credit=_find_flow_column(headers, ("CREDIT", "CR"), ("DEPOSIT", "IN")),
        type=_find_column(headers, TYPE_SYNONYMS),
        account=_find_column(headers, ACCOUNT_SYNONYMS),
    )


def _cell(row: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ""
    return row[idx].strip()


def _transaction(
    entry_type: str,
    amount: float,
    description: str,
    date: str,
    match: CategoryMatch,
    raw_content: str,
    income_text: str = "",
    account_hint: Optional[str] = None,
) -> TransactionEntry:
    return TransactionEntry(
        entry_type=entry_type,
        amount=amount,
        merchant_or_source=description.strip() or DEFAULT_MERCHANT,
        date=date,
        bucket=match.bucket,
        category=match.category,
        sub_category=match.sub_category,
        raw_content=raw_content,
        income_type=income_type_for(income_text) if entry_type == "Income" else None,
        account_hint=account_hint or None,
    )


def _account_snapshot(
    value: float,
    type_text: str,
    description: str,
    account_hint: str,
    date: str,
    raw_content: str,
) -> AccountEntry:
    combined = f"{type_text} {description} {account_hint}"
    is_liability = any(marker in combined.upper() for marker in LIABILITY_MARKERS)
    if is_liability:
        wealth_category = match_rule(combined, LIABILITY_CATEGORY_RULES, default="CreditCard")
    else:
        wealth_category = match_rule(combined, ASSET_CATEGORY_RULES, default="Savings")

    return AccountEntry(
        name=description or account_hint or DEFAULT_ACCOUNT_NAME,
        value=value,
        wealth_type="Liability" if is_liability else "Investment",
        wealth_category=wealth_category,
        date=date,
        raw_content=raw_content,
    )


def extract_structured_row(
    row: Sequence[str],
    columns: ColumnMap,
    taxonomy: Taxonomy,
    separator: str = " | ",
) -> ParsedEntry:
    """
    Convert one data row under a recognised header into an entry.

    Args:
        row: Data row fields
        columns: Resolved column roles
        taxonomy: Category taxonomy
        separator: Separator used to rebuild raw_content

    Returns:
        TransactionEntry or AccountEntry

    Raises:
        RowExtractionError: If the row carries no usable amount
    """
    type_text = _cell(row, columns.type).upper()
    description = _cell(row, columns.description)
    account_hint = _cell(row, columns.account)
    raw_content = separator.join(row)

    if columns.has_debit_credit:
        debit = clean_amount(_cell(row, columns.debit))
        credit = clean_amount(_cell(row, columns.credit))
        if credit > 0:
            amount, entry_type = credit, "Income"
        elif debit > 0:
            amount, entry_type = debit, "Expense"
        else:
            amount, entry_type = 0.0, "Expense"
    else:
        amount_idx = columns.amount if columns.amount is not None else columns.balance
        amount = abs(clean_amount(_cell(row, amount_idx)))
        received = is_credit_type(type_text) or is_received(type_text) or is_received(description)
        entry_type = "Income" if received else "Expense"

    if amount == 0:
        raise RowExtractionError(
            "Row has no usable amount",
            details={"raw_content": raw_content}
        )

    date = normalize_date(_cell(row, columns.date))

    # Balance-only sheets are account lists; debit/credit statements with a
    # running balance column are still transactions
    balance_only = (
        columns.balance is not None
        and columns.amount is None
        and not columns.has_debit_credit
    )
    is_snapshot = balance_only or any(marker in type_text for marker in ACCOUNT_TYPE_MARKERS)
    if is_snapshot:
        return _account_snapshot(amount, type_text, description, account_hint, date, raw_content)

    if is_bill_payment(description) or is_bill_payment(type_text):
        entry_type, match = "BillPayment", BILL_PAYMENT_MATCH
    elif is_transfer(description) or is_transfer(type_text):
        entry_type, match = "Transfer", TRANSFER_MATCH
    else:
        match = resolve_category(description, taxonomy)

    return _transaction(
        entry_type,
        amount,
        description,
        date,
        match,
        raw_content,
        income_text=description,
        account_hint=account_hint,
    )


def extract_structured_rows(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    taxonomy: Taxonomy,
    separator: str = " | ",
) -> List[ParsedEntry]:
    """
    Extract entries from data rows following a recognised header.

    Args:
        header: Header row fields
        rows: Data rows after the header
        taxonomy: Category taxonomy
        separator: Separator used to rebuild raw_content

    Returns:
        Entries in row order; failing rows are dropped
    """
    columns = resolve_columns(header)
    logger.debug(f"Resolved columns: {columns}")

    results: List[ParsedEntry] = []
    for idx, row in enumerate(rows):
        if len(row) < 2:
            continue
        try:
            results.append(extract_structured_row(row, columns, taxonomy, separator))
        except RowExtractionError as e:
            logger.debug(f"Dropped row {idx}: {e.message}")
        except Exception as e:
            logger.debug(f"Dropped row {idx}: {e}")

    logger.info(f"Structured extraction: {len(results)}/{len(rows)} rows imported")
    return results


def _extract_freeform(line: str, taxonomy: Taxonomy) -> Optional[TransactionEntry]:
    """Single-field row such as an SMS alert or '12/05/2024 Starbucks Coffee 450'."""
    tokens = line.split()
    date_idx = next((i for i, token in enumerate(tokens) if is_date_like(token)), None)
    # Clock times such as 10:30 are neither amount nor merchant text
    rest = [
        token for i, token in enumerate(tokens)
        if i != date_idx and not TIME_PATTERN.match(token)
    ]
    remainder = " ".join(rest)

    amount = 0.0
    match = AMOUNT_PATTERN.search(remainder)
    if match and clean_amount(match.group(1)) != 0:
        amount = abs(clean_amount(match.group(1)))
        remainder = remainder[:match.start()] + remainder[match.end():]
    else:
        for i, token in enumerate(rest):
            value = clean_amount(token)
            if value != 0:
                amount = abs(value)
                remainder = " ".join(rest[:i] + rest[i + 1:])
                break

    if amount == 0:
        return None

    merchant = MERCHANT_PATTERN.search(line)
    description = merchant.group(1).strip() if merchant else " ".join(remainder.split())
    if len(description) <= 2:
        description = DEFAULT_DESCRIPTION

    date = normalize_date(tokens[date_idx]) if date_idx is not None else today_iso()
    entry_type = "Income" if is_received(line) else "Expense"
    return _transaction(
        entry_type,
        amount,
        description,
        date,
        resolve_category(line, taxonomy),
        line,
        income_text=line,
    )


def extract_generic_row(
    row: Sequence[str],
    taxonomy: Taxonomy,
    separator: str = " | ",
) -> Optional[TransactionEntry]:
    """
    Guess date, amount and description for a row without a header.

    Args:
        row: Row fields
        taxonomy: Category taxonomy
        separator: Separator used to rebuild raw_content

    Returns:
        TransactionEntry, or None when no non-zero amount is found
    """
    if len(row) == 1:
        return _extract_freeform(row[0], taxonomy)

    date_idx = next((i for i, value in enumerate(row) if is_date_like(value)), None)
    amount_idx = next(
        (i for i, value in enumerate(row) if i != date_idx and value and clean_amount(value) != 0),
        None,
    )
    if amount_idx is None:
        return None

    desc_idx = next(
        (i for i, value in enumerate(row) if i not in (date_idx, amount_idx) and len(value) > 2),
        None,
    )
    description = row[desc_idx] if desc_idx is not None else DEFAULT_DESCRIPTION
    date = normalize_date(row[date_idx]) if date_idx is not None else today_iso()
    entry_type = "Income" if is_received(description) else "Expense"

    return _transaction(
        entry_type,
        abs(clean_amount(row[amount_idx])),
        description,
        date,
        resolve_category(description, taxonomy),
        separator.join(row),
        income_text=description,
    )


def extract_generic_rows(
    rows: Sequence[Sequence[str]],
    taxonomy: Taxonomy,
    separator: str = " | ",
    skip_noise: bool = False,
) -> List[ParsedEntry]:
    """
    Fallback extraction over all rows when no header was recognised.

    Args:
        rows: Tokenized rows
        taxonomy: Category taxonomy
        separator: Separator used to rebuild raw_content
        skip_noise: Drop OTP and promotional lines before extraction

    Returns:
        Entries in row order
    """
    results: List[ParsedEntry] = []
    for idx, row in enumerate(rows):
        if skip_noise and is_noise(" ".join(row)):
            logger.debug(f"Skipped noise row {idx}")
            continue
        try:
            entry = extract_generic_row(row, taxonomy, separator)
        except Exception as e:
            logger.debug(f"Dropped row {idx}: {e}")
            continue
        if entry is not None:
            results.append(entry)

    logger.info(f"Generic extraction: {len(results)}/{len(rows)} rows imported")
    return results
