"""
Category taxonomy: bucket -> category -> ordered list of subcategory names.

The taxonomy is owned by the caller's configuration. The parser only reads it,
and its iteration order decides which subcategory wins a keyword match.
"""
import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from core.config import get_settings
from core.exceptions import TaxonomyError
from core.logger import setup_logger
from core.schema import BUCKETS, Bucket

logger = setup_logger(__name__)

Taxonomy = Dict[str, Dict[str, List[str]]]

_TAXONOMY_ADAPTER = TypeAdapter(Dict[Bucket, Dict[str, List[str]]])

DEFAULT_TAXONOMY: Taxonomy = {
    "Needs": {
        "Housing": ["Rent/Mortgage", "Utilities", "Maintenance", "Municipal Tax"],
        "Household": ["Groceries", "Supplies", "Staff Salary"],
        "Logistics": ["Fuel", "Transport", "Parking"],
        "Communication": ["Internet", "Mobile/Phone"],
        "Essentials": ["Health/Insurance", "Education"],
        "Obligations": ["Debt Interest", "Loan EMI", "Credit Card Due"],
    },
    "Wants": {
        "Lifestyle": ["Dining", "Shopping", "Gifts", "Hobbies"],
        "Leisure": ["Travel", "Entertainment", "Subscription", "Weekend Trip"],
        "Personal": ["Coffee", "Apparel", "Beauty/Grooming", "Tech Gadgets"],
    },
    "Savings": {
        "Investment": ["SIP/Mutual Fund", "Stocks", "Crypto", "Gold"],
        "Reserve": ["Emergency Fund", "Fixed Deposit", "Cash Vault"],
        "Future": ["Real Estate", "Retirement", "Pension/NPS"],
    },
    "Avoids": {
        "Waste": ["Late Fee", "Bank Penalty", "ATM Fee"],
        "Impulse": ["Impulse Buy", "Redundant Sub", "Excessive Shopping"],
        "Low Value": ["Unwanted Dining", "Vices", "Postponable"],
    },
    "Uncategorized": {
        "General": ["General", "Correction"],
        "Internal": ["Transfer", "Bill Payment"],
    },
}


def flatten_subcategories(taxonomy: Taxonomy, bucket: str) -> List[Tuple[str, str]]:
    """
    Flatten one bucket into ordered (category, subcategory) pairs.

    Args:
        taxonomy: Bucket -> category -> subcategories mapping
        bucket: Bucket to flatten

    Returns:
        Pairs in taxonomy iteration order
    """
    return [
        (category, sub_category)
        for category, sub_categories in taxonomy.get(bucket, {}).items()
        for sub_category in sub_categories
    ]


def validate_taxonomy(data: object) -> Taxonomy:
    """
    Validate a taxonomy structure, preserving its key order.

    Raises:
        TaxonomyError: If the structure or bucket names are invalid
    """
    try:
        return _TAXONOMY_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise TaxonomyError(
            "Invalid category taxonomy",
            details={"errors": e.errors(include_url=False), "buckets": BUCKETS}
        )


def load_taxonomy(path: str) -> Taxonomy:
    """
    Load a taxonomy from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        Validated taxonomy

    Raises:
        TaxonomyError: If the file is missing, unreadable or malformed
    """
    file_path = Path(path)
    if not file_path.exists():
        raise TaxonomyError(
            f"Taxonomy file not found: {path}",
            details={"taxonomy_path": path}
        )

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TaxonomyError(
            f"Failed to read taxonomy file: {path}",
            details={"taxonomy_path": path, "error": str(e)}
        )

    taxonomy = validate_taxonomy(data)
    logger.info(f"Loaded taxonomy from {file_path.name} ({len(taxonomy)} buckets)")
    return taxonomy


_taxonomy: Optional[Taxonomy] = None


def get_taxonomy() -> Taxonomy:
    """
    Get the configured taxonomy singleton.

    Uses ``TAXONOMY_PATH`` when set, otherwise the built-in default.
    """
    global _taxonomy
    if _taxonomy is None:
        path = get_settings().taxonomy_path
        _taxonomy = load_taxonomy(path) if path else DEFAULT_TAXONOMY
    return _taxonomy


def reset_taxonomy() -> None:
    """Reset taxonomy singleton (useful for testing)."""
    global _taxonomy
    _taxonomy = None
