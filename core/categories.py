"""
Free-text category resolution against the configured taxonomy.
"""
from typing import NamedTuple, Optional

from core.rules import is_bill_payment
from core.taxonomy import Taxonomy, flatten_subcategories

BILL_PAYMENT = "Bill Payment"
TRANSFER = "Transfer"
GENERAL = "General"
INTERNAL = "Internal"


class CategoryMatch(NamedTuple):
    """Resolved (bucket, category, subcategory) triple."""
    bucket: str
    category: str
    sub_category: str


UNCATEGORIZED = CategoryMatch("Uncategorized", GENERAL, GENERAL)
BILL_PAYMENT_MATCH = CategoryMatch("Uncategorized", INTERNAL, BILL_PAYMENT)
TRANSFER_MATCH = CategoryMatch("Uncategorized", INTERNAL, TRANSFER)


def resolve_category(text: Optional[str], taxonomy: Taxonomy) -> CategoryMatch:
    """
    Map a description to a taxonomy entry.

    Buckets are scanned in taxonomy order and, within a bucket, the
    flattened subcategory list in order. The first subcategory whose
    lowercase name occurs in the lowercase text wins, so the taxonomy's
    own ordering decides ties.

    Args:
        text: Merchant / description text
        taxonomy: Bucket -> category -> subcategories mapping

    Returns:
        CategoryMatch; Uncategorized/General when nothing matches
    """
    if not text:
        return UNCATEGORIZED
    if is_bill_payment(text):
        return BILL_PAYMENT_MATCH

    combined = text.lower()
    for bucket in taxonomy:
        for category, sub_category in flatten_subcategories(taxonomy, bucket):
            if sub_category and sub_category.lower() in combined:
                return CategoryMatch(bucket, category, sub_category)
    return UNCATEGORIZED
