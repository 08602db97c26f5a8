"""
Statement text parsing entry point.
Tokenizes raw text, detects a header row and routes to the structured or
generic extractor.
"""
from typing import List, Optional, Sequence

from core.config import get_settings
from core.extractors import extract_generic_rows, extract_structured_rows
from core.logger import setup_logger
from core.schema import ParsedEntry
from core.taxonomy import Taxonomy, get_taxonomy
from core.tokenizer import tokenize

logger = setup_logger(__name__)

# A header mentions a date plus a money column, or an account plus balance/name/type
DATE_HEADER_KEYWORDS = ("AMOUNT", "DEBIT", "CREDIT", "VALUE")
ACCOUNT_HEADER_KEYWORDS = ("BAL", "NAME", "TYPE")


def is_header_row(row: Sequence[str]) -> bool:
    """Check whether a row looks like a statement header."""
    joined = ",".join(row).upper()
    if "DATE" in joined and any(k in joined for k in DATE_HEADER_KEYWORDS):
        return True
    return "ACCOUNT" in joined and any(k in joined for k in ACCOUNT_HEADER_KEYWORDS)


def find_header_row(rows: Sequence[Sequence[str]]) -> Optional[int]:
    """
    Find the first header row.

    Args:
        rows: Tokenized rows

    Returns:
        Index of the header row, or None if there is none
    """
    for idx, row in enumerate(rows):
        if is_header_row(row):
            return idx
    return None


def parse_statement_text(text: Optional[str], taxonomy: Optional[Taxonomy] = None) -> List[ParsedEntry]:
    """
    Parse pasted statement text, CSV dumps or SMS lines into entries.

    This never raises: unexpected failures are logged and give an empty
    list, which callers report as "nothing importable".

    Args:
        text: Raw text blob
        taxonomy: Category taxonomy (defaults to the configured one)

    Returns:
        Parsed entries in input order
    """
    if not text or not text.strip():
        return []

    try:
        settings = get_settings()
        if taxonomy is None:
            taxonomy = get_taxonomy()

        rows = tokenize(text)
        if not rows:
            return []

        header_idx = find_header_row(rows)
        if header_idx is not None:
            logger.info(f"Header found at row {header_idx}, using structured import ({len(rows)} rows)")
            return extract_structured_rows(
                rows[header_idx],
                rows[header_idx + 1:],
                taxonomy,
                separator=settings.raw_content_separator,
            )

        logger.info(f"No header found, using generic import ({len(rows)} rows)")
        return extract_generic_rows(
            rows,
            taxonomy,
            separator=settings.raw_content_separator,
            skip_noise=settings.skip_noise_lines,
        )

    except Exception as e:
        logger.error(f"Failed to parse statement text: {e}", exc_info=True)
        return []
