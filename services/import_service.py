"""
Statement import service.
Wraps the parser with the caller-side contract: decoding uploads, summarising
results and signalling when nothing importable was found.
"""
import asyncio
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.config import get_settings
from core.exceptions import DataNotFoundError, FileProcessingError
from core.logger import setup_logger
from core.parsing import parse_statement_text
from core.schema import AccountEntry, ParsedEntry, TransactionEntry
from core.taxonomy import Taxonomy

logger = setup_logger(__name__)

NO_DATA_MESSAGE = "No financial records identified in the source."


@dataclass
class ImportResult:
    """Entries from one import, split by the store they belong to."""
    entries: List[ParsedEntry] = field(default_factory=list)

    @property
    def transactions(self) -> List[TransactionEntry]:
        return [e for e in self.entries if isinstance(e, TransactionEntry)]

    @property
    def accounts(self) -> List[AccountEntry]:
        return [e for e in self.entries if isinstance(e, AccountEntry)]

    @property
    def counts_by_type(self) -> Dict[str, int]:
        return dict(Counter(e.entry_type for e in self.entries))

    @property
    def message(self) -> str:
        return f"Imported {len(self.entries)} records"


class ImportService:
    """Service for importing statement text into parsed entries."""

    def __init__(self, taxonomy: Optional[Taxonomy] = None):
        """
        Initialize import service.

        Args:
            taxonomy: Category taxonomy override (defaults to the configured one)
        """
        self.settings = get_settings()
        self.taxonomy = taxonomy

    def import_text(self, text: str) -> ImportResult:
        """
        Parse statement text.

        Args:
            text: Pasted statement text or decoded file content

        Returns:
            ImportResult with at least one entry

        Raises:
            DataNotFoundError: If no entries could be parsed
        """
        entries = parse_statement_text(text, self.taxonomy)
        if not entries:
            logger.warning("Import produced no entries")
            raise DataNotFoundError(
                NO_DATA_MESSAGE,
                details={"text_length": len(text or "")}
            )

        result = ImportResult(entries=entries)
        logger.info(f"{result.message}: {result.counts_by_type}")
        return result

    async def import_text_async(self, text: str) -> ImportResult:
        """Run ``import_text`` in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.import_text, text)

    def decode_upload(self, content: bytes, filename: Optional[str] = None) -> str:
        """
        Decode an uploaded file as UTF-8 text.

        Args:
            content: Raw file bytes
            filename: Original filename, for error details

        Returns:
            Decoded text (a UTF-8 BOM is dropped)

        Raises:
            FileProcessingError: If the file is too large or not UTF-8
        """
        if len(content) > self.settings.max_upload_bytes:
            raise FileProcessingError(
                "Uploaded file is too large",
                details={
                    "filename": filename,
                    "size": len(content),
                    "max_upload_bytes": self.settings.max_upload_bytes,
                }
            )
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FileProcessingError(
                "Uploaded file is not valid UTF-8 text",
                details={"filename": filename, "error": str(e)}
            )

    def import_bytes(self, content: bytes, filename: Optional[str] = None) -> ImportResult:
        """
        Decode and parse an uploaded file.

        Raises:
            FileProcessingError: If the file cannot be decoded
            DataNotFoundError: If no entries could be parsed
        """
        logger.info(f"Importing file {filename or '<upload>'} ({len(content)} bytes)")
        return self.import_text(self.decode_upload(content, filename))

    async def import_bytes_async(self, content: bytes, filename: Optional[str] = None) -> ImportResult:
        """Run ``import_bytes`` in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.import_bytes, content, filename)
