"""
Character-level CSV tokenizer for pasted statements and CSV dumps.

The lexer is a two-state machine (NORMAL / IN_QUOTES) driven by an iterator
of characters with one character of lookahead, so quoted delimiters,
escaped quotes and quoted newlines survive. Malformed quoting never raises;
it just yields best-effort field boundaries.
"""
from enum import Enum
from typing import Iterator, List, Optional

Row = List[str]


class LexState(Enum):
    """Lexer states."""
    NORMAL = "normal"
    IN_QUOTES = "in_quotes"


def sniff_delimiter(text: str) -> str:
    """
    Pick the field delimiter from the first non-empty line.

    Semicolon wins only with strictly more occurrences than comma; tab
    only with strictly more than both. Ties and empty input give ','.
    """
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    commas = first_line.count(",")
    semicolons = first_line.count(";")
    tabs = first_line.count("\t")

    delimiter = ","
    if semicolons > commas:
        delimiter = ";"
    if tabs > max(commas, semicolons):
        delimiter = "\t"
    return delimiter


class CsvLexer:
    """Finite-state CSV lexer; feed characters, then call ``finish``."""

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter
        self.state = LexState.NORMAL
        self.rows: List[Row] = []
        self._row: Row = []
        self._field: List[str] = []

    def _end_field(self) -> None:
        self._row.append("".join(self._field))
        self._field = []

    def _end_row(self) -> None:
        if self._field or self._row:
            self._end_field()
            self.rows.append(self._row)
        self._row = []
        self._field = []

    def feed(self, char: str, next_char: Optional[str]) -> bool:
        """
        Consume one character.

        Args:
            char: Current character
            next_char: Following character, or None at end of input

        Returns:
            True if the lookahead character was consumed as well
        """
        if self.state is LexState.IN_QUOTES:
            if char == '"' and next_char == '"':
                self._field.append('"')
                return True
            if char == '"':
                self.state = LexState.NORMAL
            else:
                self._field.append(char)
            return False

        if char == '"':
            self.state = LexState.IN_QUOTES
        elif char == self.delimiter:
            self._end_field()
        elif char == "\n":
            self._end_row()
        elif char == "\r" and next_char == "\n":
            self._end_row()
            return True
        else:
            self._field.append(char)
        return False

    def finish(self) -> List[Row]:
        """Flush the trailing row and return all rows."""
        self._end_row()
        return self.rows


def _with_lookahead(text: str) -> Iterator:
    chars = iter(text)
    current = next(chars, None)
    while current is not None:
        following = next(chars, None)
        yield current, following
        current = following


def tokenize(text: Optional[str], delimiter: Optional[str] = None) -> List[Row]:
    """
    Split raw statement text into rows of trimmed string fields.

    Args:
        text: Raw text blob (LF or CRLF line endings)
        delimiter: Force a delimiter instead of sniffing it

    Returns:
        Rows with at least one non-empty field
    """
    if not text or not text.strip():
        return []

    lexer = CsvLexer(delimiter or sniff_delimiter(text))
    pairs = _with_lookahead(text)
    for char, next_char in pairs:
        if lexer.feed(char, next_char):
            # Lookahead consumed; skip it
            next(pairs, None)

    rows = []
    for raw_row in lexer.finish():
        row = [field.strip() for field in raw_row]
        if any(row):
            rows.append(row)
    return rows
