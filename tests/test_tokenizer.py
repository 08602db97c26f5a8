"""
Unit tests for the CSV tokenizer.
"""
from core.tokenizer import CsvLexer, LexState, sniff_delimiter, tokenize


def test_quoted_delimiter_stays_in_field():
    """Test a quoted comma does not split the field."""
    assert tokenize('a,"b,c",d') == [["a", "b,c", "d"]]


def test_escaped_quotes():
    """Test doubled quotes inside a quoted field become one quote."""
    assert tokenize('x,"say ""hi""",y') == [["x", 'say "hi"', "y"]]


def test_crlf_line_endings():
    """Test CRLF ends rows without leaking carriage returns."""
    assert tokenize("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]


def test_newline_inside_quotes():
    """Test a quoted newline stays inside the field."""
    assert tokenize('a,"line1\nline2"\nc,d') == [["a", "line1\nline2"], ["c", "d"]]


def test_semicolon_delimiter_sniffed():
    """Test more semicolons than commas switches the delimiter."""
    rows = tokenize("Date;Amount;Note,x\n01;2;3")
    assert rows == [["Date", "Amount", "Note,x"], ["01", "2", "3"]]


def test_tab_delimiter_sniffed():
    """Test tab wins when strictly more frequent than comma and semicolon."""
    assert tokenize("a\tb\tc\n1\t2\t3") == [["a", "b", "c"], ["1", "2", "3"]]


def test_sniff_delimiter_defaults():
    """Test ties and empty input fall back to comma."""
    assert sniff_delimiter("a,b;c") == ","
    assert sniff_delimiter("") == ","
    assert sniff_delimiter("no delimiters here") == ","
    assert sniff_delimiter("\n\na;b;c\n") == ";"


def test_fields_trimmed_and_empty_rows_dropped():
    """Test whitespace is trimmed and blank rows disappear."""
    assert tokenize(" a , b \n\n , \nc,d") == [["a", "b"], ["c", "d"]]


def test_empty_input():
    """Test empty and whitespace-only text."""
    assert tokenize("") == []
    assert tokenize("   \n  ") == []
    assert tokenize(None) == []


def test_unterminated_quote_is_best_effort():
    """Test malformed quoting does not raise."""
    assert tokenize('a,"b,c\nd') == [["a", "b,c\nd"]]


def test_forced_delimiter():
    """Test an explicit delimiter overrides sniffing."""
    assert tokenize("a;b,c", delimiter=";") == [["a", "b,c"]]


def test_lexer_state_transitions():
    """Test the lexer moves between NORMAL and IN_QUOTES."""
    lexer = CsvLexer(",")
    assert lexer.state is LexState.NORMAL

    assert lexer.feed('"', "x") is False
    assert lexer.state is LexState.IN_QUOTES

    # Escaped quote consumes the lookahead
    assert lexer.feed('"', '"') is True
    assert lexer.state is LexState.IN_QUOTES

    assert lexer.feed('"', None) is False
    assert lexer.state is LexState.NORMAL
    assert lexer.finish() == [['"']]


def test_lexer_crlf_consumes_lookahead():
    """Test CR followed by LF ends the row and consumes the LF."""
    lexer = CsvLexer(",")
    lexer.feed("a", "\r")
    assert lexer.feed("\r", "\n") is True
    lexer.feed("b", None)
    assert lexer.finish() == [["a"], ["b"]]
