"""Tokenizer for one row of separator-delimited text (CSV, TSV)."""
from typing import List, NamedTuple

from transtree.exceptions import TextParseError

QUOTE_CHAR = '"'


class DelimitedLine(NamedTuple):
    fields: List[str]
    # Offset of the first character of the next row
    pos_after_end: int
    # Line number on which the next row starts
    next_line_number: int


def read_delimited_line(content: str, offset: int, line_number: int, separator: str,
                        quoted_fields: bool) -> DelimitedLine:
    """
    Read the fields of one logical row starting at `offset`.

    A row ends at a line terminator (LF, CRLF or a lone CR) outside of quotes. When
    `quoted_fields` is set, a field may be wrapped in double quotes; inside quotes
    a doubled quote stands for one quote character, and separators and line breaks
    are part of the value. A quoted row may therefore span several physical lines.

    Args:
        content: The whole text buffer.
        offset: Where the row starts.
        line_number: The line number of the row start, for error messages.
        separator: The single field separator character.
        quoted_fields: Whether double quotes are recognized.

    Returns:
        The fields of the row, the offset past its line terminator, and the line
        number of the next row.

    Raises:
        TextParseError: If a quoted field is not closed before the end of the buffer.
    """
    fields: List[str] = []
    n = len(content)
    if offset >= n:
        return DelimitedLine(fields, n, line_number)

    current: List[str] = []
    i = offset
    in_quotes = False
    quote_start = 0
    quote_line = line_number

    while i < n:
        ch = content[i]

        if in_quotes:
            if ch == QUOTE_CHAR:
                if i + 1 < n and content[i + 1] == QUOTE_CHAR:
                    current.append(QUOTE_CHAR)
                    i += 2
                else:
                    in_quotes = False
                    i += 1
            elif ch == '\r':
                # CRLF inside a value decodes to LF
                if i + 1 < n and content[i + 1] == '\n':
                    i += 1
                    continue
                current.append(ch)
                line_number += 1
                i += 1
            else:
                current.append(ch)
                if ch == '\n':
                    line_number += 1
                i += 1
        elif quoted_fields and ch == QUOTE_CHAR:
            in_quotes = True
            quote_start = i
            quote_line = line_number
            i += 1
        elif ch == separator:
            fields.append(''.join(current))
            current = []
            i += 1
        elif ch in '\r\n':
            break
        else:
            current.append(ch)
            i += 1

    if in_quotes:
        column = quote_start - _line_start_before(content, quote_start) + 1
        raise TextParseError(f"Unclosed quote at {quote_line}:{column}",
                             quote_start, i, quote_line, column)

    fields.append(''.join(current))

    if i < n:
        if content[i] == '\r':
            i += 1
            if i < n and content[i] == '\n':
                i += 1
        else:
            i += 1
        line_number += 1

    return DelimitedLine(fields, i, line_number)


def _line_start_before(content: str, position: int) -> int:
    return max(content.rfind('\n', 0, position), content.rfind('\r', 0, position)) + 1
