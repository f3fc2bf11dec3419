"""Parsers for translation tables: one key column and one column per locale."""
import logging
from abc import abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Set

from transtree.base_parser import BaseParser
from transtree.delimited import DelimitedLine, read_delimited_line
from transtree.exceptions import DuplicateKeyError, TextParseError
from transtree.text_format import TextFormat
from transtree.translation import Translation
from transtree.tree import TranslationTree

logger = logging.getLogger(__name__)


@dataclass
class TableColumn:
    caption: str
    values: List[str] = field(default_factory=list)


@dataclass
class TranslationTable:
    """The cells of a translation table, split into keys, locale columns and descriptions."""
    keys: List[str] = field(default_factory=list)
    key_lines: List[int] = field(default_factory=list)
    locale_columns: List[TableColumn] = field(default_factory=list)
    description_column: Optional[TableColumn] = None

    def find_column(self, locale: Optional[str]) -> Optional[TableColumn]:
        """Return the first locale column for an empty locale, else the column captioned with it."""
        if not self.locale_columns:
            return None
        if not locale:
            return self.locale_columns[0]
        wanted = locale.strip().lower()
        for column in self.locale_columns:
            if column.caption.lower() == wanted:
                return column
        return None


class BaseTableParser(BaseParser):
    """
    Common logic of CSV and TSV translation files.

    The first non-empty row holds column captions: the first cell is the caption of the
    key column, the others are locale names or the description caption.
    """

    # Caption that marks the column with entry descriptions (matched case-insensitively)
    description_column_caption: str = "Description"

    # Skip empty cells instead of loading them as empty texts
    treat_empty_values_as_absent: bool = False

    text_processing_mode: TextFormat = TextFormat.NONE

    @abstractmethod
    def read_cells(self, content: str, offset: int, line_number: int) -> DelimitedLine:
        """Read the cells of the row that starts at `offset`."""

    def read_table(self, content: str) -> TranslationTable:
        """
        Split the content into columns.

        Raises:
            TextParseError: On malformed rows, empty captions, empty keys or short rows.
            DuplicateKeyError: If a key repeats (case-insensitively).
        """
        table = TranslationTable()
        description_caption = type(self).description_column_caption.lower()
        header: Optional[List[str]] = None
        column_slots: List[Optional[TableColumn]] = []
        seen_keys: Set[str] = set()

        offset = 0
        line_number = 1
        n = len(content)

        while offset < n:
            ch = content[offset]
            if ch in '\r\n':
                offset += 2 if content.startswith('\r\n', offset) else 1
                line_number += 1
                continue

            row = self.read_cells(content, offset, line_number)
            cells = row.fields

            if header is None:
                header = cells
                for i, cell in enumerate(cells[1:], start=1):
                    caption = cell.strip()
                    if len(cells) > 2 and not caption:
                        raise TextParseError(
                            "Multiple columns are provided, but the locale name is empty for at least one column. "
                            "Locale names must be listed as column captions on the first non-empty text line.",
                            offset, row.pos_after_end, line_number, 1)
                    column = TableColumn(caption)
                    if caption.lower() == description_caption and table.description_column is None:
                        table.description_column = column
                    else:
                        table.locale_columns.append(column)
                    column_slots.append(column)
            else:
                key = cells[0].strip()
                if not key:
                    raise TextParseError(f"Empty key detected on line {line_number}",
                                         offset, row.pos_after_end, line_number, 1)
                if key.lower() in seen_keys:
                    raise DuplicateKeyError(key, line_number)
                if len(cells) < len(header):
                    raise TextParseError(
                        f"Insufficient number of columns detected on line {line_number} "
                        f"({len(header)} columns expected, {len(cells)} columns found)",
                        offset, row.pos_after_end, line_number, 1)

                seen_keys.add(key.lower())
                table.keys.append(key)
                table.key_lines.append(line_number)
                # cells beyond the captioned columns are ignored
                for column, cell in zip(column_slots, cells[1:]):
                    column.values.append(cell.strip())

            offset = row.pos_after_end
            line_number = row.next_line_number

        return table

    def load_translation(self, translation_text: str, locale: Optional[str] = None) -> Optional[Translation]:
        if not translation_text:
            return None

        table = self.read_table(translation_text)
        column = table.find_column(locale)
        if column is None:
            logger.debug("No column for locale %r in the table", locale)
            return None

        translation = Translation(locale=column.caption or None)
        skip_empty = type(self).treat_empty_values_as_absent

        for i, key in enumerate(table.keys):
            raw_value = column.values[i]
            if skip_empty and not raw_value:
                continue
            entry = self.make_entry(key, raw_value)
            if table.description_column is not None:
                entry.description = table.description_column.values[i] or None
            translation.add(key, entry, table.key_lines[i])

        logger.debug("Loaded %d entries for locale %r", len(translation), translation.locale)
        return translation

    def load_translation_structure(self, content: str) -> Optional[TranslationTree]:
        if not content:
            return None

        table = self.read_table(content)
        column = table.find_column(None)
        tree = TranslationTree()

        for i, key in enumerate(table.keys):
            templated = False
            if column is not None:
                templated = self.make_entry(key, column.values[i]).is_templated
            tree.add_entry(key, templated)

        return tree


class CsvParser(BaseTableParser):
    """Comma-separated tables with optionally quoted cells."""

    extension = ".csv"

    # Spreadsheet exports often use ';' instead
    separator: str = ","

    def read_cells(self, content: str, offset: int, line_number: int) -> DelimitedLine:
        return read_delimited_line(content, offset, line_number,
                                   separator=type(self).separator, quoted_fields=True)


class TsvParser(BaseTableParser):
    """Tab-separated tables."""

    extension = ".tsv"

    # Whether cells holding tabs or line breaks are wrapped in double quotes
    expect_quotes: bool = False

    def read_cells(self, content: str, offset: int, line_number: int) -> DelimitedLine:
        return read_delimited_line(content, offset, line_number,
                                   separator='\t', quoted_fields=type(self).expect_quotes)
