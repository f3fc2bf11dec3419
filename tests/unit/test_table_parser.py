"""Unit tests for the CSV and TSV translation table parsers."""
import pytest

from transtree.exceptions import DuplicateKeyError, TextFileParseError, TextParseError
from transtree.table_parser import BaseTableParser, CsvParser, TsvParser
from transtree.text_format import TextFormat
from transtree.translation import Literal, Reference

CSV_TABLE = (
    "Key,en,de,Description\n"
    "\n"
    "greeting,Hello,Hallo,Shown on start\n"
    "menu.open,  Open {0} ,Öffnen {0},\n"
    "alias,@greeting,@greeting,\n"
)


class TestCsvParser:

    def test_first_locale_column_is_the_default(self):
        translation = CsvParser().load_translation(CSV_TABLE)

        assert translation.locale == "en"
        assert list(translation) == ["greeting", "menu.open", "alias"]
        assert translation["greeting"].text == "Hello"
        assert translation["menu.open"].text == "Open {0}"

    def test_locale_column_is_matched_ignoring_case(self):
        translation = CsvParser().load_translation(CSV_TABLE, "DE")

        assert translation.locale == "de"
        assert translation["greeting"].text == "Hallo"

    def test_unknown_locale_gives_none(self):
        assert CsvParser().load_translation(CSV_TABLE, "fr") is None

    def test_empty_text_gives_none(self):
        assert CsvParser().load_translation("") is None

    def test_description_column(self):
        translation = CsvParser().load_translation(CSV_TABLE)

        assert translation["greeting"].description == "Shown on start"
        assert translation["menu.open"].description is None

    def test_description_caption_is_configurable(self):
        BaseTableParser.description_column_caption = "Notes"
        translation = CsvParser().load_translation("Key,Notes,en\na,note,text\n")

        assert translation.locale == "en"
        assert translation["a"].description == "note"
        assert translation["a"].text == "text"

    def test_references(self):
        translation = CsvParser().load_translation(CSV_TABLE)
        assert translation["alias"].value == Reference("greeting")

    def test_placeholders_follow_the_text_format(self):
        assert CsvParser().load_translation(CSV_TABLE)["menu.open"].is_templated is False

        CsvParser.text_processing_mode = TextFormat.DOTNET
        assert CsvParser().load_translation(CSV_TABLE)["menu.open"].is_templated is True

    def test_quoted_cells(self):
        translation = CsvParser().load_translation('Key,en\nquote,"He said ""hi"", then left"\n')
        assert translation["quote"].text == 'He said "hi", then left'

    def test_multiline_cell_keeps_line_numbers(self):
        with pytest.raises(DuplicateKeyError) as exc_info:
            CsvParser().load_translation('Key,en\na,"x\ny"\nA,z\n')
        assert exc_info.value.line_number == 4
        assert "line 4" in str(exc_info.value)

    def test_crlf_line_endings(self):
        translation = CsvParser().load_translation("Key,en\r\n\r\na,1\r\nb,2\r\n")
        assert {key: entry.text for key, entry in translation.items()} == {"a": "1", "b": "2"}

    def test_custom_separator(self):
        CsvParser.separator = ";"
        translation = CsvParser().load_translation("Key;en\na;1,5\n")
        assert translation["a"].text == "1,5"

    def test_empty_values_are_kept_by_default(self):
        translation = CsvParser().load_translation("Key,en\na,\nb,x\n")
        assert translation["a"].value == Literal("")

    def test_empty_values_can_be_treated_as_absent(self):
        BaseTableParser.treat_empty_values_as_absent = True
        translation = CsvParser().load_translation("Key,en\na,\nb,x\n")
        assert list(translation) == ["b"]

    def test_single_unnamed_locale_column(self):
        translation = CsvParser().load_translation("Key,\na,1\n")
        assert translation.locale is None
        assert translation["a"].text == "1"

    def test_empty_caption_among_several_columns(self):
        with pytest.raises(TextParseError):
            CsvParser().load_translation("Key,,de\na,1,2\n")

    def test_empty_key(self):
        with pytest.raises(TextParseError) as exc_info:
            CsvParser().load_translation("Key,en\n ,1\n")
        assert exc_info.value.line_number == 2

    def test_short_row(self):
        with pytest.raises(TextParseError, match="Insufficient number of columns"):
            CsvParser().load_translation("Key,en,de\na,1\n")

    def test_extra_cells_are_ignored(self):
        translation = CsvParser().load_translation("Key,en\na,1,extra\n")
        assert translation["a"].text == "1"

    def test_unclosed_quote_in_file(self, write_file):
        path = write_file("broken.csv", 'Key,en\na,"open\n')
        with pytest.raises(TextFileParseError) as exc_info:
            CsvParser().load_translation_file(path)
        assert exc_info.value.line_number == 2
        assert exc_info.value.file_name == path

    def test_load_translation_structure(self):
        CsvParser.text_processing_mode = TextFormat.DOTNET
        tree = CsvParser().load_translation_structure(
            "Key,en\nmenu.open,Open {0}\nmenu.close,Close\ntitle,Title\n")

        assert tree.root.keys["title"].is_templated is False
        menu = tree.find_node("menu")
        assert menu.keys["open"].is_templated is True
        assert menu.keys["close"].is_templated is False

    def test_structure_of_empty_text(self):
        assert CsvParser().load_translation_structure("") is None


class TestTsvParser:

    def test_tab_separated_cells(self):
        translation = TsvParser().load_translation("Key\ten\tde\na\tone, two\teins\n", "de")
        assert translation["a"].text == "eins"

    def test_quotes_are_text_by_default(self):
        translation = TsvParser().load_translation('Key\ten\na\t"q"\n')
        assert translation["a"].text == '"q"'

    def test_quotes_when_expected(self):
        TsvParser.expect_quotes = True
        translation = TsvParser().load_translation('Key\ten\na\t"tab\there"\n')
        assert translation["a"].text == "tab\there"

    def test_extension(self):
        assert TsvParser().can_handle_extension(".TSV")
        assert not TsvParser().can_handle_extension(".csv")
