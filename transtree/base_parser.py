"""Behavior shared by all translation file parsers."""
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from transtree.exceptions import (
    GenericParserError,
    ParserFileError,
    ParserLoadError,
    TextFileParseError,
    TextParseError,
)
from transtree.placeholders import is_templated
from transtree.text_format import UNESCAPING_FORMATS, TextFormat, unescape_string
from transtree.translation import EntryValue, Literal, Reference, Translation, TranslationEntry
from transtree.tree import TranslationTree

logger = logging.getLogger(__name__)

REFERENCE_MARKER = '@'


class BaseParser(ABC):
    """
    Base class of the format parsers.

    Settings are class attributes shared by every instance of a format. They are read
    while a parse runs and must not be changed while one is in flight.
    """

    # File extension handled by the parser, including the dot
    extension: str = ""

    # Escaping convention used to decode values and to recognize placeholders
    text_processing_mode: TextFormat = TextFormat.BACKSLASH_ESCAPING

    # Whether values starting with '@' are references to other keys
    recognize_references: bool = True

    def can_handle_extension(self, file_extension: str) -> bool:
        return bool(file_extension) and bool(self.extension) and file_extension.lower() == self.extension

    def get_text_processing_mode(self) -> TextFormat:
        return type(self).text_processing_mode

    def is_reference(self, text: str) -> bool:
        return type(self).recognize_references and text.startswith(REFERENCE_MARKER)

    def is_templated_text(self, text: str) -> bool:
        return is_templated(text, self.get_text_processing_mode())

    def make_value(self, raw_value: str) -> EntryValue:
        """Turn a raw source value into a reference or a (possibly unescaped) literal."""
        if self.is_reference(raw_value):
            return Reference(raw_value[len(REFERENCE_MARKER):].strip())
        if self.get_text_processing_mode() in UNESCAPING_FORMATS:
            return Literal(unescape_string(raw_value), escaped_text=raw_value)
        return Literal(raw_value)

    def make_entry(self, key: str, raw_value: str) -> TranslationEntry:
        """
        Create an entry for a raw value. Literal values are classified on their source
        form; references are never templated.
        """
        value = self.make_value(raw_value)
        entry = TranslationEntry(key=key, value=value)
        if isinstance(value, Literal):
            entry.is_templated = self.is_templated_text(
                value.escaped_text if value.escaped_text is not None else value.text)
        return entry

    @abstractmethod
    def load_translation(self, translation_text: str, locale: Optional[str] = None) -> Optional[Translation]:
        """
        Parse the text of a translation source.

        Args:
            translation_text: The content to parse.
            locale: The locale to pick from formats that hold several translations.

        Returns:
            The parsed Translation, or None if the content holds no usable translation.
        """

    @abstractmethod
    def load_translation_structure(self, content: str) -> Optional[TranslationTree]:
        """Parse the text of a translation source into a tree of keys."""

    def parse_configuration(self, file_content: str):
        raise GenericParserError(f"{type(self).__name__} does not have its own configuration format")

    def load_translation_file(self, file_path: str, locale: Optional[str] = None) -> Optional[Translation]:
        """
        Read and parse a translation file.

        Raises:
            ParserLoadError: If the file cannot be read.
            TextFileParseError: If the text cannot be tokenized.
            ParserFileError: For any other content error.
        """
        content = read_text_file(file_path)
        logger.debug("Parsing translation file %s", file_path)
        translation = self._run_on_file(file_path, self.load_translation, content, locale)
        if translation is not None:
            translation.original_file = file_path
        return translation

    def load_translation_structure_file(self, file_path: str) -> Optional[TranslationTree]:
        content = read_text_file(file_path)
        logger.debug("Building key tree from %s", file_path)
        return self._run_on_file(file_path, self.load_translation_structure, content)

    def parse_configuration_file(self, file_path: str):
        content = read_text_file(file_path)
        return self._run_on_file(file_path, self.parse_configuration, content)

    @staticmethod
    def _run_on_file(file_path: str, func, *args):
        try:
            return func(*args)
        except TextParseError as exc:
            raise TextFileParseError(file_path, str(exc), exc.start_position, exc.end_position,
                                     exc.line_number, exc.column_number) from exc
        except ParserFileError:
            raise
        except GenericParserError as exc:
            raise ParserFileError(file_path, f"Parsing of '{file_path}' has failed: {exc}") from exc


def read_text_file(file_path: str) -> str:
    """Read a UTF-8 text file, tolerating a byte order mark."""
    try:
        with open(file_path, 'r', encoding='utf-8-sig') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ParserLoadError(file_path, f"Loading of '{file_path}' has failed: {exc}") from exc


def get_file_extension(file_path: str) -> str:
    return os.path.splitext(file_path)[1].lower()
