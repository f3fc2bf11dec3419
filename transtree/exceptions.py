"""Error types raised while loading translation sources."""
from typing import Optional


class TranstreeError(Exception):
    """Base class for all errors raised by the package."""


class GenericParserError(TranstreeError):
    """Raised when the content of a translation or configuration source is invalid."""


class TextParseError(GenericParserError):
    """Raised when the text of a source cannot be tokenized."""

    def __init__(self, message: str, start_position: int, end_position: int,
                 line_number: int, column_number: int):
        super().__init__(message)
        self.start_position = start_position
        self.end_position = end_position
        self.line_number = line_number
        self.column_number = column_number


class TextFileParseError(TextParseError):
    """A TextParseError bound to the file it was raised for."""

    def __init__(self, file_name: str, message: str, start_position: int, end_position: int,
                 line_number: int, column_number: int):
        super().__init__(message, start_position, end_position, line_number, column_number)
        self.file_name = file_name

    def __str__(self) -> str:
        return f"{self.file_name}:{self.line_number}:{self.column_number}: {super().__str__()}"


class DuplicateKeyError(GenericParserError):
    """Raised when a qualified key is inserted twice into the same translation."""

    def __init__(self, key: str, line_number: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            message = f"Duplicate key '{key}' specified"
            if line_number is not None:
                message += f" on line {line_number}"
        super().__init__(message)
        self.key = key
        self.line_number = line_number


class ParserFileError(GenericParserError):
    """Raised when a specific file could not be parsed."""

    def __init__(self, file_name: str, message: str):
        super().__init__(message)
        self.file_name = file_name


class ParserLoadError(ParserFileError):
    """Raised when a file could not be read."""


class ParserConfigError(ParserFileError):
    """Raised when a configuration file is invalid."""
