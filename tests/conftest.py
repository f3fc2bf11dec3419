import logging
import os

import pytest

from transtree import file_formats
from transtree.base_parser import BaseParser
from transtree.json_parser import ArbParser, JsonParser
from transtree.logging_config import LOGGER_NAME
from transtree.table_parser import BaseTableParser, CsvParser, TsvParser

# Parser settings are class attributes; every test starts from the shipped defaults
_PARSER_SETTINGS = [
    (BaseParser, 'recognize_references'),
    (BaseTableParser, 'treat_empty_values_as_absent'),
    (BaseTableParser, 'description_column_caption'),
    (CsvParser, 'separator'),
    (CsvParser, 'text_processing_mode'),
    (TsvParser, 'expect_quotes'),
    (TsvParser, 'text_processing_mode'),
    (JsonParser, 'text_processing_mode'),
    (ArbParser, 'text_processing_mode'),
]


@pytest.fixture(autouse=True)
def restore_parser_settings():
    """Snapshot parser class settings and the format registry, and put them back after each test."""
    saved = [(cls, name, name in cls.__dict__, getattr(cls, name)) for cls, name in _PARSER_SETTINGS]
    file_formats.clear()
    yield
    for cls, name, own, value in saved:
        if own:
            setattr(cls, name, value)
        elif name in cls.__dict__:
            # the setting was inherited before the test assigned it on the subclass
            delattr(cls, name)
    file_formats.clear()
    # The CLI attaches handlers to the package logger; drop them so they do not leak between tests
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.propagate = True


@pytest.fixture
def default_formats():
    file_formats.use_default_formats()


@pytest.fixture
def write_file(tmp_path):
    """Return a helper that writes UTF-8 text below the test's temporary directory."""
    def _write(relative_path, content):
        path = tmp_path / relative_path
        os.makedirs(path.parent, exist_ok=True)
        path.write_text(content, encoding='utf-8', newline='')
        return str(path)
    return _write
