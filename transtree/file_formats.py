"""
Process-wide registry that maps file extensions to parser factories.

Formats are registered explicitly, usually once at startup with use_default_formats().
clear() empties the registry again.
"""
import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

from transtree.base_parser import BaseParser, get_file_extension, read_text_file
from transtree.exceptions import ParserConfigError, ParserLoadError
from transtree.json_parser import ArbParser, JsonParser, TranslationConfiguration
from transtree.table_parser import CsvParser, TsvParser
from transtree.tree import TranslationTree

logger = logging.getLogger(__name__)

ParserFactory = Callable[[], BaseParser]

_parser_factories: Dict[str, ParserFactory] = {}
_config_parser_factories: Dict[str, ParserFactory] = {}


def register_parser(extension: str, factory: ParserFactory) -> None:
    """Register the factory of translation file parsers for an extension. The first registration wins."""
    extension = extension.lower()
    if extension not in _parser_factories:
        _parser_factories[extension] = factory
        logger.debug("Registered parser for '%s'", extension)


def register_config_parser(extension: str, factory: ParserFactory) -> None:
    """Register the factory of configuration file parsers for an extension. The first registration wins."""
    extension = extension.lower()
    if extension not in _config_parser_factories:
        _config_parser_factories[extension] = factory
        logger.debug("Registered configuration parser for '%s'", extension)


def get_parser(extension: str) -> Optional[BaseParser]:
    if not extension:
        return None
    factory = _parser_factories.get(extension.lower())
    return factory() if factory else None


def get_config_parser(extension: str) -> Optional[BaseParser]:
    if not extension:
        return None
    factory = _config_parser_factories.get(extension.lower())
    return factory() if factory else None


def get_parser_for_file(file_path: str) -> Optional[BaseParser]:
    return get_parser(get_file_extension(file_path))


def supported_extensions() -> List[str]:
    """Extensions registered for translation files, in lowercase."""
    return list(_parser_factories)


def use_default_formats() -> None:
    """Register the CSV, TSV, JSON and ARB formats."""
    register_parser(CsvParser.extension, CsvParser)
    register_parser(TsvParser.extension, TsvParser)
    register_parser(JsonParser.extension, JsonParser)
    register_parser(ArbParser.extension, ArbParser)
    register_config_parser(".jsoncfg", JsonParser)
    register_config_parser(".arbcfg", ArbParser)


def clear() -> None:
    _parser_factories.clear()
    _config_parser_factories.clear()


def load_translation_structure(config_file: str,
                               base_directory: Optional[str] = None
                               ) -> Tuple[Optional[TranslationTree], TranslationConfiguration]:
    """
    Parse a configuration file, then build the key tree of the default translation file it names.

    A relative default file is resolved against `base_directory`, or against the
    directory of the configuration file.

    Raises:
        ParserConfigError: If no parser handles the configuration or it names no default file.
        ParserLoadError: If no parser handles the default file or the file is empty.
    """
    config_parser = get_config_parser(get_file_extension(config_file))
    if config_parser is None:
        raise ParserConfigError(config_file, f"No configuration parser registered for '{config_file}'")

    configuration = config_parser.parse_configuration_file(config_file)
    if not configuration.default_file:
        raise ParserConfigError(
            config_file,
            f"No reference to a default translation file is present in '{config_file}'. "
            f"The reference must be specified as a 'default_file' setting.")
    configuration.directory_hint = os.path.dirname(config_file) or None

    default_file = configuration.default_file
    if not os.path.isabs(default_file):
        directory = base_directory or os.path.dirname(config_file)
        if directory:
            default_file = os.path.join(directory, default_file)

    parser = config_parser if config_parser.can_handle_extension(get_file_extension(default_file)) \
        else get_parser_for_file(default_file)
    if parser is None:
        raise ParserLoadError(config_file, f"No parser found for the default translation file '{default_file}'")

    if not read_text_file(default_file):
        raise ParserLoadError(config_file, f"Default translation file '{default_file}' is empty")

    return parser.load_translation_structure_file(default_file), configuration
