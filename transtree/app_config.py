"""Application configuration for the transtree command line."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jsonschema
import yaml
from dotenv import load_dotenv

from transtree.base_parser import BaseParser
from transtree.json_parser import ArbParser, JsonParser
from transtree.logging_config import setup_logger
from transtree.table_parser import BaseTableParser, CsvParser, TsvParser
from transtree.text_format import TextFormat

_TEXT_FORMAT_NAMES = [member.value for member in TextFormat]

# Expected structure of config.yaml. Unknown keys are allowed.
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "input_folder": {"type": "string"},
        "recognize_references": {"type": "boolean"},
        "treat_empty_values_as_absent": {"type": "boolean"},
        "description_column_caption": {"type": "string", "minLength": 1},
        "csv": {
            "type": "object",
            "properties": {
                "separator": {"type": "string", "minLength": 1, "maxLength": 1},
                "text_format": {"enum": _TEXT_FORMAT_NAMES},
            },
        },
        "tsv": {
            "type": "object",
            "properties": {
                "expect_quotes": {"type": "boolean"},
                "text_format": {"enum": _TEXT_FORMAT_NAMES},
            },
        },
        "json": {
            "type": "object",
            "properties": {"text_format": {"enum": _TEXT_FORMAT_NAMES}},
        },
        "arb": {
            "type": "object",
            "properties": {"text_format": {"enum": _TEXT_FORMAT_NAMES}},
        },
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": ["string", "null"]},
                "log_to_console": {"type": "boolean"},
            },
        },
    },
}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str
    input_folder: str

    # Parsing settings
    recognize_references: bool
    treat_empty_values_as_absent: bool
    description_column_caption: str
    csv_separator: str
    csv_text_format: TextFormat
    tsv_expect_quotes: bool
    tsv_text_format: TextFormat
    json_text_format: TextFormat
    arb_text_format: TextFormat

    # Logging
    log_level: str
    log_file_path: Optional[str]
    log_to_console: bool


def _compute_project_root() -> str:
    """The project root is the directory the tool is run from."""
    return os.path.abspath(os.getcwd())


def _load_dotenv_files(project_root: str) -> Optional[str]:
    """Load .env files from project root or docker directory and return the loaded path."""
    dotenv_path_project_root = os.path.join(project_root, '.env')
    dotenv_path_docker_dir = os.path.join(project_root, 'docker', '.env')

    if os.path.exists(dotenv_path_project_root):
        load_dotenv(dotenv_path_project_root)
        return dotenv_path_project_root
    if os.path.exists(dotenv_path_docker_dir):
        load_dotenv(dotenv_path_docker_dir)
        return dotenv_path_docker_dir
    return None


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """Load and check the YAML configuration file, falling back to defaults on any problem."""
    # TRANSTREE_CONFIG_FILE (possibly set from .env) overrides the default 'config.yaml'
    default_config_path = os.path.join(project_root, 'config.yaml')
    config_file = os.environ.get('TRANSTREE_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)

        if loaded_config is None:
            print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                  file=sys.stderr)
        elif isinstance(loaded_config, dict):
            jsonschema.validate(instance=loaded_config, schema=CONFIG_SCHEMA)
            config = loaded_config
        else:
            print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                  file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except jsonschema.ValidationError as e:
        location = '.'.join(str(part) for part in e.absolute_path) or '<root>'
        print(f"Error: Invalid setting '{location}' in configuration file '{config_file}': {e.message}",
              file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    return config.get(name) or {}


def load_app_config() -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    dotenv_path = _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root)

    log_config = _section(config, 'logging')
    log_level = os.environ.get('TRANSTREE_LOG_LEVEL', log_config.get('log_level', 'INFO')).upper()
    log_file_path = log_config.get('log_file_path', 'logs/transtree.log')
    log_to_console = log_config.get('log_to_console', True)
    logger = setup_logger(log_level, log_file_path, log_to_console)

    if dotenv_path:
        logger.info("Loaded environment variables from: %s", dotenv_path)
    else:
        logger.debug("No .env file found in '%s'. Relying on system environment variables if any.", project_root)

    csv_config = _section(config, 'csv')
    tsv_config = _section(config, 'tsv')

    csv_separator = os.environ.get('TRANSTREE_CSV_SEPARATOR', csv_config.get('separator', ','))
    if len(csv_separator) != 1:
        logger.warning("Ignoring CSV separator %r: a single character is required", csv_separator)
        csv_separator = ','

    return AppConfig(
        project_root=project_root,
        input_folder=config.get('input_folder', project_root),
        recognize_references=config.get('recognize_references', True),
        treat_empty_values_as_absent=config.get('treat_empty_values_as_absent', False),
        description_column_caption=config.get('description_column_caption', 'Description'),
        csv_separator=csv_separator,
        csv_text_format=TextFormat.from_name(csv_config.get('text_format', 'none')),
        tsv_expect_quotes=_env_flag('TRANSTREE_TSV_EXPECT_QUOTES', tsv_config.get('expect_quotes', False)),
        tsv_text_format=TextFormat.from_name(tsv_config.get('text_format', 'none')),
        json_text_format=TextFormat.from_name(_section(config, 'json').get('text_format', 'dotnet')),
        arb_text_format=TextFormat.from_name(_section(config, 'arb').get('text_format', 'arb')),
        log_level=log_level,
        log_file_path=log_file_path,
        log_to_console=log_to_console,
    )


def apply_parser_settings(config: AppConfig) -> None:
    """
    Copy parser settings into the parser classes.

    Must be called before parsing starts, never while a parse is running.
    """
    BaseParser.recognize_references = config.recognize_references
    BaseTableParser.treat_empty_values_as_absent = config.treat_empty_values_as_absent
    BaseTableParser.description_column_caption = config.description_column_caption
    CsvParser.separator = config.csv_separator
    CsvParser.text_processing_mode = config.csv_text_format
    TsvParser.expect_quotes = config.tsv_expect_quotes
    TsvParser.text_processing_mode = config.tsv_text_format
    JsonParser.text_processing_mode = config.json_text_format
    ArbParser.text_processing_mode = config.arb_text_format
    logging.getLogger(__name__).debug("Applied parser settings: %s", config)
