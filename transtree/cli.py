import logging
import os
import sys
from typing import List, Optional

import click
from tqdm import tqdm

from transtree import file_formats
from transtree.app_config import AppConfig, apply_parser_settings, load_app_config
from transtree.base_parser import BaseParser, get_file_extension
from transtree.exceptions import GenericParserError
from transtree.translation import Translation
from transtree.translation_validator import check_encoding_and_mojibake, validate_translation
from transtree.tree import TreeNode

logger = logging.getLogger(__name__)


def _parser_for(file_path: str) -> BaseParser:
    parser = file_formats.get_parser_for_file(file_path)
    if parser is None:
        raise click.ClickException(
            f"No parser registered for '{get_file_extension(file_path) or file_path}'. "
            f"Supported extensions: {', '.join(file_formats.supported_extensions())}")
    return parser


def _load(file_path: str, locale: Optional[str]) -> Translation:
    parser = _parser_for(file_path)
    try:
        translation = parser.load_translation_file(file_path, locale)
    except GenericParserError as exc:
        logger.error("%s", exc)
        raise click.ClickException(str(exc))
    if translation is None:
        raise click.ClickException(f"No translation for locale '{locale or '<default>'}' found in '{file_path}'")
    return translation


def _echo_node(node: TreeNode, depth: int) -> None:
    indent = "  " * depth
    for key, leaf in node.keys.items():
        click.echo(f"{indent}{key}{' (templated)' if leaf.is_templated else ''}")
    for child in node.child_nodes.values():
        click.echo(f"{indent}{child.name}/")
        _echo_node(child, depth + 1)


@click.group()
@click.version_option(package_name="transtree")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Extract translation entries from CSV, TSV, JSON and ARB files."""
    config = load_app_config()
    apply_parser_settings(config)
    file_formats.use_default_formats()
    ctx.obj = config


@cli.command("keys")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--locale", default=None, help="Locale column to read from CSV/TSV files.")
def keys(file_path: str, locale: Optional[str]) -> None:
    """List the qualified keys of a translation file with their values."""
    translation = _load(file_path, locale)
    for key, entry in translation.items():
        value = f"@{entry.reference}" if entry.is_reference else entry.text
        marker = "T" if entry.is_templated else "-"
        click.echo(f"{marker} {key}\t{value}")


@cli.command("tree")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
def tree(file_path: str) -> None:
    """Print the key tree of a translation file or of the default file named by a .jsoncfg/.arbcfg file."""
    try:
        if file_formats.get_config_parser(get_file_extension(file_path)) is not None:
            key_tree, _ = file_formats.load_translation_structure(file_path)
        else:
            key_tree = _parser_for(file_path).load_translation_structure_file(file_path)
    except GenericParserError as exc:
        logger.error("%s", exc)
        raise click.ClickException(str(exc))

    if key_tree is None:
        raise click.ClickException(f"'{file_path}' contains no keys")
    _echo_node(key_tree.root, 0)


@cli.command("scan")
@click.argument("folder", required=False, type=click.Path(exists=True, file_okay=False))
@click.pass_obj
def scan(config: AppConfig, folder: Optional[str]) -> None:
    """Parse every translation file below FOLDER (default: the configured input folder)."""
    folder = folder or config.input_folder
    extensions = set(file_formats.supported_extensions())
    files: List[str] = []
    for dirpath, _, filenames in os.walk(folder):
        for filename in sorted(filenames):
            if get_file_extension(filename) in extensions:
                files.append(os.path.join(dirpath, filename))

    if not files:
        logger.info("No translation files found in '%s'.", folder)
        return

    failures = {}
    total_entries = 0
    for file_path in tqdm(files, desc="Parsing", unit="file"):
        try:
            translation = _parser_for(file_path).load_translation_file(file_path)
        except GenericParserError as exc:
            logger.error("%s", exc)
            failures[file_path] = str(exc)
            continue
        if translation is not None:
            total_entries += len(translation)

    click.echo(f"Parsed {len(files) - len(failures)} of {len(files)} file(s), {total_entries} entries.")
    if failures:
        for file_path, message in failures.items():
            click.echo(f"FAILED {file_path}: {message}", err=True)
        sys.exit(1)


@cli.command("validate")
@click.argument("base_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("target_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--locale", default=None, help="Locale column of TARGET_FILE for CSV/TSV files.")
def validate(base_file: str, target_file: str, locale: Optional[str]) -> None:
    """Check TARGET_FILE against BASE_FILE: keys, placeholders, references and encoding."""
    base = _load(base_file, None)
    target = _load(target_file, locale)
    mode = _parser_for(base_file).get_text_processing_mode()

    errors = check_encoding_and_mojibake(target_file) + validate_translation(base, target, mode)
    if not errors:
        click.echo("No issues found")
        return

    for error in errors:
        click.echo(error)
    logger.error("Found %d issue(s) in '%s'", len(errors), target_file)
    sys.exit(1)
