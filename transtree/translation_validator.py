from typing import Iterable, List, Set, Tuple
import re
from collections import Counter

from transtree.placeholders import extract_placeholder_names
from transtree.text_format import TextFormat
from transtree.translation import Translation
from transtree.tree import split_path


def check_key_coverage(base_keys: Set[str], target_keys: Set[str]) -> Tuple[Set[str], Set[str]]:
    """
    Compares the keys of a target translation against the base (default) translation.

    Args:
        base_keys: A set of keys from the base translation.
        target_keys: A set of keys from the target locale translation.

    Returns:
        A tuple containing two sets:
        - missing_keys: Keys present in the base translation but missing from the target.
        - extra_keys: Keys present in the target but absent from the base translation.
    """
    missing_keys = base_keys - target_keys
    extra_keys = target_keys - base_keys
    return missing_keys, extra_keys


def check_placeholder_parity(base_string: str, target_string: str, mode: TextFormat) -> bool:
    """
    Checks if the placeholders are identical between a base and a target string.
    Placeholders are recognized with the syntax of the given escaping mode.
    Reordering is allowed, but each placeholder must occur the same number of times.

    Args:
        base_string: The base text.
        target_string: The translated text.
        mode: The escaping mode of the source files.

    Returns:
        True if the placeholders in both strings match, False otherwise.
    """
    base_placeholders = Counter(extract_placeholder_names(base_string, mode))
    target_placeholders = Counter(extract_placeholder_names(target_string, mode))

    return base_placeholders == target_placeholders


def check_references(translation: Translation) -> List[str]:
    """Reports entries that reference a key missing from the translation."""
    errors = []
    for key, entry in translation.items():
        if entry.is_reference and entry.reference not in translation:
            errors.append(f"Key '{key}' references unknown key '{entry.reference}'.")
    return errors


def lint_translation_keys(keys: Iterable[str]) -> List[str]:
    """Reports keys that cannot be placed in a key tree (empty segments such as 'a..b')."""
    return [f"Malformed key '{key}' with an empty segment." for key in keys if split_path(key) is None]


def check_encoding_and_mojibake(file_path: str) -> List[str]:
    """
    Checks a file for UTF-8 encoding and common mojibake patterns.

    Args:
        file_path: The path to the file to check.

    Returns:
        A list of string error messages. An empty list means the file is valid.
    """
    errors = []

    # 1. Check for valid UTF-8 encoding
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError:
        errors.append(f"File '{file_path}' is not a valid UTF-8 file.")
        return errors  # Stop further checks if the file can't be read
    except OSError as e:
        errors.append(f"Could not read file '{file_path}'. Reason: {e}")
        return errors

    # 2. 'Ã' followed by a character in 0x80-0xFF is UTF-8 text that was
    # decoded as latin-1 or cp1252
    mojibake_pattern = re.compile(r'Ã[\x80-\xff]')
    if mojibake_pattern.search(content):
        errors.append(f"Potential mojibake detected in '{file_path}'. Found patterns like 'Ã¼', 'Ã¤', etc.")

    # 3. Check for the Unicode replacement character
    if '\uFFFD' in content:
        errors.append(f"File '{file_path}' contains the Unicode replacement character (\uFFFD), indicating a previous encoding/decoding error.")

    return errors


def validate_translation(base: Translation, target: Translation, mode: TextFormat) -> List[str]:
    """
    Runs all checks of a target translation against its base translation.

    Args:
        base: The default translation.
        target: The locale-specific translation.
        mode: The escaping mode used to recognize placeholders.

    Returns:
        A list of error messages. An empty list means the target is consistent with the base.
    """
    errors = lint_translation_keys(target.keys())

    missing_keys, extra_keys = check_key_coverage(set(base.keys()), set(target.keys()))
    for key in sorted(missing_keys):
        errors.append(f"Key '{key}' is missing from the translation.")
    for key in sorted(extra_keys):
        errors.append(f"Key '{key}' does not exist in the base translation.")

    for key, entry in target.items():
        base_entry = base.get(key)
        if base_entry is None or base_entry.text is None or entry.text is None:
            continue
        if not check_placeholder_parity(base_entry.text, entry.text, mode):
            errors.append(f"Placeholders of key '{key}' differ from the base translation.")

    errors.extend(check_references(target))
    return errors
