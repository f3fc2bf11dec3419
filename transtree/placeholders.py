"""
Recognition of template placeholders in entry values.

Each TextFormat owns a scanner that walks a text and yields one item per closing
brace that matches an open one. Scanners for additional syntaxes can be plugged in
with register_template_syntax().
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from transtree.text_format import TextFormat

logger = logging.getLogger(__name__)

# A scanner yields the inner text of an outermost placeholder when it closes,
# and None when a nested placeholder closes.
PlaceholderScanner = Callable[[str], Iterator[Optional[str]]]

PLACEHOLDER_KEY_TYPE = "type"
PLACEHOLDER_KEY_FORMAT = "format"
PLACEHOLDER_KEY_EXAMPLE = "example"
PLACEHOLDER_KEY_OPTIONAL_PARAMETERS = "optionalParameters"


class MalformedTemplateError(ValueError):
    """Raised by scanners on unmatched braces or hanging quotes."""


def _scan_braces(text: str, quote_escaping: bool, doubled_braces: bool) -> Iterator[Optional[str]]:
    in_quotes = False
    depth = 0
    start = -1
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        next_char = text[i + 1] if i + 1 < n else None

        if quote_escaping and ch == "'":
            if next_char == "'":
                i += 2
            else:
                in_quotes = not in_quotes
                i += 1
            continue

        if doubled_braces and not in_quotes:
            if ch == '{' and next_char == '{':
                i += 2
                continue
            # "}}" closes an open placeholder first, otherwise it is a literal brace
            if ch == '}' and next_char == '}' and depth == 0:
                i += 2
                continue

        if not in_quotes:
            if ch == '{':
                if depth == 0:
                    start = i
                depth += 1
            elif ch == '}':
                if depth == 0:
                    raise MalformedTemplateError(f"Unmatched closing curly bracket at position {i}")
                depth -= 1
                yield text[start + 1:i] if depth == 0 else None
        i += 1

    if in_quotes:
        raise MalformedTemplateError("Hanging open quote")
    if depth > 0:
        raise MalformedTemplateError("Unclosed opening curly bracket")


def _scan_nothing(text: str) -> Iterator[Optional[str]]:
    return iter(())


def _scan_arb(text: str) -> Iterator[Optional[str]]:
    return _scan_braces(text, quote_escaping=True, doubled_braces=False)


def _scan_arb_no_escaping(text: str) -> Iterator[Optional[str]]:
    return _scan_braces(text, quote_escaping=False, doubled_braces=False)


def _scan_dotnet(text: str) -> Iterator[Optional[str]]:
    return _scan_braces(text, quote_escaping=False, doubled_braces=True)


_SCANNERS: Dict[TextFormat, PlaceholderScanner] = {
    TextFormat.NONE: _scan_nothing,
    TextFormat.BACKSLASH_ESCAPING: _scan_nothing,
    TextFormat.ARB: _scan_arb,
    TextFormat.ARB_NO_ESCAPING: _scan_arb_no_escaping,
    TextFormat.DOTNET: _scan_dotnet,
}


def register_template_syntax(mode: TextFormat, scanner: PlaceholderScanner) -> None:
    """Install the placeholder scanner used for the given mode, replacing the current one."""
    _SCANNERS[mode] = scanner


def get_template_syntax(mode: TextFormat) -> PlaceholderScanner:
    return _SCANNERS.get(mode, _scan_nothing)


def is_templated(text: Optional[str], mode: TextFormat) -> bool:
    """
    Check whether the text contains at least one placeholder under the given mode.

    Malformed placeholder syntax is not an error: such text is reported as plain.

    Args:
        text: The entry value to classify.
        mode: The escaping mode that defines the placeholder syntax.

    Returns:
        True if a placeholder was found, False otherwise.
    """
    if not text:
        return False
    try:
        for _ in get_template_syntax(mode)(text):
            return True
    except MalformedTemplateError as exc:
        logger.debug("Treating text as plain (%s): %r", exc, text)
    return False


def extract_placeholder_names(text: Optional[str], mode: TextFormat) -> List[str]:
    """
    Return the names of the outermost placeholders found in the text, in order.

    The name is the part of the placeholder before any ',' or ':' so that "{0:N2}"
    and "{count, plural, ...}" give "0" and "count". Malformed text yields the
    placeholders found before the error.
    """
    names: List[str] = []
    if not text:
        return names
    try:
        for inner in get_template_syntax(mode)(text):
            if inner is not None:
                names.append(inner.split(',', 1)[0].split(':', 1)[0].strip())
    except MalformedTemplateError as exc:
        logger.debug("Stopped collecting placeholders (%s): %r", exc, text)
    return names


@dataclass
class Placeholder:
    """Describes one parameter of a templated entry as declared in the source document."""
    name: str
    type: Optional[str] = None
    format: Optional[str] = None
    example: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    optional_parameters: Dict[str, str] = field(default_factory=dict)


def parse_placeholder(name: str, definition: Mapping[str, Any]) -> Placeholder:
    """
    Build a Placeholder from its metadata object.

    Recognized string attributes (type, format, example) are matched case-insensitively;
    other string attributes are kept in `properties`. String members of an
    "optionalParameters" object go to `optional_parameters`. Values of other kinds
    are ignored.

    Args:
        name: The placeholder name, as used in the entry text.
        definition: The decoded metadata object.

    Returns:
        The parsed Placeholder.
    """
    placeholder = Placeholder(name=name.strip())

    for raw_key, value in definition.items():
        key = raw_key.strip()
        lowered = key.lower()
        if isinstance(value, str):
            if lowered == PLACEHOLDER_KEY_TYPE:
                placeholder.type = value
            elif lowered == PLACEHOLDER_KEY_FORMAT:
                placeholder.format = value
            elif lowered == PLACEHOLDER_KEY_EXAMPLE:
                placeholder.example = value
            else:
                placeholder.properties[key] = value
        elif isinstance(value, Mapping) and lowered == PLACEHOLDER_KEY_OPTIONAL_PARAMETERS.lower():
            for child_key, child_value in value.items():
                if isinstance(child_value, str):
                    placeholder.optional_parameters[child_key.strip()] = child_value

    return placeholder
