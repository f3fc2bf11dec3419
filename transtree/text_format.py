import string
from enum import Enum


class TextFormat(Enum):
    """
    Escaping convention used when decoding entry values and recognizing placeholders.

    NONE: values are taken verbatim and placeholders are not detected.
    BACKSLASH_ESCAPING: unsafe characters are prefixed with a backslash (C++, JSON, TOML
        basic strings). Placeholders are not supported.
    ARB: curly-brace placeholders as in Flutter .arb files with "use-escaping: true",
        where a single quote starts a literal run and two quotes stand for one.
    ARB_NO_ESCAPING: curly-brace placeholders as in .arb files, quotes carry no meaning.
    DOTNET: curly-brace placeholders following String.Format() rules ("{{" and "}}" are
        literal braces). Values are treated as optionally backslash-escaped.
    """
    NONE = "none"
    BACKSLASH_ESCAPING = "backslash"
    ARB = "arb"
    ARB_NO_ESCAPING = "arb_no_escaping"
    DOTNET = "dotnet"

    @classmethod
    def from_name(cls, name: str) -> "TextFormat":
        """Look a mode up by value or member name, ignoring case, dashes and underscores."""
        normalized = name.strip().lower().replace('-', '_')
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown text format '{name}'")


# Modes in which values may carry backslash escapes that are decoded at load time
UNESCAPING_FORMATS = (TextFormat.BACKSLASH_ESCAPING, TextFormat.DOTNET)

_SIMPLE_ESCAPES = {
    '"': '"',
    '\\': '\\',
    '/': '/',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}


def unescape_string(value: str) -> str:
    """
    Decode backslash escapes used in JSON and TOML strings.

    Unknown sequences and truncated or malformed \\u sequences are kept as they are.

    Args:
        value: The escaped text.

    Returns:
        The decoded text.
    """
    result = []
    i = 0
    n = len(value)
    while i < n:
        ch = value[i]
        if ch != '\\':
            result.append(ch)
            i += 1
            continue

        i += 1
        if i >= n:
            # A lone trailing backslash is dropped
            break

        next_char = value[i]
        if next_char in _SIMPLE_ESCAPES:
            result.append(_SIMPLE_ESCAPES[next_char])
        elif next_char == 'u':
            hex_digits = value[i + 1:i + 5]
            # int() alone would also take a sign, spaces or underscores
            if len(hex_digits) == 4 and all(c in string.hexdigits for c in hex_digits):
                result.append(chr(int(hex_digits, 16)))
                i += 4
            else:
                result.append('\\u')
        else:
            result.append('\\' + next_char)
        i += 1

    return ''.join(result)
