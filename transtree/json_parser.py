"""
Parsers for JSON-based translation files.

A document is walked recursively: string fields become entries whose key is the
dot-joined path of the enclosing objects, object fields become groups. All string
fields of an object are handled before its object fields.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from transtree.base_parser import BaseParser
from transtree.exceptions import DuplicateKeyError, GenericParserError, TextParseError
from transtree.placeholders import parse_placeholder
from transtree.text_format import TextFormat
from transtree.translation import Translation, TranslationEntry
from transtree.tree import TranslationTree, TreeNode

logger = logging.getLogger(__name__)

KEY_DEFAULT_FILE = "default_file"
KEY_DEFAULT_LOCALE = "default_locale"
KEY_GENERATED_NAMESPACE = "generated_namespace"
KEY_GENERATED_CLASS = "generated_class"
KEY_SECTION_TRANSLATIONS = "translations"
KEY_TRANSLATION_ASTERISK = "*"
KEY_TRANSLATION_DEFAULT = "default"

ARB_KEY_LOCALE = "@@locale"
ARB_KEY_GLOBAL_CONTEXT = "@@context"
ARB_KEY_LAST_MODIFIED = "@@last_modified"
ARB_KEY_AUTHOR = "@@author"
ARB_CUSTOM_PROPERTY_PREFIX = "@@x-"
ARB_KEY_PLACEHOLDERS = "placeholders"

# Entry metadata attributes of .arb files, mapped to TranslationEntry fields
ARB_ENTRY_ATTRIBUTES = {
    "description": "description",
    "type": "type",
    "context": "context",
    "source_text": "source_text",
    "screen": "screen",
    "video": "video",
}

ISO_8601_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")


@dataclass
class TranslationConfiguration:
    """Settings that tie a default translation file to its locale-specific siblings."""
    default_file: str
    default_locale: Optional[str] = None
    namespace: Optional[str] = None
    class_name: Optional[str] = None
    text_processing_mode: TextFormat = TextFormat.NONE
    # locale name -> file; the "*" entry is stored as "default"
    translations: Dict[str, str] = field(default_factory=dict)
    directory_hint: Optional[str] = None


def _reject_duplicate_names(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for name, value in pairs:
        if name in result:
            raise DuplicateKeyError(name, message=f"Duplicate name '{name}' in a JSON object")
        result[name] = value
    return result


def decode_json_object(text: str) -> Dict[str, Any]:
    """
    Decode a JSON document whose root is an object.

    Raises:
        TextParseError: On JSON syntax errors, with the line and column reported by the decoder.
        DuplicateKeyError: If one object lists the same name twice.
        GenericParserError: If the root is not an object.
    """
    try:
        document = json.loads(text, object_pairs_hook=_reject_duplicate_names)
    except json.JSONDecodeError as exc:
        raise TextParseError(exc.msg, exc.pos, exc.pos, exc.lineno, exc.colno) from exc
    if not isinstance(document, dict):
        raise GenericParserError("The root of a JSON translation file must be an object")
    return document


def qualify(group_name: str, name: str) -> str:
    return f"{group_name}.{name}" if group_name else name


def parse_iso8601(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    for date_format in ISO_8601_FORMATS:
        try:
            return datetime.strptime(value, date_format)
        except ValueError:
            continue
    return None


class JsonParser(BaseParser):
    """Plain nested JSON translation files."""

    extension = ".json"
    text_processing_mode: TextFormat = TextFormat.DOTNET

    def should_skip_property(self, name: str) -> bool:
        return False

    def split_target(self, name: str) -> Tuple[str, Optional[str]]:
        """Split a field name into the entry key and an optional target."""
        return name, None

    @staticmethod
    def _field_name(raw_name: str) -> str:
        name = raw_name.strip()
        if not name:
            raise GenericParserError(f"Invalid empty name '{raw_name}' encountered")
        return name

    def load_translation(self, translation_text: str, locale: Optional[str] = None) -> Optional[Translation]:
        document = decode_json_object(translation_text)
        translation = self.create_translation(document)
        self.walk(document, translation)
        logger.debug("Loaded %d entries from JSON", len(translation))
        return translation

    def create_translation(self, document: Mapping[str, Any]) -> Translation:
        """Create the Translation for a document. Formats with file-level metadata read it here."""
        return Translation()

    def walk(self, document: Mapping[str, Any], translation: Translation, group_name: str = "") -> Translation:
        """
        Add the entries of a document object and its child objects to the translation.

        Args:
            document: The decoded object.
            translation: The Translation being built.
            group_name: The qualified name of the object, empty at the top level.

        Returns:
            The same translation.

        Raises:
            DuplicateKeyError: If a qualified key already exists in the translation.
        """
        for name, value in document.items():
            if isinstance(value, str):
                self.add_string_field(translation, group_name, name, value)

        for name, value in document.items():
            if isinstance(value, dict):
                self.add_object_field(translation, group_name, name, value)

        return translation

    def add_string_field(self, translation: Translation, group_name: str, name: str, value: str) -> None:
        key = qualify(group_name, self._field_name(name))
        if key in translation:
            raise DuplicateKeyError(key, message=f"Duplicate key '{key}' specified in the translation file")
        translation.add(key, self.make_entry(key, value))

    def add_object_field(self, translation: Translation, group_name: str, name: str,
                         value: Mapping[str, Any]) -> None:
        self.walk(value, translation, qualify(group_name, self._field_name(name)))

    def load_translation_structure(self, content: str) -> Optional[TranslationTree]:
        document = decode_json_object(content)
        tree = TranslationTree()
        self._build_node(document, tree.root, "")
        return tree

    def _build_node(self, document: Mapping[str, Any], node: TreeNode, group_name: str) -> None:
        for name, value in document.items():
            if not isinstance(value, str):
                continue
            key = self._field_name(name)
            if self.should_skip_property(key):
                continue
            key, _ = self.split_target(key)
            qualified_key = qualify(group_name, key)
            # a dotted field name places its leaf in the group named by the prefix
            group, _, leaf_name = key.rpartition('.')
            owner = node.make_node(group) if group else node
            if owner is None or not leaf_name:
                raise GenericParserError(
                    f"Key '{qualified_key}' could not be used to build a tree of translation entries")
            try:
                owner.add_leaf(leaf_name, self.make_entry(qualified_key, value).is_templated)
            except DuplicateKeyError:
                raise DuplicateKeyError(
                    qualified_key,
                    message=f"Duplicate key '{qualified_key}' specified in the translation file") from None

        seen_groups = set()
        for name, value in document.items():
            if not isinstance(value, dict):
                continue
            group = self._field_name(name)
            if self.should_skip_property(group):
                continue
            if group.lower() in seen_groups:
                raise GenericParserError(f"Duplicate group name '{group}' specified")
            seen_groups.add(group.lower())
            child = node.make_node(group)
            if child is None:
                raise GenericParserError(f"Group '{group}' could not be used to build a tree of translation entries")
            self._build_node(value, child, qualify(group_name, group))

    def parse_configuration(self, file_content: str) -> TranslationConfiguration:
        document = decode_json_object(file_content)

        def get_string(name: str) -> Optional[str]:
            value = document.get(name)
            return value if isinstance(value, str) else None

        configuration = TranslationConfiguration(
            default_file=(get_string(KEY_DEFAULT_FILE) or "").strip(),
            default_locale=get_string(KEY_DEFAULT_LOCALE),
            namespace=get_string(KEY_GENERATED_NAMESPACE),
            class_name=get_string(KEY_GENERATED_CLASS),
            text_processing_mode=self.get_text_processing_mode(),
        )
        if not configuration.default_file:
            return configuration

        section = next((value for name, value in document.items()
                        if name.lower() == KEY_SECTION_TRANSLATIONS), None)
        if isinstance(section, dict):
            seen = set()
            for name, value in section.items():
                locale = name.strip()
                if locale == KEY_TRANSLATION_ASTERISK:
                    locale = KEY_TRANSLATION_DEFAULT
                if not isinstance(value, str):
                    raise GenericParserError(f"Translation reference '{name}' is not a string")
                if locale.lower() in seen:
                    raise GenericParserError(
                        f"Duplicate translation reference '{name}' specified in the list of translations")
                seen.add(locale.lower())
                configuration.translations[locale] = value.strip()

        return configuration


class ArbParser(JsonParser):
    """
    Flutter Application Resource Bundle files.

    Besides entries, an .arb file carries file metadata ("@@locale", "@@author", ...),
    custom properties ("@@x-name") and per-entry metadata objects ("@key").
    """

    extension = ".arb"
    text_processing_mode: TextFormat = TextFormat.ARB

    def should_skip_property(self, name: str) -> bool:
        return name.startswith('@')

    def split_target(self, name: str) -> Tuple[str, Optional[str]]:
        # "key@target" names the HTML target of the entry
        at_index = name.find('@')
        if 0 < at_index < len(name) - 1:
            return name[:at_index], name[at_index + 1:]
        return name, None

    def create_translation(self, document: Mapping[str, Any]) -> Translation:
        def get_string(name: str) -> Optional[str]:
            value = document.get(name)
            return value.strip() if isinstance(value, str) else None

        translation = Translation(locale=get_string(ARB_KEY_LOCALE), context=get_string(ARB_KEY_GLOBAL_CONTEXT))
        translation.author = get_string(ARB_KEY_AUTHOR)
        translation.last_modified = parse_iso8601(get_string(ARB_KEY_LAST_MODIFIED))
        return translation

    def add_string_field(self, translation: Translation, group_name: str, name: str, value: str) -> None:
        key = self._field_name(name)

        if key.startswith(ARB_CUSTOM_PROPERTY_PREFIX) and len(key) > len(ARB_CUSTOM_PROPERTY_PREFIX):
            translation.custom_properties[key[len(ARB_CUSTOM_PROPERTY_PREFIX):]] = value
            return

        if key.startswith('@'):
            return
        key, target = self.split_target(key)

        qualified_key = qualify(group_name, key)
        if qualified_key in translation:
            raise DuplicateKeyError(qualified_key,
                                    message=f"Duplicate key '{qualified_key}' specified in the translation file")
        entry = self.make_entry(qualified_key, value)
        entry.target = target
        translation.add(qualified_key, entry)

    def add_object_field(self, translation: Translation, group_name: str, name: str,
                         value: Mapping[str, Any]) -> None:
        group = self._field_name(name)
        if not group.startswith('@'):
            super().add_object_field(translation, group_name, group, value)
            return

        if len(group) == 1:
            return
        entry_key = qualify(group_name, group[1:])
        entry = translation.get(entry_key)
        if entry is None:
            logger.warning("Metadata found for key '%s', which has no entry", entry_key)
            return
        self._apply_entry_metadata(entry, value)

    @staticmethod
    def _apply_entry_metadata(entry: TranslationEntry, metadata: Mapping[str, Any]) -> None:
        for raw_name, value in metadata.items():
            name = raw_name.strip().lower()
            if isinstance(value, str):
                attribute = ARB_ENTRY_ATTRIBUTES.get(name)
                if attribute:
                    setattr(entry, attribute, value)
            elif name == ARB_KEY_PLACEHOLDERS and isinstance(value, dict):
                for placeholder_name, definition in value.items():
                    if isinstance(definition, dict):
                        entry.add_placeholder(parse_placeholder(placeholder_name, definition))
