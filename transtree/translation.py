"""In-memory model of one parsed translation source."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, MutableMapping, Optional, Union

from transtree.exceptions import DuplicateKeyError
from transtree.placeholders import Placeholder


@dataclass(frozen=True)
class Literal:
    """Literal entry text, with the source form kept when escapes were decoded."""
    text: str
    escaped_text: Optional[str] = None


@dataclass(frozen=True)
class Reference:
    """Entry text that is taken from another key."""
    key: str


EntryValue = Union[Literal, Reference]


@dataclass
class TranslationEntry:
    """One localizable key with its value and the metadata found next to it."""
    key: str
    value: EntryValue
    is_templated: bool = False
    target: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    context: Optional[str] = None
    source_text: Optional[str] = None
    screen: Optional[str] = None
    video: Optional[str] = None
    placeholders: List[Placeholder] = field(default_factory=list)

    @property
    def text(self) -> Optional[str]:
        return self.value.text if isinstance(self.value, Literal) else None

    @property
    def escaped_text(self) -> Optional[str]:
        return self.value.escaped_text if isinstance(self.value, Literal) else None

    @property
    def reference(self) -> Optional[str]:
        return self.value.key if isinstance(self.value, Reference) else None

    @property
    def is_reference(self) -> bool:
        return isinstance(self.value, Reference)

    def add_placeholder(self, placeholder: Placeholder) -> None:
        self.placeholders.append(placeholder)


class Translation(MutableMapping):
    """
    Entries of one locale keyed by qualified key ("group.subgroup.key").

    Keys are unique: adding an existing key raises DuplicateKeyError and keeps the
    entry that was there first. Entries can be removed, but never silently replaced.
    """

    def __init__(self, locale: Optional[str] = None, context: Optional[str] = None):
        self._entries: Dict[str, TranslationEntry] = {}
        self.locale = locale
        self.context = context
        self.author: Optional[str] = None
        self.last_modified: Optional[datetime] = None
        self.custom_properties: Dict[str, str] = {}
        self.original_file: Optional[str] = None

    def add(self, key: str, entry: TranslationEntry, line_number: Optional[int] = None) -> TranslationEntry:
        if key in self._entries:
            raise DuplicateKeyError(key, line_number)
        self._entries[key] = entry
        return entry

    def __setitem__(self, key: str, entry: TranslationEntry) -> None:
        self.add(key, entry)

    def __getitem__(self, key: str) -> TranslationEntry:
        return self._entries[key]

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation):
            return NotImplemented
        return (self._entries == other._entries
                and self.locale == other.locale
                and self.context == other.context
                and self.author == other.author
                and self.last_modified == other.last_modified
                and self.custom_properties == other.custom_properties)

    def __repr__(self) -> str:
        return f"Translation(locale={self.locale!r}, entries={len(self._entries)})"
