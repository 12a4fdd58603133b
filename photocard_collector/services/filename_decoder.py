"""Decode photocard metadata from image filenames.

Filenames follow a loose convention of underscore-separated tokens:

    <category>_<album...>_<store...>_<version...>_<member>.png

Examples:
    albums_awe_amazon_usa_jurin.png
    albums_new_dna_aladin_rakuten_g_ver_standard_hinata.png
    events_the_first_howl_lucky_draw_r3_standard_maya.png
    season_greetings_season_greetings_sg_2023_standard_harvey.png

The category is read from the front and the member from the back. Version
tokens are matched backward from the member by an ordered rule table, and
whatever remains in the middle is split into album name and store at the
first recognized store word.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from photocard_collector.enums import (
    Category,
    Member,
    ReleaseStructure,
    ReleaseType,
    Version,
)
from photocard_collector.services.lexicon import DEFAULT_LEXICON, Lexicon
from photocard_collector.services.release_rules import derive_release_fields

log = logging.getLogger(__name__)

MIN_TOKENS = 4

_EXTENSION_RE = re.compile(r"\.(png|jpe?g)$", re.IGNORECASE)


class DecodeErrorKind(str, Enum):
    MALFORMED_INPUT = "MalformedInput"
    UNKNOWN_CATEGORY = "UnknownCategory"
    UNKNOWN_MEMBER = "UnknownMember"


class DecodeError(ValueError):
    """A filename could not be classified."""

    kind: DecodeErrorKind = None

    def __init__(self, filename: str, token: Optional[str], reason: str):
        self.filename = filename
        self.token = token
        self.reason = reason
        super().__init__(f"{reason}: {filename!r}")


class MalformedInput(DecodeError):
    kind = DecodeErrorKind.MALFORMED_INPUT


class UnknownCategory(DecodeError):
    kind = DecodeErrorKind.UNKNOWN_CATEGORY


class UnknownMember(DecodeError):
    kind = DecodeErrorKind.UNKNOWN_MEMBER


@dataclass(frozen=True)
class ParsedFilename:
    """Structured metadata recovered from a photocard filename."""
    category: Category
    release_type: ReleaseType
    release_structure: ReleaseStructure
    album_name: str
    store: Optional[str]
    version: Version
    member: Member

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "category": self.category.value,
            "release_type": self.release_type.value,
            "release_structure": self.release_structure.value,
            "album_name": self.album_name,
            "store": self.store,
            "version": self.version.value,
            "member": self.member.value,
        }


@dataclass(frozen=True)
class VersionRule:
    """A run of tokens immediately before the member that names a version.

    Each slot is the set of tokens allowed at that position. When ``version``
    is None the version is looked up from the token in the first slot.
    """
    name: str
    slots: Tuple[FrozenSet[str], ...]
    version: Optional[Version] = None

    @property
    def width(self) -> int:
        return len(self.slots)

    def match(
        self,
        tokens: Sequence[str],
        member_index: int,
        floor: int,
        lexicon: Lexicon,
    ) -> Optional[Version]:
        start = member_index - self.width
        if start < floor:
            return None
        window = tokens[start:member_index]
        if not all(token in slot for token, slot in zip(window, self.slots)):
            return None
        if self.version is not None:
            return self.version
        return lexicon.release_versions[window[0]]


def build_version_rules(lexicon: Lexicon) -> Tuple[VersionRule, ...]:
    """Version rules in precedence order, most specific first."""
    g, ver = (frozenset({token}) for token in lexicon.g_ver_tokens)
    standard = frozenset({lexicon.standard_token})
    releases = frozenset(lexicon.release_versions)
    return (
        VersionRule("g_ver_standard", (g, ver, standard), Version.G_VER),
        VersionRule("g_ver", (g, ver), Version.G_VER),
        VersionRule("release_standard", (releases, standard)),
        VersionRule("standard", (standard,), Version.STANDARD),
        VersionRule("release", (releases,)),
    )


def strip_extension(filename: str) -> str:
    """Drop any directory part and a trailing .png/.jpg/.jpeg suffix."""
    return _EXTENSION_RE.sub("", os.path.basename(filename.strip()))


def tokenize(filename: str) -> List[str]:
    """Split a filename into lower-case tokens (empty runs are ignored)."""
    return [token for token in strip_extension(filename).lower().split("_") if token]


def format_display(tokens: Sequence[str]) -> str:
    """Join tokens with spaces, upper-casing the first letter of each word."""
    return " ".join(token[:1].upper() + token[1:] for token in tokens)


class FilenameDecoder:
    """Turns a photocard filename into a ParsedFilename.

    The decoder holds only read-only tables, so one instance can be shared
    freely between callers.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon
        self.version_rules = build_version_rules(lexicon)

    def decode(self, filename: str) -> ParsedFilename:
        tokens = tokenize(filename)
        if len(tokens) < MIN_TOKENS:
            raise MalformedInput(
                filename, None,
                f"Invalid filename format: insufficient parts ({len(tokens)} < {MIN_TOKENS})",
            )

        category, category_end = self.lexicon.category_for(tokens)
        if category is None:
            raise UnknownCategory(filename, tokens[0], f"Unknown category {tokens[0]!r}")

        member_index = len(tokens) - 1
        member = self.lexicon.members.get(tokens[member_index])
        if member is None:
            raise UnknownMember(
                filename, tokens[member_index], f"Unknown member {tokens[member_index]!r}"
            )

        version, version_start = self._match_version(tokens, category_end, member_index)
        middle = tokens[category_end:version_start]

        store_start = self._find_store_start(middle)
        if store_start is None:
            album_tokens, store_tokens = middle, []
        else:
            album_tokens, store_tokens = middle[:store_start], middle[store_start:]

        album_name = format_display(album_tokens)
        store = format_display(store_tokens) if store_tokens else None
        release_type, release_structure = derive_release_fields(category, album_name, store)

        return ParsedFilename(
            category=category,
            release_type=release_type,
            release_structure=release_structure,
            album_name=album_name,
            store=store,
            version=version,
            member=member,
        )

    def _match_version(
        self, tokens: Sequence[str], floor: int, member_index: int
    ) -> Tuple[Version, int]:
        """Return (version, index where the version tokens begin)."""
        for rule in self.version_rules:
            version = rule.match(tokens, member_index, floor, self.lexicon)
            if version is not None:
                log.debug("Version rule %s matched %s", rule.name, version.value)
                return version, member_index - rule.width
        return Version.STANDARD, member_index

    def _find_store_start(self, middle: Sequence[str]) -> Optional[int]:
        """Index in ``middle`` where the store begins, or None.

        Two-word store phrases anywhere in the segment take precedence over
        single store words.
        """
        for i in range(len(middle) - 1):
            pair = tuple(middle[i:i + 2])
            for phrase in self.lexicon.store_phrases:
                if pair == phrase:
                    return i

        for i, token in enumerate(middle):
            if token in self.lexicon.store_words:
                return i

        return None


_default_decoder = FilenameDecoder()


def decode_filename(filename: str) -> ParsedFilename:
    """Decode ``filename`` with the default dictionaries."""
    return _default_decoder.decode(filename)


__all__ = [
    "DecodeError",
    "DecodeErrorKind",
    "MalformedInput",
    "UnknownCategory",
    "UnknownMember",
    "ParsedFilename",
    "VersionRule",
    "FilenameDecoder",
    "build_version_rules",
    "decode_filename",
    "format_display",
    "strip_extension",
    "tokenize",
]
