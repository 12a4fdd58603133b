"""Classification dictionaries used by the filename decoder.

All keys are lower-case tokens exactly as they appear between underscores in
a photocard filename. A Lexicon is immutable once built; the decoder only
reads from it.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from photocard_collector.enums import Category, Member, Version


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Lexicon:
    """Read-only token tables for category, member, version and store detection."""

    # Multi-token category phrases, tried before the single-token table
    category_phrases: Mapping[Tuple[str, ...], Category]
    categories: Mapping[str, Category]
    members: Mapping[str, Member]
    # Version tokens that may stand alone or precede "standard" (r1, zero, ...)
    release_versions: Mapping[str, Version]
    standard_token: str = "standard"
    g_ver_tokens: Tuple[str, str] = ("g", "ver")
    # Two-token store phrases in priority order
    store_phrases: Tuple[Tuple[str, str], ...] = ()
    store_words: FrozenSet[str] = field(default_factory=frozenset)

    def category_for(self, tokens) -> Tuple[Optional[Category], int]:
        """Match a category at the start of ``tokens``.

        Returns (category, number of tokens consumed), or (None, 0) on a miss.
        """
        for phrase, category in self.category_phrases.items():
            if tuple(tokens[:len(phrase)]) == phrase:
                return category, len(phrase)
        category = self.categories.get(tokens[0]) if tokens else None
        if category is None:
            return None, 0
        return category, 1


DEFAULT_LEXICON = Lexicon(
    category_phrases=_frozen({
        ("season", "greetings"): Category.SEASON_GREETINGS,
    }),
    categories=_frozen({
        "albums": Category.ALBUMS,
        "events": Category.EVENTS,
        "merch": Category.MERCH,
        "fanclub": Category.FANCLUB,
        "showcase": Category.SHOWCASE,
    }),
    members=_frozen({member.value.lower(): member for member in Member}),
    release_versions=_frozen({
        "r1": Version.R1,
        "r2": Version.R2,
        "r3": Version.R3,
        "zero": Version.ZERO,
    }),
    store_phrases=(
        ("tower", "records"),
        ("aladin", "rakuten"),
        ("amazon", "usa"),
        ("lucky", "draw"),
        ("md", "benefit"),
        ("merch", "benefit"),
        ("watch", "band"),
        ("the", "box"),
        ("alphaz", "exclusive"),
        ("weverse", "shop"),
        ("official", "store"),
    ),
    store_words=frozenset({
        "amazon",
        "hmv",
        "ktown4u",
        "tower",
        "aladin",
        "rakuten",
        "yes24",
        "weverse",
        "soundwave",
        "broadcast",
        "exclusive",
        "lucky",
        "benefit",
        "md",
        "pob",
        "vip",
        "sg",
        "shops",
        "merch",
        "fanclub",
    }),
)


__all__ = ["Lexicon", "DEFAULT_LEXICON"]
