"""Derive release type and release structure from decoded photocard fields.

Both derivations are pure functions of (category, album_name, store), so the
catalog can recompute them whenever a user corrects a decoded field.
"""

from typing import Optional, Tuple

from photocard_collector.enums import Category, ReleaseStructure, ReleaseType

# Categories with a fixed release type
_CATEGORY_RELEASE_TYPES = {
    Category.ALBUMS: ReleaseType.ALBUM,
    Category.FANCLUB: ReleaseType.FANMEETING,
    Category.SEASON_GREETINGS: ReleaseType.SEASON_GREETINGS,
    Category.SHOWCASE: ReleaseType.SHOWCASE,
}

# Categories refined by keywords: (field, needle, release type), first match wins
_EVENT_KEYWORDS: Tuple[Tuple[str, str, ReleaseType], ...] = (
    ("album", "anniversary", ReleaseType.ANNIVERSARY),
    ("store", "lucky draw", ReleaseType.LUCKY_DRAW),
    ("album", "kcon", ReleaseType.KCON),
    ("album", "fanmeeting", ReleaseType.FANMEETING),
)
_KEYWORD_CATEGORIES = frozenset({Category.EVENTS, Category.MERCH})

# Store needles, checked in order against the lower-cased store text
_STORE_STRUCTURES: Tuple[Tuple[Tuple[str, ...], ReleaseStructure], ...] = (
    (("tower records",), ReleaseStructure.TOWER_RECORDS),
    (("ktown4u",), ReleaseStructure.KTOWN4U),
    (("hmv",), ReleaseStructure.HMV),
    (("aladin", "rakuten"), ReleaseStructure.ALADIN_RAKUTEN),
    (("broadcast",), ReleaseStructure.BROADCAST),
    (("alphaz", "exclusive"), ReleaseStructure.ALPHAZ_EXCLUSIVE),
    (("lucky", "draw"), ReleaseStructure.LUCKY_DRAW),
    (("benefit", "md"), ReleaseStructure.UNIT_POB),
    (("fanclub", "the box"), ReleaseStructure.ANNUAL_MEMBERSHIP),
    (("vip",), ReleaseStructure.VIP_PHOTOCARD),
)


def infer_release_type(
    category: Category, album_name: str, store: Optional[str]
) -> ReleaseType:
    """Infer the release type for a decoded card."""
    if category in _KEYWORD_CATEGORIES:
        texts = {
            "album": (album_name or "").lower(),
            "store": (store or "").lower(),
        }
        for source, needle, release_type in _EVENT_KEYWORDS:
            if needle in texts[source]:
                return release_type
        return ReleaseType.SHOWCASE

    return _CATEGORY_RELEASE_TYPES.get(category, ReleaseType.PHOTOCARD)


def infer_release_structure(store: Optional[str]) -> ReleaseStructure:
    """Infer the distribution channel from the store text.

    No store means the card came packed in the album itself.
    """
    if not store:
        return ReleaseStructure.ALBUM_CARD

    text = store.lower()
    for needles, structure in _STORE_STRUCTURES:
        if any(needle in text for needle in needles):
            return structure
    return ReleaseStructure.SHOPS


def derive_release_fields(
    category: Category, album_name: str, store: Optional[str]
) -> Tuple[ReleaseType, ReleaseStructure]:
    """Return (release_type, release_structure) for a catalog entry."""
    return (
        infer_release_type(category, album_name, store),
        infer_release_structure(store),
    )
