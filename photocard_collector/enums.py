"""Closed enumerations shared by the decoder and the database layer."""

from enum import Enum


class Category(str, Enum):
    ALBUMS = "ALBUMS"
    EVENTS = "EVENTS"
    MERCH = "MERCH"
    FANCLUB = "FANCLUB"
    SEASON_GREETINGS = "SEASON_GREETINGS"
    SHOWCASE = "SHOWCASE"


class Member(str, Enum):
    JURIN = "JURIN"
    CHISA = "CHISA"
    HINATA = "HINATA"
    HARVEY = "HARVEY"
    JURIA = "JURIA"
    MAYA = "MAYA"
    COCONA = "COCONA"


class Version(str, Enum):
    STANDARD = "STANDARD"
    G_VER = "G_VER"
    R1 = "R1"
    R2 = "R2"
    R3 = "R3"
    ZERO = "ZERO"
    USA = "USA"  # valid in the catalog, never produced by filename decoding


class ReleaseType(str, Enum):
    ALBUM = "ALBUM"
    ANNIVERSARY = "ANNIVERSARY"
    SHOWCASE = "SHOWCASE"
    KCON = "KCON"
    WEVERSE = "WEVERSE"
    FANMEETING = "FANMEETING"
    LUCKY_DRAW = "LUCKY_DRAW"
    SEASON_GREETINGS = "SEASON_GREETINGS"
    PHOTOCARD = "PHOTOCARD"
    POSTCARD = "POSTCARD"


class ReleaseStructure(str, Enum):
    TOWER_RECORDS = "TOWER_RECORDS"
    KTOWN4U = "KTOWN4U"
    HMV = "HMV"
    ALADIN_RAKUTEN = "ALADIN_RAKUTEN"
    BROADCAST = "BROADCAST"
    ALPHAZ_EXCLUSIVE = "ALPHAZ_EXCLUSIVE"
    LUCKY_DRAW = "LUCKY_DRAW"
    SHOPS = "SHOPS"
    ALBUM_CARD = "ALBUM_CARD"
    UNIT_POB = "UNIT_POB"
    VIP_PHOTOCARD = "VIP_PHOTOCARD"
    ANNUAL_MEMBERSHIP = "ANNUAL_MEMBERSHIP"


class Condition(str, Enum):
    MINT = "MINT"
    NEAR_MINT = "NEAR_MINT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


def enum_values(enum_cls) -> list:
    """Return the string values of an enum class, in declaration order."""
    return [member.value for member in enum_cls]


__all__ = [
    "Category",
    "Member",
    "Version",
    "ReleaseType",
    "ReleaseStructure",
    "Condition",
    "enum_values",
]
