from __future__ import annotations

from functools import lru_cache
from typing import Mapping, Optional

import pycountry

from route360.reference import ALIASES, REFERENCE


UNKNOWN_FLAG = "\U0001F3F3\uFE0F"

# Common names pycountry does not resolve through lookup().
_NAME_OVERRIDES: dict[str, str] = {
    "russia": "RU",
    "south korea": "KR",
    "north korea": "KP",
    "vietnam": "VN",
    "turkey": "TR",
    "czechia": "CZ",
    "iran": "IR",
    "syria": "SY",
    "laos": "LA",
    "bolivia": "BO",
    "venezuela": "VE",
    "taiwan": "TW",
    "ivory coast": "CI",
}


def normalize(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return str(raw).strip().lower()


def resolve_alias(normalized: str, aliases: Mapping[str, str] = ALIASES) -> str:
    return aliases.get(normalized, normalized)


def canonical_name(raw: Optional[str], aliases: Mapping[str, str] = ALIASES) -> str:
    return resolve_alias(normalize(raw), aliases)


@lru_cache(maxsize=2048)
def _iso2_from_canonical(key: str) -> Optional[str]:
    ref = REFERENCE.get(key)
    if ref is not None and ref.iso2:
        return ref.iso2
    if key in _NAME_OVERRIDES:
        return _NAME_OVERRIDES[key]
    try:
        country = pycountry.countries.lookup(key)
    except LookupError:
        return None
    return getattr(country, "alpha_2", None)


def iso2_for(name: Optional[str]) -> Optional[str]:
    key = canonical_name(name)
    if not key:
        return None
    return _iso2_from_canonical(key)


def flag_for(name: Optional[str]) -> str:
    """
    Flag glyph for a country name: the two regional-indicator symbols of its
    alpha-2 code, or a white flag when the name does not map to a country.
    """
    code = iso2_for(name)
    if not code or len(code) != 2 or not code.isalpha():
        return UNKNOWN_FLAG
    return "".join(chr(0x1F1E6 + ord(ch) - ord("A")) for ch in code.upper())


def format_label(name: str) -> str:
    return f"{flag_for(name)} {name}"
