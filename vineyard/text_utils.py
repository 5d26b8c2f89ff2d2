"""Text normalization utilities."""
from __future__ import annotations

import re

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_kebab_id(value: str) -> str:
    """
    Normalize a display name to a kebab-case identifier.

    Lowercases, drops apostrophes, collapses every other run of
    non-alphanumerics to a single dash and trims dashes at both ends.
    Used for town ids, location ids and sin topic labels.

    Examples:
        >>> to_kebab_id("Shepherd's Well")
        'shepherds-well'
        >>> to_kebab_id("  The Steward's Pride!  ")
        'the-stewards-pride'
    """
    raw = _APOSTROPHES.sub("", str(value or "").lower())
    raw = _NON_ALNUM.sub("-", raw)
    return raw.strip("-")


def fill_template(pattern: str, slots: dict[str, str]) -> str:
    """Replace every ``{key}`` occurrence in ``pattern`` with its slot value."""
    out = pattern
    for key, value in slots.items():
        out = out.replace("{" + key + "}", value)
    return out
