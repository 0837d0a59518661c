"""
Shared utility functions for the Createosaur trait engine.
Name handling used by the catalog, the ranker and the search helpers.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Set


def canonicalize_name(name: str) -> str:
    """
    Canonicalize trait names and references for consistent matching.

    Transforms:
    - Normalizes Unicode (NFKD) and drops accents
    - Case-folds to lowercase
    - Treats underscores and hyphens as spaces, so ids and names meet
    - Keeps only alphanumeric characters and spaces
    - Collapses whitespace

    Args:
        name: Trait name, id or free-form reference

    Returns:
        Canonicalized string for comparison

    Examples:
        >>> canonicalize_name("Sharp teeth")
        'sharp teeth'
        >>> canonicalize_name("sharp_teeth")
        'sharp teeth'
    """
    if not name:
        return ""

    name = unicodedata.normalize("NFKD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))
    name = name.casefold()

    name = re.sub(r"[_\-]+", " ", name)
    name = re.sub(r"[^a-z0-9 ]+", " ", name)
    name = re.sub(r"\s+", " ", name).strip()

    return name


def trait_id_from_name(name: str) -> str:
    """
    Derive a stable trait id from a display name.

    Args:
        name: Display name like "Sharp teeth"

    Returns:
        Id like "sharp_teeth"
    """
    return canonicalize_name(name).replace(" ", "_")


def format_trait_list(names: Iterable[str], limit: int = 3) -> str:
    """
    Join trait names for human-readable messages, eliding after `limit`.

    Args:
        names: Display names in the order they should appear
        limit: Maximum names shown before "and N more"

    Returns:
        e.g. "Sharp teeth, Massive jaw and 2 more"
    """
    names = list(names)
    if not names:
        return ""
    if len(names) <= limit:
        if len(names) == 1:
            return names[0]
        return ", ".join(names[:-1]) + " and " + names[-1]

    shown = ", ".join(names[:limit])
    return f"{shown} and {len(names) - limit} more"


def find_mentions(text: str, names: Iterable[str]) -> List[str]:
    """
    Find which names occur as whole words in a block of free text.

    Args:
        text: Free text such as a search result snippet
        names: Candidate names to look for

    Returns:
        Matching names, in the order given
    """
    haystack = f" {canonicalize_name(text)} "
    found: List[str] = []
    seen: Set[str] = set()

    for name in names:
        needle = canonicalize_name(name)
        if not needle or needle in seen:
            continue
        if f" {needle} " in haystack:
            found.append(name)
            seen.add(needle)

    return found
