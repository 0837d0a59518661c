"""
Trait catalog loading.

Builds an immutable lookup structure from trait definitions and closes the
conflict and synergy relations symmetrically, so that a relation declared on
only one side still binds both traits.
"""
from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from models import TraitCategory, TraitDefinition
from trait_lists import DEFAULT_TRAIT_DEFINITIONS
from utils import canonicalize_name

logger = logging.getLogger(__name__)


# ===== ERRORS =====

class TraitCatalogError(Exception):
    """Base class for trait engine errors."""


class DuplicateTraitError(TraitCatalogError, ValueError):
    """Two definitions share the same trait id."""

    def __init__(self, trait_id: str):
        super().__init__(trait_id)
        self.trait_id = trait_id

    def __str__(self) -> str:
        return f"Duplicate trait id: {self.trait_id}"


class UnknownTraitError(TraitCatalogError, LookupError):
    """A trait reference is absent from the catalog."""

    def __init__(self, trait_id: str):
        super().__init__(trait_id)
        self.trait_id = trait_id

    def __str__(self) -> str:
        return f"Unknown trait: {self.trait_id}"


class AmbiguousTraitNameError(TraitCatalogError, ValueError):
    """Two traits have display names that canonicalize to the same string."""

    def __init__(self, name: str, trait_ids: Tuple[str, str]):
        super().__init__(name, trait_ids)
        self.name = name
        self.trait_ids = trait_ids

    def __str__(self) -> str:
        return f"Traits {self.trait_ids[0]} and {self.trait_ids[1]} share the name '{self.name}'"


DefinitionLike = Union[TraitDefinition, Mapping[str, Any]]


# ===== CATALOG HANDLE =====

class TraitCatalog:
    """
    Read-only registry of trait definitions.

    Never mutated after construction, so one instance can be shared by any
    number of callers. Use load_catalog() rather than building it directly.
    """

    def __init__(
        self,
        definitions: Dict[str, TraitDefinition],
        conflicts: Dict[str, FrozenSet[str]],
        synergies: Dict[str, FrozenSet[str]],
        aliases: Dict[str, str],
        dangling_references: Dict[str, FrozenSet[str]],
    ):
        self._definitions = MappingProxyType(dict(definitions))
        self._conflicts = MappingProxyType(dict(conflicts))
        self._synergies = MappingProxyType(dict(synergies))
        self._aliases = MappingProxyType(dict(aliases))
        self.dangling_references = MappingProxyType(dict(dangling_references))

        by_category: Dict[TraitCategory, List[str]] = defaultdict(list)
        for trait_id, definition in self._definitions.items():
            by_category[definition.category].append(trait_id)
        self._by_category = MappingProxyType(
            {category: tuple(sorted(ids)) for category, ids in by_category.items()}
        )

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[TraitDefinition]:
        """Iterate definitions in ascending id order."""
        for trait_id in self.ids():
            yield self._definitions[trait_id]

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, str):
            return False
        return self._lookup(ref) is not None

    def __repr__(self) -> str:
        return f"TraitCatalog({len(self)} traits)"

    def _lookup(self, ref: str) -> Optional[str]:
        if ref in self._definitions:
            return ref
        return self._aliases.get(canonicalize_name(ref))

    def ids(self) -> Tuple[str, ...]:
        """All trait ids, sorted."""
        return tuple(sorted(self._definitions))

    def resolve(self, ref: str) -> str:
        """
        Resolve an id or display name to the trait id.

        Args:
            ref: Trait id ("sharp_teeth") or name ("Sharp teeth")

        Returns:
            The canonical trait id

        Raises:
            UnknownTraitError: If nothing in the catalog matches
        """
        trait_id = self._lookup(ref) if isinstance(ref, str) else None
        if trait_id is None:
            raise UnknownTraitError(ref)
        return trait_id

    def get(self, ref: str) -> TraitDefinition:
        """Look up a definition by id or name."""
        return self._definitions[self.resolve(ref)]

    def by_category(self, category: Union[TraitCategory, str]) -> List[TraitDefinition]:
        """
        Get all traits in one category, sorted by id.

        Raises:
            ValueError: If the category name is not recognised
        """
        if isinstance(category, str):
            category = TraitCategory(category.lower())
        return [self._definitions[t] for t in self._by_category.get(category, ())]

    def conflicts_of(self, ref: str) -> FrozenSet[str]:
        """Ids that cannot coexist with this trait (symmetric closure)."""
        return self._conflicts[self.resolve(ref)]

    def synergies_of(self, ref: str) -> FrozenSet[str]:
        """Ids that reinforce this trait (symmetric closure)."""
        return self._synergies[self.resolve(ref)]

    def name_of(self, ref: str) -> str:
        return self.get(ref).name


# ===== LOADING =====

def _coerce_definition(item: DefinitionLike) -> TraitDefinition:
    if isinstance(item, TraitDefinition):
        return item
    if isinstance(item, Mapping):
        return TraitDefinition.from_dict(dict(item))
    raise TypeError(f"Expected a trait definition or mapping, got {type(item).__name__}")


def _build_aliases(definitions: Dict[str, TraitDefinition]) -> Dict[str, str]:
    """
    Map canonical ids and names to trait ids.

    Ids take priority over names, so a name that collides with another
    trait's id never shadows it.

    Raises:
        AmbiguousTraitNameError: If two names canonicalize to the same string
    """
    aliases: Dict[str, str] = {}
    for trait_id, definition in definitions.items():
        key = canonicalize_name(definition.name)
        if not key:
            continue
        if key in aliases:
            raise AmbiguousTraitNameError(definition.name, (aliases[key], trait_id))
        aliases[key] = trait_id
    for trait_id in definitions:
        aliases[canonicalize_name(trait_id)] = trait_id
    return aliases


def _close_symmetric(
    definitions: Dict[str, TraitDefinition],
    aliases: Dict[str, str],
    relation: str,
    dangling: Dict[str, Set[str]],
) -> Dict[str, FrozenSet[str]]:
    """
    Resolve one relation and close it symmetrically.

    Args:
        definitions: Id -> definition
        aliases: Canonical reference -> id
        relation: Attribute name, "conflicts" or "synergies"
        dangling: Collects references that match no trait

    Returns:
        Adjacency map id -> frozenset of related ids
    """
    adjacency: Dict[str, Set[str]] = {trait_id: set() for trait_id in definitions}

    for trait_id, definition in definitions.items():
        for ref in getattr(definition, relation):
            other = ref if ref in definitions else aliases.get(canonicalize_name(ref))
            if other is None:
                dangling[trait_id].add(ref)
                continue
            if other == trait_id:
                continue
            adjacency[trait_id].add(other)
            adjacency[other].add(trait_id)

    return {trait_id: frozenset(related) for trait_id, related in adjacency.items()}


def load_catalog(definitions: Iterable[DefinitionLike]) -> TraitCatalog:
    """
    Build a catalog from an ordered sequence of trait definitions.

    Args:
        definitions: TraitDefinition instances or JSON-style dicts

    Returns:
        TraitCatalog with symmetric conflict and synergy adjacency

    Raises:
        DuplicateTraitError: If two definitions share an id
        AmbiguousTraitNameError: If two display names canonicalize alike
        ValueError: If a definition is malformed
    """
    by_id: Dict[str, TraitDefinition] = {}
    for item in definitions:
        definition = _coerce_definition(item)
        if definition.id in by_id:
            raise DuplicateTraitError(definition.id)
        by_id[definition.id] = definition

    aliases = _build_aliases(by_id)
    dangling: Dict[str, Set[str]] = defaultdict(set)

    conflicts = _close_symmetric(by_id, aliases, 'conflicts', dangling)
    synergies = _close_symmetric(by_id, aliases, 'synergies', dangling)

    if dangling:
        total = sum(len(refs) for refs in dangling.values())
        logger.debug(f"Ignored {total} relationship references to traits outside the catalog")

    logger.info(f"Loaded trait catalog with {len(by_id)} traits")

    return TraitCatalog(
        definitions=by_id,
        conflicts=conflicts,
        synergies=synergies,
        aliases=aliases,
        dangling_references={k: frozenset(v) for k, v in dangling.items()},
    )


def load_catalog_file(filepath: Union[str, Path]) -> TraitCatalog:
    """
    Load a catalog from a JSON file.

    The file holds either a list of trait definitions or an object with a
    "traits" list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON is invalid or has the wrong shape
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Trait catalog file not found: {filepath}")

    logger.info(f"Loading trait catalog from {filepath}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in trait catalog file: {e}") from e

    if isinstance(data, dict):
        data = data.get('traits')
    if not isinstance(data, list):
        raise ValueError(f"Trait catalog file must contain a list of traits: {filepath}")

    return load_catalog(data)


def default_catalog() -> TraitCatalog:
    """Catalog built from the built-in trait table."""
    return load_catalog(DEFAULT_TRAIT_DEFINITIONS)
