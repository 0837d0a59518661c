"""
Data models for creature trait compatibility.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, NamedTuple, Optional, Tuple


class TraitCategory(Enum):
    """Broad grouping of creature traits."""
    PHYSICAL = "physical"
    BEHAVIORAL = "behavioral"
    DEFENSIVE = "defensive"
    HUNTING = "hunting"
    ENVIRONMENTAL = "environmental"


class Rarity(Enum):
    """Ordinal rarity tier of a trait."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    LEGENDARY = "legendary"

    @property
    def weight(self) -> float:
        """Fixed weight used when blending suggestion confidence."""
        return RARITY_WEIGHTS[self]


RARITY_WEIGHTS: Dict[Rarity, float] = {
    Rarity.COMMON: 0.1,
    Rarity.UNCOMMON: 0.3,
    Rarity.RARE: 0.6,
    Rarity.LEGENDARY: 1.0,
}


class Severity(Enum):
    """Conflict severity levels"""
    WARNING = "warning"  # Candidate not yet added
    ERROR = "error"  # Both traits selected, selection is invalid


@dataclass(frozen=True)
class TraitDefinition:
    """
    Identity and relationships for one trait.

    Relationship entries may name other traits by id or by display name;
    the catalog resolves and symmetrically closes them at load time.
    """
    id: str
    name: str
    category: TraitCategory
    conflicts: FrozenSet[str] = frozenset()
    synergies: FrozenSet[str] = frozenset()
    rarity: Rarity = Rarity.COMMON
    description: str = ""

    def __post_init__(self):
        """Coerce plain strings and lists into enums and frozensets."""
        if not self.id or not isinstance(self.id, str):
            raise ValueError(f"Trait id must be a non-empty string, got {self.id!r}")
        if isinstance(self.category, str):
            object.__setattr__(self, 'category', TraitCategory(self.category.lower()))
        if isinstance(self.rarity, str):
            object.__setattr__(self, 'rarity', Rarity(self.rarity.lower()))
        for relation in ('conflicts', 'synergies'):
            refs = getattr(self, relation)
            if isinstance(refs, str):
                raise ValueError(f"Trait {self.id} {relation} must be a list of references, not a string")
            object.__setattr__(self, relation, frozenset(refs))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TraitDefinition":
        """Create from a JSON-style dictionary."""
        try:
            return cls(
                id=data['id'],
                name=data.get('name', data['id']),
                category=data['category'],
                conflicts=data.get('conflicts', ()),
                synergies=data.get('synergies', ()),
                rarity=data.get('rarity', Rarity.COMMON.value),
                description=data.get('description', ''),
            )
        except KeyError as e:
            raise ValueError(f"Trait definition missing required field {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'conflicts': sorted(self.conflicts),
            'synergies': sorted(self.synergies),
            'rarity': self.rarity.value,
            'description': self.description,
        }


@dataclass(frozen=True)
class TraitSelection:
    """
    The trait identifiers currently chosen for one creature.

    Behaves as an ordered set: duplicates are dropped keeping the first
    occurrence, and insertion order is kept so the most recently added trait
    is known. Instances are immutable; add/remove return new selections.
    """
    trait_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        """Drop duplicates while keeping insertion order."""
        unique = tuple(dict.fromkeys(self.trait_ids))
        object.__setattr__(self, 'trait_ids', unique)

    @classmethod
    def of(cls, *trait_ids: str) -> "TraitSelection":
        return cls(tuple(trait_ids))

    def __iter__(self) -> Iterator[str]:
        return iter(self.trait_ids)

    def __len__(self) -> int:
        return len(self.trait_ids)

    def __contains__(self, trait_id: object) -> bool:
        return trait_id in self.trait_ids

    @property
    def last_added(self) -> Optional[str]:
        """Most recently added trait id, or None for an empty selection."""
        return self.trait_ids[-1] if self.trait_ids else None

    def add(self, trait_id: str) -> "TraitSelection":
        """Return a selection with `trait_id` appended (no-op if present)."""
        if trait_id in self.trait_ids:
            return self
        return TraitSelection(self.trait_ids + (trait_id,))

    def remove(self, trait_id: str) -> "TraitSelection":
        """Return a selection without `trait_id`."""
        return TraitSelection(tuple(t for t in self.trait_ids if t != trait_id))

    def to_list(self) -> List[str]:
        return list(self.trait_ids)


def as_selection(selection: Iterable[str]) -> TraitSelection:
    """Accept a TraitSelection or any iterable of ids."""
    if isinstance(selection, TraitSelection):
        return selection
    if isinstance(selection, str):
        raise TypeError("Selection must be an iterable of trait ids, not a single string")
    return TraitSelection(tuple(selection))


class TraitConflict(NamedTuple):
    """A conflict between two traits."""
    trait1: str
    trait2: str
    reason: str
    severity: Severity


class TraitSuggestion(NamedTuple):
    """A ranked candidate trait to add next."""
    trait: str
    reason: str
    confidence: float  # 0.0 to 1.0


@dataclass(frozen=True)
class CandidateCheck:
    """Outcome of checking one hypothetical addition."""
    candidate: str
    compatible: bool
    conflicts: List[TraitConflict] = field(default_factory=list)


@dataclass
class CompatibilityReport:
    """Validity and suggestions for one selection."""
    selection: TraitSelection
    conflicts: List[TraitConflict]
    suggestions: List[TraitSuggestion]

    @property
    def valid(self) -> bool:
        """A selection is valid when no error-severity conflict exists."""
        return not any(c.severity == Severity.ERROR for c in self.conflicts)

    def get_summary(self) -> str:
        """Get a human-readable summary."""
        if self.valid:
            return f"✅ Valid selection ({len(self.selection)} traits)"

        return (f"❌ Invalid selection ({len(self.selection)} traits, "
                f"{len(self.conflicts)} conflicts)")
