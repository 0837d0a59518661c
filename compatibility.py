"""
Trait compatibility engine.
Validates selections, checks hypothetical additions and ranks suggestions.

Every function here is a pure function of (catalog, selection, candidate):
nothing is cached between calls and the caller's selection is never mutated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from models import (
    CandidateCheck,
    CompatibilityReport,
    Severity,
    TraitCategory,
    TraitConflict,
    TraitSelection,
    TraitSuggestion,
    as_selection,
)
from trait_catalog import TraitCatalog
from utils import format_trait_list

logger = logging.getLogger(__name__)

RARITY_ONLY_REASON = "rarity-based"


@dataclass(frozen=True)
class ScoringWeights:
    """Blend of synergy overlap and rarity in suggestion confidence."""
    synergy: float = 0.7
    rarity: float = 0.3

    def __post_init__(self):
        if self.synergy < 0 or self.rarity < 0:
            raise ValueError(f"Scoring weights must be non-negative, got {self}")


DEFAULT_WEIGHTS = ScoringWeights()


def _resolve_selection(catalog: TraitCatalog, selection: Iterable[str]) -> List[str]:
    """Resolve every selected reference to its id, keeping order and uniqueness."""
    resolved = [catalog.resolve(ref) for ref in as_selection(selection)]
    return list(dict.fromkeys(resolved))


def _conflict_reason(catalog: TraitCatalog, trait1: str, trait2: str) -> str:
    return f"{catalog.name_of(trait1)} is incompatible with {catalog.name_of(trait2)}"


# ===== CONFLICT VALIDATION =====

def validate_selection(catalog: TraitCatalog, selection: Iterable[str]) -> List[TraitConflict]:
    """
    Report every conflicting pair inside a selection.

    Args:
        catalog: Loaded trait catalog
        selection: TraitSelection or iterable of trait ids

    Returns:
        Error-severity conflicts, one per unordered pair, sorted by
        (trait1, trait2). Empty means the selection is valid.

    Raises:
        UnknownTraitError: If any selected id is not in the catalog
    """
    selected = sorted(_resolve_selection(catalog, selection))
    conflicts: List[TraitConflict] = []

    for i, trait1 in enumerate(selected):
        blocked = catalog.conflicts_of(trait1)
        for trait2 in selected[i + 1:]:
            if trait2 in blocked:
                conflicts.append(TraitConflict(
                    trait1=trait1,
                    trait2=trait2,
                    reason=_conflict_reason(catalog, trait1, trait2),
                    severity=Severity.ERROR,
                ))

    return conflicts


# ===== CANDIDATE CHECK =====

def check_candidate(catalog: TraitCatalog, selection: Iterable[str], candidate: str) -> CandidateCheck:
    """
    Determine whether adding one trait would introduce a conflict.

    Args:
        catalog: Loaded trait catalog
        selection: Current selection
        candidate: Trait id under consideration

    Returns:
        CandidateCheck; when incompatible, its conflicts are warning-severity
        records {trait1: selected trait, trait2: candidate} sorted by trait1.

    Raises:
        UnknownTraitError: If the candidate or a selected id is unknown
    """
    candidate_id = catalog.resolve(candidate)
    selected = _resolve_selection(catalog, selection)
    blocked = catalog.conflicts_of(candidate_id)

    conflicts = [
        TraitConflict(
            trait1=trait_id,
            trait2=candidate_id,
            reason=_conflict_reason(catalog, trait_id, candidate_id),
            severity=Severity.WARNING,
        )
        for trait_id in sorted(selected)
        if trait_id != candidate_id and trait_id in blocked
    ]

    return CandidateCheck(
        candidate=candidate_id,
        compatible=not conflicts,
        conflicts=conflicts,
    )


# ===== SUGGESTION RANKING =====

def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def suggest(
    catalog: TraitCatalog,
    selection: Iterable[str],
    max_results: Optional[int] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    excluded: Iterable[str] = (),
) -> List[TraitSuggestion]:
    """
    Rank traits to add next.

    Candidates are catalog traits that are not selected, not excluded by
    the user and conflict with no selected trait. Each gets

        confidence = synergy_weight * synergy + rarity_weight * rarity

    where synergy is the fraction of selected traits that list the
    candidate as a synergy (0 for an empty selection), clamped to [0, 1].

    Args:
        catalog: Loaded trait catalog
        selection: Current selection
        max_results: Truncate to this many suggestions (None returns all)
        weights: Blend weights
        excluded: Traits the user rejected; never suggested

    Returns:
        Suggestions sorted by confidence descending, then id ascending

    Raises:
        UnknownTraitError: If a selected or excluded id is unknown
        ValueError: If max_results is negative
    """
    if max_results is not None and max_results < 0:
        raise ValueError(f"max_results must be non-negative, got {max_results}")

    selected = _resolve_selection(catalog, selection)
    selected_set = set(selected)
    excluded_set = set(_resolve_selection(catalog, excluded))

    blocked = set()
    for trait_id in selected:
        blocked.update(catalog.conflicts_of(trait_id))

    suggestions: List[TraitSuggestion] = []
    for definition in catalog:
        candidate = definition.id
        if candidate in selected_set or candidate in excluded_set or candidate in blocked:
            continue

        # Keep selection order so the reason names traits as the user picked them
        drivers = [t for t in selected if candidate in catalog.synergies_of(t)]
        synergy_score = len(drivers) / len(selected) if selected else 0.0

        confidence = _clamp(weights.synergy * synergy_score + weights.rarity * definition.rarity.weight)

        if drivers:
            driver_names = [catalog.name_of(t) for t in drivers]
            reason = f"Works well with {format_trait_list(driver_names, limit=len(driver_names))}"
        else:
            reason = RARITY_ONLY_REASON

        suggestions.append(TraitSuggestion(
            trait=candidate,
            reason=reason,
            confidence=confidence,
        ))

    suggestions.sort(key=lambda s: (-s.confidence, s.trait))

    if max_results is not None:
        suggestions = suggestions[:max_results]

    return suggestions


# ===== COMBINED EVALUATION =====

def evaluate_selection(
    catalog: TraitCatalog,
    selection: Iterable[str],
    max_suggestions: Optional[int] = 5,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    excluded: Iterable[str] = (),
) -> CompatibilityReport:
    """
    Validate a selection and rank suggestions in one call.

    Suggestions are still produced for an invalid selection; they exclude
    anything that conflicts with any selected trait or was excluded.
    """
    selected = TraitSelection(tuple(_resolve_selection(catalog, selection)))
    conflicts = validate_selection(catalog, selected)
    suggestions = suggest(catalog, selected, max_results=max_suggestions, weights=weights, excluded=excluded)

    if conflicts:
        logger.debug(f"Selection {selected.to_list()} has {len(conflicts)} conflicts")

    return CompatibilityReport(
        selection=selected,
        conflicts=conflicts,
        suggestions=suggestions,
    )


def group_by_category(catalog: TraitCatalog, selection: Iterable[str]) -> Dict[str, List[str]]:
    """
    Bucket selected trait ids by category.

    Returns:
        Category value -> ids in selection order; every category is present
    """
    grouped: Dict[str, List[str]] = {category.value: [] for category in TraitCategory}
    for trait_id in _resolve_selection(catalog, selection):
        grouped[catalog.get(trait_id).category.value].append(trait_id)
    return grouped


# ===== REPORTING =====

def generate_compatibility_summary(report: CompatibilityReport, catalog: TraitCatalog) -> str:
    """Generate human-readable compatibility summary"""
    lines = [report.get_summary()]

    if report.selection:
        lines.append("")
        lines.append("Selected traits:")
        for trait_id in report.selection:
            definition = catalog.get(trait_id)
            lines.append(f"  • {definition.name} ({definition.category.value}, {definition.rarity.value})")

    if report.conflicts:
        lines.append("\nConflicts:")
        for conflict in report.conflicts:
            lines.append(f"  ❌ {conflict.reason}")

    if report.suggestions:
        lines.append("\nSuggestions:")
        for suggestion in report.suggestions:
            lines.append(
                f"  💡 {catalog.name_of(suggestion.trait)} "
                f"({suggestion.confidence:.0%}) - {suggestion.reason}"
            )

    return "\n".join(lines)
