import pytest

from compatibility import (
    RARITY_ONLY_REASON,
    ScoringWeights,
    check_candidate,
    evaluate_selection,
    generate_compatibility_summary,
    group_by_category,
    suggest,
    validate_selection,
)
from models import Rarity, Severity, TraitSelection
from trait_catalog import UnknownTraitError, default_catalog, load_catalog


# ===== VALIDATION =====

def test_conflicting_pair_reports_one_error(catalog):
    conflicts = validate_selection(catalog, {'sharp_teeth', 'herbivore'})

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert (conflict.trait1, conflict.trait2) == ('herbivore', 'sharp_teeth')
    assert conflict.severity is Severity.ERROR
    assert conflict.reason == "Herbivore is incompatible with Sharp teeth"


def test_one_sided_conflict_still_invalid(catalog):
    forward = validate_selection(catalog, ['predator_instincts', 'herbivore'])
    backward = validate_selection(catalog, ['herbivore', 'predator_instincts'])

    assert len(forward) == 1
    assert forward == backward


def test_conflicts_sorted_by_pair(catalog):
    selection = TraitSelection.of('sharp_teeth', 'armored', 'herbivore', 'agile', 'predator_instincts')
    conflicts = validate_selection(catalog, selection)

    pairs = [(c.trait1, c.trait2) for c in conflicts]
    assert pairs == [
        ('agile', 'armored'),
        ('herbivore', 'predator_instincts'),
        ('herbivore', 'sharp_teeth'),
    ]
    assert all(c.trait1 < c.trait2 for c in conflicts)


def test_valid_selection_has_no_conflicts(catalog):
    assert validate_selection(catalog, ['sharp_teeth', 'massive_jaw']) == []
    assert validate_selection(catalog, []) == []


def test_validation_is_idempotent(catalog):
    selection = ['sharp_teeth', 'herbivore', 'agile']
    first = validate_selection(catalog, selection)
    second = validate_selection(catalog, selection)

    assert first == second
    assert selection == ['sharp_teeth', 'herbivore', 'agile']


def test_names_resolve_and_duplicates_collapse(catalog):
    conflicts = validate_selection(catalog, ['Sharp teeth', 'sharp_teeth', 'Herbivore'])
    assert [(c.trait1, c.trait2) for c in conflicts] == [('herbivore', 'sharp_teeth')]


def test_unknown_selection_id_raises(catalog):
    with pytest.raises(UnknownTraitError):
        validate_selection(catalog, ['sharp_teeth', 'wings'])


# ===== CANDIDATE CHECK =====

def test_candidate_conflict_is_warning(catalog):
    result = check_candidate(catalog, {'herbivore'}, 'sharp_teeth')

    assert result.compatible is False
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert (conflict.trait1, conflict.trait2) == ('herbivore', 'sharp_teeth')
    assert conflict.severity is Severity.WARNING


def test_candidate_conflicts_with_several_selected(catalog):
    result = check_candidate(catalog, ['sharp_teeth', 'predator_instincts', 'massive_jaw'], 'herbivore')

    assert not result.compatible
    assert [c.trait1 for c in result.conflicts] == ['predator_instincts', 'sharp_teeth']
    assert all(c.trait2 == 'herbivore' for c in result.conflicts)


def test_compatible_candidate(catalog):
    result = check_candidate(catalog, ['sharp_teeth'], 'massive_jaw')

    assert result.compatible is True
    assert result.conflicts == []
    assert result.candidate == 'massive_jaw'


def test_candidate_matches_closed_relation_for_every_pair(catalog):
    for candidate in catalog.ids():
        for selected in catalog.ids():
            if selected == candidate:
                continue
            result = check_candidate(catalog, [selected], candidate)
            assert result.compatible == (selected not in catalog.conflicts_of(candidate))


def test_unknown_candidate_raises(catalog):
    with pytest.raises(UnknownTraitError):
        check_candidate(catalog, ['sharp_teeth'], 'wings')


# ===== SUGGESTIONS =====

def test_suggestions_exclude_selected_and_incompatible(catalog):
    selection = ['sharp_teeth', 'agile']
    suggested = {s.trait for s in suggest(catalog, selection)}

    assert 'sharp_teeth' not in suggested
    assert 'agile' not in suggested
    assert 'herbivore' not in suggested
    assert 'armored' not in suggested
    for trait_id in suggested:
        assert check_candidate(catalog, selection, trait_id).compatible


def test_synergies_rank_above_unrelated_traits(catalog):
    suggestions = suggest(catalog, ['sharp_teeth'])
    order = [s.trait for s in suggestions]

    assert order[:2] == ['massive_jaw', 'predator_instincts']
    assert suggestions[0].confidence == pytest.approx(0.7 + 0.3 * 0.3)
    assert suggestions[1].confidence == pytest.approx(0.7 + 0.3 * 0.1)
    assert suggestions[0].reason == "Works well with Sharp teeth"
    assert order.index('grazing') > order.index('predator_instincts')


def test_synergy_score_is_fraction_of_selection(catalog):
    suggestions = {s.trait: s for s in suggest(catalog, ['sharp_teeth', 'agile'])}

    # only one of the two selected traits drives massive_jaw
    assert suggestions['massive_jaw'].confidence == pytest.approx(0.7 * 0.5 + 0.3 * 0.3)
    assert suggestions['back_plates'].reason == RARITY_ONLY_REASON


def test_empty_selection_ranks_by_rarity_then_id(catalog):
    suggestions = suggest(catalog, [])
    order = [s.trait for s in suggestions]

    assert order == [
        'venom_glands',
        'back_plates',
        'armored', 'massive_jaw',
        'agile', 'grazing', 'herbivore', 'predator_instincts', 'sharp_teeth',
    ]
    assert all(s.reason == RARITY_ONLY_REASON for s in suggestions)
    assert suggestions[0].confidence == pytest.approx(0.3 * Rarity.LEGENDARY.weight)


def test_confidence_always_in_unit_interval(catalog):
    heavy = ScoringWeights(synergy=2.0, rarity=2.0)
    for selection in ([], ['sharp_teeth'], ['sharp_teeth', 'agile'], ['grazing']):
        for suggestion in suggest(catalog, selection, weights=heavy):
            assert 0.0 <= suggestion.confidence <= 1.0
        for suggestion in suggest(catalog, selection):
            assert 0.0 <= suggestion.confidence <= 1.0


def test_max_results_truncates(catalog):
    everything = suggest(catalog, ['sharp_teeth'])

    assert suggest(catalog, ['sharp_teeth'], max_results=2) == everything[:2]
    assert suggest(catalog, ['sharp_teeth'], max_results=0) == []
    with pytest.raises(ValueError):
        suggest(catalog, ['sharp_teeth'], max_results=-1)


def test_suggest_is_deterministic(catalog):
    assert suggest(catalog, ['agile', 'sharp_teeth']) == suggest(catalog, ['agile', 'sharp_teeth'])


def test_reason_lists_drivers_in_selection_order():
    catalog = default_catalog()
    suggestions = {s.trait: s for s in suggest(catalog, ['predator_instincts', 'sharp_teeth'])}

    assert suggestions['massive_jaw'].reason == "Works well with Predator instincts and Sharp teeth"
    assert suggestions['venom_glands'].reason == "Works well with Sharp teeth"


def test_excluded_traits_are_never_suggested(catalog):
    suggested = [s.trait for s in suggest(catalog, ['sharp_teeth'], excluded=['massive_jaw', 'Venom glands'])]

    assert 'massive_jaw' not in suggested
    assert 'venom_glands' not in suggested
    assert suggested[0] == 'predator_instincts'

    report = evaluate_selection(catalog, ['sharp_teeth'], excluded={'massive_jaw'})
    assert report.suggestions[0].trait == 'predator_instincts'


def test_unknown_excluded_trait_raises(catalog):
    with pytest.raises(UnknownTraitError):
        suggest(catalog, ['sharp_teeth'], excluded=['wings'])


def test_reason_names_every_driver():
    catalog = load_catalog(
        [{'id': f't{i}', 'name': f'Trait {i}', 'category': 'physical', 'synergies': ['hub']} for i in range(4)]
        + [{'id': 'hub', 'name': 'Hub', 'category': 'physical'}]
    )

    top = suggest(catalog, ['t0', 't1', 't2', 't3'])[0]

    assert top.trait == 'hub'
    assert top.reason == "Works well with Trait 0, Trait 1, Trait 2 and Trait 3"


def test_negative_weights_rejected():
    with pytest.raises(ValueError):
        ScoringWeights(synergy=-0.1)


# ===== REPORTS =====

def test_evaluate_selection_report(catalog):
    report = evaluate_selection(catalog, ['sharp_teeth', 'herbivore'], max_suggestions=3)

    assert report.valid is False
    assert len(report.conflicts) == 1
    assert len(report.suggestions) <= 3
    assert "Invalid selection" in report.get_summary()

    ok = evaluate_selection(catalog, ['sharp_teeth'])
    assert ok.valid is True
    assert ok.suggestions[0].trait == 'massive_jaw'


def test_summary_mentions_conflicts_and_suggestions(catalog):
    report = evaluate_selection(catalog, ['sharp_teeth', 'herbivore'])
    summary = generate_compatibility_summary(report, catalog)

    assert "Herbivore is incompatible with Sharp teeth" in summary
    assert "Suggestions:" in summary


def test_group_by_category(catalog):
    grouped = group_by_category(catalog, ['agile', 'sharp_teeth', 'massive_jaw'])

    assert set(grouped) == {'physical', 'behavioral', 'defensive', 'hunting', 'environmental'}
    assert grouped['hunting'] == ['sharp_teeth', 'massive_jaw']
    assert grouped['physical'] == ['agile']
    assert grouped['environmental'] == []
