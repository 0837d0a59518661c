import pytest

from trait_catalog import load_catalog


SMALL_TRAITS = [
    {
        'id': 'sharp_teeth',
        'name': 'Sharp teeth',
        'category': 'hunting',
        'conflicts': ['herbivore'],
        'synergies': ['massive jaw', 'predator instincts'],
        'rarity': 'common',
    },
    {
        'id': 'herbivore',
        'name': 'Herbivore',
        'category': 'behavioral',
        'conflicts': ['sharp teeth'],
        'synergies': ['grazing'],
        'rarity': 'common',
    },
    {
        'id': 'massive_jaw',
        'name': 'Massive jaw',
        'category': 'hunting',
        'conflicts': [],
        'synergies': [],
        'rarity': 'uncommon',
    },
    {
        'id': 'predator_instincts',
        'name': 'Predator instincts',
        'category': 'behavioral',
        # declared one-sided: only this side names the herbivore conflict
        'conflicts': ['herbivore'],
        'synergies': [],
        'rarity': 'common',
    },
    {
        'id': 'grazing',
        'name': 'Grazing',
        'category': 'behavioral',
        'rarity': 'common',
    },
    {
        'id': 'agile',
        'name': 'Agile',
        'category': 'physical',
        'conflicts': ['armored'],
        'rarity': 'common',
    },
    {
        'id': 'armored',
        'name': 'Armored',
        'category': 'defensive',
        'rarity': 'uncommon',
    },
    {
        'id': 'back_plates',
        'name': 'Back plates',
        'category': 'defensive',
        'rarity': 'rare',
    },
    {
        'id': 'venom_glands',
        'name': 'Venom glands',
        'category': 'hunting',
        'rarity': 'legendary',
    },
]


@pytest.fixture
def catalog():
    return load_catalog(SMALL_TRAITS)
