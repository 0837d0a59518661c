"""
Built-in creature trait table.
Relationship lists name other traits by display name; entries that name
traits outside the table are kept as written and ignored by the catalog.
"""

from typing import Any, Dict, List

TRAIT_CATEGORY_INFO: Dict[str, Dict[str, str]] = {
    'physical': {
        'name': 'Physical',
        'color': 'blue',
        'description': 'Body structure and physical capabilities',
    },
    'behavioral': {
        'name': 'Behavioral',
        'color': 'purple',
        'description': 'Instincts, intelligence, and social behaviors',
    },
    'defensive': {
        'name': 'Defensive',
        'color': 'green',
        'description': 'Protection mechanisms and defensive features',
    },
    'hunting': {
        'name': 'Hunting',
        'color': 'red',
        'description': 'Predatory capabilities and attack methods',
    },
    'environmental': {
        'name': 'Environmental',
        'color': 'yellow',
        'description': 'Adaptation to specific environments',
    },
}


DEFAULT_TRAIT_DEFINITIONS: List[Dict[str, Any]] = [
    # ===== HUNTING =====
    {
        'id': 'massive_jaw',
        'name': 'Massive jaw',
        'category': 'hunting',
        'conflicts': ['filter feeding', 'herbivore'],
        'synergies': ['sharp teeth', 'predator instincts', 'powerful bite'],
        'description': 'Enormous jaw structure for maximum bite force',
        'rarity': 'uncommon',
    },
    {
        'id': 'sharp_teeth',
        'name': 'Sharp teeth',
        'category': 'hunting',
        'conflicts': ['herbivore', 'filter feeding'],
        'synergies': ['massive jaw', 'predator instincts', 'carnivore'],
        'description': 'Razor-sharp dental arrangement for tearing flesh',
        'rarity': 'common',
    },
    {
        'id': 'sickle_claws',
        'name': 'Sickle claws',
        'category': 'hunting',
        'conflicts': ['blunt claws', 'herbivore'],
        'synergies': ['agile', 'climbing ability', 'precision strikes'],
        'description': 'Curved retractable claws for slashing attacks',
        'rarity': 'rare',
    },
    {
        'id': 'venom_glands',
        'name': 'Venom glands',
        'category': 'hunting',
        'conflicts': ['herbivore'],
        'synergies': ['sharp teeth', 'stealth', 'ambush tactics'],
        'description': 'Modified salivary glands that deliver a paralysing bite',
        'rarity': 'legendary',
    },

    # ===== PHYSICAL =====
    {
        'id': 'powerful_legs',
        'name': 'Powerful legs',
        'category': 'physical',
        'conflicts': ['aquatic adaptation', 'burrowing'],
        'synergies': ['agile', 'sprint speed', 'jumping ability'],
        'description': 'Strong muscular legs for running and jumping',
        'rarity': 'common',
    },
    {
        'id': 'sturdy_build',
        'name': 'Sturdy build',
        'category': 'physical',
        'conflicts': ['lightweight frame', 'agile'],
        'synergies': ['armored', 'defensive stance', 'endurance'],
        'description': 'Robust, heavily built body structure',
        'rarity': 'common',
    },
    {
        'id': 'agile',
        'name': 'Agile',
        'category': 'physical',
        'conflicts': ['sturdy build', 'massive size', 'heavy armor'],
        'synergies': ['powerful legs', 'climbing ability', 'quick reflexes'],
        'description': 'Quick, nimble movement and flexibility',
        'rarity': 'common',
    },
    {
        'id': 'climbing_ability',
        'name': 'Climbing ability',
        'category': 'physical',
        'conflicts': ['massive size'],
        'synergies': ['agile', 'sickle claws'],
        'description': 'Grasping limbs suited to trunks and rock faces',
        'rarity': 'uncommon',
    },

    # ===== BEHAVIORAL =====
    {
        'id': 'predator_instincts',
        'name': 'Predator instincts',
        'category': 'behavioral',
        'conflicts': ['herbivore', 'docile nature', 'grazing behavior'],
        'synergies': ['pack hunter', 'sharp teeth', 'stealth', 'ambush tactics'],
        'description': 'Natural hunting behaviors and killer instinct',
        'rarity': 'common',
    },
    {
        'id': 'herbivore',
        'name': 'Herbivore',
        'category': 'behavioral',
        'conflicts': ['sharp teeth', 'predator instincts', 'carnivore', 'pack hunter'],
        'synergies': ['grazing behavior', 'plant digestion', 'herd mentality'],
        'description': 'Plant-eating digestive system and behavior',
        'rarity': 'common',
    },
    {
        'id': 'pack_hunter',
        'name': 'Pack hunter',
        'category': 'behavioral',
        'conflicts': ['solitary', 'herbivore', 'docile nature'],
        'synergies': ['high intelligence', 'coordination', 'predator instincts'],
        'description': 'Coordinated group hunting behavior',
        'rarity': 'uncommon',
    },
    {
        'id': 'high_intelligence',
        'name': 'High intelligence',
        'category': 'behavioral',
        'conflicts': ['primitive brain', 'instinctual only'],
        'synergies': ['pack hunter', 'problem solving', 'tool use', 'learning ability'],
        'description': 'Advanced cognitive abilities and problem-solving skills',
        'rarity': 'rare',
    },
    {
        'id': 'stealth',
        'name': 'Stealth',
        'category': 'behavioral',
        'conflicts': [],
        'synergies': ['predator instincts', 'ambush tactics'],
        'description': 'Moves silently and strikes from cover',
        'rarity': 'uncommon',
    },

    # ===== DEFENSIVE =====
    {
        'id': 'triple_horns',
        'name': 'Triple horns',
        'category': 'defensive',
        'conflicts': ['smooth skull', 'stealth'],
        'synergies': ['protective frill', 'charging attack', 'intimidation'],
        'description': 'Three prominent horns for defense and display',
        'rarity': 'rare',
    },
    {
        'id': 'protective_frill',
        'name': 'Protective frill',
        'category': 'defensive',
        'conflicts': ['stealth', 'aquatic adaptation'],
        'synergies': ['triple horns', 'intimidation display', 'neck protection'],
        'description': 'Large bony frill protecting neck and shoulders',
        'rarity': 'uncommon',
    },
    {
        'id': 'back_plates',
        'name': 'Back plates',
        'category': 'defensive',
        'conflicts': ['smooth back', 'stealth'],
        'synergies': ['armored', 'intimidation display', 'temperature regulation'],
        'description': 'Large bony plates along the spine',
        'rarity': 'rare',
    },
    {
        'id': 'spiked_tail',
        'name': 'Spiked tail',
        'category': 'defensive',
        'conflicts': ['club tail', 'whip tail'],
        'synergies': ['tail weapon', 'defensive stance', 'reach advantage'],
        'description': 'Tail ending in dangerous spikes for defense',
        'rarity': 'uncommon',
    },
    {
        'id': 'armored',
        'name': 'Armored',
        'category': 'defensive',
        'conflicts': ['lightweight frame', 'stealth', 'agile'],
        'synergies': ['sturdy build', 'back plates', 'defensive stance'],
        'description': 'Thick, protective skin or bony armor',
        'rarity': 'uncommon',
    },

    # ===== ENVIRONMENTAL =====
    {
        'id': 'aquatic_adaptation',
        'name': 'Aquatic adaptation',
        'category': 'environmental',
        'conflicts': ['powerful legs', 'protective frill'],
        'synergies': ['filter feeding'],
        'description': 'Paddle limbs and sealing nostrils for life in water',
        'rarity': 'uncommon',
    },
    {
        'id': 'filter_feeding',
        'name': 'Filter feeding',
        'category': 'environmental',
        'conflicts': ['sharp teeth', 'massive jaw'],
        'synergies': ['aquatic adaptation'],
        'description': 'Strains small prey and plankton from the water',
        'rarity': 'rare',
    },
    {
        'id': 'burrowing',
        'name': 'Burrowing',
        'category': 'environmental',
        'conflicts': ['powerful legs', 'back plates'],
        'synergies': ['sturdy build'],
        'description': 'Digs dens to shelter from heat and predators',
        'rarity': 'uncommon',
    },
]
