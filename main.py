#!/usr/bin/env python3
"""
Createosaur Trait Tool - check and extend creature trait selections
"""

import argparse
import logging
import sys

from compatibility import check_candidate, evaluate_selection, generate_compatibility_summary, suggest
from config import configure_logging, load_config
from presets import JsonFileStore, PresetSnapshot, PresetStore
from trait_catalog import TraitCatalog, default_catalog, load_catalog_file
from trait_lists import TRAIT_CATEGORY_INFO
from websearch import WebSearch, traits_mentioned

logger = logging.getLogger(__name__)


def print_catalog(catalog: TraitCatalog, category=None):
    """Print the catalog grouped by category."""

    print("\n" + "="*60)
    print("🦖 TRAIT CATALOG")
    print("="*60)

    categories = [category] if category else list(TRAIT_CATEGORY_INFO)
    for cat in categories:
        traits = catalog.by_category(cat)
        info = TRAIT_CATEGORY_INFO.get(cat, {})
        print(f"\n{info.get('name', cat).upper()} ({len(traits)})")
        for definition in traits:
            print(f"   {definition.id:<22} {definition.name:<22} {definition.rarity.value}")

    print("\n" + "="*60)


def cmd_catalog(args, catalog):
    print_catalog(catalog, args.category)
    return 0


def cmd_validate(args, catalog):
    report = evaluate_selection(catalog, args.traits, max_suggestions=args.limit, excluded=args.exclude)
    print(generate_compatibility_summary(report, catalog))
    return 0 if report.valid else 2


def cmd_check(args, catalog):
    result = check_candidate(catalog, args.traits, args.candidate)
    name = catalog.name_of(result.candidate)
    if result.compatible:
        print(f"✅ {name} is compatible with the current selection")
        return 0

    print(f"⚠️  {name} would conflict with the current selection:")
    for conflict in result.conflicts:
        print(f"   - {conflict.reason}")
    return 2


def cmd_suggest(args, catalog):
    suggestions = suggest(catalog, args.traits, max_results=args.limit, excluded=args.exclude)
    if not suggestions:
        print("No compatible traits left to suggest.")
        return 0

    print("\n💡 SUGGESTIONS")
    for suggestion in suggestions:
        bar = "█" * int(round(suggestion.confidence * 20))
        print(f"   {catalog.name_of(suggestion.trait):<22} {suggestion.confidence:5.0%} |{bar}")
        if args.verbose:
            print(f"      {suggestion.reason}")
    return 0


def cmd_search(args, catalog, config):
    search = WebSearch(endpoint=config.search_endpoint)
    results = search.query(args.query)
    if not results:
        print(f"No results for '{args.query}'.")
        return 0

    for result in results:
        print(f"\n🔎 {result.title}\n   {result.url}\n   {result.text}")

    hints = traits_mentioned(catalog, results)
    if hints:
        print(f"\nTraits mentioned: {', '.join(catalog.name_of(t) for t in hints)}")
    return 0


def cmd_presets(args, catalog, config):
    presets = PresetStore(JsonFileStore(config.preset_store_path))

    if args.action == 'list':
        saved = presets.list()
        if not saved:
            print("No presets saved.")
        for preset in saved:
            traits = ", ".join(catalog.name_of(t) for t in preset.snapshot.traits if t in catalog)
            print(f"   {preset.id}  {preset.name}  [{traits}]")

    elif args.action == 'save':
        if not args.name:
            print("Error: --name is required to save a preset.")
            return 1
        resolved = [catalog.resolve(t) for t in args.traits]
        preset = presets.save(args.name, PresetSnapshot(traits=resolved))
        print(f"✅ Saved preset '{preset.name}' ({preset.id})")

    elif args.action == 'delete':
        if not args.id:
            print("Error: --id is required to delete a preset.")
            return 1
        presets.delete(args.id)
        print(f"🗑️  Deleted preset {args.id}")

    return 0


def main():
    """Main entry point for the trait tool."""

    parser = argparse.ArgumentParser(
        description="Check and extend creature trait selections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py validate sharp_teeth herbivore
  python main.py check sharp_teeth herbivore
  python main.py suggest sharp_teeth --limit 5
  python main.py suggest sharp_teeth --exclude venom_glands
  python main.py presets save --name "Raptor" agile sickle_claws

Traits may be given by id (sharp_teeth) or by name ("Sharp teeth").
        """
    )

    parser.add_argument(
        '--catalog',
        help='Path to a JSON trait catalog (defaults to the built-in traits)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show detailed progress information'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    p_catalog = subparsers.add_parser('catalog', help='List available traits')
    p_catalog.add_argument('--category', choices=list(TRAIT_CATEGORY_INFO))

    p_validate = subparsers.add_parser('validate', help='Validate a selection and suggest additions')
    p_validate.add_argument('traits', nargs='*')
    p_validate.add_argument('--limit', type=int, default=5)
    p_validate.add_argument('--exclude', action='append', default=[], metavar='TRAIT',
                            help='Never suggest this trait (repeatable)')

    p_check = subparsers.add_parser('check', help='Check whether a candidate fits a selection')
    p_check.add_argument('candidate')
    p_check.add_argument('traits', nargs='*')

    p_suggest = subparsers.add_parser('suggest', help='Rank traits to add next')
    p_suggest.add_argument('traits', nargs='*')
    p_suggest.add_argument('--limit', type=int, default=None)
    p_suggest.add_argument('--exclude', action='append', default=[], metavar='TRAIT',
                           help='Never suggest this trait (repeatable)')

    p_search = subparsers.add_parser('search', help='Look up a species description')
    p_search.add_argument('query')

    p_presets = subparsers.add_parser('presets', help='Manage saved presets')
    p_presets.add_argument('action', choices=['list', 'save', 'delete'])
    p_presets.add_argument('traits', nargs='*')
    p_presets.add_argument('--name')
    p_presets.add_argument('--id')

    args = parser.parse_args()

    try:
        config = load_config()
        configure_logging(config, verbose=args.verbose)

        catalog_file = args.catalog or config.trait_catalog_file
        catalog = load_catalog_file(catalog_file) if catalog_file else default_catalog()
        logger.debug(f"Using catalog with {len(catalog)} traits")

        if args.command == 'catalog':
            code = cmd_catalog(args, catalog)
        elif args.command == 'validate':
            code = cmd_validate(args, catalog)
        elif args.command == 'check':
            code = cmd_check(args, catalog)
        elif args.command == 'suggest':
            code = cmd_suggest(args, catalog)
        elif args.command == 'search':
            code = cmd_search(args, catalog, config)
        else:
            code = cmd_presets(args, catalog, config)

    except Exception as e:
        print(f"❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
