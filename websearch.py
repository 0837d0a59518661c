"""
Species lookup for the custom-species form.

Answers from built-in species notes, or from a configured search endpoint
when one is set. Lookups never raise for network problems: callers get the
built-in answer (possibly an empty list) instead.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import requests

from trait_catalog import TraitCatalog
from utils import find_mentions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """One search hit."""
    title: str
    url: str
    text: str


SPECIES_NOTES: Dict[str, List[SearchResult]] = {
    'allosaurus': [SearchResult(
        title="Allosaurus - Wikipedia",
        url="https://en.wikipedia.org/wiki/Allosaurus",
        text=("Allosaurus fragilis was a large carnivorous dinosaur from the Late Jurassic period. "
              "It was a bipedal predator with powerful legs, sharp teeth, and large claws. "
              "Known for being an apex predator and hunter."),
    )],
    'therizinosaurus': [SearchResult(
        title="Therizinosaurus - Giant Clawed Dinosaur",
        url="https://example.com/therizinosaurus",
        text=("Therizinosaurus cheloniformis was a massive herbivore from the Late Cretaceous period. "
              "Despite its enormous claws, it was a plant-eater. It had a long neck, massive size, "
              "and distinctive large claws used for stripping vegetation."),
    )],
    'microraptor': [SearchResult(
        title="Microraptor - Four-Winged Dinosaur",
        url="https://example.com/microraptor",
        text=("Microraptor zhaoianus was a small feathered dinosaur from the Early Cretaceous period. "
              "It had four wings and was capable of gliding flight. Known for its black feathers, "
              "small size, and arboreal lifestyle."),
    )],
}


class WebSearch:
    """Lookup provider for species descriptions."""

    def __init__(self, endpoint: Optional[str] = None, api_key: Optional[str] = None, timeout: float = 10):
        self.endpoint = endpoint
        self.timeout = timeout
        self.headers = {
            'User-Agent': 'Createosaur/1.0',
            'Accept': 'application/json',
        }
        if api_key:
            self.headers['Authorization'] = f"Bearer {api_key}"
        self.cache: Dict[str, List[SearchResult]] = {}

    def _make_request_with_retry(self, params: Dict, max_retries: int = 3) -> Optional[requests.Response]:
        """
        GET the search endpoint with exponential backoff on rate limiting.

        Returns:
            Response object if successful, None if all retries failed
        """
        for attempt in range(max_retries + 1):
            try:
                response = requests.get(self.endpoint, headers=self.headers, params=params, timeout=self.timeout)
            except requests.RequestException as e:
                if attempt < max_retries:
                    time.sleep(2 ** attempt + random.uniform(0, 1))
                    continue
                logger.warning(f"Search endpoint unreachable: {e}")
                return None

            if response.status_code == 200:
                return response
            if response.status_code == 429 and attempt < max_retries:
                time.sleep(2 ** attempt + random.uniform(0, 1))
                continue

            logger.warning(f"Search endpoint returned status {response.status_code}")
            return None

        return None

    def _builtin_results(self, query: str) -> List[SearchResult]:
        query_lower = query.lower()
        for key, results in SPECIES_NOTES.items():
            if key in query_lower:
                return list(results)
        return []

    def _parse_results(self, data) -> Optional[List[SearchResult]]:
        """
        Accept a bare list or an object with a "results" list.

        Returns:
            Parsed results, or None when the payload has any other shape
        """
        if isinstance(data, dict):
            data = data.get('results', [])
        if not isinstance(data, list):
            logger.warning(f"Unexpected search response shape: {type(data).__name__}")
            return None
        results = []
        for item in data:
            if not isinstance(item, dict) or not item.get('title'):
                continue
            results.append(SearchResult(
                title=item['title'],
                url=item.get('url', ''),
                text=item.get('text') or item.get('snippet', ''),
            ))
        return results

    def query(self, text: str) -> List[SearchResult]:
        """
        Look up a species description.

        Args:
            text: Free-text query, usually a species name

        Returns:
            Search results; empty for unknown species
        """
        text = (text or "").strip()
        if not text:
            return []

        cache_key = text.lower()
        if cache_key in self.cache:
            return list(self.cache[cache_key])

        results = None
        if self.endpoint:
            response = self._make_request_with_retry({'q': text})
            if response is not None:
                try:
                    results = self._parse_results(response.json())
                except ValueError as e:
                    logger.warning(f"Could not decode search response: {e}")

        if results is None:
            results = self._builtin_results(text)

        self.cache[cache_key] = results
        return list(results)


def traits_mentioned(catalog: TraitCatalog, results: Iterable[SearchResult]) -> List[str]:
    """
    Catalog trait ids whose names appear in result titles or text.

    Args:
        catalog: Loaded trait catalog
        results: Search results to scan

    Returns:
        Matching trait ids, sorted
    """
    text = " ".join(f"{r.title} {r.text}" for r in results)
    if not text.strip():
        return []

    names = {definition.name: definition.id for definition in catalog}
    return sorted(names[name] for name in find_mentions(text, names))
