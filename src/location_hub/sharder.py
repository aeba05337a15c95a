"""
Denormalizer / sharder for the static location API.

Walks the location tree once (State -> District -> Taluka -> Village) and
builds, entirely in memory:

- the ``states.json`` roll-up with per-state counts
- one shard document per state with villages projected to
  ``{name, code, uniqueCode}``
- the first-letter search index of flattened location records

Traversal keeps source order at every level. Nothing is written here; the
static_api module owns file output.
"""

import logging
import re
import string
from typing import Any, Dict, List, Mapping, Optional

from .code_strategy import CodeStrategy, DeterministicCodeStrategy
from .exceptions import SlugCollisionError

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "
SEARCH_LETTERS = frozenset(string.ascii_lowercase)


# ============================================================================
# Record Builders
# ============================================================================

def build_full_path(state_name: str, district_name: str, taluka_name: str, village_name: str) -> str:
    return PATH_SEPARATOR.join([state_name, district_name, taluka_name, village_name])


def build_search_text(state_name: str, district_name: str, taluka_name: str, village_name: str) -> str:
    return " ".join([state_name, district_name, taluka_name, village_name]).lower()


def build_location_record(
    state: Mapping[str, Any],
    district: Mapping[str, Any],
    taluka: Mapping[str, Any],
    village: Mapping[str, Any],
    code_strategy: CodeStrategy
) -> Dict[str, Any]:
    """
    Build the flattened record for one village.

    Args:
        state, district, taluka, village: Tree nodes with ``code`` and ``name``
        code_strategy: Generator for ``uniqueCode``

    Returns:
        dict: FlattenedLocationRecord with keys in published order
    """
    record = {
        'stateName': state['name'],
        'stateCode': state['code'],
        'districtName': district['name'],
        'districtCode': district['code'],
        'talukaName': taluka['name'],
        'talukaCode': taluka['code'],
        'villageName': village['name'],
        'villageCode': village['code'],
    }
    record['uniqueCode'] = code_strategy.generate(record)
    record['fullPath'] = build_full_path(state['name'], district['name'], taluka['name'], village['name'])
    record['searchText'] = build_search_text(state['name'], district['name'], taluka['name'], village['name'])
    return record


def search_letter(village_name: str) -> Optional[str]:
    """
    Return the index bucket for a village name, or None when excluded.

    Only names whose lower-cased first character is ``a``-``z`` are indexed.

    Example:
        >>> search_letter('Bandra')
        'b'
        >>> search_letter('7 Mile Post') is None
        True
    """
    initial = village_name[:1].lower()
    return initial if initial in SEARCH_LETTERS else None


def state_slug(state_name: str) -> str:
    """
    File name stem for a state shard.

    Lower-case, whitespace runs become a single hyphen, and every character
    outside ``[a-z0-9-]`` is dropped.

    Example:
        >>> state_slug('Andaman & Nicobar Islands')
        'andaman--nicobar-islands'
    """
    slug = re.sub(r'\s+', '-', state_name.lower())
    return re.sub(r'[^a-z0-9-]', '', slug)


def assign_state_slugs(states: List[Mapping[str, Any]]) -> List[str]:
    """
    Compute shard slugs for all states and reject collisions.

    Raises:
        SlugCollisionError: If two states share a slug or a slug is empty
    """
    seen: Dict[str, str] = {}
    slugs = []

    for i, state in enumerate(states):
        slug = state_slug(state['name'])
        if not slug:
            logger.error(f"State name {state['name']!r} produces an empty file name")
            raise SlugCollisionError(
                f"State {state['name']!r} has no characters usable in a file name",
                path=f"states[{i}].name"
            )
        if slug in seen:
            logger.error(f"States {seen[slug]!r} and {state['name']!r} both map to {slug}.json")
            raise SlugCollisionError(
                f"States {seen[slug]!r} and {state['name']!r} both map to states/{slug}.json",
                path=f"states[{i}].name"
            )
        seen[slug] = state['name']
        slugs.append(slug)

    return slugs


# ============================================================================
# Traversal
# ============================================================================

def shard_location_tree(
    tree: Mapping[str, Any],
    code_strategy: Optional[CodeStrategy] = None
) -> Dict[str, Any]:
    """
    Denormalize the location tree into roll-up, shards and search index.

    The search index is built fresh for every call and returned, so repeated
    runs never share buckets.

    Args:
        tree: Verified root document ``{"states": [...]}``
        code_strategy: uniqueCode generator (deterministic by default)

    Returns:
        dict with:
        - states: roll-up entries ``{name, code, districts, talukas, villages}``
        - state_shards: slug -> ``{state, code, districts: [...]}``
        - search_index: letter -> list of flattened records
        - totals: states, districts, talukas, villages, indexed, unindexed

    Raises:
        SlugCollisionError: If two states map to the same shard file

    Example:
        >>> result = shard_location_tree(tree)
        >>> result['state_shards']['maharashtra']['districts'][0]['name']
        'Mumbai'
    """
    if code_strategy is None:
        code_strategy = DeterministicCodeStrategy()
    if not code_strategy.reproducible:
        logger.warning(
            f"Sharding with non-reproducible code strategy '{code_strategy.name}'; "
            f"output will differ between runs"
        )

    states = tree['states']
    slugs = assign_state_slugs(states)

    rollup = []
    state_shards: Dict[str, Dict[str, Any]] = {}
    search_index: Dict[str, List[Dict[str, Any]]] = {}
    totals = {
        'states': len(states),
        'districts': 0,
        'talukas': 0,
        'villages': 0,
        'indexed': 0,
        'unindexed': 0,
    }

    for state, slug in zip(states, slugs):
        state_talukas = 0
        state_villages = 0
        shard_districts = []

        for district in state['districts']:
            shard_talukas = []

            for taluka in district['talukas']:
                shard_villages = []

                for village in taluka['villages']:
                    record = build_location_record(state, district, taluka, village, code_strategy)

                    shard_villages.append({
                        'name': village['name'],
                        'code': village['code'],
                        'uniqueCode': record['uniqueCode'],
                    })

                    letter = search_letter(village['name'])
                    if letter is None:
                        totals['unindexed'] += 1
                        logger.debug(f"Not indexed for search (non a-z initial): {record['fullPath']}")
                    else:
                        search_index.setdefault(letter, []).append(record)
                        totals['indexed'] += 1

                shard_talukas.append({
                    'name': taluka['name'],
                    'code': taluka['code'],
                    'villages': shard_villages,
                })
                state_villages += len(shard_villages)

            shard_districts.append({
                'name': district['name'],
                'code': district['code'],
                'talukas': shard_talukas,
            })
            state_talukas += len(shard_talukas)

        state_shards[slug] = {
            'state': state['name'],
            'code': state['code'],
            'districts': shard_districts,
        }
        rollup.append({
            'name': state['name'],
            'code': state['code'],
            'districts': len(shard_districts),
            'talukas': state_talukas,
            'villages': state_villages,
        })

        totals['districts'] += len(shard_districts)
        totals['talukas'] += state_talukas
        totals['villages'] += state_villages

        logger.debug(
            f"Sharded {state['name']} -> states/{slug}.json "
            f"({len(shard_districts)} districts, {state_talukas} talukas, {state_villages} villages)"
        )

    if totals['unindexed'] > 0:
        logger.warning(
            f"{totals['unindexed']:,} village(s) start with a non a-z character "
            f"and are browse-only (excluded from search index)"
        )

    logger.info(
        f"Sharding complete: {totals['states']} states, {totals['villages']:,} villages, "
        f"{len(search_index)} search letters"
    )

    return {
        'states': rollup,
        'state_shards': state_shards,
        'search_index': search_index,
        'totals': totals,
    }
