"""
Aggregate statistics for the static location API.

Totals are summed from the per-state roll-up produced by the sharder. Counts
are plain associative sums, so this second pass over the roll-up gives the
same numbers as counting during traversal.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from .config import API_BASE_PATH, get_build_time

logger = logging.getLogger(__name__)


def api_endpoints(base_path: str = API_BASE_PATH) -> List[str]:
    """Endpoint listing embedded in stats.json."""
    return [
        f"GET {base_path}/states.json",
        f"GET {base_path}/states/{{state-name}}.json",
        f"GET {base_path}/search/{{letter}}.json",
        f"GET {base_path}/stats.json",
    ]


def format_timestamp(moment: datetime) -> str:
    """
    ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC.

    Example:
        >>> format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2024-01-02T03:04:05.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def sum_rollup(rollup: List[Mapping[str, Any]]) -> Dict[str, int]:
    """Sum district/taluka/village counts across roll-up entries."""
    totals = {'states': len(rollup), 'districts': 0, 'talukas': 0, 'villages': 0}
    for entry in rollup:
        totals['districts'] += entry['districts']
        totals['talukas'] += entry['talukas']
        totals['villages'] += entry['villages']
    return totals


def build_stats(
    sharded: Mapping[str, Any],
    generated_at: Optional[datetime] = None,
    base_path: str = API_BASE_PATH
) -> Dict[str, Any]:
    """
    Build the stats.json document.

    Args:
        sharded: Result of shard_location_tree
        generated_at: Run time to publish as lastUpdated. Defaults to
            SOURCE_DATE_EPOCH when set, otherwise the current time.
        base_path: URL prefix used in apiEndpoints

    Returns:
        dict: totalStates, totalDistricts, totalTalukas, totalVillages,
        lastUpdated, apiEndpoints
    """
    if generated_at is None:
        generated_at = get_build_time() or datetime.now(timezone.utc)

    totals = sum_rollup(sharded['states'])

    traversal_totals = sharded.get('totals')
    if traversal_totals and traversal_totals['villages'] != totals['villages']:
        logger.warning(
            f"Village count mismatch: roll-up {totals['villages']:,} "
            f"vs traversal {traversal_totals['villages']:,}"
        )

    stats = {
        'totalStates': totals['states'],
        'totalDistricts': totals['districts'],
        'totalTalukas': totals['talukas'],
        'totalVillages': totals['villages'],
        'lastUpdated': format_timestamp(generated_at),
        'apiEndpoints': api_endpoints(base_path),
    }

    logger.info(
        f"Stats: {stats['totalStates']} states, {stats['totalDistricts']:,} districts, "
        f"{stats['totalTalukas']:,} talukas, {stats['totalVillages']:,} villages"
    )
    return stats
