"""
Read-side access to a generated static location API.

Mirrors what the browse/search UI does against /api: list states, open a
state shard, cascade district -> taluka -> village pickers, and filter a
letter bucket by substring. Letter buckets are loaded into pandas DataFrames
once per instance and filtered with vectorized string matching.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from .data_cleaning import clean_location_name, suggest_names
from .exceptions import ValidationError
from .sharder import state_slug
from .tree_reader import read_json_file

logger = logging.getLogger(__name__)

# First query character must map to a bucket file name
SEARCHABLE_INITIAL = re.compile(r'[a-z0-9]')

SEARCH_COLUMNS = ['searchText', 'villageName', 'uniqueCode']


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValidationError(f"limit must not be negative, got {limit}")


class StaticLocationApi:
    """
    Browse and search a static API directory produced by run_static_api.

    Args:
        api_root: Directory containing states.json, states/, search/, ...

    Example:
        >>> api = StaticLocationApi('public/api')
        >>> api.list_districts('Maharashtra')
        ['Mumbai', 'Pune']
        >>> api.search_locations('bandra')[0]['uniqueCode']
        'MH-MUM-AND-001'
    """

    def __init__(self, api_root: Union[str, Path]):
        self.api_root = Path(api_root)
        self._states: Optional[List[Dict[str, Any]]] = None
        self._state_details: Dict[str, Dict[str, Any]] = {}
        self._buckets: Dict[str, pd.DataFrame] = {}

    # ------------------------------------------------------------------
    # Whole-file endpoints
    # ------------------------------------------------------------------

    def get_states(self) -> List[Dict[str, Any]]:
        """Roll-up entries from states.json (cached)."""
        if self._states is None:
            self._states = read_json_file(self.api_root / "states.json")['states']
            logger.info(f"Loaded {len(self._states)} states from {self.api_root}")
        return self._states

    def get_stats(self) -> Dict[str, Any]:
        return read_json_file(self.api_root / "stats.json")

    def get_manifest(self) -> Dict[str, Any]:
        return read_json_file(self.api_root / "index.json")

    def get_state_details(self, state_name: str) -> Dict[str, Any]:
        """
        Load one state shard by state name.

        Raises:
            ReadError: If no shard exists for the state
            ParseError: If the shard is malformed
        """
        slug = state_slug(state_name)
        if slug not in self._state_details:
            self._state_details[slug] = read_json_file(self.api_root / "states" / f"{slug}.json")
        return self._state_details[slug]

    # ------------------------------------------------------------------
    # Cascading pickers
    # ------------------------------------------------------------------

    def _find_state(self, state_name: str) -> Optional[Dict[str, Any]]:
        slug = state_slug(state_name)
        if slug not in self._state_details and not (self.api_root / "states" / f"{slug}.json").exists():
            logger.warning(f"No state file for '{state_name}' (states/{slug}.json)")
            return None
        return self.get_state_details(state_name)

    @staticmethod
    def _find_child(nodes: List[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
        name_lower = name.lower()
        for node in nodes:
            if node['name'].lower() == name_lower:
                return node
        return None

    def list_districts(self, state_name: str) -> List[str]:
        state = self._find_state(state_name)
        if state is None:
            return []
        return sorted(district['name'] for district in state.get('districts', []))

    def list_talukas(self, state_name: str, district_name: str) -> List[str]:
        state = self._find_state(state_name)
        if state is None:
            return []
        district = self._find_child(state.get('districts', []), district_name)
        if district is None:
            return []
        return sorted(taluka['name'] for taluka in district.get('talukas', []))

    def list_villages(self, state_name: str, district_name: str, taluka_name: str) -> List[str]:
        state = self._find_state(state_name)
        if state is None:
            return []
        district = self._find_child(state.get('districts', []), district_name)
        if district is None:
            return []
        taluka = self._find_child(district.get('talukas', []), taluka_name)
        if taluka is None:
            return []
        return sorted(village['name'] for village in taluka.get('villages', []))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _load_bucket(self, letter: str) -> pd.DataFrame:
        """Letter bucket as a DataFrame; empty when the file does not exist."""
        if letter not in self._buckets:
            bucket_path = self.api_root / "search" / f"{letter}.json"
            if not bucket_path.exists():
                logger.debug(f"No search bucket for '{letter}'")
                df = pd.DataFrame(columns=SEARCH_COLUMNS)
            else:
                df = pd.DataFrame(read_json_file(bucket_path)['locations'])
                for col in SEARCH_COLUMNS:
                    if col not in df.columns:
                        df[col] = ''
                logger.debug(f"Loaded search bucket '{letter}': {len(df):,} locations")
            self._buckets[letter] = df
        return self._buckets[letter]

    @staticmethod
    def _normalize_query(query: str) -> Tuple[str, Optional[str]]:
        term = (clean_location_name(query) or '').lower()
        if not term or not SEARCHABLE_INITIAL.match(term[0]):
            return term, None
        return term, term[0]

    def search_locations(self, query: str, limit: int = 50) -> List[Dict[str, Any]]:
        """
        Substring search within the bucket of the query's first character.

        A record matches when its searchText, villageName or uniqueCode
        contains the lower-cased query. Queries starting with anything other
        than ``a-z``/``0-9`` return nothing.

        Args:
            query: Search text
            limit: Maximum records, in bucket order

        Returns:
            list: Flattened location records

        Raises:
            ValidationError: If limit is negative
        """
        _check_limit(limit)
        term, letter = self._normalize_query(query)
        if letter is None:
            return []

        df = self._load_bucket(letter)
        if df.empty:
            return []

        mask = (
            df['searchText'].fillna('').str.contains(term, regex=False)
            | df['villageName'].fillna('').str.lower().str.contains(term, regex=False)
            | df['uniqueCode'].fillna('').str.lower().str.contains(term, regex=False)
        )
        results = df[mask].head(limit)

        logger.debug(f"Search '{term}': {int(mask.sum()):,} matches, returning {len(results)}")
        return results.to_dict('records')

    def suggest_villages(self, query: str, limit: int = 5, threshold: int = 80) -> List[Dict[str, Any]]:
        """
        Fuzzy "did you mean" suggestions for a misspelled village name.

        Returns:
            list: ``{villageName, fullPath, uniqueCode, score}`` dicts, best first
        """
        _check_limit(limit)
        if limit == 0:
            return []

        term, letter = self._normalize_query(query)
        if letter is None:
            return []

        df = self._load_bucket(letter)
        if df.empty:
            return []

        suggestions = []
        for name, score in suggest_names(term, df['villageName'].tolist(), limit=limit, threshold=threshold):
            first = df[df['villageName'] == name].iloc[0]
            suggestions.append({
                'villageName': name,
                'fullPath': first.get('fullPath', ''),
                'uniqueCode': first['uniqueCode'],
                'score': round(float(score), 1),
            })
        return suggestions
