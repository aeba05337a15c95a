"""
Admin location record store.

A small CRUD store for locations added or corrected by an admin, persisted
to a single JSON file. It is deliberately separate from the static API: edits
here never regenerate states/ or search/, and a rebuild never touches this
file. Unique codes come from RandomSuffixCodeStrategy because admin records
have no source codes. Each record also carries a readable hierarchical
``locationId`` (``maharashtra_mumbai_andheri_versova``) and an 8-character
``shortCode`` for quick reference.
"""

import json
import logging
import math
import secrets
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .code_strategy import (
    CodeStrategy,
    RandomSuffixCodeStrategy,
    generate_location_id,
    generate_short_code,
)
from .config import get_settings
from .data_cleaning import clean_location_name
from .exceptions import ParseError, RecordNotFoundError, ValidationError
from .sharder import build_search_text
from .static_api import write_json
from .stats_builder import format_timestamp
from .tree_reader import read_json_file

logger = logging.getLogger(__name__)

NAME_FIELDS = ['stateName', 'districtName', 'talukaName', 'villageName']
BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'


def new_record_id(now: datetime) -> str:
    """Id in the ``loc_<epoch-ms>_<9 base36 chars>`` form."""
    millis = int(now.timestamp() * 1000)
    suffix = ''.join(secrets.choice(BASE36) for _ in range(9))
    return f"loc_{millis}_{suffix}"


class LocationStore:
    """
    JSON-file backed store of admin location records.

    Args:
        path: Store file; created on first write. Defaults to the
            LOCATION_HUB_ADMIN_STORE setting
        code_strategy: uniqueCode generator (random suffix by default)
        clock: Returns the current UTC time; injectable for tests
        uuid_factory: Source of shortCode values; injectable for tests
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        code_strategy: Optional[CodeStrategy] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4
    ):
        self.path = Path(path) if path is not None else get_settings()['admin_store']
        self.code_strategy = code_strategy or RandomSuffixCodeStrategy()
        self.clock = clock
        self.uuid_factory = uuid_factory
        self._locations: List[Dict[str, Any]] = []

        if self.path.exists():
            self._locations = self._load()
            logger.info(f"Loaded {len(self._locations):,} admin locations from {self.path}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load(self) -> List[Dict[str, Any]]:
        data = read_json_file(self.path)
        if not isinstance(data, dict) or not isinstance(data.get('locations', []), list):
            logger.error(f"Admin store {self.path} is not a {{'locations': [...]}} document")
            raise ParseError(f"Admin store {self.path} must be an object with a 'locations' list")
        return data.get('locations', [])

    def _save(self) -> None:
        write_json(self.path, {'locations': self._locations})

    def _index_of(self, location_id: str) -> int:
        for i, location in enumerate(self._locations):
            if location['id'] == location_id:
                return i
        raise RecordNotFoundError(f"Location not found: {location_id}")

    @staticmethod
    def _clean_names(data: Mapping[str, Any], required: bool) -> Dict[str, str]:
        names = {}
        for field in NAME_FIELDS:
            if field not in data:
                if required:
                    raise ValidationError(f"Missing required field: {field}")
                continue
            cleaned = clean_location_name(data[field])
            if cleaned is None:
                raise ValidationError(f"Field must not be blank: {field}")
            names[field] = cleaned
        return names

    def _derive(self, record: Dict[str, Any]) -> None:
        record['uniqueCode'] = self.code_strategy.generate(record)
        record['locationId'] = generate_location_id(*(record[field] for field in NAME_FIELDS))
        record['searchText'] = build_search_text(*(record[field] for field in NAME_FIELDS))

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add_location(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a record from the four location names.

        Raises:
            ValidationError: If a name is missing or blank
            WriteError: If the store file cannot be written
        """
        names = self._clean_names(data, required=True)
        now = self.clock()

        record = {'id': new_record_id(now)}
        record.update(names)
        self._derive(record)
        record['shortCode'] = generate_short_code(self.uuid_factory)
        record['createdAt'] = format_timestamp(now)
        record['updatedAt'] = record['createdAt']

        self._locations.append(record)
        self._save()
        logger.info(f"Added location {record['id']} ({record['uniqueCode']})")
        return dict(record)

    def get_location(self, location_id: str) -> Dict[str, Any]:
        return dict(self._locations[self._index_of(location_id)])

    def update_location(self, location_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Change location names; uniqueCode, locationId and searchText are regenerated
        whenever a name actually changes.

        Raises:
            RecordNotFoundError: If the id is unknown
            ValidationError: For blank names or fields that cannot be edited
        """
        unknown = set(updates) - set(NAME_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        index = self._index_of(location_id)
        names = self._clean_names(updates, required=False)
        record = dict(self._locations[index])

        changed = any(record[field] != value for field, value in names.items())
        record.update(names)
        if changed:
            self._derive(record)
        record['updatedAt'] = format_timestamp(self.clock())

        self._locations[index] = record
        self._save()
        logger.info(f"Updated location {location_id}")
        return dict(record)

    def delete_location(self, location_id: str) -> bool:
        index = self._index_of(location_id)
        del self._locations[index]
        self._save()
        logger.info(f"Deleted location {location_id}")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_locations(self, page: int = 1, limit: int = 100) -> Dict[str, Any]:
        """
        One page of records.

        Returns:
            dict: locations, total, pages
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")

        start = (page - 1) * limit
        total = len(self._locations)
        return {
            'locations': [dict(location) for location in self._locations[start:start + limit]],
            'total': total,
            'pages': math.ceil(total / limit),
        }

    def get_locations_by_state(self, state_name: str) -> List[Dict[str, Any]]:
        state_lower = state_name.lower()
        return [dict(loc) for loc in self._locations if loc['stateName'].lower() == state_lower]

    def search_locations(self, query: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Substring match over the four names and uniqueCode."""
        if limit < 0:
            raise ValidationError(f"limit must not be negative, got {limit}")

        term = (clean_location_name(query) or '').lower()
        if not term or limit == 0:
            return []

        results = []
        for location in self._locations:
            haystacks = [location[field].lower() for field in NAME_FIELDS]
            haystacks.append(location.get('uniqueCode', '').lower())
            if any(term in text for text in haystacks):
                results.append(dict(location))
                if len(results) >= limit:
                    break
        return results

    def export_data(self) -> str:
        """JSON export ``{timestamp, totalLocations, locations}``."""
        return json.dumps({
            'timestamp': format_timestamp(self.clock()),
            'totalLocations': len(self._locations),
            'locations': self._locations,
        }, ensure_ascii=False, indent=2)
