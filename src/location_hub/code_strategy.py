"""
Unique code generation for location records.

Two strategies share one interface and must not be mixed up:

- DeterministicCodeStrategy builds ``STATE-DISTRICT-TALUKA-VILLAGE`` from the
  source codes. The static API builder requires it: identical input must give
  byte-identical output.
- RandomSuffixCodeStrategy builds ``ST-DIS-VIL-XXXX`` from name abbreviations
  and four random hex characters. Only the admin store uses it, for records
  that have no source codes.

Both take a location mapping with the FlattenedLocationRecord keys
(stateName, stateCode, districtName, ...); each reads only what it needs.
"""

import re
import uuid
from typing import Any, Callable, Mapping, Optional, Union

# Source codes may be strings ("MH") or census/LGD integers (27)
Code = Union[str, int]


class CodeStrategy:
    """Interface for uniqueCode generators."""

    name = "base"
    reproducible = False

    def generate(self, location: Mapping[str, Any]) -> str:
        raise NotImplementedError


class DeterministicCodeStrategy(CodeStrategy):
    """Composite code from the four ancestor codes."""

    name = "deterministic"
    reproducible = True

    def generate(self, location: Mapping[str, Any]) -> str:
        return synthesize_unique_code(
            location['stateCode'],
            location['districtCode'],
            location['talukaCode'],
            location['villageCode'],
        )


class RandomSuffixCodeStrategy(CodeStrategy):
    """
    Name-abbreviation code with a random 4-character suffix.

    Args:
        uuid_factory: Callable returning a uuid.UUID; injectable for tests
    """

    name = "random-suffix"
    reproducible = False

    def __init__(self, uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4):
        self.uuid_factory = uuid_factory

    def generate(self, location: Mapping[str, Any]) -> str:
        state_abbr = location['stateName'][:2].upper()
        district_abbr = location['districtName'][:3].upper()
        village = location.get('villageName') or ''
        village_abbr = village[:3].upper() if village else 'GEN'
        suffix = str(self.uuid_factory())[:4].upper()
        return f"{state_abbr}-{district_abbr}-{village_abbr}-{suffix}"


def synthesize_unique_code(state_code: Code, district_code: Code, taluka_code: Code, village_code: Code) -> str:
    """
    Build the deterministic unique code for a village.

    Integer codes are rendered in decimal.

    Example:
        >>> synthesize_unique_code('MH', 'MUM', 'AND', '001')
        'MH-MUM-AND-001'
        >>> synthesize_unique_code(27, 519, 4150, 562000)
        '27-519-4150-562000'
    """
    return f"{state_code}-{district_code}-{taluka_code}-{village_code}"


def generate_location_id(
    state: str,
    district: str,
    sub_district: Optional[str] = None,
    village: Optional[str] = None
) -> str:
    """
    Build a readable hierarchical id such as ``maharashtra_mumbai_andheri``.

    Each part is lower-cased with every whitespace run, leading and trailing
    ones included, replaced by ``_``.
    """
    parts = [state, district]
    if sub_district:
        parts.append(sub_district)
    if village:
        parts.append(village)
    return '_'.join(re.sub(r'\s+', '_', part.lower()) for part in parts)


def generate_short_code(uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4) -> str:
    """Eight-character upper-case reference code, e.g. ``3F2A9C1B``."""
    return str(uuid_factory())[:8].upper()
