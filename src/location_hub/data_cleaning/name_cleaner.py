"""
Location name cleaner.

Deterministic normalization for location names typed by people: admin form
input and search queries. Source data fed to the static API builder is never
rewritten; codes and names there are published exactly as given.

Key Features:
- Normalizes Unicode dashes and strips invisible characters
- Collapses whitespace runs
- Fuzzy name suggestions via rapidfuzz
"""

import logging
import re
import unicodedata
from typing import Iterable, List, Optional, Tuple

from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)


# ============================================================================
# Unicode and Text Normalization
# ============================================================================

UNICODE_HYPHENS = [
    '\u2010',  # Hyphen
    '\u2011',  # Non-breaking hyphen
    '\u2012',  # Figure dash
    '\u2013',  # En dash
    '\u2014',  # Em dash
    '\u2015',  # Horizontal bar
    '\u2212',  # Minus sign
    '\uFE58',  # Small em dash
    '\uFE63',  # Small hyphen-minus
    '\uFF0D',  # Fullwidth hyphen-minus
]

INVISIBLE_CHARS = [
    '\u200B',  # Zero-width space
    '\u200C',  # Zero-width non-joiner
    '\u200D',  # Zero-width joiner
    '\uFEFF',  # Zero-width no-break space
]


def normalize_unicode(text: Optional[str]) -> Optional[str]:
    """
    Normalize Unicode text to canonical form.

    - NFKC composition, so Devanagari and accented names stay intact
    - Unicode hyphens/dashes become ``-``
    - Zero-width characters are removed

    Example:
        >>> normalize_unicode("Medchal−Malkajgiri")
        'Medchal-Malkajgiri'
    """
    if text is None:
        return None

    text = unicodedata.normalize('NFKC', str(text))

    for dash in UNICODE_HYPHENS:
        text = text.replace(dash, '-')

    for char in INVISIBLE_CHARS:
        text = text.replace(char, '')

    return text


def clean_location_name(text: Optional[str]) -> Optional[str]:
    """
    Clean a location name entered by a person.

    Processing steps:
    1. Unicode normalization
    2. Collapse whitespace runs to one space
    3. Strip leading/trailing whitespace

    Case is preserved.

    Returns:
        Cleaned name, or None if nothing remains

    Example:
        >>> clean_location_name("  Navi   Mumbai ")
        'Navi Mumbai'
        >>> clean_location_name("   ") is None
        True
    """
    text = normalize_unicode(text)
    if text is None:
        return None

    text = re.sub(r'\s+', ' ', text).strip()
    return text or None


# ============================================================================
# Fuzzy Suggestions
# ============================================================================

def suggest_names(
    query: str,
    choices: Iterable[str],
    limit: int = 5,
    threshold: int = 80
) -> List[Tuple[str, float]]:
    """
    Suggest known names close to a possibly misspelled query.

    Matching is case-insensitive; the original spelling of each choice is
    returned. Duplicate names are suggested once.

    Args:
        query: Text typed by the user
        choices: Candidate names
        limit: Maximum suggestions
        threshold: Minimum similarity score (0-100)

    Returns:
        list: ``(name, score)`` pairs, best first

    Example:
        >>> [name for name, _ in suggest_names("bandara", ["Bandra", "Borivali"])]
        ['Bandra']
    """
    query = clean_location_name(query)
    if not query:
        return []

    unique_choices = list(dict.fromkeys(choices))
    if not unique_choices:
        return []

    matches = process.extract(
        query.lower(),
        [choice.lower() for choice in unique_choices],
        scorer=fuzz.WRatio,
        limit=limit,
        score_cutoff=threshold
    )

    suggestions = [(unique_choices[index], score) for _, score, index in matches]
    logger.debug(f"Suggestions for '{query}': {suggestions}")
    return suggestions
