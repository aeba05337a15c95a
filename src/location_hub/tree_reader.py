"""
Tree reader for the India location source document.

Loads the single nested JSON file (states -> districts -> talukas -> villages)
into memory. No schema checks happen here; see verify_source for that.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .exceptions import ParseError, ReadError

# Configure logging
logger = logging.getLogger(__name__)


def read_json_file(path: Union[str, Path]) -> Any:
    """
    Read and parse one UTF-8 JSON file.

    Args:
        path: File to read

    Returns:
        The decoded JSON value

    Raises:
        ReadError: If the file is missing, is a directory or cannot be read
        ParseError: If the content is not valid JSON
    """
    file_path = Path(path)

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise ReadError(f"File does not exist: {file_path}")

    if not file_path.is_file():
        logger.error(f"Path is not a file: {file_path}")
        raise ReadError(f"Path is not a file: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)

    except json.JSONDecodeError as e:
        logger.error(f"Malformed JSON in {file_path.name}: {e}")
        raise ParseError(f"Malformed JSON in {file_path}: {e}") from e

    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading {file_path.name}: {e}")
        raise ReadError(f"Cannot read {file_path}: {e}") from e


def load_location_tree(source_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load the India location tree from its source JSON document.

    Args:
        source_path: Path to india_locations.json

    Returns:
        dict: Root document of shape ``{"states": [...]}``

    Raises:
        ReadError: If the source file is missing or unreadable
        ParseError: If the source file is malformed JSON

    Example:
        >>> tree = load_location_tree('data/india_locations.json')
        >>> len(tree['states'])
        36
    """
    source = Path(source_path)
    logger.info(f"Loading location tree: {source}")

    tree = read_json_file(source)

    size_mb = source.stat().st_size / (1024 * 1024)
    state_count = len(tree.get('states', [])) if isinstance(tree, dict) else 0
    logger.info(f"Loaded {source.name} ({size_mb:.2f} MB, {state_count} states)")

    return tree
