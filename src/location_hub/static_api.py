"""
Static API file writer.

Writes the sharded documents to disk, one write per file:

    <output>/states.json
    <output>/states/<slug>.json
    <output>/search/<letter>.json
    <output>/stats.json
    <output>/index.json

Direct writes leave already-written files in place if a later write fails.
Atomic publication writes into a sibling staging directory and swaps it in
only once every file exists, so readers keep seeing the previous output set
until then.
"""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .exceptions import WriteError

logger = logging.getLogger(__name__)

JSON_INDENT = 2


def write_json(path: Path, obj: Any) -> Path:
    """
    Write one pretty-printed UTF-8 JSON document.

    Raises:
        WriteError: If the directory or file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=JSON_INDENT)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise WriteError(f"Cannot write {path}: {e}") from e

    logger.debug(f"Wrote {path}")
    return path


def write_static_api(
    sharded: Mapping[str, Any],
    stats: Mapping[str, Any],
    manifest: Mapping[str, Any],
    output_dir: Union[str, Path]
) -> List[Path]:
    """
    Write the complete static API file set into ``output_dir``.

    Args:
        sharded: Result of shard_location_tree
        stats: stats.json document
        manifest: index.json document
        output_dir: API root directory (created if missing)

    Returns:
        list: Paths written, in write order

    Raises:
        WriteError: On the first failed write; earlier files stay on disk
    """
    root = Path(output_dir)
    written = []

    written.append(write_json(root / "states.json", {'states': sharded['states']}))
    logger.info(f"Created states.json ({len(sharded['states'])} states)")

    for slug, shard in sharded['state_shards'].items():
        written.append(write_json(root / "states" / f"{slug}.json", shard))
    logger.info(f"Created {len(sharded['state_shards'])} state files")

    for letter, locations in sharded['search_index'].items():
        written.append(write_json(
            root / "search" / f"{letter}.json",
            {'letter': letter.upper(), 'locations': locations}
        ))
    logger.info(f"Created {len(sharded['search_index'])} search index files")

    written.append(write_json(root / "stats.json", stats))
    written.append(write_json(root / "index.json", manifest))
    logger.info("Created stats.json and index.json")

    return written


def publish_static_api(
    sharded: Mapping[str, Any],
    stats: Mapping[str, Any],
    manifest: Mapping[str, Any],
    output_dir: Union[str, Path],
    atomic: bool = False
) -> Dict[str, Any]:
    """
    Write the static API, optionally through a staging directory.

    With ``atomic=True`` the files go to ``.<name>.staging-<timestamp>`` next
    to ``output_dir``; after the last write the old directory is moved aside,
    the staging directory renamed into place and the old one removed. A
    failed atomic run removes its staging directory and leaves the previous
    output untouched.

    Returns:
        dict: output_dir, files_written, atomic
    """
    target = Path(output_dir)

    if not atomic:
        written = write_static_api(sharded, stats, manifest, target)
        return {'output_dir': str(target), 'files_written': len(written), 'atomic': False}

    stamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
    staging = target.parent / f".{target.name}.staging-{stamp}"
    previous = target.parent / f".{target.name}.previous-{stamp}"

    logger.info(f"Staging static API in {staging}")
    try:
        written = write_static_api(sharded, stats, manifest, staging)
    except WriteError:
        shutil.rmtree(staging, ignore_errors=True)
        logger.error(f"Staged build discarded; {target} left unchanged")
        raise

    try:
        if target.exists():
            target.rename(previous)
        staging.rename(target)
    except OSError as e:
        logger.error(f"Failed to swap staged build into {target}: {e}")
        if previous.exists() and not target.exists():
            previous.rename(target)
        raise WriteError(f"Cannot publish staged build to {target}: {e}") from e

    if previous.exists():
        shutil.rmtree(previous)

    logger.info(f"Published {len(written)} files to {target}")
    return {'output_dir': str(target), 'files_written': len(written), 'atomic': True}
