#!/usr/bin/env python3
"""
Export every village of the location tree as a flat table for bulk loading.

Usage:
    python scripts/export_location_records.py data/india_locations.json exports/locations.parquet
"""

import logging
import sys

from location_hub.exceptions import LocationHubError
from location_hub.export_records import export_location_records
from location_hub.tree_reader import load_location_tree
from location_hub.verify_source import verify_tree_shape

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 2:
        print("Usage: python scripts/export_location_records.py <source.json> <output.csv|output.parquet>")
        return 1

    source, output = args
    try:
        tree = load_location_tree(source)
        verify_tree_shape(tree)
        summary = export_location_records(tree, output)
    except (LocationHubError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        return 1

    print(f"\nExported {summary['rows']:,} records to {summary['output_path']}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
