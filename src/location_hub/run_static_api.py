"""
Static API Build Script

Turns the nested India location document into the pre-sharded static JSON
API served under /api.

Pipeline Stages:
1. Read - Load the source JSON tree into memory
2. Verify - Check the nested shape before traversal
3. Shard - One traversal building roll-up, state shards and search index
4. Stats - Sum global counts
5. Publish - Write states/, search/, stats.json and index.json

The job is linear: NOT_STARTED -> RUNNING -> COMPLETED | FAILED. There are no
retries and no checkpoints; a failed direct-write run may leave partial output
behind, which stays untrustworthy until a successful rerun replaces it.

Usage:
    location-hub-build --source data/india_locations.json --output-dir public/api
    python -m location_hub.run_static_api --atomic
"""

import argparse
import logging
import sys
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .code_strategy import DeterministicCodeStrategy
from .config import get_settings, setup_logging
from .manifest_writer import build_manifest
from .sharder import shard_location_tree
from .static_api import publish_static_api
from .stats_builder import build_stats
from .tree_reader import load_location_tree
from .verify_source import verify_tree_shape

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StaticApiBuild:
    """
    One run of the static API generator.

    Args:
        source: Source india_locations.json
        output_dir: API root to write
        atomic: Publish through a staging directory
        generated_at: Fixed lastUpdated time (reproducible builds)
    """

    def __init__(
        self,
        source: Union[str, Path],
        output_dir: Union[str, Path],
        atomic: bool = False,
        generated_at: Optional[datetime] = None
    ):
        self.source = Path(source)
        self.output_dir = Path(output_dir)
        self.atomic = atomic
        self.generated_at = generated_at
        self.status = JobStatus.NOT_STARTED
        self.error: Optional[BaseException] = None

    def run(self) -> Dict[str, Any]:
        """
        Execute every stage once.

        Returns:
            dict: Build report (counts, files written, elapsed time)

        Raises:
            RuntimeError: If the build was already started
            LocationHubError: Whatever stage failed, after status is FAILED
        """
        if self.status is not JobStatus.NOT_STARTED:
            raise RuntimeError(f"Build already {self.status.value}; create a new StaticApiBuild to rerun")

        self.status = JobStatus.RUNNING
        start_time = time.time()

        try:
            logger.info("[1/5] Reading source tree...")
            tree = load_location_tree(self.source)

            logger.info("[2/5] Verifying tree shape...")
            verify_tree_shape(tree)

            logger.info("[3/5] Sharding locations...")
            sharded = shard_location_tree(tree, DeterministicCodeStrategy())

            logger.info("[4/5] Building stats and manifest...")
            stats = build_stats(sharded, generated_at=self.generated_at)
            manifest = build_manifest(stats)

            logger.info(f"[5/5] Writing static API to {self.output_dir}...")
            published = publish_static_api(sharded, stats, manifest, self.output_dir, atomic=self.atomic)

        except BaseException as e:
            self.status = JobStatus.FAILED
            self.error = e
            raise

        self.status = JobStatus.COMPLETED
        totals = sharded['totals']

        return {
            'status': self.status.value,
            'source': str(self.source),
            'output_dir': published['output_dir'],
            'atomic': published['atomic'],
            'files_written': published['files_written'],
            'states': totals['states'],
            'districts': totals['districts'],
            'talukas': totals['talukas'],
            'villages': totals['villages'],
            'indexed_villages': totals['indexed'],
            'unindexed_villages': totals['unindexed'],
            'search_letters': sorted(sharded['search_index']),
            'last_updated': stats['lastUpdated'],
            'elapsed_seconds': time.time() - start_time,
        }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Build the Bharat Location Hub static JSON API")
    ap.add_argument("--source", default=str(settings['source_file']),
                    help=f"Source location tree (default: {settings['source_file']})")
    ap.add_argument("--output-dir", default=str(settings['output_dir']),
                    help=f"Static API root (default: {settings['output_dir']})")
    ap.add_argument("--atomic", action="store_true", default=settings['atomic'],
                    help="Write to a staging directory and swap it into place")
    ap.add_argument("--log-dir", default=settings['log_dir'],
                    help="Also write a timestamped log file to this directory")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point.

    Returns:
        int: Exit code (0 = success, 1 = failure, 130 = interrupted)
    """
    args = parse_args(argv)
    setup_logging(
        Path(args.log_dir) if args.log_dir else None,
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    logger.info("=" * 80)
    logger.info("BHARAT LOCATION HUB - STATIC API BUILD")
    logger.info("=" * 80)
    logger.info(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    build = StaticApiBuild(args.source, args.output_dir, atomic=args.atomic)

    try:
        report = build.run()

    except KeyboardInterrupt:
        logger.warning("Build interrupted by user (Ctrl+C)")
        logger.info(f"Output in {args.output_dir} may be incomplete - rerun the build")
        return 130

    except Exception as e:
        logger.error(f"BUILD FAILED: {e}", exc_info=True)
        if not args.atomic:
            logger.error(f"Files already written to {args.output_dir} are untrustworthy until a successful rerun")
        return 1

    logger.info("=" * 80)
    logger.info("BUILD COMPLETE")
    logger.info("=" * 80)
    logger.info(f"Total files created: {report['files_written']}")
    logger.info(f"Total locations: {report['villages']:,} "
                f"({report['indexed_villages']:,} searchable, {report['unindexed_villages']:,} browse-only)")
    logger.info(f"Search letters: {''.join(report['search_letters']).upper()}")
    logger.info(f"Output: {Path(report['output_dir']).absolute()}")
    logger.info(f"Total time: {report['elapsed_seconds']:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
