"""
Runtime configuration for the Location Hub.

Defaults are resolved relative to the project root and may be overridden
through environment variables (a local ``.env`` file is honoured).

Environment variables:
    LOCATION_HUB_SOURCE       - source india_locations.json
    LOCATION_HUB_OUTPUT_DIR   - root of the generated static API
    LOCATION_HUB_LOG_DIR      - directory for timestamped run logs (stdout only if unset)
    LOCATION_HUB_ADMIN_STORE  - JSON file backing the admin record store
    LOCATION_HUB_ATOMIC       - "1"/"true" to publish through a staging dir
    SOURCE_DATE_EPOCH         - pins lastUpdated for reproducible builds
"""

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

# Project layout
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_SOURCE_FILE = PROJECT_ROOT / "data" / "india_locations.json"
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "public" / "api"
DEFAULT_ADMIN_STORE = PROJECT_ROOT / "data" / "admin_locations.json"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Published API identity
API_NAME = "Bharat Location Hub API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Complete Indian location database with 500K+ villages"
API_BASE_PATH = "/api"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    value = (os.getenv(name) or "").strip()
    return Path(value) if value else default


def get_settings() -> Dict[str, Any]:
    """
    Resolve the effective settings from the environment.

    Read on every call so tests and long-lived callers see changes to
    ``os.environ``.

    Returns:
        dict: source_file, output_dir, log_dir, admin_store, atomic
    """
    return {
        'source_file': _env_path("LOCATION_HUB_SOURCE", DEFAULT_SOURCE_FILE),
        'output_dir': _env_path("LOCATION_HUB_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        'log_dir': _env_path("LOCATION_HUB_LOG_DIR", None),
        'admin_store': _env_path("LOCATION_HUB_ADMIN_STORE", DEFAULT_ADMIN_STORE),
        'atomic': _env_flag("LOCATION_HUB_ATOMIC"),
    }


def get_build_time() -> Optional[datetime]:
    """Return the pinned build time from SOURCE_DATE_EPOCH, if set."""
    epoch = (os.getenv("SOURCE_DATE_EPOCH") or "").strip()
    if not epoch:
        return None
    try:
        return datetime.fromtimestamp(int(epoch), tz=timezone.utc)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Ignoring invalid SOURCE_DATE_EPOCH: {epoch!r}"
        )
        return None


def setup_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> Optional[Path]:
    """
    Configure root logging for command-line execution.

    Logs always go to stdout; when ``log_dir`` is given a timestamped
    ``static_api_YYYYmmdd_HHMMSS.log`` file is written there as well.

    Args:
        log_dir: Optional directory for the run log file
        level: Root log level

    Returns:
        Path of the log file, or None when logging to stdout only
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = None

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"static_api_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    return log_file
