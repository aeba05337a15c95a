"""Top-level index.json descriptor for the static location API."""

from typing import Any, Dict, Mapping

from .config import API_BASE_PATH, API_DESCRIPTION, API_NAME, API_VERSION


def build_manifest(stats: Mapping[str, Any], base_path: str = API_BASE_PATH) -> Dict[str, Any]:
    """
    Build the index.json manifest: endpoints, usage examples and a copy of
    the stats document.
    """
    return {
        'name': API_NAME,
        'version': API_VERSION,
        'description': API_DESCRIPTION,
        'endpoints': {
            'states': f"{base_path}/states.json",
            'search': f"{base_path}/search/{{letter}}.json",
            'stats': f"{base_path}/stats.json",
            'stateDetails': f"{base_path}/states/{{state-name}}.json",
        },
        'examples': {
            'getAllStates': f"fetch('{base_path}/states.json')",
            'searchByLetter': f"fetch('{base_path}/search/m.json')",
            'getStats': f"fetch('{base_path}/stats.json')",
            'getMaharashtra': f"fetch('{base_path}/states/maharashtra.json')",
        },
        'stats': dict(stats),
    }
