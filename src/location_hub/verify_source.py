"""
Source Tree Verification Module

Verifies the shape of the India location tree before any sharding starts, so
a malformed entry is reported with its exact JSON path instead of surfacing
as a KeyError deep inside the traversal.

Checks performed for every level:
1. The node is a JSON object
2. ``name`` is a string; ``code`` is a string or an integer (census/LGD
   numbers), published exactly as given
3. Non-leaf nodes carry their child list (districts, talukas, villages)

Executable: ``python -m location_hub.verify_source data/india_locations.json``
"""

import logging
import sys
from typing import Any, Dict, List

from .exceptions import LocationHubError, ShapeError
from .tree_reader import load_location_tree

logger = logging.getLogger(__name__)


# Child list expected below each level, leaf last
LEVEL_CHILDREN = [
    ('states', 'districts'),
    ('districts', 'talukas'),
    ('talukas', 'villages'),
    ('villages', None),
]


def _fail(message: str, path: str) -> None:
    logger.error(f"Shape check failed at {path}: {message}")
    raise ShapeError(f"{message} (at {path})", path=path)


def check_node(node: Any, path: str, child_key: str = None) -> List[Any]:
    """
    Verify a single tree node and return its children.

    Args:
        node: Decoded JSON value for the node
        path: JSON path used in error messages
        child_key: Name of the expected child list, None for villages

    Returns:
        list: The node's children (empty for villages)

    Raises:
        ShapeError: If the node is not an object, lacks a valid code/name,
            or lacks its child list
    """
    if not isinstance(node, dict):
        _fail(f"expected an object, found {type(node).__name__}", path)

    for field in ('code', 'name'):
        if field not in node:
            _fail(f"missing '{field}'", path)

    if not isinstance(node['name'], str):
        _fail(f"'name' must be a string, found {type(node['name']).__name__}", path)

    code = node['code']
    if isinstance(code, bool) or not isinstance(code, (str, int)):
        _fail(f"'code' must be a string or integer, found {type(code).__name__}", path)

    if child_key is None:
        return []

    if child_key not in node:
        _fail(f"missing '{child_key}' list", f"{path}.{child_key}")
    children = node[child_key]
    if not isinstance(children, list):
        _fail(f"'{child_key}' must be a list, found {type(children).__name__}", f"{path}.{child_key}")

    return children


def verify_tree_shape(tree: Any) -> Dict[str, Any]:
    """
    Verify the complete nested shape of a location tree.

    Args:
        tree: Root document as returned by load_location_tree

    Returns:
        dict: Node counts per level plus ``verification_status``

    Raises:
        ShapeError: On the first malformed node, with ``.path`` set

    Example:
        >>> report = verify_tree_shape({'states': []})
        >>> report['verification_status']
        'PASSED'
    """
    if not isinstance(tree, dict):
        _fail(f"root must be an object, found {type(tree).__name__}", "$")
    if 'states' not in tree:
        _fail("missing 'states' list", "states")
    if not isinstance(tree['states'], list):
        _fail(f"'states' must be a list, found {type(tree['states']).__name__}", "states")

    counts = {level: 0 for level, _ in LEVEL_CHILDREN}

    # Iterative walk: (level index, node, path)
    pending = [(0, state, f"states[{i}]") for i, state in enumerate(tree['states'])]
    pending.reverse()

    while pending:
        depth, node, path = pending.pop()
        level, child_key = LEVEL_CHILDREN[depth]
        children = check_node(node, path, child_key)
        counts[level] += 1

        for i in range(len(children) - 1, -1, -1):
            pending.append((depth + 1, children[i], f"{path}.{child_key}[{i}]"))

    report = dict(counts)
    report['verification_status'] = 'PASSED'

    logger.info(
        f"Shape verified: {counts['states']} states, {counts['districts']} districts, "
        f"{counts['talukas']} talukas, {counts['villages']} villages"
    )
    return report


def main(argv: List[str] = None) -> int:
    """Verify a source file from the command line."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m location_hub.verify_source <india_locations.json>")
        return 1

    try:
        report = verify_tree_shape(load_location_tree(args[0]))
    except LocationHubError as e:
        print(f"\nVERIFICATION FAILED: {e}\n")
        return 1

    print("\n" + "=" * 60)
    print("VERIFICATION SUCCESSFUL")
    print("=" * 60)
    for level in ('states', 'districts', 'talukas', 'villages'):
        print(f"  {level:10s} {report[level]:,}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
