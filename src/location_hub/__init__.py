"""
Bharat Location Hub.

Builds a pre-sharded static JSON API from the nested India location tree
(state -> district -> taluka -> village) and provides read-side search plus a
small admin record store.
"""

from .code_strategy import CodeStrategy, DeterministicCodeStrategy, RandomSuffixCodeStrategy
from .exceptions import (
    LocationHubError,
    ParseError,
    ReadError,
    RecordNotFoundError,
    ShapeError,
    SlugCollisionError,
    ValidationError,
    WriteError,
)
from .run_static_api import JobStatus, StaticApiBuild

__version__ = "1.0.0"

__all__ = [
    'CodeStrategy',
    'DeterministicCodeStrategy',
    'RandomSuffixCodeStrategy',
    'JobStatus',
    'StaticApiBuild',
    'LocationHubError',
    'ReadError',
    'ParseError',
    'ShapeError',
    'SlugCollisionError',
    'WriteError',
    'ValidationError',
    'RecordNotFoundError',
]
