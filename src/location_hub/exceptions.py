"""
Error taxonomy for the Location Hub.

Every batch step raises one of these so the runner can report which stage
failed. All of them are RuntimeErrors, matching how the pipeline has always
signalled an aborted run.
"""


class LocationHubError(RuntimeError):
    """Base class for all Location Hub failures."""


class ReadError(LocationHubError):
    """Source or API file is missing or cannot be read."""


class ParseError(LocationHubError):
    """File content is not valid JSON."""


class ShapeError(LocationHubError):
    """
    Location tree does not have the expected nested shape.

    Attributes:
        path: JSON path of the offending node, e.g. ``states[0].districts``
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class SlugCollisionError(ShapeError):
    """Two states normalize to the same output file name."""


class WriteError(LocationHubError):
    """Output directory or file could not be written."""


class ValidationError(LocationHubError):
    """Admin input is missing a required field."""


class RecordNotFoundError(LocationHubError):
    """No admin record exists with the requested id."""
