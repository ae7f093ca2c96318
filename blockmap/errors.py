"""
Error kinds raised while mapping configuration blocks to API objects.
"""


class BlockmapError(Exception):
    """Base class for every error the mapper reports as a diagnostic."""


class ConfigurationError(BlockmapError):
    """Raised when a configuration block does not satisfy its schema."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class StructuralMismatch(BlockmapError):
    """An attribute tree does not have the shape a mapper requires."""


class SemanticInvariantViolation(BlockmapError):
    """A cross-field rule failed after the whole tree was expanded."""


class SerializationFailure(BlockmapError):
    """A domain object could not be encoded."""


class ExternalCallFailure(BlockmapError):
    """An SDK call failed; carries the action being attempted."""

    def __init__(self, action: str, cause: BaseException):
        self.action = action
        self.cause = cause
        super().__init__(f"{action}: {cause}")


class ResourceNotFound(BlockmapError):
    """The remote object a resource refers to does not exist."""
