"""Domain errors raised by the operation pipeline, the cache and the image boundary.

None of these carry an HTTP status; the router owns the mapping to status codes.
"""


class ImageServerError(Exception):
    """Base class for every error surfaced to the request handler."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ParameterError(ImageServerError):
    """A raw operation parameter does not match its grammar."""

    def __init__(self, reason: str, operation: str | None = None) -> None:
        self.reason = reason
        self.operation = operation
        super().__init__(f"Invalid parameter for {operation}: {reason}" if operation else reason)

    def for_operation(self, operation: str) -> "ParameterError":
        """Return a copy of this error attributed to ``operation``."""
        return type(self)(self.reason, operation)


class InvalidParameter(ParameterError):
    pass


class InvalidDimensions(ParameterError):
    pass


class InvalidAnchor(ParameterError):
    pass


class InvalidCropSpec(ParameterError):
    pass


class ChainError(ImageServerError):
    """The operation chain itself is malformed."""


class InvalidOperation(ChainError):
    pass


class UnknownOperation(ChainError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Unknown operation '{operation}'")


class TransformError(ImageServerError):
    """A registered transform failed while being applied."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Error applying {operation}: {cause}")


class SourceNotFound(ImageServerError):
    pass


class AccessDenied(ImageServerError):
    pass


class CacheWriteError(ImageServerError):
    pass
