"""Error taxonomy for the codec layer.

Malformed data never surfaces as an exception: decoders degrade to empty
results. Only invalid call patterns and exhausted limits raise.
"""


class CodecError(Exception):
    """Base class for all codec errors."""


class InvalidBoundaryError(CodecError, ValueError):
    """A multipart boundary is missing or violates the RFC 2046 grammar."""

    def __init__(self, boundary: object, reason: str) -> None:
        self.boundary = boundary
        self.reason = reason
        super().__init__(f"Invalid multipart boundary {boundary!r}: {reason}")


class NestingTooDeepError(CodecError):
    """Nested multipart bodies exceed the configured depth limit."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(f"Multipart nesting depth {depth} exceeds the limit of {limit}")
