"""
Error taxonomy for the mesh pipeline.

Parse errors are returned to callers inside a ParseResult rather than raised
out of the reader; projection errors are raised when the projector is
configured to reject degenerate depth.
"""

from __future__ import annotations
from typing import Optional, Sequence


class MeshPipelineError(Exception):
    """Base class for all pipeline errors."""


class MeshParseError(MeshPipelineError):
    """Base class for mesh asset parse failures."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class AssetIOError(MeshParseError):
    """The underlying text stream could not be read."""


class FormatError(MeshParseError):
    """A numeric field or face corner is malformed, or an index is out of range."""


class UnsupportedTopologyError(MeshParseError):
    """A face has a corner count other than 3."""


class DegenerateProjectionError(MeshPipelineError):
    """One or more points lie at (near) zero depth."""

    def __init__(self, indices: Sequence[int], min_depth: float):
        self.indices = list(indices)
        self.min_depth = min_depth
        preview = ", ".join(str(i) for i in self.indices[:8])
        if len(self.indices) > 8:
            preview += ", ..."
        super().__init__(
            f"{len(self.indices)} point(s) with |z| < {min_depth:g} "
            f"cannot be projected (indices: {preview})"
        )
