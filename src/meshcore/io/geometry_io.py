"""
Mesh asset reader (triangulated OBJ subset) and built-in mesh generators.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple
import io
import logging
import math
import re
import numpy as np

from ..errors import (
    AssetIOError,
    FormatError,
    MeshParseError,
    UnsupportedTopologyError,
)
from ..geometry.mesh import Mesh, ColoredMesh
from ..geometry.primitives import Color

logger = logging.getLogger(__name__)

RECOGNIZED_TAGS = ("v", "vn", "vt", "f")

_CORNER_RE = re.compile(r"^(-?\d+)/(-?\d+)/(-?\d+)$")


@dataclass(frozen=True, eq=False)
class ParseResult:
    """
    Outcome of parsing a mesh asset: exactly one of mesh/error is set.

    Usage:
        result = ObjReader.read("models/pyramid.obj")
        if result.ok:
            mesh = result.mesh
        else:
            print(result.error)
    """

    mesh: Optional[Mesh] = None
    error: Optional[MeshParseError] = None

    def __post_init__(self):
        if (self.mesh is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of mesh or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Mesh:
        """Return the mesh, or raise the parse error."""
        if self.error is not None:
            raise self.error
        return self.mesh


def _strip_ignored(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """Yield (line_number, tokens) for lines carrying a recognized tag."""
    for number, line in enumerate(lines, start=1):
        content = line.split("#", 1)[0]
        tokens = content.split()
        if not tokens or tokens[0] not in RECOGNIZED_TAGS:
            continue
        yield number, tokens


def _parse_floats(tokens: List[str], allowed: Tuple[int, ...], line_number: int,
                  tag: str) -> List[float]:
    if len(tokens) not in allowed:
        expected = " or ".join(str(n) for n in allowed)
        raise FormatError(
            f"'{tag}' expects {expected} numbers, got {len(tokens)}", line_number
        )
    values = []
    for token in tokens:
        try:
            # float() also takes digit separators like 1_0
            if "_" in token:
                raise ValueError(token)
            value = float(token)
        except ValueError:
            raise FormatError(f"invalid number '{token}' in '{tag}' line", line_number)
        if not math.isfinite(value):
            raise FormatError(f"non-finite number '{token}' in '{tag}' line", line_number)
        values.append(value)
    return values


def _to_zero_based(raw: str, size: int, what: str, line_number: int) -> int:
    index = int(raw) - 1
    if index < 0 or index >= size:
        raise FormatError(
            f"{what} index {raw} out of range (have {size})", line_number
        )
    return index


class _ObjBuilder:
    """Accumulates parsed records in file order."""

    def __init__(self, scale: float):
        self.scale = scale
        self.positions: List[List[float]] = []
        self.normals: List[List[float]] = []
        self.uvs: List[List[float]] = []
        self.corners: List[List[List[int]]] = []

    def feed(self, line_number: int, tokens: List[str]):
        tag, args = tokens[0], tokens[1:]
        if tag == "v":
            x, y, z = _parse_floats(args, (3, 4), line_number, tag)[:3]
            self.positions.append([x * self.scale, y * self.scale, z * self.scale])
        elif tag == "vn":
            self.normals.append(_parse_floats(args, (3,), line_number, tag))
        elif tag == "vt":
            self.uvs.append(_parse_floats(args, (2, 3), line_number, tag)[:2])
        elif tag == "f":
            self.corners.append(self._parse_face(args, line_number))

    def _parse_face(self, args: List[str], line_number: int) -> List[List[int]]:
        if len(args) != 3:
            raise UnsupportedTopologyError(
                f"face has {len(args)} corners, only triangles are supported",
                line_number,
            )
        face = []
        for corner in args:
            match = _CORNER_RE.match(corner)
            if match is None:
                raise FormatError(
                    f"face corner '{corner}' does not match v/vt/vn", line_number
                )
            v, vt, vn = match.groups()
            face.append([
                _to_zero_based(v, len(self.positions), "position", line_number),
                _to_zero_based(vt, len(self.uvs), "uv", line_number),
                _to_zero_based(vn, len(self.normals), "normal", line_number),
            ])
        return face

    def build(self) -> Mesh:
        mesh = Mesh(
            positions=np.array(self.positions, dtype=np.float64).reshape(-1, 3),
            normals=np.array(self.normals, dtype=np.float64).reshape(-1, 3),
            uvs=np.array(self.uvs, dtype=np.float64).reshape(-1, 2),
            corners=np.array(self.corners, dtype=np.int32).reshape(-1, 3, 3),
        )
        mesh.pivot = mesh.centroid()
        return mesh


class ObjReader:
    """Reader for the triangulated v/vn/vt/f subset of the OBJ format."""

    @staticmethod
    def parse_stream(stream: TextIO, scale: float = 1.0) -> ParseResult:
        """
        Parse mesh text from an open stream.

        Lines tagged anything other than v, vn, vt or f (object names,
        smoothing groups, comments, blank lines) are skipped. The mesh pivot
        is set to the centroid of the parsed positions.

        Args:
            stream: Text stream to read
            scale: Factor applied to 'v' positions only

        Returns:
            ParseResult holding the Mesh or the MeshParseError
        """
        builder = _ObjBuilder(scale)
        try:
            for line_number, tokens in _strip_ignored(stream):
                builder.feed(line_number, tokens)
            mesh = builder.build()
        except MeshParseError as e:
            logger.warning(f"Mesh parse failed: {e}")
            return ParseResult(error=e)
        except (OSError, UnicodeDecodeError) as e:
            error = AssetIOError(f"could not read mesh stream: {e}")
            logger.warning(str(error))
            return ParseResult(error=error)

        logger.debug(
            f"Parsed mesh: {mesh.num_positions} positions, "
            f"{mesh.normals.shape[0]} normals, {mesh.uvs.shape[0]} uvs, "
            f"{mesh.num_faces} faces"
        )
        return ParseResult(mesh=mesh)

    @staticmethod
    def parse_text(text: str, scale: float = 1.0) -> ParseResult:
        """Parse mesh text held in memory."""
        return ObjReader.parse_stream(io.StringIO(text), scale=scale)

    @staticmethod
    def read(filepath: str | Path, scale: float = 1.0) -> ParseResult:
        """
        Read a mesh file.

        A missing or unreadable file is reported as an AssetIOError result.
        """
        filepath = Path(filepath)
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return ObjReader.parse_stream(f, scale=scale)
        except OSError as e:
            error = AssetIOError(f"could not open mesh file '{filepath}': {e}")
            logger.warning(str(error))
            return ParseResult(error=error)


# Corner signs of the 8 cube vertices
_CUBE_CORNERS = np.array([
    [-1, -1, -1],
    [ 1, -1, -1],
    [ 1,  1, -1],
    [-1,  1, -1],
    [-1, -1,  1],
    [ 1, -1,  1],
    [ 1,  1,  1],
    [-1,  1,  1],
], dtype=np.float64)

# Two triangles per face, wound so cross(p1 - p0, p2 - p0) points outward
_CUBE_INDICES = np.array([
    0, 2, 1, 0, 3, 2,   # -z
    0, 5, 4, 0, 1, 5,   # -y
    1, 6, 5, 1, 2, 6,   # +x
    3, 6, 2, 3, 7, 6,   # +y
    0, 7, 3, 0, 4, 7,   # -x
    4, 6, 7, 4, 5, 6,   # +z
], dtype=np.int32)

_RED = Color(1.0, 0.0, 0.0)
_GREEN = Color(0.0, 1.0, 0.0)
_BLUE = Color(0.0, 0.0, 1.0)

_CUBE_COLORS = np.array([
    c.to_array() for c in (_RED, _GREEN, _BLUE, _RED, _GREEN, _BLUE, _RED, _GREEN)
])


def generate_cube(center: tuple[float, float, float] = (0.0, 0.0, 0.0),
                  size: float = 1.0) -> ColoredMesh:
    """
    Generate an 8-vertex, 12-triangle colored cube.

    Args:
        center: Cube center, also used as the rotation pivot
        size: Half edge length

    Returns:
        ColoredMesh with outward-wound triangles
    """
    if size <= 0:
        raise ValueError(f"Cube size must be positive, got {size}")
    pivot = np.array(center, dtype=np.float64)
    return ColoredMesh(
        positions=pivot + size * _CUBE_CORNERS,
        colors=_CUBE_COLORS.copy(),
        indices=_CUBE_INDICES.copy(),
        pivot=pivot,
    )
