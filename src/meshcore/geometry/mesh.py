"""
Triangle mesh data structures.

Mesh stores per-corner index triples (position, uv, normal) grouped per
triangle, so the three index views always have equal length and are
multiples of three. ColoredMesh is the simplified variant where positions and
per-vertex colors share one vertex enumeration and a single index list.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray

from .primitives import as_vec3_array


# Column order inside Mesh.corners[..., k]
POSITION = 0
UV = 1
NORMAL = 2


def _as_array(arr, dtype, shape_tail) -> NDArray:
    arr = np.asarray(arr, dtype=dtype)
    if arr.size == 0:
        return arr.reshape((0,) + shape_tail)
    return arr


def _check_points(name: str, arr: NDArray, width: int):
    if arr.ndim != 2 or arr.shape[1] != width:
        raise ValueError(f"{name} must have shape (N, {width}), got {arr.shape}")


def _check_range(name: str, indices: NDArray, size: int):
    if indices.size == 0:
        return
    lo = int(indices.min())
    hi = int(indices.max())
    if lo < 0 or hi >= size:
        bad = lo if lo < 0 else hi
        raise ValueError(
            f"{name} references index {bad} but only {size} entries exist"
        )


@dataclass
class Mesh:
    """
    Triangle mesh with positions, normals and texture coordinates.

    Attributes:
        positions: Vertex positions (N, 3)
        normals: Vertex normals (Nn, 3)
        uvs: Texture coordinates (Nt, 2)
        corners: Corner index triples (F, 3, 3); corners[f, c] is
            (position_index, uv_index, normal_index) of corner c of face f
        pivot: Rotation reference point (3,)
        orientation: Accumulated rotation angles about x, y, z (3,)
    """

    positions: NDArray[np.float64]
    normals: NDArray[np.float64]
    uvs: NDArray[np.float64]
    corners: NDArray[np.int32]
    pivot: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    orientation: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.positions = _as_array(self.positions, np.float64, (3,))
        self.normals = _as_array(self.normals, np.float64, (3,))
        self.uvs = _as_array(self.uvs, np.float64, (2,))
        self.corners = _as_array(self.corners, np.int32, (3, 3))
        self.pivot = as_vec3_array(self.pivot).copy()
        self.orientation = as_vec3_array(self.orientation).copy()
        self._validate()

    def _validate(self):
        """Check shapes and index ranges."""
        _check_points("positions", self.positions, 3)
        _check_points("normals", self.normals, 3)
        _check_points("uvs", self.uvs, 2)
        if self.corners.ndim != 3 or self.corners.shape[1:] != (3, 3):
            raise ValueError(f"corners must have shape (F, 3, 3), got {self.corners.shape}")
        _check_range("position indices", self.corners[..., POSITION], self.num_positions)
        _check_range("uv indices", self.corners[..., UV], self.uvs.shape[0])
        _check_range("normal indices", self.corners[..., NORMAL], self.normals.shape[0])

    @classmethod
    def from_index_lists(cls, positions, normals, uvs,
                         position_indices, uv_indices, normal_indices,
                         pivot=None) -> Mesh:
        """
        Build a mesh from three parallel flat index lists.

        Raises:
            ValueError: If the lists differ in length or are not a multiple of 3
        """
        pi = np.asarray(position_indices, dtype=np.int32).ravel()
        ti = np.asarray(uv_indices, dtype=np.int32).ravel()
        ni = np.asarray(normal_indices, dtype=np.int32).ravel()
        if not (pi.size == ti.size == ni.size):
            raise ValueError(
                f"Index lists must have equal length, got "
                f"{pi.size}, {ti.size}, {ni.size}"
            )
        if pi.size % 3 != 0:
            raise ValueError(f"Index list length {pi.size} is not a multiple of 3")
        corners = np.stack([pi, ti, ni], axis=-1).reshape(-1, 3, 3)
        return cls(
            positions=positions,
            normals=normals,
            uvs=uvs,
            corners=corners,
            pivot=np.zeros(3) if pivot is None else pivot,
        )

    @property
    def num_positions(self) -> int:
        return self.positions.shape[0]

    @property
    def num_faces(self) -> int:
        return self.corners.shape[0]

    @property
    def position_indices(self) -> NDArray[np.int32]:
        """Flat position index list (3F,)."""
        return self.corners[..., POSITION].ravel()

    @property
    def uv_indices(self) -> NDArray[np.int32]:
        """Flat uv index list (3F,)."""
        return self.corners[..., UV].ravel()

    @property
    def normal_indices(self) -> NDArray[np.int32]:
        """Flat normal index list (3F,)."""
        return self.corners[..., NORMAL].ravel()

    def centroid(self) -> NDArray[np.float64]:
        """Mean of all positions (origin for an empty mesh)."""
        if self.num_positions == 0:
            return np.zeros(3, dtype=np.float64)
        return self.positions.mean(axis=0)

    def __repr__(self) -> str:
        return (
            f"Mesh(positions={self.num_positions}, "
            f"normals={self.normals.shape[0]}, "
            f"uvs={self.uvs.shape[0]}, "
            f"faces={self.num_faces})"
        )


@dataclass
class ColoredMesh:
    """
    Mesh variant with per-vertex colors and a single shared index list.

    Attributes:
        positions: Vertex positions (N, 3)
        colors: Vertex RGBA colors (N, 4)
        indices: Flat triangle index list (3T,)
        pivot: Rotation reference point (3,)
        orientation: Accumulated rotation angles about x, y, z (3,)
    """

    positions: NDArray[np.float64]
    colors: NDArray[np.float64]
    indices: NDArray[np.int32]
    pivot: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    orientation: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.positions = _as_array(self.positions, np.float64, (3,))
        self.colors = _as_array(self.colors, np.float64, (4,))
        self.indices = np.asarray(self.indices, dtype=np.int32).ravel()
        self.pivot = as_vec3_array(self.pivot).copy()
        self.orientation = as_vec3_array(self.orientation).copy()
        self._validate()

    def _validate(self):
        _check_points("positions", self.positions, 3)
        _check_points("colors", self.colors, 4)
        if self.colors.shape[0] != self.positions.shape[0]:
            raise ValueError(
                f"colors length ({self.colors.shape[0]}) must match "
                f"positions length ({self.positions.shape[0]})"
            )
        if self.indices.size % 3 != 0:
            raise ValueError(f"Index list length {self.indices.size} is not a multiple of 3")
        _check_range("indices", self.indices, self.positions.shape[0])

    @property
    def num_positions(self) -> int:
        return self.positions.shape[0]

    @property
    def num_faces(self) -> int:
        return self.indices.size // 3

    @property
    def position_indices(self) -> NDArray[np.int32]:
        return self.indices

    def __repr__(self) -> str:
        return f"ColoredMesh(positions={self.num_positions}, faces={self.num_faces})"
