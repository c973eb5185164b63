"""
Backface culling over triangle index triples.

A triangle (i0, i1, i2) is kept when its winding normal
n = (p1 - p0) x (p2 - p0) points toward the viewer:

    dot(n, p0 - viewer) < 0

Surviving triangles keep their corner order and their relative order from the
input (a stable filter), so draw order is predictable downstream.
"""

from __future__ import annotations
from typing import Union
import numpy as np
from numpy.typing import NDArray

from meshcore.geometry.mesh import Mesh, ColoredMesh
from meshcore.geometry.primitives import Vector3, as_vec3_array

ViewerPosition = Union[Vector3, tuple, NDArray[np.float64]]

ORIGIN = (0.0, 0.0, 0.0)


def facing_mask(positions: NDArray[np.float64],
                triangles: NDArray[np.int64],
                viewer_position: ViewerPosition = ORIGIN) -> NDArray[np.bool_]:
    """
    Per-triangle front-facing test.

    Args:
        positions: Vertex positions (N, 3)
        triangles: Triangle index triples (T, 3)
        viewer_position: Viewer location

    Returns:
        Boolean mask (T,), True where the triangle faces the viewer

    Raises:
        IndexError: If any index is outside positions
    """
    positions = np.asarray(positions, dtype=np.float64)
    triangles = np.asarray(triangles, dtype=np.int64)
    if triangles.size == 0:
        return np.zeros(0, dtype=bool)

    n_points = positions.shape[0]
    if triangles.min() < 0 or triangles.max() >= n_points:
        bad = triangles[(triangles < 0) | (triangles >= n_points)]
        raise IndexError(
            f"Triangle index {int(bad[0])} out of range for {n_points} positions"
        )

    viewer = as_vec3_array(viewer_position)
    p0 = positions[triangles[:, 0]]
    p1 = positions[triangles[:, 1]]
    p2 = positions[triangles[:, 2]]
    normals = np.cross(p1 - p0, p2 - p0)
    return np.einsum("ij,ij->i", normals, p0 - viewer) < 0


def cull_backfaces(positions: NDArray[np.float64],
                   indices: NDArray[np.int32],
                   viewer_position: ViewerPosition = ORIGIN) -> NDArray[np.int32]:
    """
    Remove triangles facing away from the viewer.

    Args:
        positions: Vertex positions (N, 3)
        indices: Flat index list (3T,), one triple per triangle
        viewer_position: Viewer location (default: origin)

    Returns:
        Flat index list of the surviving triangles, input order preserved

    Raises:
        ValueError: If the index list length is not a multiple of 3
        IndexError: If any index is outside positions
    """
    flat = np.asarray(indices, dtype=np.int64).ravel()
    if flat.size % 3 != 0:
        raise ValueError(f"Index list length {flat.size} is not a multiple of 3")
    triangles = flat.reshape(-1, 3)
    keep = facing_mask(positions, triangles, viewer_position)
    return triangles[keep].ravel().astype(np.int32)


def cull_mesh(mesh: Union[Mesh, ColoredMesh],
              viewer_position: ViewerPosition = ORIGIN) -> NDArray[np.int32]:
    """Cull a mesh by its position indices; returns the surviving flat index list."""
    return cull_backfaces(mesh.positions, mesh.position_indices, viewer_position)


def cull_mesh_corners(mesh: Mesh,
                      viewer_position: ViewerPosition = ORIGIN) -> NDArray[np.int32]:
    """Cull a mesh and return the surviving (F', 3, 3) corner triples."""
    keep = facing_mask(mesh.positions, mesh.corners[..., 0], viewer_position)
    return mesh.corners[keep]
