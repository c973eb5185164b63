"""
In-place axis rotations about a mesh pivot.

Rotations are cumulative: each call rotates the current positions, so repeated
calls compose and floating-point drift accumulates uncorrected.
"""

from __future__ import annotations
from typing import Union
import numpy as np

from .mesh import Mesh, ColoredMesh

AnyMesh = Union[Mesh, ColoredMesh]


def _rotate_plane(points: np.ndarray, center: np.ndarray,
                  a: int, b: int, radians: float):
    """
    Rotate columns (a, b) of points about center, in place.

    a' = (a - ca)*c - (b - cb)*s
    b' = (a - ca)*s + (b - cb)*c
    """
    if points.shape[0] == 0:
        return
    c = np.cos(radians)
    s = np.sin(radians)
    da = points[:, a] - center[a]
    db = points[:, b] - center[b]
    points[:, a] = da * c - db * s + center[a]
    points[:, b] = da * s + db * c + center[b]


def rotate_x(mesh: AnyMesh, radians: float, rotate_normals: bool = False):
    """
    Rotate mesh positions about the x-axis through the pivot.

    y' = (y - py)*cos - (z - pz)*sin
    z' = (y - py)*sin + (z - pz)*cos

    Args:
        mesh: Mesh to rotate (modified in place)
        radians: Rotation angle
        rotate_normals: Also rotate normals (about the origin). Off by
            default, which leaves normals stale relative to positions.
    """
    _rotate_plane(mesh.positions, mesh.pivot, 1, 2, radians)
    if rotate_normals:
        normals = getattr(mesh, "normals", None)
        if normals is not None:
            _rotate_plane(normals, np.zeros(3), 1, 2, radians)
    mesh.orientation[0] += radians


def rotate_y(mesh: AnyMesh, radians: float, rotate_normals: bool = False):
    """
    Rotate mesh positions about the y-axis through the pivot.

    x' = (z - pz)*sin + (x - px)*cos
    z' = (z - pz)*cos - (x - px)*sin

    Args:
        mesh: Mesh to rotate (modified in place)
        radians: Rotation angle
        rotate_normals: Also rotate normals (about the origin)
    """
    # (z, x) plane: z' = dz*c - dx*s, x' = dz*s + dx*c
    _rotate_plane(mesh.positions, mesh.pivot, 2, 0, radians)
    if rotate_normals:
        normals = getattr(mesh, "normals", None)
        if normals is not None:
            _rotate_plane(normals, np.zeros(3), 2, 0, radians)
    mesh.orientation[1] += radians
