"""Geometry primitives, triangle meshes, and rotations."""

from .primitives import Vector2, Vector3, Color, sub, dot, cross
from .mesh import Mesh, ColoredMesh
from .transform import rotate_x, rotate_y

__all__ = [
    "Vector2",
    "Vector3",
    "Color",
    "sub",
    "dot",
    "cross",
    "Mesh",
    "ColoredMesh",
    "rotate_x",
    "rotate_y",
]
