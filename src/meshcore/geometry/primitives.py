"""
Geometric primitives: Vector2, Vector3 and Color value types.

All values are immutable. Arrays of positions/normals inside a Mesh are plain
NumPy arrays; these types are for single values crossing API boundaries.
"""

from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class Vector2:
    """2D vector (texture coordinates)."""
    x: float
    y: float

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (2,)."""
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Vector2:
        """Create from NumPy array."""
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def __repr__(self) -> str:
        return f"Vector2({self.x:.6f}, {self.y:.6f})"


@dataclass(frozen=True)
class Vector3:
    """3D vector."""
    x: float
    y: float
    z: float

    def to_array(self) -> NDArray[np.float64]:
        """Convert to NumPy array (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> Vector3:
        """Create from NumPy array."""
        if arr.shape != (3,):
            raise ValueError(f"Expected array of shape (3,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]), z=float(arr[2]))

    def sub(self, other: Vector3) -> Vector3:
        """Componentwise difference self - other."""
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def dot(self, other: Vector3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Vector magnitude (L2 norm)."""
        return float(np.sqrt(self.dot(self)))

    def __sub__(self, other: Vector3) -> Vector3:
        return self.sub(other)

    def __repr__(self) -> str:
        return f"Vector3({self.x:.6f}, {self.y:.6f}, {self.z:.6f})"


@dataclass(frozen=True)
class Color:
    """RGBA color, components in [0, 1]."""
    r: float
    g: float
    b: float
    a: float = 1.0

    def to_array(self) -> NDArray[np.float64]:
        return np.array([self.r, self.g, self.b, self.a], dtype=np.float64)


def sub(a: Vector3, b: Vector3) -> Vector3:
    """a - b, componentwise."""
    return a.sub(b)


def dot(a: Vector3, b: Vector3) -> float:
    """Euclidean inner product."""
    return a.dot(b)


def cross(a: Vector3, b: Vector3) -> Vector3:
    """
    Right-handed cross product.

    cross(a, b).x = a.y*b.z - a.z*b.y (and cyclic). The result is
    perpendicular to both inputs with magnitude |a||b|sin(angle).
    """
    return a.cross(b)


def as_vec3_array(value) -> NDArray[np.float64]:
    """Coerce a Vector3, sequence or array to a float64 array of shape (3,)."""
    if isinstance(value, Vector3):
        return value.to_array()
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr
