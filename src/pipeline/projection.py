"""
Pinhole projection of 3D points to 2D screen vertices.

    screen_x = x * (focal_length / z) + screen_width / 2
    screen_y = y * (focal_length / z) + screen_height / 2

Output order matches input order, so index arrays built against the 3D
positions stay valid against the projected vertices.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging
import numpy as np
from numpy.typing import NDArray

from meshcore.config.schemas import ProjectionConfig
from meshcore.errors import DegenerateProjectionError

logger = logging.getLogger(__name__)

WHITE = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Vertex2D:
    """Screen-space vertex as consumed by the renderer."""
    x: float
    y: float
    u: float
    v: float
    color: tuple


@dataclass(eq=False)
class ProjectedVertices:
    """
    Projected vertex arrays.

    Attributes:
        positions: Screen coordinates (N, 2)
        uvs: Texture coordinates (N, 2)
        colors: RGBA colors (N, 4)
    """

    positions: NDArray[np.float64]
    uvs: NDArray[np.float64]
    colors: NDArray[np.float64]

    def __post_init__(self):
        n = self.positions.shape[0]
        if self.uvs.shape != (n, 2) or self.colors.shape != (n, 4):
            raise ValueError(
                f"uvs/colors must have shapes ({n}, 2)/({n}, 4), "
                f"got {self.uvs.shape}/{self.colors.shape}"
            )

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, i: int) -> Vertex2D:
        x, y = self.positions[i]
        u, v = self.uvs[i]
        return Vertex2D(float(x), float(y), float(u), float(v),
                        tuple(float(c) for c in self.colors[i]))

    def to_vertices(self) -> List[Vertex2D]:
        """Convert to a list of Vertex2D values."""
        return [self[i] for i in range(len(self))]


class Projector:
    """Fixed pinhole camera looking down +z from the origin."""

    def __init__(self,
                 focal_length: float = 300.0,
                 screen_width: float = 640.0,
                 screen_height: float = 480.0,
                 min_depth: float = 1e-6,
                 on_degenerate: str = "clamp"):
        """
        Args:
            focal_length: Perspective strength
            screen_width, screen_height: Screen size; the optical axis maps
                to the screen center
            min_depth: Points with |z| < min_depth are degenerate
            on_degenerate: "clamp" moves degenerate points to z = ±min_depth
                and logs a warning; "raise" raises DegenerateProjectionError
        """
        if focal_length <= 0:
            raise ValueError(f"focal_length must be positive, got {focal_length}")
        if min_depth <= 0:
            raise ValueError(f"min_depth must be positive, got {min_depth}")
        if on_degenerate not in ("clamp", "raise"):
            raise ValueError(f"on_degenerate must be 'clamp' or 'raise', got '{on_degenerate}'")
        self.focal_length = float(focal_length)
        self.screen_width = float(screen_width)
        self.screen_height = float(screen_height)
        self.min_depth = float(min_depth)
        self.on_degenerate = on_degenerate

    @classmethod
    def from_config(cls, config: ProjectionConfig) -> Projector:
        return cls(
            focal_length=config.focal_length,
            screen_width=config.screen_width,
            screen_height=config.screen_height,
            min_depth=config.min_depth,
            on_degenerate=config.on_degenerate,
        )

    def _safe_depth(self, z: NDArray[np.float64]) -> NDArray[np.float64]:
        degenerate = np.abs(z) < self.min_depth
        if not degenerate.any():
            return z
        bad = np.flatnonzero(degenerate)
        if self.on_degenerate == "raise":
            raise DegenerateProjectionError(bad.tolist(), self.min_depth)
        logger.warning(
            f"Clamped {bad.size} point(s) with |z| < {self.min_depth:g} "
            f"to depth ±{self.min_depth:g}"
        )
        z = z.copy()
        # zero of either sign maps to +min_depth
        sign = np.where(z[degenerate] < 0, -1.0, 1.0)
        z[degenerate] = sign * self.min_depth
        return z

    def project_positions(self, points: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Project points (N, 3) to screen coordinates (N, 2).
        """
        points = np.asarray(points, dtype=np.float64)
        if points.size == 0:
            return np.zeros((0, 2), dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"points must have shape (N, 3), got {points.shape}")
        z = self._safe_depth(points[:, 2])
        factor = self.focal_length / z
        screen = np.empty((points.shape[0], 2), dtype=np.float64)
        screen[:, 0] = points[:, 0] * factor + self.screen_width / 2
        screen[:, 1] = points[:, 1] * factor + self.screen_height / 2
        return screen

    def project(self, points: NDArray[np.float64],
                colors: Optional[NDArray[np.float64]] = None) -> ProjectedVertices:
        """
        Project points to renderer vertices.

        Texture coordinates are always the (0, 0) placeholder; the mesh's own
        uv array is not carried through projection.

        Args:
            points: 3D points (N, 3)
            colors: Per-point RGBA colors (N, 4), or None for opaque white

        Returns:
            ProjectedVertices with one vertex per input point, same order
        """
        screen = self.project_positions(points)
        n = screen.shape[0]
        if colors is None:
            vertex_colors = np.tile(np.array(WHITE, dtype=np.float64), (n, 1))
        else:
            vertex_colors = np.array(colors, dtype=np.float64).reshape(n, 4)
        return ProjectedVertices(
            positions=screen,
            uvs=np.zeros((n, 2), dtype=np.float64),
            colors=vertex_colors,
        )

    def __repr__(self) -> str:
        return (
            f"Projector(focal_length={self.focal_length}, "
            f"screen={self.screen_width:g}x{self.screen_height:g}, "
            f"on_degenerate='{self.on_degenerate}')"
        )
