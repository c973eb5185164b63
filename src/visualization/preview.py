"""
Matplotlib-based preview renderer for projected triangles.

Implements the pipeline's Renderer protocol so draw calls can be inspected
offline (saved as images) without a window or GPU.
"""

from functools import lru_cache
from typing import List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection

from meshcore.config.schemas import BlendMode
from pipeline.projection import ProjectedVertices


@lru_cache(maxsize=None)
def white_texture() -> np.ndarray:
    """Shared 1x1 opaque white RGBA texture, created once per process."""
    tex = np.ones((1, 1, 4), dtype=np.float64)
    tex.setflags(write=False)
    return tex


class MatplotlibRenderer:
    """
    Draws triangle lists into a matplotlib axis in screen space.

    Screen y grows downward, matching the projector's convention.
    """

    def __init__(self, screen_size: Tuple[float, float] = (640.0, 480.0),
                 dpi: int = 100, background: str = "black",
                 show_edges: bool = True):
        """
        Initialize renderer.

        Args:
            screen_size: (width, height) in screen units
            dpi: Figure resolution; figure size is screen_size / dpi inches
            background: Axis background color
            show_edges: Outline triangles
        """
        self.screen_size = screen_size
        self.show_edges = show_edges
        width, height = screen_size
        self.fig, self.ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi)
        self.ax.set_facecolor(background)
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.set_aspect('equal')
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        self.collections: List[PolyCollection] = []

    def draw_triangles(self, vertices: ProjectedVertices, indices: np.ndarray,
                       texture: Optional[np.ndarray], blend_mode: BlendMode) -> None:
        """
        Add one draw call to the axis.

        Each triangle is filled with the mean of its vertex colors modulated
        by the mean texture color. ADD blending has no matplotlib equivalent
        and is drawn like ALPHA.
        """
        tris = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
        if tris.shape[0] == 0:
            return
        if texture is None:
            texture = white_texture()
        tint = np.asarray(texture, dtype=np.float64).reshape(-1, 4).mean(axis=0)

        polygons = vertices.positions[tris]                 # (T, 3, 2)
        face_colors = vertices.colors[tris].mean(axis=1) * tint
        if blend_mode == BlendMode.NONE:
            face_colors[:, 3] = 1.0
        face_colors = np.clip(face_colors, 0.0, 1.0)

        collection = PolyCollection(
            polygons,
            facecolors=face_colors,
            edgecolors='white' if self.show_edges else 'none',
            linewidths=0.5,
        )
        self.ax.add_collection(collection)
        self.collections.append(collection)

    def clear(self):
        """Remove everything drawn so far."""
        for collection in self.collections:
            collection.remove()
        self.collections.clear()

    def savefig(self, path, **kwargs):
        """Save the current canvas to an image file."""
        self.fig.savefig(path, facecolor=self.fig.get_facecolor(), **kwargs)

    def close(self):
        plt.close(self.fig)
