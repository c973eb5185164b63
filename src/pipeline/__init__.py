"""
Per-frame geometry pipeline.

Key classes:
- Projector: Pinhole projection of 3D points to screen vertices
- cull_backfaces: Removes triangles facing away from the viewer
- FrameStepper: Rotate -> project -> cull, producing a DrawCall
- Renderer: Protocol for the rasterizing collaborator
"""

from .projection import Projector, ProjectedVertices, Vertex2D
from .culling import cull_backfaces, cull_mesh, cull_mesh_corners, facing_mask
from .frame import DrawCall, FrameStepper, Renderer

__all__ = [
    # Projection
    "Projector",
    "ProjectedVertices",
    "Vertex2D",
    # Culling
    "cull_backfaces",
    "cull_mesh",
    "cull_mesh_corners",
    "facing_mask",
    # Frame driver
    "DrawCall",
    "FrameStepper",
    "Renderer",
]
