"""
Per-frame driver: Transform -> Projector -> Culler -> renderer draw call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union
import logging
import numpy as np
from numpy.typing import NDArray

from meshcore.config.schemas import (
    AnimationConfig,
    BlendMode,
    CullingConfig,
    RenderConfig,
)
from meshcore.geometry.mesh import Mesh, ColoredMesh
from meshcore.geometry.transform import rotate_x, rotate_y
from meshcore.io.scene import Scene

from .culling import cull_backfaces
from .projection import Projector, ProjectedVertices

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DrawCall:
    """
    One draw request for the renderer.

    Attributes:
        vertices: Projected vertices
        indices: Flat triangle index list over vertices
        texture: RGBA texture (H, W, 4), or None for a flat white texture
        blend_mode: How the renderer composites the triangles
    """

    vertices: ProjectedVertices
    indices: NDArray[np.int32]
    texture: Optional[NDArray[np.float64]] = None
    blend_mode: BlendMode = BlendMode.ALPHA

    @property
    def num_triangles(self) -> int:
        return self.indices.size // 3


class Renderer(Protocol):
    """Collaborator that rasterizes projected triangles."""

    def draw_triangles(self, vertices: ProjectedVertices, indices: NDArray[np.int32],
                       texture: Optional[NDArray[np.float64]],
                       blend_mode: BlendMode) -> None:
        ...


class FrameStepper:
    """
    Runs the geometry pipeline once per frame for a single mesh.

    Usage:
        stepper = FrameStepper(mesh, Projector())
        call = stepper.step()
        renderer.draw_triangles(call.vertices, call.indices,
                                call.texture, call.blend_mode)
    """

    def __init__(self,
                 mesh: Union[Mesh, ColoredMesh],
                 projector: Projector,
                 animation: Optional[AnimationConfig] = None,
                 culling: Optional[CullingConfig] = None,
                 render: Optional[RenderConfig] = None,
                 texture: Optional[NDArray[np.float64]] = None):
        self.mesh = mesh
        self.projector = projector
        self.animation = animation or AnimationConfig()
        self.culling = culling or CullingConfig()
        self.render = render or RenderConfig()
        self.texture = texture
        self.frame_count = 0

    @classmethod
    def from_scene(cls, scene: Scene,
                   texture: Optional[NDArray[np.float64]] = None) -> FrameStepper:
        """Build a stepper from a loaded scene's mesh and settings."""
        return cls(
            mesh=scene.mesh,
            projector=Projector.from_config(scene.projection),
            animation=scene.animation,
            culling=scene.culling,
            render=scene.render,
            texture=texture,
        )

    def _vertex_colors(self) -> NDArray[np.float64]:
        if isinstance(self.mesh, ColoredMesh):
            return self.mesh.colors
        n = self.mesh.num_positions
        return np.tile(np.array(self.render.flat_color, dtype=np.float64), (n, 1))

    def advance(self):
        """Apply this frame's rotation to the mesh."""
        anim = self.animation
        if anim.spin_x_rad:
            rotate_x(self.mesh, anim.spin_x_rad, rotate_normals=anim.rotate_normals)
        if anim.spin_y_rad:
            rotate_y(self.mesh, anim.spin_y_rad, rotate_normals=anim.rotate_normals)

    def draw_call(self) -> DrawCall:
        """Project and cull the current mesh state without advancing it."""
        vertices = self.projector.project(self.mesh.positions, self._vertex_colors())
        indices = self.mesh.position_indices
        if self.culling.enabled:
            indices = cull_backfaces(self.mesh.positions, indices,
                                     self.culling.viewer_position)
        return DrawCall(
            vertices=vertices,
            indices=np.array(indices, dtype=np.int32),
            texture=self.texture,
            blend_mode=self.render.blend_mode,
        )

    def step(self) -> DrawCall:
        """Advance one frame and return its draw call."""
        self.advance()
        call = self.draw_call()
        self.frame_count += 1
        logger.debug(
            f"Frame {self.frame_count}: {call.num_triangles}/"
            f"{self.mesh.num_faces} triangles after culling"
        )
        return call

    def run(self, renderer: Renderer, frames: int) -> Tuple[DrawCall, ...]:
        """
        Step `frames` times, submitting each draw call to the renderer.

        Returns:
            The draw calls, in submission order
        """
        if frames < 0:
            raise ValueError(f"frames must be non-negative, got {frames}")
        calls = []
        for _ in range(frames):
            call = self.step()
            renderer.draw_triangles(call.vertices, call.indices,
                                    call.texture, call.blend_mode)
            calls.append(call)
        return tuple(calls)
