"""
Scene class - container for a loaded mesh and its validated settings.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from ..config.schemas import (
    AnimationConfig,
    CullingConfig,
    ProjectionConfig,
    RenderConfig,
    SceneConfig,
)
from ..geometry.mesh import Mesh, ColoredMesh


@dataclass
class Scene:
    """
    A mesh plus the settings that drive its per-frame pipeline.

    Usage:
        from meshcore.io import SceneLoader

        scene, config = SceneLoader.load('cases/tetrahedron/scene.yaml')
        print(scene.name, scene.mesh)
    """

    mesh: Union[Mesh, ColoredMesh]
    config: SceneConfig
    scene_dir: Optional[Path] = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def description(self) -> str:
        return self.config.description

    @property
    def projection(self) -> ProjectionConfig:
        return self.config.projection

    @property
    def culling(self) -> CullingConfig:
        return self.config.culling

    @property
    def animation(self) -> AnimationConfig:
        return self.config.animation

    @property
    def render(self) -> RenderConfig:
        return self.config.render

    @property
    def screen_size(self) -> Tuple[float, float]:
        """(width, height) of the projection screen."""
        return (self.projection.screen_width, self.projection.screen_height)

    def __repr__(self) -> str:
        return f"Scene(name='{self.name}', mesh={self.mesh!r})"
