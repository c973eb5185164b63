"""Configuration schemas for validation."""

from .schemas import (
    BlendMode,
    ProjectionConfig,
    CullingConfig,
    AnimationConfig,
    MeshSourceConfig,
    RenderConfig,
    SceneConfig,
)

__all__ = [
    "BlendMode",
    "ProjectionConfig",
    "CullingConfig",
    "AnimationConfig",
    "MeshSourceConfig",
    "RenderConfig",
    "SceneConfig",
]
