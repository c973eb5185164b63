"""
Pydantic schemas for scene configuration validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Tuple, Literal
from enum import Enum


class BlendMode(str, Enum):
    """Blend modes understood by the renderer collaborator."""
    ALPHA = "alpha"
    ADD = "add"
    NONE = "none"


class ProjectionConfig(BaseModel):
    """Pinhole projection constants."""
    focal_length: float = Field(
        default=300.0,
        gt=0,
        description="Focal length in screen units"
    )
    screen_width: float = Field(
        default=640.0,
        gt=0,
        description="Screen width in pixels"
    )
    screen_height: float = Field(
        default=480.0,
        gt=0,
        description="Screen height in pixels"
    )
    min_depth: float = Field(
        default=1e-6,
        gt=0,
        description="Points with |z| below this are degenerate"
    )
    on_degenerate: Literal["clamp", "raise"] = Field(
        default="clamp",
        description="Clamp degenerate depth to min_depth, or raise"
    )


class CullingConfig(BaseModel):
    """Backface culling settings."""
    enabled: bool = Field(default=True, description="Remove back-facing triangles")
    viewer_position: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0),
        description="Viewer position used by the facing test"
    )


class AnimationConfig(BaseModel):
    """Per-frame rotation applied before projection."""
    spin_x_rad: float = Field(default=0.0, description="Rotation about x per frame [rad]")
    spin_y_rad: float = Field(default=0.0, description="Rotation about y per frame [rad]")
    rotate_normals: bool = Field(
        default=False,
        description="Rotate normals together with positions"
    )


class MeshSourceConfig(BaseModel):
    """Where the scene mesh comes from."""
    kind: Literal["obj", "cube"] = Field(default="cube", description="Mesh source type")
    file: Optional[str] = Field(
        default=None,
        description="Path to mesh file (relative to the scene file)"
    )
    scale: float = Field(default=1.0, gt=0, description="Scale applied to positions")
    pivot: Optional[Tuple[float, float, float]] = Field(
        default=None,
        description="Rotation pivot (default: mesh centroid / cube center)"
    )
    cube_center: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 5.0),
        description="Cube center"
    )
    cube_size: float = Field(default=1.0, gt=0, description="Cube half edge length")
    fallback: Literal["none", "cube"] = Field(
        default="none",
        description="Substitute the default cube if the mesh file fails to parse"
    )

    @model_validator(mode="after")
    def check_file(self):
        """An obj source needs a file."""
        if self.kind == "obj" and not self.file:
            raise ValueError("mesh.file is required when mesh.kind is 'obj'")
        return self


class RenderConfig(BaseModel):
    """Draw-call settings handed to the renderer."""
    blend_mode: BlendMode = Field(default=BlendMode.ALPHA, description="Blend mode")
    flat_color: Tuple[float, float, float, float] = Field(
        default=(1.0, 1.0, 1.0, 1.0),
        description="Vertex color for meshes without per-vertex colors (RGBA)"
    )

    @field_validator("flat_color")
    @classmethod
    def check_color_range(cls, v):
        """Color components must be in [0, 1]."""
        if any(c < 0.0 or c > 1.0 for c in v):
            raise ValueError(f"flat_color components must be in [0, 1], got {v}")
        return v


class SceneConfig(BaseModel):
    """Top-level scene configuration."""
    name: str = Field(..., description="Scene name")
    description: str = Field(default="", description="Scene description")

    mesh: MeshSourceConfig = Field(
        default_factory=MeshSourceConfig,
        description="Mesh source"
    )
    projection: ProjectionConfig = Field(
        default_factory=ProjectionConfig,
        description="Projection settings"
    )
    culling: CullingConfig = Field(
        default_factory=CullingConfig,
        description="Culling settings"
    )
    animation: AnimationConfig = Field(
        default_factory=AnimationConfig,
        description="Per-frame rotation"
    )
    render: RenderConfig = Field(
        default_factory=RenderConfig,
        description="Renderer settings"
    )

    class Config:
        """Pydantic config."""
        extra = "forbid"  # Catch typos in YAML
        validate_assignment = True

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Check name is not blank."""
        if not v or not v.strip():
            raise ValueError("Scene name cannot be empty")
        return v.strip()
