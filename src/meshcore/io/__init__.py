"""IO utilities: mesh asset reader, generators, scene loader."""

from .geometry_io import ObjReader, ParseResult, generate_cube
from .scene_loader import SceneLoader
from .scene import Scene

__all__ = [
    "ObjReader",
    "ParseResult",
    "generate_cube",
    "SceneLoader",
    "Scene",
]
