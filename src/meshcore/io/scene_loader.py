"""
YAML scene file loader with validation.
"""

from pathlib import Path
import logging
import yaml
import numpy as np

from ..config.schemas import MeshSourceConfig, SceneConfig
from ..geometry.mesh import Mesh, ColoredMesh
from .geometry_io import ObjReader, generate_cube
from .scene import Scene

logger = logging.getLogger(__name__)


class SceneLoader:
    """Load and validate scenes from YAML files."""

    @staticmethod
    def load(filepath: str | Path) -> tuple[Scene, SceneConfig]:
        """
        Load scene file and build its mesh.

        Args:
            filepath: Path to YAML scene file

        Returns:
            Tuple of (Scene object, validated config)

        Raises:
            FileNotFoundError: If the scene file does not exist
            pydantic.ValidationError: If the config is invalid
            MeshParseError: If the mesh fails to parse and no fallback is set
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"Scene file not found: {filepath}")

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        config = SceneConfig(**raw_config)
        logger.info(f"Loaded scene '{config.name}' from {filepath}")

        mesh = SceneLoader._build_mesh(config.mesh, base_path=filepath.parent)
        scene = Scene(mesh=mesh, config=config, scene_dir=filepath.parent)

        return scene, config

    @staticmethod
    def _build_mesh(source: MeshSourceConfig, base_path: Path) -> Mesh | ColoredMesh:
        """
        Build the scene mesh from its source config.

        Args:
            source: Validated mesh source config
            base_path: Base directory for resolving relative paths

        Returns:
            Parsed or generated mesh with its pivot set
        """
        if source.kind == "cube":
            mesh = generate_cube(center=source.cube_center, size=source.cube_size)
        else:
            result = ObjReader.read(base_path / source.file, scale=source.scale)
            if result.ok:
                mesh = result.mesh
            elif source.fallback == "cube":
                logger.warning(
                    f"Using fallback cube for '{source.file}': {result.error}"
                )
                mesh = generate_cube(center=source.cube_center, size=source.cube_size)
            else:
                raise result.error

        if source.pivot is not None:
            mesh.pivot = np.array(source.pivot, dtype=np.float64)

        return mesh

    @staticmethod
    def validate(filepath: str | Path) -> bool:
        """
        Validate scene file without building the mesh.

        Returns:
            True if valid, raises ValidationError otherwise
        """
        filepath = Path(filepath)

        with open(filepath, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        SceneConfig(**raw_config)

        return True
