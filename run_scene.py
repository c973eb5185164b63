"""
Run a scene defined by a YAML config file and save a preview image.
"""

import sys
import argparse
import logging
from pathlib import Path

import yaml

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from meshcore.errors import MeshPipelineError
from meshcore.io import SceneLoader
from pipeline import FrameStepper
from visualization import MatplotlibRenderer

logger = logging.getLogger("run_scene")


def main():
    parser = argparse.ArgumentParser(description="Run mesh pipeline scene")
    parser.add_argument("scene_file", type=str, help="Path to YAML scene file")
    parser.add_argument("--frames", type=int, default=1,
                        help="Number of frames to step before saving (at least 1)")
    parser.add_argument("--output", type=str, default="frame.png",
                        help="Preview image path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()
    if args.frames < 1:
        parser.error(f"--frames must be at least 1, got {args.frames}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    scene_path = Path(args.scene_file).resolve()
    if not scene_path.exists():
        logger.error(f"Scene file not found: {scene_path}")
        sys.exit(1)

    try:
        scene, config = SceneLoader.load(scene_path)
    except (MeshPipelineError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error loading scene: {e}")
        sys.exit(1)

    logger.info(f"Scene '{config.name}': {scene.mesh}")

    stepper = FrameStepper.from_scene(scene)
    renderer = MatplotlibRenderer(screen_size=scene.screen_size)

    try:
        for _ in range(args.frames - 1):
            stepper.step()
        call = stepper.step()
    except MeshPipelineError as e:
        logger.error(f"Frame failed: {e}")
        sys.exit(1)

    renderer.draw_triangles(call.vertices, call.indices, call.texture, call.blend_mode)
    renderer.savefig(args.output)
    renderer.close()

    logger.info(
        f"Frame {stepper.frame_count}: drew {call.num_triangles} of "
        f"{scene.mesh.num_faces} triangles -> {args.output}"
    )


if __name__ == "__main__":
    main()
