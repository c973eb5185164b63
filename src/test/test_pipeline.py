"""
Test projection, backface culling and the frame driver.
"""

import math
import pytest
import numpy as np
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from meshcore.config import AnimationConfig, BlendMode, CullingConfig, RenderConfig
from meshcore.errors import DegenerateProjectionError
from meshcore.geometry import Mesh, rotate_y
from meshcore.io import ObjReader, generate_cube
from pipeline import (
    FrameStepper,
    Projector,
    Vertex2D,
    cull_backfaces,
    cull_mesh,
    cull_mesh_corners,
)


class RecordingRenderer:
    """Renderer stand-in that records every draw call."""

    def __init__(self):
        self.calls = []

    def draw_triangles(self, vertices, indices, texture, blend_mode):
        self.calls.append((vertices, indices.copy(), texture, blend_mode))


class TestProjector:
    """Pinhole projection."""

    def setup_method(self):
        self.projector = Projector(focal_length=300.0, screen_width=640.0, screen_height=480.0)

    def test_point_on_axis_at_focal_length_hits_center(self):
        vertices = self.projector.project(np.array([[0.0, 0.0, 300.0]]))
        assert vertices[0].x == 320.0
        assert vertices[0].y == 240.0

    def test_formula(self):
        screen = self.projector.project_positions(np.array([[1.0, -2.0, 4.0]]))
        # x * (f / z) + W/2, y * (f / z) + H/2
        np.testing.assert_array_almost_equal(screen[0], [1.0 * 75.0 + 320.0, -2.0 * 75.0 + 240.0])

    def test_order_and_count_preserved(self):
        points = np.array([[-1.0, 0.0, 5.0], [1.0, 0.0, 5.0], [0.0, 1.0, 10.0]])
        vertices = self.projector.project(points)

        assert len(vertices) == 3
        assert vertices[0].x < vertices[1].x
        assert vertices[2].y > 240.0

    def test_placeholder_uvs_and_default_color(self):
        vertices = self.projector.project(np.array([[0.5, 0.5, 2.0], [1.0, 1.0, 3.0]]))

        np.testing.assert_array_equal(vertices.uvs, np.zeros((2, 2)))
        np.testing.assert_array_equal(vertices.colors, np.ones((2, 4)))
        assert vertices.to_vertices()[1] == Vertex2D(
            x=vertices.positions[1, 0], y=vertices.positions[1, 1],
            u=0.0, v=0.0, color=(1.0, 1.0, 1.0, 1.0),
        )

    def test_custom_colors(self):
        colors = np.array([[1.0, 0.0, 0.0, 0.5]])
        vertices = self.projector.project(np.array([[0.0, 0.0, 1.0]]), colors=colors)
        assert vertices[0].color == (1.0, 0.0, 0.0, 0.5)

    def test_zero_depth_is_clamped(self, caplog):
        projector = Projector(focal_length=1.0, screen_width=2.0, screen_height=2.0,
                              min_depth=0.01)
        points = np.array([[1.0, 1.0, 0.0], [1.0, 1.0, -0.001], [1.0, 1.0, 1.0]])

        with caplog.at_level("WARNING"):
            screen = projector.project_positions(points)

        assert np.all(np.isfinite(screen))
        np.testing.assert_array_almost_equal(screen[0], [101.0, 101.0])
        np.testing.assert_array_almost_equal(screen[1], [-99.0, -99.0])
        np.testing.assert_array_almost_equal(screen[2], [2.0, 2.0])
        assert "Clamped 2 point(s)" in caplog.text
        assert "to depth ±0.01" in caplog.text

    def test_zero_depth_raises_when_configured(self):
        projector = Projector(on_degenerate="raise")
        with pytest.raises(DegenerateProjectionError) as excinfo:
            projector.project(np.array([[0.0, 0.0, 1.0], [0.0, 0.0, 0.0]]))
        assert excinfo.value.indices == [1]

    def test_empty_input(self):
        vertices = self.projector.project(np.zeros((0, 3)))
        assert len(vertices) == 0

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            Projector(focal_length=0.0)
        with pytest.raises(ValueError):
            Projector(on_degenerate="drop")


class TestCulling:
    """Backface culling."""

    def test_cube_seen_from_origin(self):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        kept = cull_mesh(cube).reshape(-1, 3)

        assert 0 < len(kept) < cube.num_faces
        # Only the -z face (pointing at the viewer) survives
        assert len(kept) == 2
        for tri in kept:
            assert np.allclose(cube.positions[tri][:, 2], 4.0)

    @pytest.mark.parametrize("viewer, away_axis, away_sign", [
        ((0.0, 0.0, -10.0), 2, 1.0),
        ((0.0, 0.0, 10.0), 2, -1.0),
        ((10.0, 0.0, 0.0), 0, -1.0),
        ((-10.0, 0.0, 0.0), 0, 1.0),
        ((0.0, 10.0, 0.0), 1, -1.0),
        ((0.0, -10.0, 0.0), 1, 1.0),
    ])
    def test_faces_pointing_away_are_removed(self, viewer, away_axis, away_sign):
        cube = generate_cube(center=(0.0, 0.0, 0.0), size=1.0)
        kept = cull_backfaces(cube.positions, cube.indices, viewer).reshape(-1, 3)

        assert 0 < len(kept) < 12
        p = cube.positions
        for i0, i1, i2 in kept:
            normal = np.cross(p[i1] - p[i0], p[i2] - p[i0])
            unit = normal / np.linalg.norm(normal)
            assert unit[away_axis] != pytest.approx(away_sign)

    def test_order_and_winding_preserved(self):
        positions = np.array([
            [0.0, 0.0, 5.0], [0.0, 1.0, 5.0], [1.0, 0.0, 5.0],   # faces viewer
            [0.0, 0.0, 6.0], [1.0, 0.0, 6.0], [0.0, 1.0, 6.0],   # faces away
            [0.0, 0.0, 7.0], [0.0, 1.0, 7.0], [1.0, 0.0, 7.0],   # faces viewer
        ])
        indices = np.arange(9)

        kept = cull_backfaces(positions, indices)

        np.testing.assert_array_equal(kept, [0, 1, 2, 6, 7, 8])

    def test_viewer_position_matters(self):
        positions = np.array([[0.0, 0.0, 5.0], [0.0, 1.0, 5.0], [1.0, 0.0, 5.0]])
        assert cull_backfaces(positions, [0, 1, 2], (0.0, 0.0, 0.0)).size == 3
        assert cull_backfaces(positions, [0, 1, 2], (0.0, 0.0, 10.0)).size == 0

    def test_out_of_range_index_is_loud(self):
        positions = np.zeros((3, 3))
        with pytest.raises(IndexError):
            cull_backfaces(positions, [0, 1, 3])

    def test_bad_index_length(self):
        with pytest.raises(ValueError):
            cull_backfaces(np.zeros((3, 3)), [0, 1])

    def test_empty_index_list(self):
        assert cull_backfaces(np.zeros((0, 3)), []).size == 0

    def test_cull_mesh_corners(self):
        text = (
            "v 0 0 5\nv 0 1 5\nv 1 0 5\n"
            "vt 0 0\nvt 1 0\nvt 0 1\nvn 0 0 -1\n"
            "f 1/1/1 2/2/1 3/3/1\n"
            "f 1/1/1 3/3/1 2/2/1\n"
        )
        mesh = ObjReader.parse_text(text).unwrap()
        corners = cull_mesh_corners(mesh)

        assert corners.shape == (1, 3, 3)
        np.testing.assert_array_equal(corners[0, :, 0], [0, 1, 2])
        np.testing.assert_array_equal(corners[0, :, 1], [0, 1, 2])


class TestFrameStepper:
    """Rotate -> project -> cull."""

    def test_static_frame(self):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        stepper = FrameStepper(cube, Projector())

        call = stepper.step()

        assert len(call.vertices) == 8
        assert call.num_triangles == 2
        assert call.blend_mode == BlendMode.ALPHA
        assert call.texture is None
        np.testing.assert_array_equal(call.vertices.colors, cube.colors)

    def test_culling_disabled(self):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        stepper = FrameStepper(cube, Projector(), culling=CullingConfig(enabled=False))
        assert stepper.step().num_triangles == 12

    @pytest.mark.parametrize("enabled", [True, False])
    def test_draw_call_owns_its_buffers(self, enabled):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        stepper = FrameStepper(cube, Projector(), culling=CullingConfig(enabled=enabled))

        call = stepper.step()

        assert not np.shares_memory(call.indices, cube.indices)
        assert not np.shares_memory(call.vertices.colors, cube.colors)
        call.indices[:] = 0
        call.vertices.colors[:] = 0.0
        assert cube.indices.max() == 7
        assert cube.colors.max() == 1.0

    def test_animation_rotates_mesh(self):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        reference = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        stepper = FrameStepper(cube, Projector(),
                               animation=AnimationConfig(spin_y_rad=math.pi / 4))

        call = stepper.step()
        rotate_y(reference, math.pi / 4)

        np.testing.assert_allclose(cube.positions, reference.positions)
        # Turned 45 degrees, two faces are visible
        assert call.num_triangles == 4

    def test_flat_color_for_plain_mesh(self):
        mesh = ObjReader.parse_text(
            "v 0 0 5\nv 0 1 5\nv 1 0 5\nvt 0 0\nvn 0 0 -1\nf 1/1/1 2/1/1 3/1/1\n"
        ).unwrap()
        stepper = FrameStepper(mesh, Projector(),
                               render=RenderConfig(flat_color=(0.2, 0.4, 0.6, 1.0),
                                                   blend_mode="add"))
        call = stepper.step()

        np.testing.assert_array_almost_equal(call.vertices.colors[0], [0.2, 0.4, 0.6, 1.0])
        assert call.blend_mode == BlendMode.ADD
        np.testing.assert_array_equal(call.indices, [0, 1, 2])

    def test_run_submits_each_frame(self):
        cube = generate_cube(center=(0.0, 0.0, 5.0), size=1.0)
        stepper = FrameStepper(cube, Projector(),
                               animation=AnimationConfig(spin_x_rad=0.1, spin_y_rad=0.2))
        renderer = RecordingRenderer()

        calls = stepper.run(renderer, 5)

        assert len(calls) == 5
        assert len(renderer.calls) == 5
        assert stepper.frame_count == 5
        assert cube.orientation[0] == pytest.approx(0.5)
        assert cube.orientation[1] == pytest.approx(1.0)
        for vertices, indices, texture, blend in renderer.calls:
            assert indices.max() < len(vertices)

    def test_run_rejects_negative_frames(self):
        stepper = FrameStepper(generate_cube(center=(0.0, 0.0, 5.0)), Projector())
        with pytest.raises(ValueError):
            stepper.run(RecordingRenderer(), -1)

    def test_empty_mesh_frame(self):
        mesh = Mesh(positions=[], normals=[], uvs=[], corners=[])
        call = FrameStepper(mesh, Projector()).step()
        assert len(call.vertices) == 0
        assert call.num_triangles == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
