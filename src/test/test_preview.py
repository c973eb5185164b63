"""
Test the matplotlib preview renderer.
"""

import pytest
import numpy as np
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from meshcore.config import BlendMode
from meshcore.io import generate_cube
from pipeline import FrameStepper, Projector
from visualization import MatplotlibRenderer, white_texture


@pytest.fixture
def renderer():
    r = MatplotlibRenderer(screen_size=(320.0, 240.0))
    yield r
    r.close()


class TestMatplotlibRenderer:

    def test_white_texture_is_shared(self):
        tex = white_texture()
        assert tex is white_texture()
        assert tex.shape == (1, 1, 4)
        with pytest.raises(ValueError):
            tex[0, 0, 0] = 0.5

    def test_draw_frame(self, renderer, tmp_path):
        stepper = FrameStepper(generate_cube(center=(0.0, 0.0, 5.0)),
                               Projector(screen_width=320.0, screen_height=240.0))
        stepper.run(renderer, 1)

        assert len(renderer.collections) == 1
        assert len(renderer.collections[0].get_paths()) == 2

        out = tmp_path / "frame.png"
        renderer.savefig(out)
        assert out.exists()

    def test_opaque_blend_forces_alpha(self, renderer):
        stepper = FrameStepper(generate_cube(center=(0.0, 0.0, 5.0)), Projector())
        call = stepper.draw_call()
        call.vertices.colors[:, 3] = 0.25

        renderer.draw_triangles(call.vertices, call.indices, None, BlendMode.NONE)
        renderer.draw_triangles(call.vertices, call.indices, None, BlendMode.ALPHA)

        opaque, translucent = renderer.collections
        np.testing.assert_array_almost_equal(opaque.get_facecolor()[:, 3], 1.0)
        np.testing.assert_array_almost_equal(translucent.get_facecolor()[:, 3], 0.25)

    def test_texture_tints_faces(self, renderer):
        stepper = FrameStepper(generate_cube(center=(0.0, 0.0, 5.0)), Projector())
        call = stepper.draw_call()
        call.vertices.colors[:] = 1.0
        red = np.zeros((2, 2, 4))
        red[..., 0] = 1.0
        red[..., 3] = 1.0

        renderer.draw_triangles(call.vertices, call.indices, red, BlendMode.ALPHA)

        np.testing.assert_array_almost_equal(
            renderer.collections[0].get_facecolor()[0], [1.0, 0.0, 0.0, 1.0]
        )

    def test_empty_draw_and_clear(self, renderer):
        stepper = FrameStepper(generate_cube(center=(0.0, 0.0, 5.0)), Projector())
        call = stepper.draw_call()

        renderer.draw_triangles(call.vertices, np.zeros(0, dtype=np.int32), None,
                                BlendMode.ALPHA)
        assert renderer.collections == []

        renderer.draw_triangles(call.vertices, call.indices, None, BlendMode.ALPHA)
        renderer.clear()
        assert renderer.collections == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
