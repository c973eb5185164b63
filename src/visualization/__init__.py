"""Visualization module for the mesh pipeline."""

from .preview import MatplotlibRenderer, white_texture

__all__ = [
    'MatplotlibRenderer',
    'white_texture',
]
