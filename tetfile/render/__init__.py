"""Render-side buffers fed by TetMesh."""

from tetfile.render.geometry import (
    BufferAttribute,
    RenderGeometry,
    VertexAttribType,
    VertexAttribute,
    VertexLayout,
    interleaved_layout,
)

__all__ = [
    "BufferAttribute",
    "RenderGeometry",
    "VertexAttribType",
    "VertexAttribute",
    "VertexLayout",
    "interleaved_layout",
]
