"""Render-side view of a mesh: named per-corner attribute buffers."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable

import numpy as np

from tetfile import log


class VertexAttribType(Enum):
    FLOAT32 = "float32"


class VertexAttribute:
    def __init__(self, name, size, vtype: VertexAttribType, offset):
        self.name = name
        self.size = size
        self.vtype = vtype
        self.offset = offset


class VertexLayout:
    def __init__(self, stride, attributes):
        self.stride = stride            # bytes per corner
        self.attributes = attributes    # list of VertexAttribute

    def attribute(self, name) -> VertexAttribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)


def interleaved_layout() -> VertexLayout:
    """Layout of interleaved_buffer(): pos(3) + normal(3) + uv(2)."""
    return VertexLayout(
        stride=8 * 4,
        attributes=[
            VertexAttribute("position", 3, VertexAttribType.FLOAT32, 0),
            VertexAttribute("normal",   3, VertexAttribType.FLOAT32, 12),
            VertexAttribute("uv",       2, VertexAttribType.FLOAT32, 24),
        ]
    )


class BufferAttribute:
    """
    Non-owning view of one flat attribute buffer.

    The mesh writes into array and calls mark_changed(); the renderer reads
    it, re-uploads when needs_update is set and calls consume(). The array
    is shared, never copied, resized or replaced.
    """

    def __init__(self, name: str, array: np.ndarray, item_size: int):
        if array.ndim != 1 or len(array) % item_size != 0:
            raise ValueError(f"Attribute {name!r}: flat array of {item_size}-float items expected")
        self.name = name
        self._array = array
        self.item_size = item_size
        self.version = 0
        self.needs_update = True

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def count(self) -> int:
        return len(self._array) // self.item_size

    def mark_changed(self) -> None:
        self.version += 1
        self.needs_update = True

    def consume(self) -> int:
        """Clear the dirty flag. Returns the version that was consumed."""
        self.needs_update = False
        return self.version


class RenderGeometry:
    """
    Set of named attributes for one non-indexed triangle mesh.

    Usage:
        geometry = mesh.create_geometry()
        # render loop:
        for attr in geometry.dirty_attributes():
            upload(attr.name, attr.array)
            attr.consume()
    """

    def __init__(self):
        self.attributes: Dict[str, BufferAttribute] = {}

    def set_attribute(self, name: str, array: np.ndarray, item_size: int) -> BufferAttribute:
        attr = BufferAttribute(name, array, item_size)
        self.attributes[name] = attr
        return attr

    def __getitem__(self, name: str) -> BufferAttribute:
        return self.attributes[name]

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    @property
    def corner_count(self) -> int:
        counts = {attr.count for attr in self.attributes.values()}
        if len(counts) > 1:
            raise ValueError(f"Attribute sizes disagree: {sorted(counts)}")
        return counts.pop() if counts else 0

    def mark_changed(self, name: str) -> None:
        attr = self.attributes.get(name)
        if attr is None:
            log.debug(f"RenderGeometry: no attribute {name!r} to mark")
            return
        attr.mark_changed()

    def dirty_attributes(self) -> Iterable[BufferAttribute]:
        return [attr for attr in self.attributes.values() if attr.needs_update]

    def consume(self, name: str) -> int:
        return self.attributes[name].consume()

    def get_vertex_layout(self) -> VertexLayout:
        """Describe the separate (non-interleaved) attribute streams."""
        return VertexLayout(
            stride=0,
            attributes=[
                VertexAttribute(attr.name, attr.item_size, VertexAttribType.FLOAT32, 0)
                for attr in self.attributes.values()
            ],
        )

    def interleaved_buffer(self) -> np.ndarray:
        """Copy position/normal/uv into one (corners, 8) float32 array."""
        layout = interleaved_layout()
        out = np.zeros((self.corner_count, layout.stride // 4), dtype=np.float32)
        for vattr in layout.attributes:
            if vattr.name not in self.attributes:
                continue
            column = vattr.offset // 4
            out[:, column:column + vattr.size] = self.attributes[vattr.name].array.reshape(-1, vattr.size)
        return out
