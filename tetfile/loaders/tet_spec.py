# tetfile/loaders/tet_spec.py
"""Tet import specification - settings for loading .tet files."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import numpy as np

from tetfile import log

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2, "-x": 0, "-y": 1, "-z": 2}
_AXIS_SIGN = {"x": 1, "y": 1, "z": 1, "-x": -1, "-y": -1, "-z": -1}


@dataclass
class TetSpec:
    """
    Import settings for tet files.

    Stored as .meta file next to the mesh (e.g., model.tet.meta).
    """

    # Scale factor applied to all vertices
    scale: float = 1.0

    # Axis mapping: which source axis maps to X, Y, Z
    # Values: "x", "y", "z", "-x", "-y", "-z"
    axis_x: str = "x"
    axis_y: str = "y"
    axis_z: str = "z"

    # UV transformations
    flip_uv_v: bool = False  # v = 1 - v

    # Relative tolerance below which a face or vertex has no usable normal
    degenerate_epsilon: float = 1e-10

    # Raise DegenerateGeometryError instead of recording and continuing
    strict_degenerate: bool = False

    def __post_init__(self):
        for axis in (self.axis_x, self.axis_y, self.axis_z):
            if axis not in _AXIS_INDEX:
                raise ValueError(f"Invalid axis mapping: {axis!r}")
        if self.degenerate_epsilon < 0:
            raise ValueError("degenerate_epsilon must be non-negative")

    @classmethod
    def load(cls, spec_path: str | Path) -> "TetSpec":
        """Load spec from file. Missing or broken files give the defaults."""
        path = Path(spec_path)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            known = {f.name for f in fields(cls)}
            return cls(**{k: v for k, v in data.items() if k in known})
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log.warn(e, f"Ignoring unreadable tet spec {path}")
            return cls()

    @classmethod
    def for_mesh_file(cls, mesh_path: str | Path) -> "TetSpec":
        """Load spec for a mesh file (looks for mesh_path.meta)."""
        return cls.load(Path(str(mesh_path) + ".meta"))

    def save(self, spec_path: str | Path) -> None:
        path = Path(spec_path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)

    def save_for_mesh(self, mesh_path: str | Path) -> None:
        """Save spec next to mesh file (.meta format)."""
        self.save(Path(str(mesh_path) + ".meta"))

    @property
    def is_identity(self) -> bool:
        return (
            self.scale == 1.0
            and (self.axis_x, self.axis_y, self.axis_z) == ("x", "y", "z")
            and not self.flip_uv_v
        )

    def apply_to_vertices(self, vertices: np.ndarray) -> np.ndarray:
        """
        Apply axis mapping and scale to a flat (3N,) vertex array.

        Returns a new flat float32 array.
        """
        if vertices is None or len(vertices) == 0:
            return vertices

        src = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        result = np.empty_like(src)
        for dst, axis in enumerate((self.axis_x, self.axis_y, self.axis_z)):
            result[:, dst] = src[:, _AXIS_INDEX[axis]] * _AXIS_SIGN[axis]

        result *= self.scale
        return result.astype(np.float32).reshape(-1)

    def apply_to_uvs(self, uvs: np.ndarray) -> np.ndarray:
        """Apply UV transformations to a flat (2N,) array."""
        if uvs is None or len(uvs) == 0:
            return uvs

        result = np.array(uvs, dtype=np.float32).reshape(-1, 2)
        if self.flip_uv_v:
            result[:, 1] = 1.0 - result[:, 1]
        return result.reshape(-1)
