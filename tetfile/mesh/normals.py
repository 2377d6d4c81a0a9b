"""
Face and vertex normal computation.

Face normals use (P0 - P1) x (P0 - P2), face areas use Heron's formula on
the same edges. Vertex normals are the area-weighted sum of the normals of
the incident faces, renormalized.

All arithmetic is done in float64. Degenerate elements get a zero normal and
are reported through the returned masks, so NaN never reaches a buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import scipy.sparse as sp


@dataclass
class NormalReport:
    """Elements that had no usable normal in the last recomputation."""

    degenerate_faces: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    """Indices of faces with (near) zero area."""

    degenerate_vertices: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))
    """Indices of referenced vertices whose weighted normal sum vanished."""

    @property
    def is_clean(self) -> bool:
        return len(self.degenerate_faces) == 0 and len(self.degenerate_vertices) == 0

    def summary(self) -> str:
        return (
            f"{len(self.degenerate_faces)} degenerate faces, "
            f"{len(self.degenerate_vertices)} vertices without a normal"
        )


def compute_face_geometry(
    positions: np.ndarray,
    corner_vertices: np.ndarray,
    epsilon: float = 1e-10,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute unit face normals, face areas and the degenerate face mask.

    Args:
        positions: flat (3V,) or (V, 3) vertex positions
        corner_vertices: (F, 3) vertex index per corner
        epsilon: a face is degenerate when |N| or its Heron area is
            <= epsilon * longest_edge^2

    Returns:
        normals (F, 3) float64, areas (F,) float64, degenerate (F,) bool.
        Degenerate faces have a zero normal and zero area.
    """
    p = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    p0 = p[corner_vertices[:, 0]]
    p1 = p[corner_vertices[:, 1]]
    p2 = p[corner_vertices[:, 2]]

    edge_a = p0 - p1
    edge_b = p0 - p2
    edge_c = p1 - p2

    a = np.linalg.norm(edge_a, axis=1)
    b = np.linalg.norm(edge_b, axis=1)
    c = np.linalg.norm(edge_c, axis=1)

    # Heron; rounding can push the radicand slightly below zero for slivers
    s = (a + b + c) * 0.5
    areas = np.sqrt(np.maximum(s * (s - a) * (s - b) * (s - c), 0.0))

    cross = np.cross(edge_a, edge_b)
    length = np.linalg.norm(cross, axis=1)
    longest = np.maximum(np.maximum(a, b), c)
    threshold = epsilon * longest * longest
    # Heron cancels to zero on slivers the cross product still resolves.
    # A valid face must pass both, so its area is always positive.
    # Written as a negation so non-finite input also counts as degenerate.
    ok = (length > threshold) & (areas > threshold)
    degenerate = ~ok

    normals = np.zeros_like(cross)
    normals[ok] = cross[ok] / length[ok, None]
    areas[degenerate] = 0.0

    return normals, areas, degenerate


def compute_vertex_normals(
    incidence: sp.csr_matrix,
    face_normals: np.ndarray,
    face_areas: np.ndarray,
    epsilon: float = 1e-10,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Area-weighted vertex normals.

    Args:
        incidence: (V, F) vertex/face incidence matrix
        face_normals: (F, 3) unit face normals
        face_areas: (F,) face areas
        epsilon: a vertex is degenerate when |sum| <= epsilon * sum(area)

    Returns:
        normals (V, 3) float64, degenerate (V,) bool. Vertices used by no
        face get a zero normal and are not flagged.
    """
    face_normals = np.asarray(face_normals, dtype=np.float64).reshape(-1, 3)
    face_areas = np.asarray(face_areas, dtype=np.float64)

    sums = np.asarray(incidence @ (face_normals * face_areas[:, None]))
    area_sums = np.asarray(incidence @ face_areas)
    lengths = np.linalg.norm(sums, axis=1)

    referenced = np.diff(incidence.indptr) > 0
    ok = referenced & (area_sums > 0.0) & (lengths > epsilon * area_sums)
    degenerate = referenced & ~ok

    normals = np.zeros_like(sums)
    normals[ok] = sums[ok] / lengths[ok, None]
    return normals, degenerate


def expand_to_corners(values: np.ndarray, corner_vertices: np.ndarray, out: np.ndarray) -> None:
    """
    Write per-vertex values into a flat per-corner buffer, in place.

    Corner k of face f lands at entry 3 * f + k, the same order used by
    every per-corner buffer.
    """
    width = values.shape[-1] if values.ndim > 1 else 3
    source = values.reshape(-1, width)
    out.reshape(-1, width)[:] = source[corner_vertices.reshape(-1)]
