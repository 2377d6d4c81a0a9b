"""Vertex -> incident face adjacency in CSR form."""

from __future__ import annotations

from typing import Iterator

import numpy as np
import scipy.sparse as sp


class VertexFaceAdjacency:
    """
    For every vertex, the faces that use it in at least one corner.

    Stored as CSR: faces of vertex v are faces[offsets[v]:offsets[v + 1]],
    in face order. A face that repeats a vertex in several corners is listed
    once for that vertex.
    """

    def __init__(self, offsets: np.ndarray, faces: np.ndarray, face_count: int):
        self.offsets = offsets      # (V + 1,) int64
        self.faces = faces          # (offsets[-1],) int64
        self.face_count = face_count
        self._incidence = None

    @classmethod
    def build(cls, corner_vertices: np.ndarray, vertex_count: int) -> "VertexFaceAdjacency":
        """
        Build from an (F, 3) array of corner vertex indices.

        Pass 1 counts unique incident faces per vertex, pass 2 places each
        (vertex, face) pair at its slot in face/corner order.
        """
        corner_vertices = np.asarray(corner_vertices, dtype=np.int64).reshape(-1, 3)
        face_count = len(corner_vertices)

        # Drop corners that repeat a vertex already seen earlier in the same face
        keep = np.ones(corner_vertices.shape, dtype=bool)
        keep[:, 1] = corner_vertices[:, 1] != corner_vertices[:, 0]
        keep[:, 2] = (corner_vertices[:, 2] != corner_vertices[:, 0]) & (
            corner_vertices[:, 2] != corner_vertices[:, 1]
        )

        pair_vertices = corner_vertices[keep]
        pair_faces = np.broadcast_to(
            np.arange(face_count, dtype=np.int64)[:, None], corner_vertices.shape
        )[keep]

        counts = np.bincount(pair_vertices, minlength=vertex_count)
        offsets = np.zeros(vertex_count + 1, dtype=np.int64)
        np.cumsum(counts, out=offsets[1:])

        # Stable sort keeps face order inside each vertex's slice
        order = np.argsort(pair_vertices, kind="stable")
        faces = pair_faces[order]

        return cls(offsets, faces, face_count)

    @property
    def vertex_count(self) -> int:
        return len(self.offsets) - 1

    def degree(self, vertex: int) -> int:
        return int(self.offsets[vertex + 1] - self.offsets[vertex])

    def faces_of(self, vertex: int) -> np.ndarray:
        return self.faces[self.offsets[vertex]:self.offsets[vertex + 1]]

    def vertices(self) -> Iterator[int]:
        """Vertices referenced by at least one face."""
        for vertex in np.flatnonzero(np.diff(self.offsets)):
            yield int(vertex)

    def __len__(self) -> int:
        """Number of vertices referenced by at least one face."""
        return int(np.count_nonzero(np.diff(self.offsets)))

    def __contains__(self, vertex: int) -> bool:
        return 0 <= vertex < self.vertex_count and self.degree(vertex) > 0

    def to_dict(self) -> dict[int, list[int]]:
        return {v: self.faces_of(v).tolist() for v in self.vertices()}

    @property
    def incidence(self) -> sp.csr_matrix:
        """(V, F) 0/1 incidence matrix with offsets/faces as indptr/indices."""
        if self._incidence is None:
            data = np.ones(len(self.faces), dtype=np.float64)
            self._incidence = sp.csr_matrix(
                (data, self.faces, self.offsets),
                shape=(self.vertex_count, self.face_count),
            )
        return self._incidence
