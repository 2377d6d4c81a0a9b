"""TetMesh - surface triangles plus tetrahedra, with render-ready buffers."""

from __future__ import annotations

from typing import Optional

import numpy as np

from tetfile import log
from tetfile.core.event import Event
from tetfile.errors import DegenerateGeometryError, OutOfRangeIndexError
from tetfile.loaders.tet_loader import NO_TEXCOORD, ParsedTetFile
from tetfile.loaders.tet_spec import TetSpec
from tetfile.mesh.adjacency import VertexFaceAdjacency
from tetfile.mesh.normals import (
    NormalReport,
    compute_face_geometry,
    compute_vertex_normals,
    expand_to_corners,
)
from tetfile.render.geometry import RenderGeometry


def _validate_indices(parsed: ParsedTetFile) -> None:
    """Raise OutOfRangeIndexError for the first face/tet pointing outside the arrays."""
    vertex_count = parsed.vertex_count
    tex_coord_count = parsed.tex_coord_count

    corner_vertices = parsed.faces[:, :, 0]
    bad = (corner_vertices < 0) | (corner_vertices >= vertex_count)
    if bad.any():
        face = int(np.flatnonzero(bad.any(axis=1))[0])
        value = int(corner_vertices[face][bad[face]][0])
        raise OutOfRangeIndexError("face", face, value, vertex_count, "vertex")

    corner_tex = parsed.faces[:, :, 1]
    bad = (corner_tex != NO_TEXCOORD) & ((corner_tex < 0) | (corner_tex >= tex_coord_count))
    if bad.any():
        face = int(np.flatnonzero(bad.any(axis=1))[0])
        value = int(corner_tex[face][bad[face]][0])
        raise OutOfRangeIndexError("face", face, value, tex_coord_count, "texcoord")

    tets = parsed.tets_indices.reshape(-1, 4)
    bad = (tets < 0) | (tets >= vertex_count)
    if bad.any():
        tet = int(np.flatnonzero(bad.any(axis=1))[0])
        value = int(tets[tet][bad[tet]][0])
        raise OutOfRangeIndexError("tetrahedron", tet, value, vertex_count, "vertex")


class TetMesh:
    """
    Triangulated surface of a tetrahedral body.

    Owns:
    - vertices: flat (3V,) float32 positions, written by an external
      simulation between update() calls
    - tets_indices: flat (4T,) uint32, read-only, for the simulation
    - face_normals / face_areas / normals: derived per-face and per-vertex data
    - positions_buffer / tex_coords_buffer / normals_buffer: flat per-corner
      buffers (3 corners per face) consumed directly by a renderer

    Buffers are allocated once; update() rewrites them in place and emits
    the attribute name on on_buffers_changed.

    Usage:
        mesh = load_tet_file("model.tet")
        geometry = mesh.create_geometry()
        # each simulation tick:
        simulate(mesh.vertex_positions, mesh.tetrahedra)
        mesh.update()
    """

    POSITION = "position"
    UV = "uv"
    NORMAL = "normal"

    def __init__(
        self,
        name: str,
        vertices: np.ndarray,
        tex_coords: np.ndarray,
        faces: np.ndarray,
        tets_indices: np.ndarray,
        spec: Optional[TetSpec] = None,
    ):
        """Build from already validated arrays. Use from_parsed() for file data."""
        self.name = name
        self.spec = spec if spec is not None else TetSpec()

        self.vertices = np.array(vertices, dtype=np.float32).reshape(-1)
        self.tex_coords = np.array(tex_coords, dtype=np.float32).reshape(-1)
        self.faces = np.array(faces, dtype=np.int64).reshape(-1, 3, 2)
        self.tets_indices = np.array(tets_indices, dtype=np.uint32).reshape(-1)
        self.tets_indices.flags.writeable = False

        self._vertex_count = len(self.vertices) // 3
        self._corner_vertices = np.ascontiguousarray(self.faces[:, :, 0])
        self.triangle_count = len(self.faces)

        self.adjacency = VertexFaceAdjacency.build(self._corner_vertices, self._vertex_count)

        self.face_normals = np.zeros(self.triangle_count * 3, dtype=np.float32)
        self.face_areas = np.zeros(self.triangle_count, dtype=np.float32)
        self.normals = np.zeros(self._vertex_count * 3, dtype=np.float32)

        self.positions_buffer = np.zeros(self.triangle_count * 3 * 3, dtype=np.float32)
        self.tex_coords_buffer = np.zeros(self.triangle_count * 3 * 2, dtype=np.float32)
        self.normals_buffer = np.zeros(self.triangle_count * 3 * 3, dtype=np.float32)

        self.on_buffers_changed: Event[str] = Event("buffers_changed")
        self.geometry: Optional[RenderGeometry] = None
        self.last_report = NormalReport()

        self._fill_tex_coords()
        self.update()

    @classmethod
    def from_parsed(cls, parsed: ParsedTetFile, spec: Optional[TetSpec] = None) -> "TetMesh":
        """Validate parsed arrays, apply import settings and build the mesh."""
        spec = spec if spec is not None else TetSpec()
        _validate_indices(parsed)

        vertices = parsed.vertices
        tex_coords = parsed.tex_coords
        if not spec.is_identity:
            vertices = spec.apply_to_vertices(vertices)
            tex_coords = spec.apply_to_uvs(tex_coords)

        mesh = cls(parsed.name, vertices, tex_coords, parsed.faces, parsed.tets_indices, spec)
        log.info(
            f"Loaded tet mesh {parsed.name or '<unnamed>'}: {mesh.vertex_count} vertices, "
            f"{mesh.triangle_count} triangles, {mesh.tet_count} tetrahedra"
        )
        return mesh

    # ----------------------------------------------------------------
    # Counts and views

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    @property
    def tex_coord_count(self) -> int:
        return len(self.tex_coords) // 2

    @property
    def tet_count(self) -> int:
        return len(self.tets_indices) // 4

    @property
    def corner_count(self) -> int:
        return self.triangle_count * 3

    @property
    def corner_vertices(self) -> np.ndarray:
        """(F, 3) vertex index per corner."""
        return self._corner_vertices

    @property
    def vertex_positions(self) -> np.ndarray:
        """(V, 3) writable view of vertices."""
        return self.vertices.reshape(-1, 3)

    @property
    def tetrahedra(self) -> np.ndarray:
        """(T, 4) read-only view of tets_indices."""
        return self.tets_indices.reshape(-1, 4)

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        if self._vertex_count == 0:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero.copy()
        positions = self.vertex_positions
        return positions.min(axis=0), positions.max(axis=0)

    # ----------------------------------------------------------------
    # Derived buffers

    def _fill_tex_coords(self) -> None:
        # Texture coordinates are static, so this runs once
        tex_index = self.faces[:, :, 1].reshape(-1)
        present = tex_index != NO_TEXCOORD

        uv = self.tex_coords_buffer.reshape(-1, 2)
        uv[present] = self.tex_coords.reshape(-1, 2)[tex_index[present]]
        uv[~present] = 0.0

    def recompute_normals(self) -> NormalReport:
        """
        Recompute face normals/areas, vertex normals and the per-corner
        normal buffer from the current vertex positions.

        Degenerate faces and vertices get zero normals and are reported.
        With spec.strict_degenerate they raise DegenerateGeometryError
        before any buffer is modified.
        """
        eps = self.spec.degenerate_epsilon

        face_normals, face_areas, bad_faces = compute_face_geometry(
            self.vertices, self._corner_vertices, eps
        )
        vertex_normals, bad_vertices = compute_vertex_normals(
            self.adjacency.incidence, face_normals, face_areas, eps
        )
        report = NormalReport(np.flatnonzero(bad_faces), np.flatnonzero(bad_vertices))

        if not report.is_clean:
            if self.spec.strict_degenerate:
                raise DegenerateGeometryError(report.degenerate_faces, report.degenerate_vertices)
            if not self._same_report(report):
                log.warn(f"Tet mesh {self.name or '<unnamed>'}: {report.summary()}")

        self.face_normals.reshape(-1, 3)[:] = face_normals
        self.face_areas[:] = face_areas
        self.normals.reshape(-1, 3)[:] = vertex_normals
        expand_to_corners(vertex_normals, self._corner_vertices, self.normals_buffer)

        self.last_report = report
        self.on_buffers_changed.emit(self.NORMAL)
        return report

    def _same_report(self, report: NormalReport) -> bool:
        last = self.last_report
        return np.array_equal(last.degenerate_faces, report.degenerate_faces) and np.array_equal(
            last.degenerate_vertices, report.degenerate_vertices
        )

    def sync_positions(self) -> None:
        """Copy current vertex positions into the per-corner position buffer."""
        expand_to_corners(self.vertex_positions, self._corner_vertices, self.positions_buffer)
        self.on_buffers_changed.emit(self.POSITION)

    def update(self) -> NormalReport:
        """Refresh everything that depends on vertex positions."""
        report = self.recompute_normals()
        self.sync_positions()
        return report

    # ----------------------------------------------------------------
    # Render geometry

    def create_geometry(self) -> RenderGeometry:
        """
        Create a RenderGeometry viewing the per-corner buffers and subscribe
        it to buffer change notifications.
        """
        geometry = RenderGeometry()
        geometry.set_attribute(self.POSITION, self.positions_buffer, 3)
        geometry.set_attribute(self.UV, self.tex_coords_buffer, 2)
        geometry.set_attribute(self.NORMAL, self.normals_buffer, 3)

        if self.geometry is not None:
            self.on_buffers_changed -= self.geometry.mark_changed
        self.on_buffers_changed += geometry.mark_changed
        self.geometry = geometry
        return geometry

    def __repr__(self) -> str:
        return (
            f"TetMesh(name={self.name!r}, vertices={self.vertex_count}, "
            f"triangles={self.triangle_count}, tets={self.tet_count})"
        )
