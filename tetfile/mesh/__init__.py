"""Mesh module - TetMesh, adjacency and normal computation."""

from tetfile.mesh.adjacency import VertexFaceAdjacency
from tetfile.mesh.normals import (
    NormalReport,
    compute_face_geometry,
    compute_vertex_normals,
    expand_to_corners,
)
from tetfile.mesh.tet_mesh import TetMesh

__all__ = [
    "TetMesh",
    "VertexFaceAdjacency",
    "NormalReport",
    "compute_face_geometry",
    "compute_vertex_normals",
    "expand_to_corners",
]
