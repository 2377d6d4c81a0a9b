"""tetfile - loader and render buffers for triangulated tetrahedral meshes."""

from tetfile.errors import (
    DegenerateGeometryError,
    FetchError,
    OutOfRangeIndexError,
    ParseError,
    TetFileError,
)
from tetfile.loaders import TetSpec, fetch_text, load_tet, load_tet_file, parse_tet_text
from tetfile.mesh import NormalReport, TetMesh, VertexFaceAdjacency
from tetfile.render import RenderGeometry

__all__ = [
    "DegenerateGeometryError",
    "FetchError",
    "NormalReport",
    "OutOfRangeIndexError",
    "ParseError",
    "RenderGeometry",
    "TetFileError",
    "TetMesh",
    "TetSpec",
    "VertexFaceAdjacency",
    "fetch_text",
    "load_tet",
    "load_tet_file",
    "parse_tet_text",
]
