# tetfile/loaders/tet_loader.py
"""
Loader for the .tet format.

A .tet file is an OBJ-like text file describing a surface mesh plus the
tetrahedra of the solid it bounds:

    # comment
    v x y z              vertex position
    vt u v               texture coordinate
    f a/ta b/tb c/tc     triangle, 1-based vertex/texcoord indices
    t i1 i2 i3 i4        tetrahedron, 1-based vertex indices

Unknown directives are skipped.
"""

from __future__ import annotations

import asyncio
import math
import re
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import numpy as np

from tetfile import log
from tetfile.errors import ParseError
from tetfile.loaders.fetch import fetch_text, is_http_url, local_path, read_text_file
from tetfile.loaders.tet_spec import TetSpec

if TYPE_CHECKING:
    from tetfile.mesh.tet_mesh import TetMesh

# Corner texcoord index when the face token has none
NO_TEXCOORD = -1

# Plain ASCII decimal only; float()/int() would also take "1_0" or "١"
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INDEX_RE = re.compile(r"[+-]?\d+", re.ASCII)


class ParsedTetFile:
    def __init__(self, name, vertices, tex_coords, faces, tets_indices):
        self.name = name
        self.vertices = vertices            # np.ndarray (3V,) float32
        self.tex_coords = tex_coords        # np.ndarray (2T,) float32
        self.faces = faces                  # np.ndarray (F, 3, 2) int64, [vertex, texcoord] per corner
        self.tets_indices = tets_indices    # np.ndarray (4K,) int64

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) // 3

    @property
    def tex_coord_count(self) -> int:
        return len(self.tex_coords) // 2

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def tet_count(self) -> int:
        return len(self.tets_indices) // 4


def _parse_floats(parts, count, line_number, line):
    if len(parts) < count + 1:
        raise ParseError(line_number, line, f"'{parts[0]}' expects {count} values")

    values = []
    for token in parts[1:count + 1]:
        if token.lstrip("+-").lower() in ("nan", "inf", "infinity"):
            raise ParseError(line_number, line, f"non-finite number {token!r}")
        if not _FLOAT_RE.fullmatch(token):
            raise ParseError(line_number, line, f"malformed number {token!r}")
        value = float(token)
        # overflow, e.g. 1e999
        if not math.isfinite(value):
            raise ParseError(line_number, line, f"non-finite number {token!r}")
        values.append(value)
    return values


def _parse_index(token, line_number, line) -> int:
    if not _INDEX_RE.fullmatch(token):
        raise ParseError(line_number, line, f"malformed index {token!r}")
    value = int(token)
    if value < 1:
        raise ParseError(line_number, line, f"index {value} is not 1-based")
    return value - 1


def _parse_corner(token, line_number, line):
    # Formats: v, v/vt, v/vt/vn, v//vn. The normal index is ignored.
    fields = token.split("/")
    vertex = _parse_index(fields[0], line_number, line)

    tex_coord = NO_TEXCOORD
    if len(fields) > 1 and fields[1]:
        tex_coord = _parse_index(fields[1], line_number, line)

    return vertex, tex_coord


def parse_tet_text(text: str, name: str = "") -> ParsedTetFile:
    """Parse .tet text into flat arrays. Raises ParseError on malformed lines."""
    vertices = []
    tex_coords = []
    faces = []
    tets = []
    skipped = set()

    for line_number, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split()
        cmd = parts[0]

        if cmd == "v":
            vertices.extend(_parse_floats(parts, 3, line_number, line))

        elif cmd == "vt":
            tex_coords.extend(_parse_floats(parts, 2, line_number, line))

        elif cmd == "f":
            if len(parts) < 4:
                raise ParseError(line_number, line, "'f' expects 3 corners")
            faces.append([_parse_corner(token, line_number, line) for token in parts[1:4]])

        elif cmd == "t":
            if len(parts) < 5:
                raise ParseError(line_number, line, "'t' expects 4 indices")
            tets.extend(_parse_index(token, line_number, line) for token in parts[1:5])

        else:
            skipped.add(cmd)

    if skipped:
        log.debug(f"{name or '<text>'}: skipped unknown directives {sorted(skipped)}")

    return ParsedTetFile(
        name=name,
        vertices=np.array(vertices, dtype=np.float32),
        tex_coords=np.array(tex_coords, dtype=np.float32),
        faces=np.array(faces, dtype=np.int64).reshape(-1, 3, 2),
        tets_indices=np.array(tets, dtype=np.int64),
    )


def _source_name(source) -> str:
    if isinstance(source, Path):
        return source.stem
    return Path(urlparse(str(source)).path).stem


def load_tet_file(path, spec: "TetSpec | None" = None) -> "TetMesh":
    """Load a .tet file from disk, applying spec (or its .meta file) if present."""
    from tetfile.mesh.tet_mesh import TetMesh

    path = Path(path)
    if spec is None:
        spec = TetSpec.for_mesh_file(path)

    parsed = parse_tet_text(read_text_file(path), name=path.stem)
    return TetMesh.from_parsed(parsed, spec)


async def load_tet(source, spec: "TetSpec | None" = None, timeout: float = 30.0) -> "TetMesh":
    """
    Fetch, parse and build a mesh.

    The result is fully built (adjacency, normals, per-corner buffers) before
    it is returned. Raises FetchError, ParseError or OutOfRangeIndexError.
    """
    from tetfile.mesh.tet_mesh import TetMesh

    is_remote = not isinstance(source, Path) and is_http_url(source)
    if spec is None and not is_remote:
        spec = await asyncio.to_thread(TetSpec.for_mesh_file, local_path(source))

    text = await fetch_text(source, timeout=timeout)
    parsed = parse_tet_text(text, name=_source_name(source))
    return TetMesh.from_parsed(parsed, spec)
