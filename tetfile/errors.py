"""Exceptions raised while loading and processing tet meshes."""

from __future__ import annotations

from typing import Optional, Sequence


class TetFileError(Exception):
    """Base class for all tetfile errors."""


class FetchError(TetFileError):
    """The mesh text could not be retrieved."""

    def __init__(self, source: str, reason: str, status: Optional[int] = None):
        self.source = source
        self.reason = reason
        self.status = status
        if status is not None:
            message = f"Failed to fetch {source!r}: HTTP {status} {reason}"
        else:
            message = f"Failed to fetch {source!r}: {reason}"
        super().__init__(message)


class ParseError(TetFileError):
    """A directive line could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line!r}")


class OutOfRangeIndexError(TetFileError):
    """A face or tetrahedron refers to a vertex or texcoord that does not exist."""

    def __init__(self, kind: str, element_index: int, index: int, limit: int, target: str = "vertex"):
        self.kind = kind
        self.element_index = element_index
        self.index = index
        self.limit = limit
        self.target = target
        super().__init__(
            f"{kind} {element_index} references {target} {index}, "
            f"but only {limit} {target} entries exist"
        )


class DegenerateGeometryError(TetFileError):
    """Raised in strict mode when faces or vertices have no usable normal."""

    def __init__(self, degenerate_faces: Sequence[int], degenerate_vertices: Sequence[int]):
        self.degenerate_faces = list(degenerate_faces)
        self.degenerate_vertices = list(degenerate_vertices)
        super().__init__(
            f"{len(self.degenerate_faces)} degenerate faces, "
            f"{len(self.degenerate_vertices)} vertices without a normal"
        )
