"""Loaders for the .tet text format."""

from tetfile.loaders.fetch import fetch_text
from tetfile.loaders.tet_loader import (
    NO_TEXCOORD,
    ParsedTetFile,
    load_tet,
    load_tet_file,
    parse_tet_text,
)
from tetfile.loaders.tet_spec import TetSpec

__all__ = [
    "NO_TEXCOORD",
    "ParsedTetFile",
    "TetSpec",
    "fetch_text",
    "load_tet",
    "load_tet_file",
    "parse_tet_text",
]
