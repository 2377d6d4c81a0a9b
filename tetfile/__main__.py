"""
Command-line entry point: load a .tet mesh and print a summary.

Usage:
    python -m tetfile path/to/model.tet
    python -m tetfile https://example.com/model.tet --recompute 10
"""

import argparse
import asyncio
import logging
import sys

from tetfile import log
from tetfile.errors import TetFileError
from tetfile.loaders.tet_loader import load_tet


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Load a .tet mesh and report its contents"
    )
    parser.add_argument(
        "source",
        type=str,
        help="Path or http(s) URL of the .tet file",
    )
    parser.add_argument(
        "--recompute", "-r",
        type=int,
        default=0,
        help="Extra update passes to run after loading (default: 0)",
    )
    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    log.set_level(args.log_level)

    try:
        mesh = asyncio.run(load_tet(args.source))
        report = mesh.last_report
        for _ in range(args.recompute):
            report = mesh.update()
    except TetFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    lo, hi = mesh.bounds()
    print(f"name:        {mesh.name}")
    print(f"vertices:    {mesh.vertex_count}")
    print(f"texcoords:   {mesh.tex_coord_count}")
    print(f"triangles:   {mesh.triangle_count}")
    print(f"tetrahedra:  {mesh.tet_count}")
    print(f"degenerate:  {report.summary()}")
    print(f"bounds:      {lo.tolist()} .. {hi.tolist()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
