"""Core helpers shared by the loader and mesh modules."""

from tetfile.core.event import Event

__all__ = ["Event"]
