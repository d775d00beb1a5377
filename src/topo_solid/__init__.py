"""Watertight solid meshes from elevation grids for 3D printing."""

__version__ = "0.1.0"
