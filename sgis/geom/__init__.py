"""Geometry primitives.

This package is intentionally small and dependency-free (no Qt): points,
bounding boxes and features are plain value types shared by the viewport,
the layer stack and the renderer.
"""

from __future__ import annotations
