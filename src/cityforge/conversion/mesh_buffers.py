"""
Flat vertex/index buffers handed to mesh-consuming layers.

Generation code appends to a MeshAccumulator with plain Python lists and
freezes the result into numpy arrays once a mesh is complete.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from cityforge.generators.geometry import UP, Vec3

Color = Tuple[float, float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


@dataclass
class MeshBuffers:
    """Triangle mesh as flat numpy buffers."""
    # Vertex positions, shape (N, 3), float32
    positions: np.ndarray
    # Per-vertex normals, shape (N, 3), float32
    normals: np.ndarray
    # Flat triangle index buffer, shape (M,), uint32
    indices: np.ndarray
    # Optional RGBA per vertex, shape (N, 4), float32
    colors: Optional[np.ndarray] = None

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def is_empty(self) -> bool:
        return len(self.positions) == 0

    @property
    def bounds(self) -> Tuple[Vec3, Vec3]:
        """(min, max) corners of the axis-aligned bounding box."""
        if self.is_empty:
            return (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)
        lo = self.positions.min(axis=0)
        hi = self.positions.max(axis=0)
        return tuple(float(v) for v in lo), tuple(float(v) for v in hi)

    def triangles(self) -> np.ndarray:
        """Indices reshaped to (M / 3, 3)."""
        return self.indices.reshape(-1, 3)

    @classmethod
    def empty(cls, with_colors: bool = False) -> 'MeshBuffers':
        return cls(
            positions=np.zeros((0, 3), dtype=np.float32),
            normals=np.zeros((0, 3), dtype=np.float32),
            indices=np.zeros((0,), dtype=np.uint32),
            colors=np.zeros((0, 4), dtype=np.float32) if with_colors else None,
        )

    @classmethod
    def concatenate(cls, meshes: Sequence['MeshBuffers']) -> 'MeshBuffers':
        """Join meshes, offsetting each mesh's indices past the previous vertices.

        Colors are kept only when every input carries them.
        """
        if not meshes:
            return cls.empty()
        offsets = np.cumsum([0] + [m.vertex_count for m in meshes[:-1]])
        with_colors = all(m.colors is not None for m in meshes)
        return cls(
            positions=np.concatenate([m.positions for m in meshes]).astype(np.float32),
            normals=np.concatenate([m.normals for m in meshes]).astype(np.float32),
            indices=np.concatenate(
                [m.indices + np.uint32(off) for m, off in zip(meshes, offsets)]
            ).astype(np.uint32),
            colors=(np.concatenate([m.colors for m in meshes]).astype(np.float32)
                    if with_colors else None),
        )


class MeshAccumulator:
    """Growable vertex/normal/color/index lists."""

    def __init__(self, with_colors: bool = False):
        self.with_colors = with_colors
        self.positions: List[Vec3] = []
        self.normals: List[Vec3] = []
        self.colors: List[Color] = []
        self.indices: List[int] = []

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    def add_vertex(self, position: Vec3, normal: Vec3 = UP, color: Color = WHITE) -> int:
        """Append one vertex and return its index."""
        self.positions.append(position)
        self.normals.append(normal)
        if self.with_colors:
            self.colors.append(color)
        return len(self.positions) - 1

    def add_triangle(self, a: int, b: int, c: int):
        self.indices.extend((a, b, c))

    def add_quad(self, start: int):
        """Two triangles over four consecutive vertices starting at ``start``."""
        self.add_triangle(start, start + 1, start + 2)
        self.add_triangle(start, start + 2, start + 3)

    def build(self) -> MeshBuffers:
        if not self.positions:
            return MeshBuffers.empty(self.with_colors)
        return MeshBuffers(
            positions=np.asarray(self.positions, dtype=np.float32).reshape(-1, 3),
            normals=np.asarray(self.normals, dtype=np.float32).reshape(-1, 3),
            indices=np.asarray(self.indices, dtype=np.uint32),
            colors=(np.asarray(self.colors, dtype=np.float32).reshape(-1, 4)
                    if self.with_colors else None),
        )
