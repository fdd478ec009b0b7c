"""
Wavefront OBJ export for generated city meshes.

Writes each MeshBuffers as its own object group with positions, normals
and triangle faces, plus an optional .mtl with one material per group.
The city is already Y-up, so coordinates are written unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

from .mesh_buffers import MeshBuffers

# Diffuse colors for the default materials
MATERIAL_COLORS: Dict[str, Tuple[float, float, float]] = {
    "road": (0.2, 0.2, 0.2),
    "building": (0.8, 0.8, 0.8),
}
DEFAULT_DIFFUSE = (0.8, 0.8, 0.8)


class ObjWriter:
    """Write city meshes as Wavefront OBJ + optional MTL."""

    def __init__(self):
        self._groups: List[Tuple[str, MeshBuffers, str]] = []  # (name, mesh, material)

    def add_mesh(self, name: str, mesh: MeshBuffers, material: str):
        if mesh.is_empty:
            return
        self._groups.append((name, mesh, material))

    def write(self, obj_path: str, write_mtl: bool = True):
        """Write .obj (and optionally .mtl) files."""
        obj_p = Path(obj_path)
        mtl_name = obj_p.stem + ".mtl"

        lines = []
        lines.append("# cityforge OBJ export")
        lines.append(f"# {self.vertex_count} vertices, {self.face_count} faces")
        if write_mtl:
            lines.append(f"mtllib {mtl_name}")
        lines.append("")

        offset = 0
        for name, mesh, material in self._groups:
            lines.append(f"o {name}")
            for x, y, z in mesh.positions:
                lines.append(f"v {x:.4f} {y:.4f} {z:.4f}")
            for x, y, z in mesh.normals:
                lines.append(f"vn {x:.4f} {y:.4f} {z:.4f}")
            lines.append(f"usemtl {material}")
            for tri in mesh.triangles():
                # OBJ indices are 1-based and global across groups
                a, b, c = (int(i) + offset + 1 for i in tri)
                lines.append(f"f {a}//{a} {b}//{b} {c}//{c}")
            lines.append("")
            offset += mesh.vertex_count

        obj_p.parent.mkdir(parents=True, exist_ok=True)
        obj_p.write_text("\n".join(lines) + "\n")

        if write_mtl:
            self._write_mtl(str(obj_p.parent / mtl_name))

    def _write_mtl(self, mtl_path: str):
        lines = ["# cityforge MTL", ""]
        for mat in sorted({material for _, _, material in self._groups}):
            r, g, b = MATERIAL_COLORS.get(mat, DEFAULT_DIFFUSE)
            lines.append(f"newmtl {mat}")
            lines.append("Ka 0.2 0.2 0.2")
            lines.append(f"Kd {r} {g} {b}")
            lines.append("Ks 0.0 0.0 0.0")
            lines.append("d 1.0")
            lines.append("")
        Path(mtl_path).write_text("\n".join(lines) + "\n")

    @property
    def vertex_count(self) -> int:
        return sum(mesh.vertex_count for _, mesh, _ in self._groups)

    @property
    def face_count(self) -> int:
        return sum(mesh.triangle_count for _, mesh, _ in self._groups)
