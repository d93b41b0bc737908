"""
Light path recording and OBJ export for visualization.

The renderer can hand a LightPath to the integrator for a handful of
samples; every scattering vertex is appended to it. Recorded paths are
exported as a Wavefront OBJ (tubes for segments, small spheres for
vertices) that Blender or Unity can open next to the scene geometry.
"""

from __future__ import annotations
import math
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, TextIO

from .vec3 import Vec3, Point3, Color
from .shapes import AxisAlignedRect


@dataclass
class PathVertex:
    """A single vertex in a recorded light path."""
    position: Point3
    normal: Vec3
    contribution: Color
    is_light_source: bool


@dataclass
class LightPath:
    """A recorded camera path and the radiance it returned."""
    vertices: List[PathVertex] = field(default_factory=list)
    final_color: Color = field(default_factory=lambda: Color(0, 0, 0))
    depth: int = 0

    def add_vertex(self, position: Point3, normal: Vec3, contribution: Color,
                   is_light_source: bool = False) -> None:
        self.vertices.append(PathVertex(position, normal, contribution, is_light_source))
        self.depth += 1


class PathRecorder:
    """Collects up to ``max_paths`` light paths during rendering.

    Safe to share between render threads: each path in progress is owned
    by the caller, only the finished list is shared.
    """

    def __init__(self, max_paths: int = 50):
        self.max_paths = max_paths
        self._paths: List[LightPath] = []
        self._reserved = 0
        self._lock = threading.Lock()

    def start_path(self) -> Optional[LightPath]:
        """Begin a new path, or return None if the recorder is full."""
        with self._lock:
            if self._reserved >= self.max_paths:
                return None
            self._reserved += 1
        return LightPath()

    def end_path(self, path: LightPath, final_color: Color) -> None:
        """Store a finished path with the radiance its sample produced."""
        path.final_color = final_color
        with self._lock:
            self._paths.append(path)

    @property
    def paths(self) -> List[LightPath]:
        with self._lock:
            return list(self._paths)

    def clear(self) -> None:
        with self._lock:
            self._paths.clear()
            self._reserved = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


def _write_vertex(obj: TextIO, p: Point3) -> None:
    obj.write(f"v {p.x:g} {p.y:g} {p.z:g}\n")


def _write_cylinder(obj: TextIO, start: Point3, end: Point3, radius: float,
                    vertex_offset: int, sides: int = 8) -> int:
    """Write an open tube from start to end. Returns the next vertex index."""
    direction = end - start
    length = direction.length()
    if length < 1e-6:
        return vertex_offset

    axis = direction / length
    up = Vec3(1, 0, 0) if abs(axis.y) > 0.9 else Vec3(0, 1, 0)
    right = up.cross(axis).normalize()
    forward = axis.cross(right)

    for center in (start, end):
        for i in range(sides):
            angle = 2.0 * math.pi * i / sides
            offset = (right * math.cos(angle) + forward * math.sin(angle)) * radius
            _write_vertex(obj, center + offset)

    for i in range(sides):
        nxt = (i + 1) % sides
        v1 = vertex_offset + i
        v2 = vertex_offset + nxt
        v3 = vertex_offset + sides + nxt
        v4 = vertex_offset + sides + i
        obj.write(f"f {v1} {v2} {v3}\n")
        obj.write(f"f {v1} {v3} {v4}\n")

    return vertex_offset + 2 * sides


def _write_sphere(obj: TextIO, center: Point3, radius: float, vertex_offset: int,
                  stacks: int = 6, slices: int = 8) -> int:
    """Write a UV sphere. Returns the next vertex index."""
    for i in range(stacks + 1):
        phi = math.pi * i / stacks
        for j in range(slices):
            theta = 2.0 * math.pi * j / slices
            _write_vertex(obj, Point3(
                center.x + radius * math.sin(phi) * math.cos(theta),
                center.y + radius * math.cos(phi),
                center.z + radius * math.sin(phi) * math.sin(theta)
            ))

    for i in range(stacks):
        for j in range(slices):
            next_j = (j + 1) % slices
            v1 = vertex_offset + i * slices + j
            v2 = vertex_offset + i * slices + next_j
            v3 = vertex_offset + (i + 1) * slices + next_j
            v4 = vertex_offset + (i + 1) * slices + j
            # Bottom cap is left open
            if i != stacks - 1:
                obj.write(f"f {v1} {v2} {v3}\n")
                obj.write(f"f {v1} {v3} {v4}\n")

    return vertex_offset + (stacks + 1) * slices


def _write_scene(obj: TextIO, scene, vertex_offset: int) -> int:
    """Write every axis-aligned rectangle in the scene as a quad."""
    for shape in scene:
        if not isinstance(shape, AxisAlignedRect):
            continue
        corners = shape.corners()
        if shape.flip_normal:
            corners.reverse()
        for corner in corners:
            _write_vertex(obj, corner)
        obj.write(
            f"f {vertex_offset} {vertex_offset + 1} "
            f"{vertex_offset + 2} {vertex_offset + 3}\n"
        )
        vertex_offset += 4
    return vertex_offset


def _write_mtl(mtl_path: Path) -> None:
    with open(mtl_path, 'w') as mtl:
        mtl.write("# Material file for recorded light paths\n\n")

        mtl.write("newmtl GreenPath\n")
        mtl.write("Ka 0.0 0.5 0.0\n")
        mtl.write("Kd 0.0 1.0 0.0\n")
        mtl.write("Ks 0.0 1.0 0.0\n")
        mtl.write("Ns 10.0\n")
        mtl.write("d 0.8\n")
        mtl.write("illum 2\n\n")

        mtl.write("newmtl BoxWhite\n")
        mtl.write("Ka 0.7 0.7 0.7\n")
        mtl.write("Kd 0.73 0.73 0.73\n")
        mtl.write("Ks 0.0 0.0 0.0\n")
        mtl.write("d 0.5\n")
        mtl.write("illum 1\n")


def export_paths_to_obj(
    filename: str,
    paths: List[LightPath],
    scene=None,
    path_radius: float = 0.5,
    vertex_radius: float = 1.0
) -> bool:
    """Export recorded paths (and optionally the scene) to an OBJ file.

    A sibling ``.mtl`` file with the path and box materials is written
    next to it.

    Args:
        filename: Output OBJ filename
        paths: Recorded light paths
        scene: Optional iterable of shapes; rectangles are written as quads
        path_radius: Radius of the tubes drawn along path segments
        vertex_radius: Radius of the spheres drawn at path vertices

    Returns:
        True on success, False if the file could not be written
    """
    obj_path = Path(filename)
    mtl_path = obj_path.with_suffix('.mtl')

    try:
        _write_mtl(mtl_path)
    except OSError as e:
        print(f"Warning: Could not write material file {mtl_path}: {e}", file=sys.stderr)

    try:
        with open(obj_path, 'w') as obj:
            obj.write("# Scene with recorded light paths\n")
            obj.write("# Generated for Unity/Blender visualization\n")
            obj.write(f"mtllib {mtl_path.name}\n\n")

            vertex_offset = 1  # OBJ indices start at 1

            if scene is not None:
                obj.write("# Scene geometry\n")
                obj.write("usemtl BoxWhite\n")
                vertex_offset = _write_scene(obj, scene, vertex_offset)
                obj.write("\n")

            obj.write("# Light paths\n")
            obj.write("usemtl GreenPath\n")

            for path_num, path in enumerate(paths):
                obj.write(f"# Path {path_num} (depth: {path.depth})\n")

                for v1, v2 in zip(path.vertices, path.vertices[1:]):
                    vertex_offset = _write_cylinder(
                        obj, v1.position, v2.position, path_radius, vertex_offset
                    )

                for vertex in path.vertices:
                    vertex_offset = _write_sphere(
                        obj, vertex.position, vertex_radius, vertex_offset
                    )

                obj.write("\n")
    except OSError as e:
        print(f"Warning: Failed to open file {filename}: {e}", file=sys.stderr)
        return False

    return True
