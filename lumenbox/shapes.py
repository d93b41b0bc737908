"""
Geometric shapes for the path tracer.

Each shape implements the Hittable interface with a `hit` method.
The scene is built from axis-aligned rectangles gathered in a HittableList.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, Union, TYPE_CHECKING

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


AXIS_NAMES = ('x', 'y', 'z')

# Below this the ray is treated as parallel to the rectangle's plane
PARALLEL_EPSILON = 1e-8


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The surface's fixed outward unit normal
        t: The ray parameter at intersection
        front_face: True if the ray arrived against the normal
        material: The material at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Material


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Minimum t value to consider (avoid self-intersection)
            t_max: Maximum t value to consider

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass


def _axis_index(axis: Union[int, str]) -> int:
    if isinstance(axis, str):
        name = axis.lower()
        if name not in AXIS_NAMES:
            raise ValueError(f"Unknown axis: {axis!r}")
        return AXIS_NAMES.index(name)
    if axis not in (0, 1, 2):
        raise ValueError(f"Axis index must be 0, 1 or 2, got {axis!r}")
    return int(axis)


class AxisAlignedRect(Hittable):
    """A rectangle lying in a plane of constant x, y or z.

    The two bound intervals apply to the remaining axes in increasing
    order: (y, z) for an x-rect, (x, z) for a y-rect, (x, y) for a z-rect.
    """

    def __init__(
        self,
        axis: Union[int, str],
        k: float,
        bounds_a: Tuple[float, float],
        bounds_b: Tuple[float, float],
        material: Material,
        flip_normal: bool = False
    ):
        """Create an axis-aligned rectangle.

        Args:
            axis: The constant axis (0/1/2 or 'x'/'y'/'z')
            k: The coordinate of the plane on that axis
            bounds_a: Closed interval on the first free axis
            bounds_b: Closed interval on the second free axis
            material: Material for shading
            flip_normal: Point the normal along -axis instead of +axis
        """
        if material is None:
            raise ValueError("Rectangle needs a material")
        self.axis = _axis_index(axis)
        self.free_axes = tuple(i for i in range(3) if i != self.axis)
        self.k = float(k)
        self.bounds_a = (float(min(bounds_a)), float(max(bounds_a)))
        self.bounds_b = (float(min(bounds_b)), float(max(bounds_b)))
        self.material = material
        self.flip_normal = flip_normal

        components = [0.0, 0.0, 0.0]
        components[self.axis] = -1.0 if flip_normal else 1.0
        self.normal = Vec3(*components)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-plane intersection, then clip against the bounds."""
        d = ray.direction[self.axis]

        # Ray is parallel to the plane
        if abs(d) < PARALLEL_EPSILON:
            return None

        t = (self.k - ray.origin[self.axis]) / d
        if t < t_min or t > t_max:
            return None

        a_axis, b_axis = self.free_axes
        a = ray.origin[a_axis] + t * ray.direction[a_axis]
        b = ray.origin[b_axis] + t * ray.direction[b_axis]

        a0, a1 = self.bounds_a
        b0, b1 = self.bounds_b
        if a < a0 or a > a1 or b < b0 or b > b1:
            return None

        return HitRecord(
            point=ray.at(t),
            normal=self.normal,
            t=t,
            front_face=ray.direction.dot(self.normal) < 0,
            material=self.material
        )

    def corners(self) -> list[Point3]:
        """Return the four corners, counter-clockwise around +axis."""
        a_axis, b_axis = self.free_axes
        corners = []
        for a, b in ((self.bounds_a[0], self.bounds_b[0]),
                     (self.bounds_a[1], self.bounds_b[0]),
                     (self.bounds_a[1], self.bounds_b[1]),
                     (self.bounds_a[0], self.bounds_b[1])):
            components = [0.0, 0.0, 0.0]
            components[self.axis] = self.k
            components[a_axis] = a
            components[b_axis] = b
            corners.append(Point3(*components))
        # x cross z is -y, so y-rects wind the other way
        if self.axis == 1:
            corners.reverse()
        return corners

    def __repr__(self) -> str:
        return (
            f"AxisAlignedRect({AXIS_NAMES[self.axis]}={self.k}, "
            f"bounds={self.bounds_a}x{self.bounds_b}, normal={self.normal})"
        )


class XYRect(AxisAlignedRect):
    """Rectangle in the plane z = k."""

    def __init__(self, x0: float, x1: float, y0: float, y1: float, k: float,
                 material: Material, flip_normal: bool = False):
        super().__init__(2, k, (x0, x1), (y0, y1), material, flip_normal)


class XZRect(AxisAlignedRect):
    """Rectangle in the plane y = k."""

    def __init__(self, x0: float, x1: float, z0: float, z1: float, k: float,
                 material: Material, flip_normal: bool = False):
        super().__init__(1, k, (x0, x1), (z0, z1), material, flip_normal)


class YZRect(AxisAlignedRect):
    """Rectangle in the plane x = k."""

    def __init__(self, y0: float, y1: float, z0: float, z1: float, k: float,
                 material: Material, flip_normal: bool = False):
        super().__init__(0, k, (y0, y1), (z0, z1), material, flip_normal)


class HittableList(Hittable):
    """A collection of hittable objects."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = objects if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)
