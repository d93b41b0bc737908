"""
Rays traced through the box scene.

Camera rays and Lambertian bounces both keep their direction exactly as
produced, so the ray parameter t is measured in units of that direction.
"""

from __future__ import annotations
from typing import Sequence, Union
from .vec3 import Vec3, Point3


class Ray:
    """A half-line P(t) = origin + t * direction with an unnormalized direction."""

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Union[Point3, Sequence[float]],
                 direction: Union[Vec3, Sequence[float]]):
        """Create a ray.

        Args:
            origin: Start point; plain 3-sequences are converted to Point3
            direction: Direction of any non-zero length
        """
        self.origin = Point3.coerce(origin)
        self.direction = Vec3.coerce(direction)

    def at(self, t: float) -> Point3:
        """Return origin + t * direction."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
