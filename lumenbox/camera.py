"""
Pinhole camera producing primary rays for the box scene.

The image plane sits one unit in front of the eye along the view
direction. Rays leave the eye through (s, t) on that plane with
s running left to right and t bottom to top, and are not normalized.
"""

from __future__ import annotations
import math
from typing import Sequence, Union
from .vec3 import Vec3, Point3
from .ray import Ray

VectorLike = Union[Vec3, Sequence[float]]


class Camera:
    """A look-at pinhole camera with a vertical field of view."""

    def __init__(
        self,
        look_from: VectorLike,
        look_at: VectorLike,
        vup: VectorLike = (0.0, 1.0, 0.0),
        vfov: float = 90.0,
        aspect_ratio: float = 1.0
    ):
        """Create a camera.

        Args:
            look_from: Eye position in world space
            look_at: Point the camera looks toward
            vup: World up vector, must not be parallel to the view direction
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio

        Raises:
            ValueError: If the eye and target coincide or ``vup`` is
                parallel to the view direction
        """
        look_from = Point3.coerce(look_from)
        self.look_at = Point3.coerce(look_at)
        vup = Vec3.coerce(vup)

        back = look_from - self.look_at
        if back.near_zero():
            raise ValueError("Camera look_from and look_at must differ")
        right = vup.cross(back)
        if right.near_zero():
            raise ValueError("Camera vup must not be parallel to the view direction")

        half_height = math.tan(math.radians(vfov) / 2.0)
        plane_height = 2.0 * half_height
        plane_width = aspect_ratio * plane_height

        # Right-handed basis: u right, v up, w back toward the eye
        self.w = back.normalize()
        self.u = right.normalize()
        self.v = self.w.cross(self.u)

        self.origin = look_from
        self.horizontal = self.u * plane_width
        self.vertical = self.v * plane_height
        self.lower_left_corner = self.origin - self.horizontal / 2 - self.vertical / 2 - self.w

    def get_ray(self, s: float, t: float) -> Ray:
        """Return the ray from the eye through image-plane point (s, t)."""
        target = self.lower_left_corner + self.horizontal * s + self.vertical * t
        return Ray(self.origin, target - self.origin)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, look_at={self.look_at})"
