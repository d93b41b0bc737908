"""
Built-in reference scene: the Cornell box.

A 555-unit room with a red and a green side wall, white floor, ceiling
and back wall, a (15, 15, 15) ceiling light and two white blocks.
Wall normals face into the room; block normals face out of the blocks.
"""

from __future__ import annotations

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import HittableList, XYRect, XZRect, YZRect
from .materials import Lambertian, DiffuseLight
from .renderer import RenderSettings


def cornell_box() -> HittableList:
    """Create the Cornell box scene."""
    world = HittableList()

    red = Lambertian(Color(0.65, 0.05, 0.05))
    white = Lambertian(Color(0.73, 0.73, 0.73))
    green = Lambertian(Color(0.12, 0.45, 0.15))
    light = DiffuseLight(Color(15, 15, 15))

    # Room
    world.add(YZRect(0, 555, 0, 555, 555, green, flip_normal=True))  # Left wall
    world.add(YZRect(0, 555, 0, 555, 0, red))                        # Right wall
    world.add(XZRect(213, 343, 227, 332, 554, light, flip_normal=True))
    world.add(XZRect(0, 555, 0, 555, 0, white))                      # Floor
    world.add(XZRect(0, 555, 0, 555, 555, white, flip_normal=True))  # Ceiling
    world.add(XYRect(0, 555, 0, 555, 555, white, flip_normal=True))  # Back wall

    # Tall block
    world.add(XZRect(265, 430, 295, 460, 330, white))
    world.add(XYRect(265, 430, 0, 330, 460, white))
    world.add(XYRect(265, 430, 0, 330, 295, white, flip_normal=True))
    world.add(YZRect(0, 330, 295, 460, 265, white, flip_normal=True))
    world.add(YZRect(0, 330, 295, 460, 430, white))

    # Short block
    world.add(XZRect(130, 295, 65, 230, 165, white))
    world.add(XYRect(130, 295, 0, 165, 230, white))
    world.add(XYRect(130, 295, 0, 165, 65, white, flip_normal=True))
    world.add(YZRect(0, 165, 65, 230, 130, white, flip_normal=True))
    world.add(YZRect(0, 165, 65, 230, 295, white))

    return world


def cornell_camera(aspect_ratio: float = 1.0) -> Camera:
    """Camera looking into the open front of the box."""
    return Camera(
        look_from=Point3(278, 278, -800),
        look_at=Point3(278, 278, 0),
        vup=Vec3(0, 1, 0),
        vfov=35.0,
        aspect_ratio=aspect_ratio
    )


def cornell_settings(**overrides) -> RenderSettings:
    """Reference render settings for the box, with optional overrides."""
    params = dict(width=600, aspect_ratio=1.0, samples_per_pixel=200, max_depth=10)
    params.update(overrides)
    return RenderSettings(**params)
