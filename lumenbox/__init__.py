"""
Lumenbox - A Python Monte Carlo Path Tracer

An offline renderer for closed, fully diffuse box scenes:
- Axis-aligned rectangle geometry
- Lambertian reflectors and diffuse area lights
- Recursive path tracing with implicit light gathering
- Multi-threaded tile rendering with reproducible seeding
- Light path recording and OBJ export for visualization
"""

__version__ = "0.1.0"
__author__ = "Lumenbox Team"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import HitRecord, Hittable, AxisAlignedRect, XYRect, XZRect, YZRect, HittableList
from .materials import Material, ScatterResult, Lambertian, DiffuseLight
from .camera import Camera
from .image import to_ldr, write_ppm, save_image
from .path_recorder import PathVertex, LightPath, PathRecorder, export_paths_to_obj
from .renderer import Renderer, RenderSettings, ray_color
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .scenes import cornell_box, cornell_camera, cornell_settings
