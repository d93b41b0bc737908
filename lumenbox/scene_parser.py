"""
Scene description parser.

Supports a YAML (or JSON) scene description format with:
- Camera configuration
- Render settings
- Materials library
- Axis-aligned rectangles referencing materials

Example scene file:
```yaml
camera:
  look_from: [278, 278, -800]
  look_at: [278, 278, 0]
  vfov: 35

render:
  width: 300
  aspect_ratio: 1.0
  samples: 50
  max_depth: 10
  seed: 7

materials:
  white:
    type: lambertian
    albedo: [0.73, 0.73, 0.73]

  light:
    type: diffuse_light
    emit: [15, 15, 15]

objects:
  - type: rect
    axis: y
    k: 0
    bounds: [[0, 555], [0, 555]]
    material: white

  - type: xz_rect
    bounds: [[213, 343], [227, 332]]
    k: 554
    material: light
    flip_normal: true
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import json

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import AxisAlignedRect, HittableList
from .materials import Material, Lambertian, DiffuseLight
from .renderer import RenderSettings


RECT_AXES = {
    'rect': None,
    'yz_rect': 'x',
    'xz_rect': 'y',
    'xy_rect': 'z',
}


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text()
        except OSError as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot parse scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        _require_mapping(data, "Scene")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        # Settings before camera: the camera inherits the aspect ratio
        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        self._parse_camera(data.get('camera', {}))

        return self.objects, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(_to_float(c, "Vec3 component") for c in data))
        elif isinstance(data, dict):
            return Vec3(
                _to_float(data.get('x', 0), "Vec3 component"),
                _to_float(data.get('y', 0), "Vec3 component"),
                _to_float(data.get('z', 0), "Vec3 component")
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(_to_float(c, "Color component") for c in data))
        elif isinstance(data, dict):
            return Color(
                _to_float(data.get('r', 0), "Color component"),
                _to_float(data.get('g', 0), "Color component"),
                _to_float(data.get('b', 0), "Color component")
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                try:
                    r = int(data[1:3], 16) / 255.0
                    g = int(data[3:5], 16) / 255.0
                    b = int(data[5:7], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_interval(self, data: Any) -> Tuple[float, float]:
        if not isinstance(data, (list, tuple)) or len(data) != 2:
            raise SceneParseError(f"Bound interval must have 2 values, got: {data}")
        return _to_float(data[0], "Bound"), _to_float(data[1], "Bound")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        _require_mapping(materials_data, "Materials section")
        for name, mat_data in materials_data.items():
            _require_mapping(mat_data, f"Material {name!r}")
            mat_type = str(mat_data.get('type', 'lambertian')).lower()

            if mat_type == 'lambertian':
                albedo = self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5]))
                self.materials[name] = Lambertian(albedo)

            elif mat_type == 'diffuse_light':
                emit = self._parse_color(mat_data.get('emit', [1, 1, 1]))
                self.materials[name] = DiffuseLight(emit)

            else:
                raise SceneParseError(f"Unknown material type: {mat_type}")

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            # Inline material definition
            self._parse_materials({'_inline': mat_ref})
            return self.materials.pop('_inline')
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError(f"Objects section must be a list, got: {objects_data!r}")

        for obj_data in objects_data:
            _require_mapping(obj_data, "Object")
            obj_type = str(obj_data.get('type', 'rect')).lower()
            if obj_type not in RECT_AXES:
                raise SceneParseError(f"Unknown object type: {obj_type}")

            axis = RECT_AXES[obj_type] or obj_data.get('axis')
            if axis is None:
                raise SceneParseError("Rectangle needs an 'axis'")
            if 'k' not in obj_data:
                raise SceneParseError("Rectangle needs a plane coordinate 'k'")

            bounds = obj_data.get('bounds')
            if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
                raise SceneParseError(f"Rectangle needs two bound intervals, got: {bounds}")

            material = self._get_material(obj_data.get('material'))

            try:
                rect = AxisAlignedRect(
                    axis,
                    _to_float(obj_data['k'], "Plane coordinate 'k'"),
                    self._parse_interval(bounds[0]),
                    self._parse_interval(bounds[1]),
                    material,
                    flip_normal=bool(obj_data.get('flip_normal', False))
                )
            except ValueError as e:
                raise SceneParseError(str(e)) from e

            self.objects.add(rect)

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        _require_mapping(camera_data, "Camera section")
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 5]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, 0]))
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]))
        vfov = _to_float(camera_data.get('vfov', 60), "Camera 'vfov'")
        aspect_ratio = _to_float(
            camera_data.get('aspect_ratio', self.settings.aspect_ratio), "Camera 'aspect_ratio'"
        )

        try:
            self.camera = Camera(
                look_from=look_from,
                look_at=look_at,
                vup=vup,
                vfov=vfov,
                aspect_ratio=aspect_ratio
            )
        except ValueError as e:
            raise SceneParseError(str(e)) from e

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        _require_mapping(settings_data, "Render section")
        height = settings_data.get('height')
        seed = settings_data.get('seed')
        self.settings = RenderSettings(
            width=_to_int(settings_data.get('width', 600), "Render 'width'"),
            aspect_ratio=_to_float(settings_data.get('aspect_ratio', 1.0), "Render 'aspect_ratio'"),
            height=_to_int(height, "Render 'height'") if height is not None else None,
            samples_per_pixel=_to_int(settings_data.get('samples', 200), "Render 'samples'"),
            max_depth=_to_int(settings_data.get('max_depth', 10), "Render 'max_depth'"),
            tile_size=_to_int(settings_data.get('tile_size', 32), "Render 'tile_size'"),
            num_threads=_to_int(settings_data.get('threads', 0), "Render 'threads'"),
            seed=_to_int(seed, "Render 'seed'") if seed is not None else None
        )


def _require_mapping(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        raise SceneParseError(f"{what} must be a mapping, got: {data!r}")


def _to_float(value: Any, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"{what} must be a number, got: {value!r}") from e


def _to_int(value: Any, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"{what} must be an integer, got: {value!r}") from e



def load_scene(filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary."""
    parser = SceneParser()
    return parser.parse_dict(data)
