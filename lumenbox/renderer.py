"""
Renderer module - the heart of the path tracer.

Implements:
- Recursive path tracing with implicit light gathering
- Jittered multi-sample pixel estimation
- Multi-threaded tile-based rendering with per-tile random streams
- Optional light path recording for visualization
"""

from __future__ import annotations
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, Tuple, Set
import numpy as np

from .vec3 import Vec3, Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .path_recorder import PathRecorder, LightPath
from .image import to_ldr

# Minimum ray parameter, keeps bounced rays off the surface they left
T_MIN = 0.001

# Emitter vertices dimmer than this are not recorded
RECORD_EMISSION_THRESHOLD = 0.01


def ray_color(ray: Ray, scene: Hittable, depth: int, rng,
              path: Optional[LightPath] = None) -> Color:
    """Estimate the radiance carried back along a ray.

    Light is only gathered when a path happens to strike an emitter;
    there is no explicit light sampling and no early termination
    other than the depth limit.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Remaining bounce budget
        rng: Random source exposing ``random()``
        path: Optional light path receiving one vertex per bounce

    Returns:
        The estimated radiance for this ray
    """
    # Out of bounces, no more light is gathered
    if depth <= 0:
        return Color(0, 0, 0)

    rec = scene.hit(ray, T_MIN, math.inf)

    # Background is pure absence of light
    if rec is None:
        return Color(0, 0, 0)

    emitted = rec.material.emitted()
    scatter_result = rec.material.scatter(ray, rec, rng)

    if scatter_result is not None:
        if path is not None:
            path.add_vertex(rec.point, rec.normal, scatter_result.attenuation, False)
        return emitted + scatter_result.attenuation * ray_color(
            scatter_result.scattered_ray, scene, depth - 1, rng, path
        )

    if path is not None and emitted.length_squared() > RECORD_EMISSION_THRESHOLD:
        path.add_vertex(rec.point, rec.normal, emitted, True)
    return emitted


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 600
    aspect_ratio: float = 1.0
    height: Optional[int] = None  # None = derived from width and aspect ratio
    samples_per_pixel: int = 200
    max_depth: int = 10
    tile_size: int = 32
    num_threads: int = 0  # 0 = auto-detect
    seed: Optional[int] = None

    def __post_init__(self):
        if self.height is None:
            self.height = int(self.width / self.aspect_ratio)
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None
        self._recorder: Optional[PathRecorder] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def attach_recorder(self, recorder: Optional[PathRecorder]) -> None:
        """Attach (or detach with None) a recorder for sample light paths."""
        self._recorder = recorder

    def render(self, scene: Hittable, camera: Camera, rng=None) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Without ``rng`` the image is split into tiles, each with its own
        generator spawned from the settings seed, so the result for a given
        seed does not depend on the thread count. With ``rng`` a single
        stream drives the whole image, row by row from the top.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from
            rng: Optional random source for single-stream rendering

        Returns:
            HDR image as numpy array of shape (height, width, 3), top row first
        """
        width = max(self.settings.width, 0)
        height = max(self.settings.height, 0)
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth

        # Initialize output image (HDR, no clamping during accumulation)
        image = np.zeros((height, width, 3), dtype=np.float64)
        if width == 0 or height == 0 or samples <= 0:
            return image

        root_seed = np.random.SeedSequence(self.settings.seed)
        if rng is None:
            tiles = self._generate_tiles(width, height)
            tile_rngs = [np.random.default_rng(s) for s in root_seed.spawn(len(tiles))]
        else:
            tiles = [(0, 0, width, height)]
            tile_rngs = [rng]

        # Spawned after the tile streams so recording never shifts them
        record_pixels = self._pick_record_pixels(root_seed.spawn(1)[0], width, height)

        u_scale = max(width - 1, 1)
        v_scale = max(height - 1, 1)
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        def render_tile(tile: Tuple[int, int, int, int], tile_rng) -> Tuple[Tuple, np.ndarray]:
            """Render a single tile."""
            x0, y0, x1, y1 = tile
            tile_image = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

            for y in range(y0, y1):
                for x in range(x0, x1):
                    pixel_color = Color(0, 0, 0)
                    record_pending = (x, y) in record_pixels

                    for _ in range(samples):
                        u = (x + tile_rng.random()) / u_scale
                        v = (height - 1 - y + tile_rng.random()) / v_scale
                        ray = camera.get_ray(u, v)

                        path = None
                        if record_pending:
                            record_pending = False
                            path = self._recorder.start_path()
                            if path is not None:
                                path.add_vertex(ray.origin, Vec3(0, 0, 1), Color(1, 1, 1), False)

                        contribution = ray_color(ray, scene, max_depth, tile_rng, path)
                        if path is not None:
                            self._recorder.end_path(path, contribution)

                        pixel_color = pixel_color + contribution

                    tile_image[y - y0, x - x0] = pixel_color.to_array() / samples

            # Report under the lock so callers see increasing progress
            with progress_lock:
                completed_tiles[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_tiles[0] / total_tiles)

            return tile, tile_image

        if self.settings.num_threads > 1 and total_tiles > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles, tile_rngs))
        else:
            results = [render_tile(tile, tile_rng) for tile, tile_rng in zip(tiles, tile_rngs)]

        # Combine tiles into final image
        for tile, tile_image in results:
            x0, y0, x1, y1 = tile
            image[y0:y1, x0:x1] = tile_image

        return image

    def _pick_record_pixels(self, seed_seq: np.random.SeedSequence,
                            width: int, height: int) -> Set[Tuple[int, int]]:
        """Choose distinct pixels whose first sample gets recorded."""
        if self._recorder is None or self._recorder.max_paths <= 0:
            return set()

        count = min(self._recorder.max_paths, width * height)
        picker = np.random.default_rng(seed_seq)
        indices = picker.choice(width * height, size=count, replace=False)
        return {(int(idx % width), int(idx // width)) for idx in indices}

    def _generate_tiles(self, width: int, height: int) -> list[Tuple[int, int, int, int]]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples, top rows first
        """
        tile_size = max(self.settings.tile_size, 1)
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    @staticmethod
    def to_ldr(hdr_image: np.ndarray) -> np.ndarray:
        """Convert HDR image to 8-bit LDR (see ``lumenbox.image.to_ldr``)."""
        return to_ldr(hdr_image)
