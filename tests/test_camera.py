"""Tests for Camera class."""

import pytest
import math
from lumenbox.vec3 import Vec3, Point3
from lumenbox.camera import Camera


def forward_camera(**kwargs):
    params = dict(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90,
        aspect_ratio=1.0
    )
    params.update(kwargs)
    return Camera(**params)


class TestCameraCreation:
    """Test Camera construction."""

    def test_origin(self):
        assert forward_camera().origin == Point3(0, 0, 0)

    def test_camera_basis_vectors(self):
        cam = forward_camera()
        # w points backward (opposite of look direction)
        assert cam.w.z > 0
        assert abs(cam.u.x - 1.0) < 1e-6
        assert abs(cam.v.y - 1.0) < 1e-6

    def test_basis_is_orthonormal(self):
        cam = forward_camera(look_from=Point3(3, 2, 1), look_at=Point3(-1, 0, 4))
        for axis in (cam.u, cam.v, cam.w):
            assert abs(axis.length() - 1.0) < 1e-12
        assert abs(cam.u.dot(cam.v)) < 1e-12
        assert abs(cam.u.dot(cam.w)) < 1e-12
        assert abs(cam.v.dot(cam.w)) < 1e-12

    def test_viewport_from_fov(self):
        cam = forward_camera(vfov=90, aspect_ratio=2.0)
        # tan(45 deg) = 1, so the viewport is 2 high and 4 wide
        assert abs(cam.vertical.length() - 2.0) < 1e-12
        assert abs(cam.horizontal.length() - 4.0) < 1e-12


class TestCameraRays:
    """Test Camera.get_ray() method."""

    def test_center_ray(self):
        ray = forward_camera().get_ray(0.5, 0.5)
        assert ray.direction == Vec3(0, 0, -1)

    def test_corner_rays(self):
        cam = forward_camera()

        bl = cam.get_ray(0, 0)
        assert bl.direction == Vec3(-1, -1, -1)

        tr = cam.get_ray(1, 1)
        assert tr.direction == Vec3(1, 1, -1)

    def test_ray_origin_is_eye(self):
        cam = forward_camera(look_from=Point3(1, 2, 3), look_at=Point3(0, 0, 0))
        for s, t in ((0, 0), (0.3, 0.9), (1, 1)):
            assert cam.get_ray(s, t).origin == Point3(1, 2, 3)

    def test_direction_not_normalized(self):
        ray = forward_camera().get_ray(1, 1)
        assert abs(ray.direction.length() - math.sqrt(3)) < 1e-12

    def test_narrow_fov(self):
        wide = forward_camera(vfov=90).get_ray(1, 0.5)
        narrow = forward_camera(vfov=30).get_ray(1, 0.5)
        assert abs(narrow.direction.x) < abs(wide.direction.x)

    def test_looking_down_positive_z(self):
        cam = forward_camera(look_from=Point3(278, 278, -800), look_at=Point3(278, 278, 0), vfov=35)
        ray = cam.get_ray(0.5, 0.5)
        assert ray.direction.normalize() == Vec3(0, 0, 1)
        # Image right maps to world -x when looking down +z
        assert cam.get_ray(1, 0.5).direction.x < 0


class TestCameraValidation:
    """Test degenerate camera setups."""

    def test_accepts_sequences(self):
        cam = Camera((0, 0, 0), (0, 0, -1), (0, 1, 0), 90, 1.0)
        assert cam.get_ray(0, 0).direction == Vec3(-1, -1, -1)

    def test_eye_equals_target(self):
        with pytest.raises(ValueError):
            forward_camera(look_at=Point3(0, 0, 0))

    def test_up_parallel_to_view(self):
        with pytest.raises(ValueError):
            forward_camera(vup=Vec3(0, 0, 1))

    def test_repr(self):
        assert "look_at" in repr(forward_camera())
