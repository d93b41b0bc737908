"""Tests for Ray class."""

import pytest
from lumenbox.vec3 import Vec3, Point3
from lumenbox.ray import Ray


class TestRayCreation:
    """Test Ray construction."""

    def test_stores_origin(self):
        origin = Point3(1, 2, 3)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.origin == origin

    def test_stores_direction(self):
        direction = Vec3(1, 2, 3)
        ray = Ray(Point3(0, 0, 0), direction)
        assert ray.direction == direction

    def test_direction_not_normalized(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 5))
        assert ray.direction.length() == 5.0

    def test_accepts_sequences(self):
        ray = Ray((0, 0, 0), [0, 0, -1])
        assert isinstance(ray.origin, Vec3)
        assert ray.at(2) == Point3(0, 0, -2)

    def test_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            Ray((0, 0), (0, 0, 1))


class TestRayAt:
    """Test Ray.at() method."""

    def test_at_zero(self):
        origin = Point3(1, 2, 3)
        ray = Ray(origin, Vec3(1, 0, 0))
        assert ray.at(0) == origin

    def test_at_positive(self):
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        point = ray.at(5)
        assert (point.x, point.y, point.z) == (5, 0, 0)

    def test_at_negative(self):
        ray = Ray(Point3(0, 0, 0), Vec3(1, 0, 0))
        assert ray.at(-5).x == -5

    def test_at_scales_with_direction_length(self):
        ray = Ray(Point3(1, 1, 1), Vec3(0, 2, 0))
        assert ray.at(3) == Point3(1, 7, 1)


class TestRayRepr:
    """Test Ray string representation."""

    def test_repr(self):
        s = repr(Ray(Point3(1, 2, 3), Vec3(0, 1, 0)))
        assert "Ray" in s
        assert "origin" in s
        assert "direction" in s
