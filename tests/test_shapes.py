"""Tests for geometric shapes."""

import pytest
import math
import numpy as np

from lumenbox.vec3 import Vec3, Point3, Color
from lumenbox.ray import Ray
from lumenbox.shapes import AxisAlignedRect, XYRect, XZRect, YZRect, HittableList, HitRecord
from lumenbox.materials import Lambertian, DiffuseLight


GREY = Lambertian(Color(0.5, 0.5, 0.5))


class TestAxisAlignedRectCreation:
    """Test rectangle construction."""

    def test_axis_by_name(self):
        rect = AxisAlignedRect('y', 2.0, (0, 1), (0, 1), GREY)
        assert rect.axis == 1
        assert rect.free_axes == (0, 2)

    def test_axis_by_index(self):
        rect = AxisAlignedRect(0, 2.0, (0, 1), (0, 1), GREY)
        assert rect.free_axes == (1, 2)

    def test_invalid_axis(self):
        with pytest.raises(ValueError):
            AxisAlignedRect('w', 0.0, (0, 1), (0, 1), GREY)
        with pytest.raises(ValueError):
            AxisAlignedRect(3, 0.0, (0, 1), (0, 1), GREY)

    def test_bounds_are_ordered(self):
        rect = AxisAlignedRect('z', 0.0, (5, 1), (3, -2), GREY)
        assert rect.bounds_a == (1.0, 5.0)
        assert rect.bounds_b == (-2.0, 3.0)

    def test_default_normal_is_positive_axis(self):
        assert AxisAlignedRect('x', 0, (0, 1), (0, 1), GREY).normal == Vec3(1, 0, 0)
        assert AxisAlignedRect('y', 0, (0, 1), (0, 1), GREY).normal == Vec3(0, 1, 0)
        assert AxisAlignedRect('z', 0, (0, 1), (0, 1), GREY).normal == Vec3(0, 0, 1)

    def test_flipped_normal(self):
        rect = AxisAlignedRect('y', 0, (0, 1), (0, 1), GREY, flip_normal=True)
        assert rect.normal == Vec3(0, -1, 0)

    def test_material_is_required(self):
        with pytest.raises(ValueError):
            AxisAlignedRect('z', -1, (-1, 1), (-1, 1), None)
        with pytest.raises(TypeError):
            XYRect(-1, 1, -1, 1, -1)

    def test_hits_carry_material(self):
        world = HittableList([AxisAlignedRect('z', -1, (-1, 1), (-1, 1), GREY)])
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))
        assert hit is not None
        assert hit.material is GREY

    def test_convenience_constructors(self):
        xy = XYRect(0, 1, 2, 3, 4, GREY)
        xz = XZRect(0, 1, 2, 3, 4, GREY)
        yz = YZRect(0, 1, 2, 3, 4, GREY)
        assert (xy.axis, xy.k, xy.bounds_a, xy.bounds_b) == (2, 4.0, (0.0, 1.0), (2.0, 3.0))
        assert (xz.axis, xz.k) == (1, 4.0)
        assert (yz.axis, yz.k) == (0, 4.0)


class TestAxisAlignedRectHit:
    """Test ray-rectangle intersection."""

    def test_hit_on_x_plane(self):
        k = 3.0
        material = Lambertian(Color(0.5, 0.5, 0.5))
        rect = YZRect(0, 10, 0, 10, k, material)
        ray = Ray(Point3(k - 10, 5, 5), Vec3(1, 0, 0))

        hit = rect.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 10.0) < 1e-9
        assert hit.point == Point3(k, 5, 5)
        assert hit.normal == Vec3(1, 0, 0)
        assert hit.material is material

    def test_hit_on_y_plane(self):
        rect = XZRect(-1, 1, -1, 1, 2.0, GREY)
        ray = Ray(Point3(0.5, 0, -0.5), Vec3(0, 4, 0))
        hit = rect.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 0.5) < 1e-9
        assert hit.point == Point3(0.5, 2, -0.5)
        assert hit.normal == Vec3(0, 1, 0)

    def test_hit_on_z_plane_oblique(self):
        rect = XYRect(0, 10, 0, 10, -5.0, GREY)
        ray = Ray(Point3(1, 1, 5), Vec3(0.3, 0.2, -1))
        hit = rect.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 10.0) < 1e-9
        assert abs(hit.point.x - 4.0) < 1e-9
        assert abs(hit.point.y - 3.0) < 1e-9
        assert abs(hit.point.z + 5.0) < 1e-9

    def test_hit_matches_closed_form(self):
        rng = np.random.default_rng(3)
        for _ in range(100):
            axis = int(rng.integers(0, 3))
            k = rng.uniform(-5, 5)
            rect = AxisAlignedRect(axis, k, (-100, 100), (-100, 100), GREY)
            origin = Point3(*rng.uniform(-10, 10, size=3))
            direction = Vec3(*rng.uniform(-1, 1, size=3))
            if abs(direction[axis]) < 0.2:
                continue

            expected_t = (k - origin[axis]) / direction[axis]
            hit = rect.hit(Ray(origin, direction), -math.inf, math.inf)

            assert hit is not None
            assert abs(hit.t - expected_t) < 1e-9

    def test_parallel_ray_misses(self):
        rect = YZRect(0, 10, 0, 10, 3.0, GREY)
        ray = Ray(Point3(0, 5, 5), Vec3(0, 1, 1))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_nearly_parallel_ray_misses(self):
        rect = YZRect(-1e12, 1e12, -1e12, 1e12, 3.0, GREY)
        ray = Ray(Point3(0, 0, 0), Vec3(1e-10, 1, 0))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_outside_first_bound(self):
        rect = YZRect(0, 10, 0, 10, 3.0, GREY)
        ray = Ray(Point3(0, 11, 5), Vec3(1, 0, 0))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_outside_second_bound(self):
        rect = YZRect(0, 10, 0, 10, 3.0, GREY)
        ray = Ray(Point3(0, 5, -0.5), Vec3(1, 0, 0))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_bounds_are_closed(self):
        rect = XYRect(0, 1, 0, 1, 0.0, GREY)
        ray = Ray(Point3(1, 0, 1), Vec3(0, 0, -1))
        hit = rect.hit(ray, 0.001, float('inf'))
        assert hit is not None
        assert hit.t == 1.0

    def test_behind_ray(self):
        rect = XYRect(-1, 1, -1, 1, -5.0, GREY)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_t_range(self):
        rect = XYRect(-1, 1, -1, 1, -5.0, GREY)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert rect.hit(ray, 0.001, 4.0) is None
        assert rect.hit(ray, 5.5, float('inf')) is None
        assert rect.hit(ray, 0.001, 5.0) is not None

    def test_self_intersection_suppressed(self):
        rect = XZRect(0, 1, 0, 1, 0.0, GREY)
        ray = Ray(Point3(0.5, 0.0, 0.5), Vec3(0, -1, 0))
        assert rect.hit(ray, 0.001, float('inf')) is None

    def test_normal_not_flipped_by_ray_side(self):
        rect = XZRect(-1, 1, -1, 1, 0.0, GREY)
        from_above = rect.hit(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), 0.001, float('inf'))
        from_below = rect.hit(Ray(Point3(0, -1, 0), Vec3(0, 1, 0)), 0.001, float('inf'))

        assert from_above.normal == Vec3(0, 1, 0)
        assert from_below.normal == Vec3(0, 1, 0)
        assert from_above.front_face is True
        assert from_below.front_face is False

    def test_normal_is_unit_length(self):
        rect = XYRect(-1, 1, -1, 1, 0.0, GREY, flip_normal=True)
        hit = rect.hit(Ray(Point3(0, 0, 2), Vec3(0.1, 0.1, -7)), 0.001, float('inf'))
        assert abs(hit.normal.length() - 1.0) < 1e-12


class TestAxisAlignedRectCorners:
    """Test corner generation used by the OBJ exporter."""

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_winding_matches_positive_axis(self, axis):
        rect = AxisAlignedRect(axis, 1.0, (0, 2), (0, 3), GREY)
        c = rect.corners()
        winding_normal = (c[1] - c[0]).cross(c[2] - c[1])
        assert winding_normal.normalize() == rect.normal

    def test_corners_lie_on_plane(self):
        rect = XZRect(1, 2, 3, 4, 7.0, GREY)
        for corner in rect.corners():
            assert corner.y == 7.0


class TestHittableList:
    """Test the scene aggregate."""

    def test_empty_list_misses(self):
        world = HittableList()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, float('inf')) is None
        assert len(world) == 0

    def test_add_and_iterate(self):
        world = HittableList()
        a = XYRect(0, 1, 0, 1, 0, GREY)
        b = XYRect(0, 1, 0, 1, 1, GREY)
        world.add(a)
        world.add(b)
        assert len(world) == 2
        assert list(world) == [a, b]

    def test_clear(self):
        world = HittableList([XYRect(0, 1, 0, 1, 0, GREY)])
        world.clear()
        assert len(world) == 0

    def test_closest_hit_wins(self):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = DiffuseLight(Color(1, 1, 1))
        world = HittableList()
        world.add(XYRect(-1, 1, -1, 1, -10, far_mat))
        world.add(XYRect(-1, 1, -1, 1, -2, near_mat))

        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf'))

        assert hit is not None
        assert hit.t == 2.0
        assert hit.material is near_mat

    def test_order_does_not_matter(self):
        first = HittableList([XYRect(-1, 1, -1, 1, -2, GREY), XYRect(-1, 1, -1, 1, -10, GREY)])
        second = HittableList([XYRect(-1, 1, -1, 1, -10, GREY), XYRect(-1, 1, -1, 1, -2, GREY)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert first.hit(ray, 0.001, float('inf')).t == second.hit(ray, 0.001, float('inf')).t

    def test_nearest_equals_minimum_over_members(self):
        rng = np.random.default_rng(11)
        shapes = []
        for _ in range(12):
            axis = int(rng.integers(0, 3))
            a0, a1 = sorted(rng.uniform(-5, 5, size=2))
            b0, b1 = sorted(rng.uniform(-5, 5, size=2))
            shapes.append(AxisAlignedRect(axis, rng.uniform(-5, 5), (a0, a1), (b0, b1), GREY))
        world = HittableList(shapes)

        for _ in range(200):
            ray = Ray(Point3(*rng.uniform(-6, 6, size=3)), Vec3(*rng.uniform(-1, 1, size=3)))
            t_min, t_max = sorted(rng.uniform(0, 20, size=2))

            member_ts = [
                rec.t for rec in (s.hit(ray, t_min, t_max) for s in shapes)
                if rec is not None
            ]
            hit = world.hit(ray, t_min, t_max)

            if member_ts:
                assert hit is not None
                assert hit.t == min(member_ts)
            else:
                assert hit is None


class TestHitRecord:
    """Test HitRecord dataclass."""

    def test_fields(self):
        rec = HitRecord(point=Point3(1, 2, 3), normal=Vec3(0, 1, 0), t=2.5, front_face=True, material=GREY)
        assert rec.t == 2.5
        assert rec.material is GREY

    def test_material_field_is_required(self):
        with pytest.raises(TypeError):
            HitRecord(point=Point3(0, 0, 0), normal=Vec3(0, 0, 1), t=1.0, front_face=True)
