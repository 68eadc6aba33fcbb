"""Tests for the vector / color kernel."""

import math

import pytest

from core.math import Color, Ray, Vec3, clamp, deg2rad


class TestVec3:

    def test_arithmetic(self):
        a = Vec3(1, 2, 3)
        b = Vec3(4, 5, 6)
        assert a + b == Vec3(5, 7, 9)
        assert b - a == Vec3(3, 3, 3)
        assert a * 2 == Vec3(2, 4, 6)
        assert 2 * a == Vec3(2, 4, 6)
        assert b / 2 == Vec3(2, 2.5, 3)
        assert -a == Vec3(-1, -2, -3)

    def test_operations_do_not_mutate(self):
        a = Vec3(1, 2, 3)
        _ = a + Vec3(1, 1, 1)
        _ = a.normalize()
        assert a == Vec3(1, 2, 3)

    def test_dot_and_cross(self):
        assert Vec3(1, 2, 3).dot(Vec3(4, 5, 6)) == 32
        assert Vec3(1, 0, 0).cross(Vec3(0, 1, 0)) == Vec3(0, 0, 1)

    def test_normalize_gives_unit_length(self):
        v = Vec3(3, -4, 12).normalize()
        assert v.length() == pytest.approx(1.0)
        assert v.x == pytest.approx(3 / 13)

    def test_normalize_zero_vector_raises(self):
        with pytest.raises(ValueError):
            Vec3(0, 0, 0).normalize()

    def test_reflect(self):
        assert Vec3(1, -1, 0).reflect(Vec3(0, 1, 0)) == Vec3(1, 1, 0)

    def test_refract_at_normal_incidence_goes_straight(self):
        ok, d = Vec3(0, 0, -1).refract(Vec3(0, 0, 1), 1 / 1.5)
        assert ok
        assert d.x == pytest.approx(0.0)
        assert d.z == pytest.approx(-1.0)

    def test_refract_bends_towards_normal(self):
        incoming = Vec3(math.sin(math.radians(30)), 0, -math.cos(math.radians(30)))
        ok, d = incoming.refract(Vec3(0, 0, 1), 1 / 1.5)
        assert ok
        # Snell: sin(t) = sin(i) / 1.5
        assert d.x == pytest.approx(0.5 / 1.5)
        assert d.length() == pytest.approx(1.0)

    def test_refract_total_internal_reflection(self):
        incoming = Vec3(math.sin(math.radians(60)), 0, -math.cos(math.radians(60)))
        ok, d = incoming.refract(Vec3(0, 0, 1), 1.5)
        assert not ok
        assert d is None


class TestColor:

    def test_componentwise_and_scalar_multiplication(self):
        c = Color(1, 2, 3)
        assert c * c == Color(1, 4, 9)
        assert c * 2 == Color(2, 4, 6)
        assert c + Color(1, 1, 1) == Color(2, 3, 4)

    def test_clamp_clips_each_channel(self):
        c = Color(-0.5, 0.25, 1.5).clamp(0, 1)
        assert c == Color(0, 0.25, 1)

    def test_clamp_returns_new_value(self):
        c = Color(2, 2, 2)
        c.clamp(0, 1)
        assert c == Color(2, 2, 2)

    def test_factories(self):
        assert Color.white() == Color(1, 1, 1)
        assert Color.black() == Color(0, 0, 0)
        assert Color.red() == Color(1, 0, 0)
        assert Color.gray(0.8) == Color(0.8, 0.8, 0.8)


def test_clamp_scalar():
    assert clamp(0, 1, -3) == 0
    assert clamp(0, 1, 0.3) == 0.3
    assert clamp(0, 1, 7) == 1


def test_deg2rad():
    assert deg2rad(180) == pytest.approx(math.pi)


def test_ray_point_at():
    ray = Ray(Vec3(1, 1, 1), Vec3(0, 0, -1))
    assert ray.point_at(4) == Vec3(1, 1, -3)
