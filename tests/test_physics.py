#!/usr/bin/env python3
"""
Test Suite for the Vector3D type and physical constants.

Tests cover:
1. Vector3D arithmetic (add, subtract, multiply, divide, negate)
2. Dot and cross products, magnitude and normalization
3. Immutability and tolerant equality
4. Constants derived from one another
"""

import math
import pytest

import numpy as np

from impactsim.physics import (
    EARTH_ROTATION_VECTOR,
    G,
    GM_EARTH,
    JOULES_PER_MEGATON,
    M_EARTH,
    OMEGA_EARTH,
    Vector3D,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def unit_x():
    """Unit vector in X direction."""
    return Vector3D(1, 0, 0)


@pytest.fixture
def unit_y():
    """Unit vector in Y direction."""
    return Vector3D(0, 1, 0)


# =============================================================================
# VECTOR3D TESTS
# =============================================================================

class TestVector3DBasicOperations:
    """Tests for basic Vector3D arithmetic operations."""

    @pytest.mark.parametrize("v1,v2,expected", [
        ((1, 2, 3), (4, 5, 6), (5, 7, 9)),
        ((0, 0, 0), (1, 1, 1), (1, 1, 1)),
        ((-1, -2, -3), (1, 2, 3), (0, 0, 0)),
        ((1.5, 2.5, 3.5), (0.5, 0.5, 0.5), (2, 3, 4)),
    ])
    def test_vector_addition(self, v1, v2, expected):
        """Test vector addition."""
        assert Vector3D(*v1) + Vector3D(*v2) == Vector3D(*expected)

    @pytest.mark.parametrize("v1,v2,expected", [
        ((5, 7, 9), (4, 5, 6), (1, 2, 3)),
        ((1, 1, 1), (1, 1, 1), (0, 0, 0)),
        ((0, 0, 0), (1, 2, 3), (-1, -2, -3)),
    ])
    def test_vector_subtraction(self, v1, v2, expected):
        """Test vector subtraction."""
        assert Vector3D(*v1) - Vector3D(*v2) == Vector3D(*expected)

    def test_scalar_multiplication_both_sides(self):
        """Scalar multiplication commutes."""
        v = Vector3D(1, -2, 3)
        assert v * 2 == Vector3D(2, -4, 6)
        assert 2 * v == Vector3D(2, -4, 6)

    def test_division(self):
        """Test scalar division."""
        assert Vector3D(2, 4, 6) / 2 == Vector3D(1, 2, 3)

    def test_division_by_zero_raises(self):
        """Dividing by zero raises ValueError."""
        with pytest.raises(ValueError):
            Vector3D(1, 2, 3) / 0

    def test_negation(self):
        """Test negation."""
        assert -Vector3D(1, -2, 3) == Vector3D(-1, 2, -3)

    def test_equality_tolerance(self):
        """Equality ignores differences below 1e-10."""
        assert Vector3D(1, 2, 3) == Vector3D(1 + 1e-12, 2, 3)
        assert Vector3D(1, 2, 3) != Vector3D(1.001, 2, 3)

    def test_equality_with_other_type(self):
        """Vectors never equal non-vectors."""
        assert Vector3D(1, 2, 3) != (1, 2, 3)

    def test_immutable(self):
        """Vectors are frozen."""
        v = Vector3D(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5


class TestVector3DProducts:
    """Tests for dot product, cross product and magnitude."""

    def test_dot_product(self):
        """Test dot product against numpy."""
        a, b = (1.0, 2.0, 3.0), (-4.0, 0.5, 2.0)
        assert Vector3D(*a).dot(Vector3D(*b)) == pytest.approx(np.dot(a, b))

    def test_cross_product_right_handed(self, unit_x, unit_y):
        """x cross y is z."""
        assert unit_x.cross(unit_y) == Vector3D(0, 0, 1)

    def test_cross_product_matches_numpy(self):
        """Cross product agrees with numpy.cross."""
        a, b = (3.0, -1.0, 2.0), (0.5, 4.0, -2.0)
        result = Vector3D(*a).cross(Vector3D(*b))
        np.testing.assert_allclose(result.to_tuple(), np.cross(a, b))

    def test_magnitude(self):
        """3-4-0 triangle has length 5."""
        v = Vector3D(3, 4, 0)
        assert v.magnitude == pytest.approx(5.0)
        assert v.magnitude_squared == pytest.approx(25.0)

    def test_normalized(self):
        """Normalized vector has unit length and the same direction."""
        v = Vector3D(10, -20, 5).normalized()
        assert v.magnitude == pytest.approx(1.0)
        np.testing.assert_allclose(
            v.to_tuple(), np.array([10, -20, 5]) / np.linalg.norm([10, -20, 5])
        )

    def test_normalized_zero_stays_zero(self):
        """Normalizing the zero vector returns zero instead of raising."""
        assert Vector3D.zero().normalized() == Vector3D.zero()

    def test_to_tuple(self):
        assert Vector3D(1.5, -2.5, 3.25).to_tuple() == (1.5, -2.5, 3.25)


class TestConstants:
    """Tests for derived physical constants."""

    def test_gravitational_parameter(self):
        """GM is the product of G and Earth mass."""
        assert GM_EARTH == pytest.approx(G * M_EARTH)
        assert GM_EARTH == pytest.approx(3.986e14, rel=1e-3)

    def test_rotation_vector(self):
        """Earth spins about +Z."""
        assert EARTH_ROTATION_VECTOR == Vector3D(0, 0, OMEGA_EARTH)
        assert 2 * math.pi / OMEGA_EARTH == pytest.approx(86164, rel=1e-4)

    def test_megaton(self):
        """One megaton of TNT is 4.184e15 J."""
        assert JOULES_PER_MEGATON == 4.184e15
