"""Tests for motion and force vectors."""

import hypothesis
import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_sva.spatial import (
    ForceVector,
    MotionVector,
    first_vec3,
    second_vec3,
    vector6_to_cross_dual_matrix,
    vector6_to_cross_matrix,
)
from jax_sva.types import is_scalar

# Use hypothesis profile for CI
hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)

TOL = 1e-5


def random_motion(key, scale=1.0):
    return MotionVector.from_vector(jax.random.uniform(key, (6,), minval=-scale, maxval=scale))


def random_force(key, scale=1.0):
    return ForceVector.from_vector(jax.random.uniform(key, (6,), minval=-scale, maxval=scale))


def test_motion_vector_sum_scenario():
    """Angular unit x plus linear -z keeps both blocks."""
    mvec1 = MotionVector.zero()
    mvec2 = MotionVector.zero()
    mvec1 = MotionVector.from_vectors(mvec1.angular.at[0].set(1.0), mvec1.linear)
    mvec2 = MotionVector.from_vectors(mvec2.angular, mvec2.linear.at[2].set(-1.0))

    expected = MotionVector.from_vectors([1.0, 0.0, 0.0], [0.0, 0.0, -1.0])
    assert mvec1 + mvec2 == expected


def test_motion_vector_blocks():
    """Accessors and flat vector layout."""
    key1, key2 = jax.random.split(jax.random.PRNGKey(0))
    w = jax.random.uniform(key1, (3,))
    v = jax.random.uniform(key2, (3,))

    vec = MotionVector.from_vectors(w, v)

    np.testing.assert_array_equal(vec.angular, w)
    np.testing.assert_array_equal(vec.linear, v)
    np.testing.assert_array_equal(vec.vector(), jnp.concatenate([w, v]))
    assert vec.vector().dtype == jnp.float64


def test_zero_vectors():
    np.testing.assert_array_equal(MotionVector.zero().vector(), jnp.zeros(6))
    np.testing.assert_array_equal(ForceVector.zero().vector(), jnp.zeros(6))
    assert MotionVector.zero((4,)).vector().shape == (4, 6)


def test_block_split():
    flat = jnp.arange(12.0).reshape(2, 6)
    np.testing.assert_array_equal(first_vec3(flat), flat[:, :3])
    np.testing.assert_array_equal(second_vec3(flat), flat[:, 3:])
    assert ForceVector.from_vector(flat).force.shape == (2, 3)


@pytest.mark.parametrize("cls", [MotionVector, ForceVector])
@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_vector_space_operations(cls, seed):
    """Arithmetic matches the flat 6-vector arithmetic exactly."""
    key1, key2 = jax.random.split(jax.random.PRNGKey(seed))
    vec = cls.from_vector(jax.random.uniform(key1, (6,), minval=-1.0, maxval=1.0))
    vec2 = cls.from_vector(jax.random.uniform(key2, (6,), minval=-1.0, maxval=1.0))
    m, m2 = vec.vector(), vec2.vector()

    np.testing.assert_array_equal((5.0 * vec).vector(), 5.0 * m)
    np.testing.assert_array_equal((vec * 5.0).vector(), 5.0 * m)
    np.testing.assert_array_equal((vec / 5.0).vector(), m / 5.0)
    np.testing.assert_array_equal((-vec).vector(), -m)
    np.testing.assert_array_equal((vec + vec2).vector(), m + m2)
    np.testing.assert_array_equal((vec - vec2).vector(), m - m2)


def test_augmented_assignment_rebinds():
    """In-place operators leave the original value untouched."""
    vec = MotionVector.from_vector(jnp.arange(6.0))
    vec2 = MotionVector.from_vector(jnp.ones(6))

    vec_pluseq = vec
    vec_pluseq += vec2
    assert vec_pluseq == vec + vec2
    np.testing.assert_array_equal(vec.vector(), jnp.arange(6.0))

    vec_minuseq = vec
    vec_minuseq -= vec2
    assert vec_minuseq == vec - vec2

    vec_tmp = vec
    vec_tmp *= 5.0
    np.testing.assert_array_equal(vec_tmp.vector(), 5.0 * vec.vector())
    vec_tmp /= 5.0
    np.testing.assert_allclose(vec_tmp.vector(), vec.vector(), atol=TOL)


def test_equality_is_exact():
    vec = ForceVector.from_vector(jnp.array([0.1, 0.2, 0.3, 0.4, 0.5, 0.6]))

    assert vec == vec
    assert vec != -vec
    assert not (vec != vec)
    assert vec != ForceVector.from_vector(vec.vector() + 1e-15)


def test_numpy_scalar_multiplication():
    vec = MotionVector.from_vector(jnp.arange(6.0))
    np.testing.assert_array_equal((np.float64(2.0) * vec).vector(), 2.0 * jnp.arange(6.0))
    np.testing.assert_array_equal((jnp.asarray(2.0) * vec).vector(), 2.0 * jnp.arange(6.0))


@pytest.mark.parametrize("value, expected", [
    (2, True),
    (2.5, True),
    (np.float64(1.0), True),
    (np.array(1.0), True),
    (jnp.asarray(1.0), True),
    (jnp.ones(3), False),
    ([1.0], False),
    ("2", False),
])
def test_is_scalar(value, expected):
    assert is_scalar(value) is expected


def test_division_by_zero_propagates():
    """Division by zero follows IEEE semantics instead of raising."""
    vec = MotionVector.from_vector(jnp.array([1.0, -1.0, 0.0, 2.0, 0.0, 0.0]))
    result = (vec / 0.0).vector()
    assert jnp.isposinf(result[0])
    assert jnp.isneginf(result[1])
    assert jnp.isnan(result[2])


def test_mixing_roles_raises():
    motion = MotionVector.zero()
    force = ForceVector.zero()

    with pytest.raises(TypeError):
        motion + force
    with pytest.raises(TypeError):
        motion * force
    with pytest.raises(TypeError):
        motion.cross(force)
    assert motion != force


def test_from_vector_rejects_bad_shape():
    with pytest.raises(ValueError):
        MotionVector.from_vector(jnp.zeros(5))


@pytest.mark.parametrize("cls", [MotionVector, ForceVector])
def test_from_vectors_rejects_bad_shape(cls):
    with pytest.raises(ValueError):
        cls.from_vectors([1.0, 2.0], [3.0, 4.0])
    with pytest.raises(ValueError):
        cls.from_vectors(jnp.zeros(3), jnp.zeros((3, 2)))
    with pytest.raises(ValueError):
        cls.from_vectors(1.0, jnp.zeros(3))

    batched = cls.from_vectors(jnp.zeros((4, 3)), jnp.ones((4, 3)))
    assert batched.vector().shape == (4, 6)


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_dot_matches_flat_product(seed):
    """Dual pairing equals the dot product of the flat vectors."""
    key1, key2 = jax.random.split(jax.random.PRNGKey(seed))
    m_vec = random_motion(key1, 100.0)
    f_vec = random_force(key2, 100.0)

    expected = jnp.dot(m_vec.vector(), f_vec.vector())
    assert abs(m_vec.dot(f_vec) - expected) < TOL


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_cross_matches_cross_matrix(seed):
    key1, key2 = jax.random.split(jax.random.PRNGKey(seed))
    m_vec = random_motion(key1, 100.0)
    m_vec2 = random_motion(key2, 100.0)

    expected = vector6_to_cross_matrix(m_vec.vector()) @ m_vec2.vector()
    assert jnp.linalg.norm(m_vec.cross(m_vec2).vector() - expected) < TOL


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_cross_dual_matches_cross_dual_matrix(seed):
    key1, key2 = jax.random.split(jax.random.PRNGKey(seed))
    m_vec = random_motion(key1, 100.0)
    f_vec = random_force(key2, 100.0)

    expected = vector6_to_cross_dual_matrix(m_vec.vector()) @ f_vec.vector()
    assert jnp.linalg.norm(m_vec.cross_dual(f_vec).vector() - expected) < TOL


def test_cross_is_antisymmetric():
    key1, key2 = jax.random.split(jax.random.PRNGKey(7))
    m1, m2 = random_motion(key1), random_motion(key2)

    np.testing.assert_allclose(m1.cross(m2).vector(), -m2.cross(m1).vector(), atol=1e-12)
    np.testing.assert_allclose(m1.cross(m1).vector(), jnp.zeros(6), atol=1e-12)


def test_cross_dual_preserves_power():
    """<m x m2, f> + <m2, m x* f> = 0."""
    key1, key2, key3 = jax.random.split(jax.random.PRNGKey(3), 3)
    m1, m2 = random_motion(key1), random_motion(key2)
    f = random_force(key3)

    assert abs(m1.cross(m2).dot(f) + m2.dot(m1.cross_dual(f))) < 1e-12


def test_batched_operations():
    """Blocks with a leading batch dimension broadcast through every operator."""
    key1, key2 = jax.random.split(jax.random.PRNGKey(11))
    motions = MotionVector.from_vector(jax.random.uniform(key1, (5, 6)))
    forces = ForceVector.from_vector(jax.random.uniform(key2, (5, 6)))

    assert motions.dot(forces).shape == (5,)
    assert motions.cross(motions).vector().shape == (5, 6)
    assert motions.cross_dual(forces).vector().shape == (5, 6)
    np.testing.assert_allclose(motions.dot(forces),
                               jnp.sum(motions.vector() * forces.vector(), axis=-1), atol=TOL)


def test_vectors_are_pytrees():
    """Vectors go through jit and vmap."""
    @jax.jit
    def power(m, f):
        return m.dot(f)

    m = MotionVector.from_vector(jnp.arange(6.0))
    f = ForceVector.from_vector(jnp.ones(6))
    np.testing.assert_allclose(power(m, f), 15.0)

    batched = jax.vmap(lambda v: MotionVector.from_vector(v) * 2.0)(jnp.ones((3, 6)))
    assert isinstance(batched, MotionVector)
    assert batched.vector().shape == (3, 6)


def test_string_format():
    motion = MotionVector.from_vectors([1.0, 0.0, 0.0], [0.0, 0.5, -1.0])
    force = ForceVector.from_vectors([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])

    assert str(motion) == "(angular: [1 0 0], linear: [0 0.5 -1])"
    assert str(force) == "(couple: [1 2 3], force: [4 5 6])"
