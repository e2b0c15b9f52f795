import copy

import numpy as np
from spatialmath.base import rotx, roty, rotz

import massmatrix as mm


def test_construction():
    tensor = mm.InertiaTensor()
    assert tensor.mass == 0
    assert np.allclose(tensor.diagonal, np.zeros(3))
    assert np.allclose(tensor.off_diagonal, np.zeros(3))
    assert not tensor.is_valid()
    assert tensor == mm.InertiaTensor.zero()

    tensor = mm.InertiaTensor(mass=2.0, diagonal=[1, 2, 3], off_diagonal=[0.1, 0.2, 0.3])
    assert tensor.mass == 2.0
    assert np.allclose([tensor.ixx, tensor.iyy, tensor.izz], [1, 2, 3])
    assert np.allclose([tensor.ixy, tensor.ixz, tensor.iyz], [0.1, 0.2, 0.3])


def test_factories_dtype():
    zero = mm.InertiaTensor.zero(dtype=np.float32)
    assert zero.dtype == np.float32
    assert zero.diagonal.dtype == np.float32
    assert zero == mm.InertiaTensor.zero()

    rng = np.random.default_rng(0)
    tensor = mm.InertiaTensor.random(rng=rng, dtype=np.float32)
    assert tensor.diagonal.dtype == np.float32
    assert tensor.off_diagonal.dtype == np.float32
    assert tensor.principal_moments().dtype == np.float32

    # same seed gives the same tensor in either precision
    tensor64 = mm.InertiaTensor.random(rng=np.random.default_rng(0))
    assert tensor64.diagonal.dtype == np.float64
    assert np.allclose(tensor.I, tensor64.I, atol=1e-6)


def test_matrix():
    tensor = mm.InertiaTensor(mass=1.0, diagonal=[1, 2, 3], off_diagonal=[0.1, 0.2, 0.3])
    I = np.array([[1, 0.1, 0.2], [0.1, 2, 0.3], [0.2, 0.3, 3]])
    assert np.allclose(tensor.I, I)
    assert np.allclose(tensor.I, tensor.I.T)
    assert np.allclose(tensor.vec, [1, 1, 0.1, 0.2, 2, 0.3, 3])
    assert np.allclose(mm.unvech(tensor.vec[1:]), I)


def test_set_matrix_symmetrizes():
    rng = np.random.default_rng(0)
    for _ in range(10):
        A = rng.uniform(-1, 1, size=(3, 3))
        tensor = mm.InertiaTensor(mass=1.0)
        tensor.set_I(A)
        I = tensor.I
        assert np.allclose(I, I.T)
        assert np.allclose(np.diag(I), np.diag(A))
        for i, j in [(0, 1), (0, 2), (1, 2)]:
            assert np.isclose(I[i, j], 0.5 * (A[i, j] + A[j, i]))

        assert mm.InertiaTensor.from_matrix(1.0, A) == tensor


def test_setters_report_validity():
    tensor = mm.InertiaTensor(mass=1.0, diagonal=[2, 2, 2])
    assert tensor.is_valid()

    # invalid values are stored, not rejected
    assert not tensor.set_mass(-1.0)
    assert tensor.mass == -1.0
    assert tensor.set_mass(1.0)

    assert not tensor.set_ixx(5.0)
    assert tensor.ixx == 5.0
    assert tensor.set_ixx(2.0)

    assert not tensor.set_iyy(-1.0)
    assert tensor.set_iyy(2.0)
    assert not tensor.set_izz(0.0)
    assert tensor.set_izz(2.0)

    assert tensor.set_ixy(0.1)
    assert tensor.set_ixz(0.1)
    assert tensor.set_iyz(0.1)
    assert np.allclose(tensor.off_diagonal, [0.1, 0.1, 0.1])

    # no longer positive definite
    assert not tensor.set_ixy(3.0)
    assert tensor.ixy == 3.0

    assert tensor.set_inertia_matrix(2, 3, 4, 0, 0, 0)
    assert np.allclose(tensor.diagonal, [2, 3, 4])
    assert not tensor.set_inertia_matrix(1, 1, 3, 0, 0, 0)

    assert tensor.set_diagonal_moments([1, 1, 1])
    assert not tensor.set_diagonal_moments([1, 1, 5])
    assert np.allclose(tensor.diagonal, [1, 1, 5])
    assert not tensor.set_off_diagonal_moments([0.1, 0.2, 0.3])
    assert np.allclose(tensor.off_diagonal, [0.1, 0.2, 0.3])

    assert not tensor.set_I(np.diag([1, 1, 5]))
    assert tensor.set_I(np.diag([1, 1, 1.5]))


def test_value_semantics():
    tensor = mm.InertiaTensor(mass=1.0, diagonal=[1, 2, 3])

    # getters return copies
    d = tensor.diagonal
    d[0] = 10
    assert tensor.ixx == 1

    other = tensor.copy()
    assert other == tensor
    other.set_ixx(2.5)
    assert tensor.ixx == 1
    assert other != tensor

    other = copy.copy(tensor)
    assert other == tensor and other is not tensor


def test_equality_tolerance():
    tensor = mm.InertiaTensor(mass=1.0, diagonal=[1, 2, 3], off_diagonal=[0.1, 0.2, 0.3])
    close = mm.InertiaTensor(mass=1.0 + 1e-8, diagonal=[1, 2, 3 + 1e-8], off_diagonal=[0.1, 0.2, 0.3])
    far = mm.InertiaTensor(mass=1.0, diagonal=[1, 2, 3.001], off_diagonal=[0.1, 0.2, 0.3])

    assert tensor == close
    assert not (tensor != close)
    assert tensor != far
    assert tensor.equal(far, tol=1e-2)
    assert tensor != "not a tensor"


def test_transform():
    tensor = mm.InertiaTensor(mass=1.0, diagonal=[1, 2, 3], off_diagonal=[0.1, 0.2, 0.3])
    C = rotz(0.3) @ rotx(-0.2)
    rotated = tensor.transform(C)
    assert rotated.mass == tensor.mass
    assert np.allclose(rotated.I, C @ tensor.I @ C.T)
    assert np.allclose(rotated.principal_moments(), tensor.principal_moments())
    assert rotated.transform(C.T) == tensor


def test_shapes():
    mass = 2.0

    box = mm.InertiaTensor.from_box(mass, half_extents=[0.5, 1, 1.5])
    assert np.allclose(box.diagonal, mass * np.array([1 + 2.25, 0.25 + 2.25, 0.25 + 1]) / 3)
    assert box.is_valid()

    cube = mm.InertiaTensor.from_box(mass, half_extents=[1, 1, 1], rotation=rotx(0.5))
    assert np.allclose(cube.I, mass * 2 / 3 * np.eye(3))

    sphere = mm.InertiaTensor.from_sphere(mass, radius=0.5)
    assert np.allclose(sphere.principal_moments(), [0.2, 0.2, 0.2])
    assert sphere.is_valid()

    cylinder = mm.InertiaTensor.from_cylinder(mass, radius=0.5, length=2)
    assert np.allclose(cylinder.diagonal, [(0.75 + 4) / 6, (0.75 + 4) / 6, 0.25])
    assert cylinder.is_valid()

    C = roty(0.4)
    tilted = mm.InertiaTensor.from_cylinder(mass, radius=0.5, length=2, rotation=C)
    assert tilted == cylinder.transform(C)


def test_equivalent_box():
    mass = 2.0
    half_extents = np.array([0.5, 1, 1.5])

    box = mm.InertiaTensor.from_box(mass, half_extents)
    h, C = box.equivalent_box()
    assert np.allclose(h, half_extents)
    assert np.allclose(C, np.eye(3))

    R = rotz(0.3) @ roty(0.2) @ rotx(0.1)
    box = mm.InertiaTensor.from_box(mass, half_extents, rotation=R)
    h, C = box.equivalent_box()
    assert np.allclose(np.sort(h), np.sort(half_extents))
    assert mm.InertiaTensor.from_box(mass, h, rotation=C) == box

    # not physically valid
    assert mm.InertiaTensor(mass=1.0, diagonal=[1, 1, 3]).equivalent_box() is None
    assert mm.InertiaTensor(mass=0.0, diagonal=[1, 1, 1]).equivalent_box() is None

    # a flat box has degenerate moments
    flat = mm.InertiaTensor.from_box(mass, half_extents=[0, 1, 1])
    assert flat.is_positive()
    assert flat.equivalent_box() is None
