"""Quaternion helpers for principal axis orientations.

Quaternions are stored as arrays ``[w, x, y, z]`` (scalar first), following
the convention of ``spatialmath.base``.
"""
import numpy as np
from spatialmath.base import q2r, qconj, qeye, qnorm, r2q


def identity_quaternion(dtype=np.float64):
    """The quaternion of the identity rotation."""
    return qeye().astype(dtype)


def invalid_quaternion(dtype=np.float64):
    """The zero quaternion, which does not represent any rotation.

    It is returned by the principal axis solver when it encounters a
    configuration that cannot occur for a symmetric matrix.
    """
    return np.zeros(4, dtype=dtype)


def is_invalid_quaternion(q, tol=1e-12):
    """Check if ``q`` is the (zero-norm) invalid quaternion."""
    return bool(qnorm(np.asarray(q, dtype=np.float64)) < tol)


def inverse(q):
    """Inverse of a unit quaternion."""
    return qconj(q)


def rotation_to_quaternion(C):
    """Unit quaternion of a rotation matrix."""
    C = np.asarray(C, dtype=np.float64)
    assert C.shape == (3, 3)
    return r2q(C)


def quaternion_to_rotation(q):
    """Rotation matrix of a unit quaternion.

    Parameters
    ----------
    q : np.ndarray, shape (4,)
        Unit quaternion ``[w, x, y, z]``.

    Returns
    -------
    : np.ndarray, shape (3, 3)
        The rotation matrix.
    """
    q = np.asarray(q, dtype=np.float64)
    assert q.shape == (4,)
    assert not is_invalid_quaternion(q), "Invalid (zero) quaternion has no rotation."
    return q2r(q / qnorm(q))
