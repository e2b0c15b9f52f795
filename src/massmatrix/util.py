import numpy as np


DEFAULT_TOLERANCE = 1e-6
"""Default relative tolerance of the principal moment and axis solvers."""

ANGLE2_TOLERANCE = 1e-12
"""Squared length below which a 2-vector is considered to have no direction."""


def vech(A):
    """Half-vectorize a matrix.

    This extracts a flattened (vector) representation of the upper triangular
    part of the matrix.

    Parameters
    ----------
    A : np.ndarray, shape (n, n)
        The matrix to half-vectorize.

    Returns
    -------
    : np.ndarray, shape (n * (n + 1) / 2,)
        The vector of upper triangular values.
    """
    n, m = A.shape
    assert n == m
    idx = np.triu_indices(n)
    return A[idx]


def unvech(a):
    """Undo the half-vectorization of a 3x3 symmetric matrix."""
    assert a.shape == (6,)
    A = np.zeros((3, 3), dtype=a.dtype)
    A[np.triu_indices(3)] = a
    return A + np.triu(A, k=1).T


def symmetrize(A):
    """Symmetric part of a square matrix, ``0.5 * (A + A.T)``."""
    A = np.asarray(A)
    assert A.shape[0] == A.shape[1]
    return 0.5 * (A + A.T)


def clamp(x, low, high):
    """Clamp ``x`` to the interval ``[low, high]``."""
    return np.clip(x, low, high)


def clamped_sqrt(x):
    """Square root of ``x`` if it is positive, otherwise zero."""
    if x <= 0:
        return 0 * x
    return np.sqrt(x)


def normalize_angle(angle):
    """Wrap an angle to the interval ``[-pi, pi]``."""
    return np.arctan2(np.sin(angle), np.cos(angle))


def angle2(v, tol=ANGLE2_TOLERANCE):
    """Angle between a 2-vector and the x-axis.

    Parameters
    ----------
    v : np.ndarray, shape (2,)
        The vector.
    tol : float
        If the squared length of ``v`` is below this value, the vector is
        treated as having no direction and zero is returned.

    Returns
    -------
    : float
        The angle in radians, in the interval ``[-pi, pi]``.
    """
    assert v.shape == (2,)
    if v @ v < tol:
        return 0 * v[0]
    return np.arctan2(v[1], v[0])


def sincos_distance(a, b):
    """Squared distance between two angles on the unit circle.

    Angles near ``pi`` and ``-pi`` are correctly treated as close.
    """
    return (np.sin(a) - np.sin(b)) ** 2 + (np.cos(a) - np.cos(b)) ** 2
