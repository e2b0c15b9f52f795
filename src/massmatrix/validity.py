"""Physical validity checks for inertia tensors."""
import numpy as np


def is_positive(mass, I):
    """Check if the mass and moment of inertia matrix are positive definite.

    This applies Sylvester's criterion to the inertia matrix: all leading
    principal minors must be positive. It is much cheaper than computing the
    principal moments.

    Parameters
    ----------
    mass : float
        Mass of the body.
    I : np.ndarray, shape (3, 3)
        Symmetric moment of inertia matrix.

    Returns
    -------
    : bool
        ``True`` if ``mass > 0`` and ``I`` is positive definite, ``False``
        otherwise.
    """
    assert I.shape == (3, 3)
    return bool(
        mass > 0
        and I[0, 0] > 0
        and I[0, 0] * I[1, 1] - I[0, 1] ** 2 > 0
        and np.linalg.det(I) > 0
    )


def valid_moments(moments, tol=0):
    """Check if principal moments of inertia are physically realizable.

    The moments must be positive and satisfy the strict triangle inequality:
    every moment must be smaller than the sum of the other two. Degenerate
    moments such as ``(1, 1, 2)``, which belong to an infinitely thin body, are
    not valid.

    Parameters
    ----------
    moments : array_like, shape (3,)
        The principal moments of inertia, in any order.
    tol : float, non-negative
        Optional relative slack for the triangle inequality, scaled by half the
        sum of the moments. The default of zero gives the strict check.

    Returns
    -------
    : bool
        ``True`` if the moments are valid, ``False`` otherwise.
    """
    m = np.asarray(moments)
    assert m.shape == (3,)
    assert tol >= 0, "Tolerance must be non-negative."

    if not np.all(m > 0):
        return False

    eps = 0.5 * tol * np.abs(np.sum(m))
    return bool(
        m[0] + m[1] > m[2] - eps
        and m[1] + m[2] > m[0] - eps
        and m[2] + m[0] > m[1] - eps
    )
