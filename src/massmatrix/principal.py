"""Closed-form principal moments and principal axes of inertia.

The eigen-decomposition of the symmetric 3x3 moment of inertia matrix is
computed analytically following

    M. J. Kronenburg, "A Method for Fast Diagonalization of a 2x2 or 3x3 Real
    Symmetric Matrix", arXiv:1306.6291v4.

Equation numbers in the comments refer to that paper. All functions are pure
and generic over the floating-point type given by ``dtype``.
"""
import logging

import numpy as np
from spatialmath.base import rotx, roty, rotz

from .orientation import (
    identity_quaternion,
    invalid_quaternion,
    inverse,
    rotation_to_quaternion,
)
from .util import (
    DEFAULT_TOLERANCE,
    angle2,
    clamp,
    clamped_sqrt,
    normalize_angle,
    sincos_distance,
)

logger = logging.getLogger(__name__)


# Candidate signs of (phi2, phi3), together with the element-wise multipliers
# they induce on the auxiliary vectors g1 and g2 (eqs. 5.7, 5.8).
SIGN_CANDIDATES = (
    ((1, 1), np.array([1, 1]), np.array([1, 1])),
    ((-1, 1), np.array([1, -1]), np.array([1, -1])),
    ((1, -1), np.array([-1, 1]), np.array([1, -1])),
    ((-1, -1), np.array([-1, -1]), np.array([1, 1])),
)


def _as_moment_vectors(diagonal, off_diagonal, dtype):
    Id = np.asarray(diagonal, dtype=dtype)
    Ip = np.asarray(off_diagonal, dtype=dtype)
    assert Id.shape == (3,), f"Diagonal moments must have shape (3,), not {Id.shape}."
    assert Ip.shape == (3,), f"Off-diagonal moments must have shape (3,), not {Ip.shape}."
    return Id, Ip


def _scaled_tolerance(Id, tol):
    return Id.dtype.type(tol) * np.max(Id)


def principal_moments(diagonal, off_diagonal, tol=DEFAULT_TOLERANCE, dtype=np.float64):
    """Compute the principal moments of inertia.

    These are the eigenvalues of the moment of inertia matrix.

    Parameters
    ----------
    diagonal : array_like, shape (3,)
        Diagonal moments ``(Ixx, Iyy, Izz)``.
    off_diagonal : array_like, shape (3,)
        Off-diagonal moments ``(Ixy, Ixz, Iyz)``.
    tol : float
        Tolerance relative to the largest diagonal moment.
    dtype : np.dtype
        Floating-point type used for the computation and the result.

    Returns
    -------
    : np.ndarray, shape (3,)
        The principal moments. If the matrix is already diagonal, they are
        the diagonal moments in their existing order. Otherwise they are
        sorted from smallest to largest.
    """
    Id, Ip = _as_moment_vectors(diagonal, off_diagonal, dtype)
    tol = _scaled_tolerance(Id, tol)

    # already diagonal
    if np.all(np.abs(Ip) <= tol):
        return Id.copy()

    # coefficients of the characteristic polynomial
    b = np.sum(Id)
    c = (
        Id[0] * Id[1] - Ip[0] ** 2
        + Id[0] * Id[2] - Ip[1] ** 2
        + Id[1] * Id[2] - Ip[2] ** 2
    )
    d = (
        Id[0] * Ip[2] ** 2
        + Id[1] * Ip[1] ** 2
        + Id[2] * Ip[0] ** 2
        - Id[0] * Id[1] * Id[2]
        - 2 * Ip[0] * Ip[1] * Ip[2]
    )
    p = b**2 - 3 * c

    # p is a sum of squares (eq. 4.7) that only vanishes when all three
    # moments are equal; its inverse is needed below
    if p < tol**2:
        return np.full(3, b / 3, dtype=dtype)

    q = 2 * b**3 - 9 * b * c - 27 * d
    delta = np.arccos(clamp(0.5 * q / p**1.5, -1, 1))

    sqrt_p = np.sqrt(p)
    moments = np.array(
        [
            (b + 2 * sqrt_p * np.cos(delta / 3)) / 3,
            (b + 2 * sqrt_p * np.cos((delta + 2 * np.pi) / 3)) / 3,
            (b + 2 * sqrt_p * np.cos((delta - 2 * np.pi) / 3)) / 3,
        ],
        dtype=dtype,
    )
    return np.sort(moments)


def _repeated_moment_angles(Id, moments, unequal, f1, f2, f1small):
    """Euler angles of the principal axes when two moments are equal.

    ``moments[1]`` is the repeated value and ``moments[unequal]`` the distinct
    one. Only one angle is free; ``phi3`` is fixed to zero (eq. 5.23).
    """
    # lambda - lambda3
    diff3 = moments[1] - moments[unequal]

    # s = cos(phi2)^2 is in [0, 1] since Ixx lies between the moments
    s = (Id[0] - moments[unequal]) / diff3
    phi3 = 0 * s
    phi2 = np.arccos(clamp(clamped_sqrt(s), -1, 1))

    # eqs. 5.24, 5.25
    g1 = np.array([0, 0.5 * diff3 * np.sin(2 * phi2)])
    g2 = np.array([diff3 * s, 0])

    # f2 cannot vanish here: a repeated moment with |f2| == 0 means the
    # matrix is diagonal, which is handled before this point
    phi1 = normalize_angle(0.5 * (angle2(g2) - angle2(f2)))

    # choose the sign of phi2 such that phi11 agrees with phi12
    if not f1small:
        phi11a = normalize_angle(angle2(g1) - angle2(f1))
        phi11b = normalize_angle(angle2(-g1) - angle2(f1))
        if sincos_distance(phi1, phi11b) < sincos_distance(phi1, phi11a):
            phi2 = -phi2

    return phi1, phi2, phi3


def _distinct_moment_angles(Id, Ip, moments, f1, f2, f1small, f2small):
    """Euler angles of the principal axes when all moments are distinct."""
    m0, m1, m2 = moments

    # v = cos(phi2)^2, w = cos(phi3)^2
    v = (Ip[0] ** 2 + Ip[1] ** 2 + (Id[0] - m2) * (Id[0] + m2 - m0 - m1)) / (
        (m1 - m2) * (m2 - m0)
    )
    sqrt_v = clamped_sqrt(v)
    if sqrt_v > 0:
        w = (Id[0] - m2 + (m2 - m1) * v) / ((m0 - m1) * v)
    else:
        # phi2 = pi/2 couples phi1 and phi3, so phi3 can be fixed
        w = np.ones_like(v)

    phi2 = np.arccos(clamp(sqrt_v, -1, 1))
    phi3 = np.arccos(clamp(clamped_sqrt(w), -1, 1))

    # g1, g2 for phi2, phi3 >= 0 (eqs. 5.7, 5.8)
    g1 = np.array(
        [
            0.5 * (m0 - m1) * sqrt_v * np.sin(2 * phi3),
            0.5 * ((m0 - m1) * w + m1 - m2) * np.sin(2 * phi2),
        ]
    )
    g2 = np.array(
        [
            (m0 - m1) * (1 + (v - 2) * w) + (m1 - m2) * v,
            (m0 - m1) * np.sin(phi2) * np.sin(2 * phi3),
        ]
    )

    if f1small:
        phi1 = normalize_angle(0.5 * (angle2(g2) - angle2(f2)))
        return phi1, phi2, phi3
    if f2small:
        phi1 = normalize_angle(angle2(g1) - angle2(f1))
        return phi1, phi2, phi3

    # The closed form only determines the magnitudes of phi2 and phi3. Pick
    # the signs for which the two expressions of phi1 (phi11 from f1, g1 and
    # phi12 from f2, g2) agree best.
    def score(candidate):
        _, g1_signs, g2_signs = candidate
        phi11 = normalize_angle(angle2(g1_signs * g1) - angle2(f1))
        phi12 = normalize_angle(0.5 * (angle2(g2_signs * g2) - angle2(f2)))
        return sincos_distance(phi11, phi12), phi11

    scored = [(score(candidate), candidate[0]) for candidate in SIGN_CANDIDATES]
    (_, phi1), (sign2, sign3) = min(scored, key=lambda x: x[0][0])
    return phi1, sign2 * phi2, sign3 * phi3


def principal_axes_offset(diagonal, off_diagonal, tol=DEFAULT_TOLERANCE, dtype=np.float64):
    """Compute the rotational offset of the principal axes.

    With ``R = q2r(q)`` and ``L = np.diag(principal_moments(...))``, the
    moment of inertia matrix is reconstructed as ``I = R.T @ L @ R``. The
    rows of ``R`` are the principal axes expressed in the body frame.

    The reconstruction is usually exact to round-off. It degrades near the
    tolerance-gated branches, and for repeated moments when the axis of the
    distinct moment is nearly aligned with or perpendicular to the x-axis,
    since the free angle is then ``arccos(sqrt(s))`` with ``s`` close to 0 or
    1. In these cases the element-wise error of the reconstructed matrix can
    reach about ten times the scaled tolerance ``tol * max(diagonal)``, e.g.
    ``1e-5`` for moments of order one with the default ``tol``.

    Parameters
    ----------
    diagonal : array_like, shape (3,)
        Diagonal moments ``(Ixx, Iyy, Izz)``.
    off_diagonal : array_like, shape (3,)
        Off-diagonal moments ``(Ixy, Ixz, Iyz)``.
    tol : float
        Tolerance relative to the largest diagonal moment.
    dtype : np.dtype
        Floating-point type used for the computation and the result.

    Returns
    -------
    : np.ndarray, shape (4,)
        The unit quaternion ``[w, x, y, z]`` of the offset. The identity is
        returned if the matrix is already aligned with its principal axes
        (including when all moments are equal). The zero quaternion is
        returned if the solver reaches a configuration that is impossible
        for a symmetric matrix; it should never occur in practice.
    """
    Id, Ip = _as_moment_vectors(diagonal, off_diagonal, dtype)
    moments = principal_moments(Id, Ip, tol=tol, dtype=dtype)
    tol = _scaled_tolerance(Id, tol)

    # already aligned with the principal axes
    if np.all(np.abs(moments - Id) <= tol):
        return identity_quaternion(dtype)

    # eqs. 5.5, 5.6
    f1 = np.array([Ip[0], -Ip[1]])
    f2 = np.array([Id[1] - Id[2], -2 * Ip[2]])
    f1small = f1 @ f1 < tol**2
    f2small = f2 @ f2 < tol**2

    # both vanishing implies a diagonal matrix, which was handled above
    if f1small and f2small:
        logger.warning(
            "Principal axes undefined for diagonal=%s, off_diagonal=%s; "
            "returning the invalid quaternion.",
            Id,
            Ip,
        )
        return invalid_quaternion(dtype)

    # the moments are sorted, so only adjacent values can be repeated
    unequal = None
    if np.abs(moments[0] - moments[1]) <= tol:
        unequal = 2
    elif np.abs(moments[1] - moments[2]) <= tol:
        unequal = 0

    if unequal is None:
        phi1, phi2, phi3 = _distinct_moment_angles(Id, Ip, moments, f1, f2, f1small, f2small)
    else:
        logger.debug("Repeated principal moment %s", moments[1])
        phi1, phi2, phi3 = _repeated_moment_angles(Id, moments, unequal, f1, f2, f1small)

    # the columns of E are the principal axes: I = E @ diag(moments) @ E.T
    E = rotx(float(phi1)) @ roty(float(phi2)) @ rotz(float(phi3))

    # The repeated-moment angles assume moments[0] == moments[1]. If instead
    # moments[1] == moments[2], exchange the first and last axes with a 90
    # degree pitch.
    if unequal == 0:
        E = E @ roty(np.pi / 2)

    q = inverse(rotation_to_quaternion(E))
    return np.asarray(q, dtype=dtype)
