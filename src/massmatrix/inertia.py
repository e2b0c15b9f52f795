import numpy as np

from .orientation import is_invalid_quaternion, quaternion_to_rotation
from .principal import principal_axes_offset, principal_moments
from .random import random_principal_moments, random_rotation_matrix
from .util import DEFAULT_TOLERANCE, symmetrize, vech
from .validity import is_positive, valid_moments


class InertiaTensor:
    """Mass and moment of inertia matrix of a rigid body.

    The symmetric 3x3 moment of inertia matrix is stored as its three
    diagonal moments and three off-diagonal (product) moments.

    The tensor is a plain value holder: it is never prevented from holding
    physically invalid values. All setters store the new value and return
    whether the tensor is valid afterwards (see :meth:`is_valid`), which the
    caller is expected to check.

    Parameters
    ----------
    mass : float
        Mass of the body.
    diagonal : array_like, shape (3,)
        Diagonal moments ``(Ixx, Iyy, Izz)``. Defaults to zero.
    off_diagonal : array_like, shape (3,)
        Off-diagonal moments ``(Ixy, Ixz, Iyz)``. Defaults to zero.
    dtype : np.dtype
        Floating-point type of the stored values and of all computations.
    """

    def __init__(self, mass=0, diagonal=None, off_diagonal=None, dtype=np.float64):
        if diagonal is None:
            diagonal = np.zeros(3)
        if off_diagonal is None:
            off_diagonal = np.zeros(3)

        self.dtype = np.dtype(dtype).type
        self._mass = self.dtype(mass)
        self._diagonal = self._vector(diagonal)
        self._off_diagonal = self._vector(off_diagonal)

    def _vector(self, v):
        v = np.array(v, dtype=self.dtype)
        assert v.shape == (3,), f"Moments must have shape (3,), not {v.shape}."
        return v

    def __repr__(self):
        return (
            f"InertiaTensor(mass={self._mass}, diagonal={self._diagonal}, "
            f"off_diagonal={self._off_diagonal})"
        )

    def copy(self):
        return InertiaTensor(
            mass=self._mass,
            diagonal=self._diagonal,
            off_diagonal=self._off_diagonal,
            dtype=self.dtype,
        )

    __copy__ = copy

    @classmethod
    def zero(cls, dtype=np.float64):
        return cls(dtype=dtype)

    @classmethod
    def from_matrix(cls, mass, I, dtype=np.float64):
        """Construct from a moment of inertia matrix.

        Only the symmetric part of ``I`` is used: each off-diagonal moment is
        the average of the corresponding entries ``I[i, j]`` and ``I[j, i]``.

        Parameters
        ----------
        mass : float
            Mass of the body.
        I : array_like, shape (3, 3)
            Moment of inertia matrix.
        """
        tensor = cls(mass=mass, dtype=dtype)
        tensor.set_I(I)
        return tensor

    @classmethod
    def from_box(cls, mass, half_extents, rotation=None, dtype=np.float64):
        """Construct the tensor of a uniform-density box about its center.

        Parameters
        ----------
        mass : float, non-negative
            Mass of the box.
        half_extents : array_like, shape (3,)
            Half of the side lengths of the box.
        rotation : np.ndarray, shape (3, 3)
            Orientation of the box. Defaults to the identity.
        """
        assert mass >= 0, "Mass must be non-negative."
        h2 = np.asarray(half_extents, dtype=np.float64) ** 2
        assert h2.shape == (3,)
        moments = mass * np.array([h2[1] + h2[2], h2[0] + h2[2], h2[0] + h2[1]]) / 3.0
        return cls._from_principal(mass, moments, rotation, dtype)

    @classmethod
    def from_cylinder(cls, mass, radius, length, rotation=None, dtype=np.float64):
        """Construct the tensor of a uniform-density cylinder about its center.

        The cylinder's axis is the z-axis before applying ``rotation``.
        """
        assert mass >= 0, "Mass must be non-negative."
        assert radius >= 0, "Radius must be non-negative."
        assert length >= 0, "Length must be non-negative."
        Ixy = mass * (3 * radius**2 + length**2) / 12.0
        Iz = 0.5 * mass * radius**2
        return cls._from_principal(mass, np.array([Ixy, Ixy, Iz]), rotation, dtype)

    @classmethod
    def from_sphere(cls, mass, radius, dtype=np.float64):
        """Construct the tensor of a uniform-density solid sphere about its center."""
        assert mass >= 0, "Mass must be non-negative."
        assert radius >= 0, "Radius must be non-negative."
        moment = 0.4 * mass * radius**2
        return cls(mass=mass, diagonal=[moment, moment, moment], dtype=dtype)

    @classmethod
    def _from_principal(cls, mass, moments, rotation, dtype):
        if rotation is None:
            return cls(mass=mass, diagonal=moments, dtype=dtype)
        C = np.asarray(rotation)
        assert C.shape == (3, 3)
        return cls.from_matrix(mass, C @ np.diag(moments) @ C.T, dtype=dtype)

    @classmethod
    def random(cls, rng=None, dtype=np.float64):
        """Generate a random physically valid inertia tensor.

        Useful for testing purposes.
        """
        rng = np.random.default_rng(rng)
        mass = 0.1 + rng.random() * 0.9
        moments = random_principal_moments(mass=mass, rng=rng)
        C = random_rotation_matrix(rng=rng)
        return cls.from_matrix(mass, C @ np.diag(moments) @ C.T, dtype=dtype)

    # mass

    @property
    def mass(self):
        return self._mass

    def set_mass(self, mass):
        """Set the mass.

        Returns
        -------
        : bool
            ``True`` if the tensor is valid after the change.
        """
        self._mass = self.dtype(mass)
        return self.is_valid()

    # individual moments

    @property
    def ixx(self):
        return self._diagonal[0]

    @property
    def iyy(self):
        return self._diagonal[1]

    @property
    def izz(self):
        return self._diagonal[2]

    @property
    def ixy(self):
        return self._off_diagonal[0]

    @property
    def ixz(self):
        return self._off_diagonal[1]

    @property
    def iyz(self):
        return self._off_diagonal[2]

    def set_ixx(self, value):
        self._diagonal[0] = value
        return self.is_valid()

    def set_iyy(self, value):
        self._diagonal[1] = value
        return self.is_valid()

    def set_izz(self, value):
        self._diagonal[2] = value
        return self.is_valid()

    def set_ixy(self, value):
        self._off_diagonal[0] = value
        return self.is_valid()

    def set_ixz(self, value):
        self._off_diagonal[1] = value
        return self.is_valid()

    def set_iyz(self, value):
        self._off_diagonal[2] = value
        return self.is_valid()

    def set_inertia_matrix(self, ixx, iyy, izz, ixy, ixz, iyz):
        """Set all six independent moments of inertia.

        Returns
        -------
        : bool
            ``True`` if the tensor is valid after the change.
        """
        self._diagonal = self._vector([ixx, iyy, izz])
        self._off_diagonal = self._vector([ixy, ixz, iyz])
        return self.is_valid()

    # moments as vectors

    @property
    def diagonal(self):
        """Diagonal moments ``(Ixx, Iyy, Izz)``."""
        return self._diagonal.copy()

    @property
    def off_diagonal(self):
        """Off-diagonal moments ``(Ixy, Ixz, Iyz)``."""
        return self._off_diagonal.copy()

    def set_diagonal_moments(self, diagonal):
        self._diagonal = self._vector(diagonal)
        return self.is_valid()

    def set_off_diagonal_moments(self, off_diagonal):
        self._off_diagonal = self._vector(off_diagonal)
        return self.is_valid()

    # matrix form

    @property
    def I(self):
        """Moment of inertia matrix."""
        Ixx, Iyy, Izz = self._diagonal
        Ixy, Ixz, Iyz = self._off_diagonal
        # fmt: off
        return np.array([
            [Ixx, Ixy, Ixz],
            [Ixy, Iyy, Iyz],
            [Ixz, Iyz, Izz]
        ], dtype=self.dtype)
        # fmt: on

    def set_I(self, I):
        """Set the moment of inertia matrix.

        The off-diagonal moments are taken from the symmetric part of ``I``,
        i.e. by averaging ``I[i, j]`` and ``I[j, i]``.

        Returns
        -------
        : bool
            ``True`` if the tensor is valid after the change.
        """
        I = np.asarray(I, dtype=self.dtype)
        assert I.shape == (3, 3), f"Inertia matrix must have shape (3, 3), not {I.shape}."
        S = symmetrize(I)
        self._diagonal = self._vector(np.diag(I))
        self._off_diagonal = self._vector([S[0, 1], S[0, 2], S[1, 2]])
        return self.is_valid()

    @property
    def vec(self):
        """Parameter vector ``(mass, Ixx, Ixy, Ixz, Iyy, Iyz, Izz)``."""
        return np.concatenate([[self._mass], vech(self.I)])

    # comparison

    def equal(self, other, tol=DEFAULT_TOLERANCE):
        """Check if this tensor is the same as another, component-wise.

        Parameters
        ----------
        other : InertiaTensor
            The other tensor to check.
        tol : float
            Absolute and relative tolerance on each component.

        Returns
        -------
        : bool
            ``True`` if they are the same, ``False`` otherwise.
        """
        return bool(
            np.isclose(self._mass, other.mass, rtol=tol, atol=tol)
            and np.allclose(self._diagonal, other.diagonal, rtol=tol, atol=tol)
            and np.allclose(self._off_diagonal, other.off_diagonal, rtol=tol, atol=tol)
        )

    def __eq__(self, other):
        if not isinstance(other, InertiaTensor):
            return NotImplemented
        return self.equal(other)

    __hash__ = None

    # validity

    def is_positive(self):
        """Check if the mass is positive and the inertia matrix is positive definite.

        This is cheaper than :meth:`is_valid` since it does not compute the
        principal moments.
        """
        return is_positive(self._mass, self.I)

    def is_valid(self):
        """Check if the tensor is physically valid.

        This means that it is positive (see :meth:`is_positive`) and that its
        principal moments satisfy the triangle inequality.
        """
        return self.is_positive() and valid_moments(self.principal_moments())

    @staticmethod
    def valid_moments(moments, tol=0):
        """Check if principal moments are positive and satisfy the strict triangle inequality."""
        return valid_moments(moments, tol=tol)

    # principal moments and axes

    def principal_moments(self, tol=DEFAULT_TOLERANCE):
        """Principal moments of inertia.

        If the matrix is already diagonal, the diagonal moments are returned
        in their existing order. Otherwise, the moments are sorted from
        smallest to largest.
        """
        return principal_moments(
            self._diagonal, self._off_diagonal, tol=tol, dtype=self.dtype
        )

    def principal_axes_offset(self, tol=DEFAULT_TOLERANCE):
        """Quaternion ``q`` of the rotational offset of the principal axes.

        ``self.I == R.T @ np.diag(self.principal_moments()) @ R`` with
        ``R = q2r(q)``. The zero quaternion signals a failure of the solver.
        """
        return principal_axes_offset(
            self._diagonal, self._off_diagonal, tol=tol, dtype=self.dtype
        )

    def principal_rotation(self, tol=DEFAULT_TOLERANCE):
        """Rotation matrix ``R`` of the principal axes offset."""
        return quaternion_to_rotation(self.principal_axes_offset(tol=tol))

    def transform(self, rotation):
        """Express the tensor in a rotated frame.

        Parameters
        ----------
        rotation : np.ndarray, shape (3, 3)
            Rotation matrix ``C`` from the current frame to the new one.

        Returns
        -------
        : InertiaTensor
            The tensor ``C @ I @ C.T`` with the same mass.
        """
        C = np.asarray(rotation)
        assert C.shape == (3, 3)
        return InertiaTensor.from_matrix(self._mass, C @ self.I @ C.T, dtype=self.dtype)

    def equivalent_box(self, tol=DEFAULT_TOLERANCE):
        """Uniform-density box with the same mass and moment of inertia.

        Returns
        -------
        : tuple or None
            A tuple ``(half_extents, rotation)`` such that
            ``InertiaTensor.from_box(self.mass, half_extents, rotation)``
            equals this tensor, or ``None`` if the tensor is not valid.
        """
        if not self.is_positive():
            return None

        moments = self.principal_moments(tol=tol)
        if not valid_moments(moments):
            return None

        q = self.principal_axes_offset(tol=tol)
        if is_invalid_quaternion(q):
            return None

        # Ixx = m * (hy^2 + hz^2) / 3 and similarly for the others
        m0, m1, m2 = np.asarray(moments, dtype=np.float64)
        h2 = 1.5 * np.array([m1 + m2 - m0, m0 + m2 - m1, m0 + m1 - m2]) / self._mass
        half_extents = np.sqrt(np.maximum(h2, 0))
        return half_extents, quaternion_to_rotation(q).T
