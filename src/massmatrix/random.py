"""Generate random values."""
import numpy as np
from scipy.spatial.transform import Rotation


def random_points_on_hypersphere(shape=1, dim=2, rng=None):
    """Sample random uniform-distributed points on the ``dim``-sphere.

    See https://compneuro.uwaterloo.ca/files/publications/voelker.2017.pdf
    """
    assert dim >= 1
    if np.isscalar(shape):
        shape = (shape,)
    full_shape = tuple(shape) + (dim + 1,)

    rng = np.random.default_rng(rng)
    X = rng.normal(size=full_shape)

    # make dimension compatible with X
    r = np.expand_dims(np.linalg.norm(X, axis=-1), axis=X.ndim - 1)

    points = X / r

    # squeeze out extra dimension if shape = 1
    if shape == (1,):
        return np.squeeze(points)
    return points


def random_rotation_matrix(rng=None):
    """Generate a uniformly-distributed random rotation matrix."""
    # unit quaternions are uniform on the 3-sphere
    q = random_points_on_hypersphere(dim=3, rng=rng)
    return Rotation.from_quat(q).as_matrix()


def random_principal_moments(mass=1.0, rng=None):
    """Generate random principal moments of inertia that are physically valid.

    The moments are those of a uniform-density box with random half extents
    in ``[0.1, 1]``, which are positive and always satisfy the triangle
    inequality.

    Parameters
    ----------
    mass : float, positive
        Mass of the body.
    rng : int or np.random.Generator
        Integer seed or Generator instance to use for generating random
        numbers.

    Returns
    -------
    : np.ndarray, shape (3,)
        The principal moments, in random order.
    """
    assert mass > 0, "Mass must be positive."
    rng = np.random.default_rng(rng)
    h2 = rng.uniform(low=0.1, high=1, size=3) ** 2
    return mass * np.array([h2[1] + h2[2], h2[0] + h2[2], h2[0] + h2[1]]) / 3.0
