from .inertia import InertiaTensor
from .orientation import (
    identity_quaternion,
    invalid_quaternion,
    is_invalid_quaternion,
    rotation_to_quaternion,
    quaternion_to_rotation,
)
from .principal import principal_moments, principal_axes_offset
from .random import *
from .util import *
from .validity import is_positive, valid_moments
