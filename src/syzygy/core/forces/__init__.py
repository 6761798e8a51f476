"""Forces and model utilities."""

from .base import BodyModel  # noqa: F401
from .nbody_gravity import NBodyGravity  # noqa: F401
