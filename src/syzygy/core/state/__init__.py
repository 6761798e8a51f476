"""State namespace."""

from .bodies import BodiesState, Body  # noqa: F401
from .system import SystemState  # noqa: F401
