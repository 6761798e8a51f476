"""Two-dimensional n-body simulator with next-alignment prediction."""

from .core.alignment import is_aligned  # noqa: F401
from .core.config import SimulationConfig  # noqa: F401
from .core.errors import InsufficientBodies, PredictionCancelled  # noqa: F401
from .core.integrators import step  # noqa: F401
from .core.predictor import (  # noqa: F401
    Found,
    NotFound,
    PredictionResult,
    predict_next_alignment,
)
from .core.state import Body, BodiesState, SystemState  # noqa: F401

__version__ = "0.1.0"
