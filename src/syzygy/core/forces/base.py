"""Force/model interfaces."""

from __future__ import annotations

from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..state.system import SystemState


ArrayF = NDArray[np.float64]


class BodyModel(Protocol):
    def acc_bodies(self, state: SystemState) -> ArrayF:
        """Return body accelerations as (N, 2)."""
