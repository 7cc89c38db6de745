# Andy Zhao
"""
Build the minimal-solver input from a sample of correspondences.

Each correspondence becomes one ray of the generalized camera:
  - origin:    centre of the observing camera (rig frame)
  - direction: unit viewing ray through the observed pixel (rig frame)
  - point:     the matching 3D world point
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from .types import Correspondence, Priors, SolverInput


def compute_input_datum(
        sample: Sequence[Correspondence],
        priors: Optional[Priors] = None,
) -> SolverInput:
    if len(sample) == 0:
        raise ValueError("compute_input_datum needs at least one correspondence")

    n = len(sample)
    ray_origins = np.zeros((n, 3), dtype=np.float64)
    ray_directions = np.zeros((n, 3), dtype=np.float64)
    world_points = np.zeros((n, 3), dtype=np.float64)

    for i, corr in enumerate(sample):
        ray_origins[i] = corr.camera.position
        ray_directions[i] = corr.camera.pixel_to_unit_ray(corr.observation)
        world_points[i] = corr.point

    return SolverInput(
        ray_origins=ray_origins,
        ray_directions=ray_directions,
        world_points=world_points,
        priors=priors if priors is not None else Priors(),
    )
