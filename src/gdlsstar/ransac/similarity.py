# Andy Zhao
"""
Similarity transform utilities.

A hypothesis (R, t, s) relates a world point X to the generalized camera (rig)
frame through:

    s * c + d * f = R @ X + t

where c is the centre of the observing camera and f its viewing ray. Dividing
by s puts both sides in the rig frame:

    c + (d / s) * f = (R @ X + t) / s

so the rig-frame point to project is (R @ X + t) / s.
"""

from __future__ import annotations

import numpy as np

from .types import Mat3x3, Vec3, Points3D


def to_rig_frame(rotation: Mat3x3, translation: Vec3, scale: float, point: Vec3) -> Vec3:
    """
    Map a single world point into the rig frame: (R @ X + t) / s.
    """
    return (rotation @ point + translation) / scale


def apply_similarity(rotation: Mat3x3, translation: Vec3, scale: float, points: Points3D) -> Points3D:
    """
    Apply a hypothesis to (N,3) world points, returning (N,3) rig-frame points.
    """
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Expected points shape (N,3), got {points.shape}")

    # Each point is a row, so multiply by R^T
    out = (points @ rotation.T + translation.reshape(1, 3)) / scale
    return out.astype(np.float64)


def is_valid_similarity(rotation: Mat3x3, translation: Vec3, scale: float) -> bool:
    """
    Verify a hypothesis before scoring it.
    Used for rejecting broken solver output (wrong shapes, NaNs, non-positive scale).
    """
    return (
        isinstance(rotation, np.ndarray) and rotation.shape == (3, 3)
        and np.isfinite(rotation).all()
        and np.asarray(translation).shape == (3,)
        and np.isfinite(translation).all()
        and np.isfinite(scale) and scale > 0.0
    )


def rotation_angle_between(r0: Mat3x3, r1: Mat3x3) -> float:
    """
    Angle (radians) of the relative rotation r0^T r1.

        angle = arccos((trace(r0^T r1) - 1) / 2)
    """
    cos_angle = (np.trace(r0.T @ r1) - 1.0) / 2.0
    # Clip: round-off can push the cosine slightly outside [-1, 1]
    return float(np.arccos(np.clip(cos_angle, -1.0, 1.0)))
