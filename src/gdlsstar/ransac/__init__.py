# Andy Zhao
"""
RANSAC package

This module provides:
- A robust estimator for generalized pose-and-scale (rotation, translation, scale)
- Typed geometry primitives and data records
- Camera model / minimal solver interface definitions
- A pinhole camera model for multi-camera rigs
"""

from .types import (
    FloatArray, Vec3, Pixel, Points3D, Mat3x3,
    CameraModel, MinimalSolver,
    Correspondence, Priors, SolverInput, Solution, RansacSummary,
)

from .similarity import (
    to_rig_frame, apply_similarity, is_valid_similarity, rotation_angle_between,
)

from .camera import PinholeCamera

from .datum import compute_input_datum

from .sampling import MinimalSampler, MINIMAL_SAMPLE_SIZE

from .scoring import score_hypothesis, update_best_solution

from .core import RansacParameters, RobustEstimator, compute_max_iterations

__all__ = [
    "FloatArray", "Vec3", "Pixel", "Points3D", "Mat3x3",
    "CameraModel", "MinimalSolver",
    "Correspondence", "Priors", "SolverInput", "Solution", "RansacSummary",
    "to_rig_frame", "apply_similarity", "is_valid_similarity", "rotation_angle_between",
    "PinholeCamera",
    "compute_input_datum",
    "MinimalSampler", "MINIMAL_SAMPLE_SIZE",
    "score_hypothesis", "update_best_solution",
    "RansacParameters", "RobustEstimator", "compute_max_iterations",
]
