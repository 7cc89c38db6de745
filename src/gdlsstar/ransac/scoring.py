# Andy Zhao
"""
Hypothesis scoring by reprojection error.

For every hypothesis (R, t, s) and every correspondence j:
  1) move the world point into the rig frame: (R @ X_j + t) / s
  2) project it with the camera that observed j
  3) inlier if || projected - observed ||^2 < tau^2

Correspondences whose projection fails (behind the camera) are neither
inliers nor outliers for that hypothesis.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from .similarity import to_rig_frame, is_valid_similarity
from .types import Correspondence, Mat3x3, Solution, Vec3

logger = logging.getLogger(__name__)

_EPS = float(np.finfo(np.float64).eps)


def score_hypothesis(
        correspondences: Sequence[Correspondence],
        rotation: Mat3x3,
        translation: Vec3,
        scale: float,
        reprojection_error_thresh: float,
) -> List[int]:
    """
    Return the (ascending) indices of correspondences that are inliers under (R, t, s).
    """
    sq_thresh = reprojection_error_thresh * reprojection_error_thresh

    inliers: List[int] = []
    for j, corr in enumerate(correspondences):
        point_in_rig = to_rig_frame(rotation, translation, scale, corr.point)

        pixel = corr.camera.project(point_in_rig)
        if pixel is None:
            continue

        diff = pixel - corr.observation
        sq_error = float(diff @ diff)
        if sq_error < sq_thresh:
            inliers.append(j)
    return inliers


def update_best_solution(
        correspondences: Sequence[Correspondence],
        hypotheses: Solution,
        best_solution: Solution,
        best_inliers: List[int],
        reprojection_error_thresh: float,
) -> float:
    """
    Score all hypotheses and keep the one with the most inliers.

    best_solution (single hypothesis) and best_inliers are updated IN PLACE
    when a hypothesis has strictly more inliers than the current best.

    Returns:
      - the new best inlier ratio if something improved
      - otherwise len(best_inliers) / n + eps

    The eps keeps the ratio strictly moving so the adaptive iteration bound
    is recomputed from a positive ratio even on rounds without improvement.
    """
    n = len(correspondences)
    best_inlier_ratio = len(best_inliers) / float(n) + _EPS

    for rotation, translation, scale in zip(
            hypotheses.rotations, hypotheses.translations, hypotheses.scales):
        if not is_valid_similarity(rotation, translation, scale):
            logger.debug("Skipping invalid hypothesis (scale=%s)", scale)
            continue

        logger.debug("Rotation matrix:\n%s", rotation)
        logger.debug("Translation: %s", translation)
        logger.debug("Scale: %s", scale)

        inliers = score_hypothesis(
            correspondences, rotation, translation, scale, reprojection_error_thresh)

        # Strictly more inliers than the best so far -> new best
        if len(inliers) > len(best_inliers):
            best_inliers[:] = inliers
            best_solution.rotations[0] = np.asarray(rotation, dtype=np.float64).copy()
            best_solution.translations[0] = np.asarray(translation, dtype=np.float64).copy()
            best_solution.scales[0] = float(scale)
            best_inlier_ratio = len(best_inliers) / float(n)
            logger.debug("Update num. inliers: %d", len(best_inliers))
            logger.debug("Update inlier ratio: %.6f", best_inlier_ratio)

    return best_inlier_ratio
