# Andy Zhao
"""
Robust generalized pose-and-scale estimation (RANSAC with adaptive stopping).

RANSAC overview:
- Randomly sample a *minimal* subset of 4 correspondences
- Ask the minimal solver for candidate similarity transforms (possibly several)
- Score all correspondences by reprojection error under each candidate
- Keep the candidate with the most inliers
- Shrink the iteration budget as the best inlier ratio grows

The minimal solver is a collaborator (MinimalSolver protocol in types.py), so
this loop never looks inside how hypotheses are derived.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .datum import compute_input_datum
from .sampling import MinimalSampler, MINIMAL_SAMPLE_SIZE
from .scoring import update_best_solution
from .types import Correspondence, MinimalSolver, Priors, RansacSummary, Solution

logger = logging.getLogger(__name__)

_EPS = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class RansacParameters:
    """
    Parameters of the robust estimator.

    failure_probability:
      - Target probability that no all-inlier sample was drawn.
      - Must be in (0, 1). Smaller -> more iterations.

    reprojection_error_thresh:
      - Inlier threshold in pixels (> 0).

    min_iterations, max_iterations:
      - Bounds on the adaptive iteration count, 0 <= min < max.

    seed:
      - RNG seed for reproducible sampling.
    """
    failure_probability: float = 0.01
    reprojection_error_thresh: float = 2.0
    min_iterations: int = 10
    max_iterations: int = 1000
    seed: int = 0

    def __post_init__(self) -> None:
        if not (0.0 < self.failure_probability < 1.0):
            raise ValueError(
                f"RansacParameters.failure_probability must be in (0, 1), got {self.failure_probability}")
        if not (self.reprojection_error_thresh > 0.0):
            raise ValueError(
                f"RansacParameters.reprojection_error_thresh must be > 0, got {self.reprojection_error_thresh}")
        if self.min_iterations < 0:
            raise ValueError(
                f"RansacParameters.min_iterations must be >= 0, got {self.min_iterations}")
        if self.max_iterations <= self.min_iterations:
            raise ValueError(
                "RansacParameters.max_iterations must be > min_iterations, "
                f"got max={self.max_iterations}, min={self.min_iterations}")


def compute_max_iterations(
        inlier_ratio: float,
        log_failure_probability: float,
        *,
        min_iterations: int,
        max_iterations: int,
        sample_size: int = MINIMAL_SAMPLE_SIZE,
) -> int:
    """
    Number of iterations needed so that the probability of never drawing an
    all-inlier minimal sample drops to the failure probability.

    inlier ratio w, minimal sample s, failure probability p:
    - P(all-inliers) = w^s
    - P(not-all-inlier-for-k-times) = (1 - w^s)^k <= p
    - k >= log(p) / log(1 - w^s)

    Edge cases:
     - w <= 0 -> invalid, raises
     - w >= 1 -> min_iterations is enough (w reaches 1 + eps when every
       correspondence is already an inlier and nothing improved)

    eps is subtracted from log(1 - w^s) so the denominator stays strictly
    negative when w^s underflows.

    Returns k clamped into [min_iterations, max_iterations].
    """
    if not (inlier_ratio > 0.0):
        raise ValueError(f"inlier_ratio must be > 0, got {inlier_ratio}")

    if inlier_ratio >= 1.0:
        return int(min_iterations)

    # Log. probability of producing a bad hypothesis
    log_prob = math.log(1.0 - inlier_ratio ** sample_size) - _EPS

    num_iterations = math.floor(log_failure_probability / log_prob)
    return int(min(max(num_iterations, min_iterations), max_iterations))


class RobustEstimator:
    """
    Hypothesize-and-test loop around a minimal similarity solver.

    One instance owns one sampler (RNG + index permutation); use one instance
    per concurrent run.

    - estimate(priors, correspondences) -> (best_solution, summary)
    """

    def __init__(self, params: RansacParameters, solver: MinimalSolver) -> None:
        self.params = params
        self.solver = solver
        self._sampler = MinimalSampler(seed=params.seed, sample_size=MINIMAL_SAMPLE_SIZE)

    def compute_max_iterations(self, inlier_ratio: float, log_failure_probability: float) -> int:
        return compute_max_iterations(
            inlier_ratio,
            log_failure_probability,
            min_iterations=self.params.min_iterations,
            max_iterations=self.params.max_iterations,
            sample_size=MINIMAL_SAMPLE_SIZE,
        )

    def estimate(
            self,
            priors: Optional[Priors],
            correspondences: Sequence[Correspondence],
    ) -> Tuple[Solution, RansacSummary]:
        """
        Run RANSAC over the 2D-3D correspondences.

        Inputs:
        - priors: forwarded unchanged to the minimal solver
        - correspondences: at least 4

        Returns:
        - best solution: exactly one hypothesis, identity if nothing beat it
        - summary: iterations, hypotheses, inlier indices, confidence
        """
        # ---------- Input validation ----------
        n = len(correspondences)
        if n < MINIMAL_SAMPLE_SIZE:
            raise ValueError(
                f"Not enough correspondences: need {MINIMAL_SAMPLE_SIZE}, got {n}")

        summary = RansacSummary()
        self._sampler.reset(n)

        log_failure_prob = math.log(self.params.failure_probability)
        max_iterations = self.params.max_iterations

        # Initialize best solution to the identity transform
        best_solution = Solution.identity()
        inlier_ratio = 0.0

        # ---------- Main RANSAC Loop ----------
        while summary.num_iterations < max_iterations:
            # Minimal sample -> solver input
            sample = self._sampler.sample(correspondences)
            datum = compute_input_datum(sample, priors)

            hypotheses = self.solver.estimate(datum)
            if hypotheses is None or len(hypotheses) == 0:
                logger.debug("Failed to estimate hypotheses. Skipping sample ...")
                summary.num_iterations += 1
                continue

            summary.num_hypotheses += len(hypotheses)
            logger.debug("Num. candidate solutions: %d", len(hypotheses))

            inlier_ratio = update_best_solution(
                correspondences,
                hypotheses,
                best_solution,
                summary.inliers,
                self.params.reprojection_error_thresh,
            )

            # Adaptive stopping
            max_iterations = self.compute_max_iterations(inlier_ratio, log_failure_prob)
            summary.num_iterations += 1

        # Confidence from the last observed ratio
        summary.confidence = 1.0 - (1.0 - inlier_ratio ** MINIMAL_SAMPLE_SIZE) ** summary.num_iterations
        logger.debug("Best inlier ratio: %.6f", inlier_ratio)
        logger.debug("Confidence: %.6f", summary.confidence)
        return best_solution, summary
