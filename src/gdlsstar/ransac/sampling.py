# Andy Zhao
"""
Minimal-sample drawing for RANSAC.

Instead of rng.choice(n, size=K, replace=False) on every iteration, keep a
permutation of correspondence indices and run K steps of a partial
Fisher-Yates shuffle per draw:

    for i in [0, K):
        j = uniform integer in [i, n)
        swap(indices[i], indices[j])
        take indices[i]

Every draw is K distinct indices, uniform without replacement, in O(K).
The permutation is NOT reset between draws, later draws keep shuffling the
same array. It is reset once per estimation run.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .types import Correspondence

# Minimal sample size of the generalized pose-and-scale problem.
MINIMAL_SAMPLE_SIZE = 4


class MinimalSampler:
    """
    Stateful sampler.

    - reset(n) before a run
    - sample(correspondences) once per RANSAC iteration
    """

    def __init__(self, seed: int = 0, sample_size: int = MINIMAL_SAMPLE_SIZE) -> None:
        if sample_size < 1:
            raise ValueError("sample_size must be >= 1")

        self.sample_size = int(sample_size)
        # RNG: reproducible sampling
        self._rng = np.random.default_rng(seed)
        self._indices: Optional[np.ndarray] = None

    @property
    def num_correspondences(self) -> int:
        return 0 if self._indices is None else int(self._indices.shape[0])

    def reset(self, num_correspondences: int) -> None:
        """
        Identity permutation: index i maps to i.
        """
        if num_correspondences < self.sample_size:
            raise ValueError(
                f"Need at least {self.sample_size} correspondences to sample, got {num_correspondences}"
            )
        self._indices = np.arange(num_correspondences, dtype=np.int64)

    def sample_indices(self) -> List[int]:
        """
        Draw one minimal sample of distinct indices, in draw order.
        """
        if self._indices is None:
            raise ValueError("Call reset() before sampling.")

        idx = self._indices
        n = idx.shape[0]
        drawn = []
        for i in range(self.sample_size):
            j = int(self._rng.integers(i, n))
            idx[i], idx[j] = idx[j], idx[i]
            drawn.append(int(idx[i]))
        return drawn

    def sample(self, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        """
        Draw one minimal sample of correspondences.
        """
        if len(correspondences) != self.num_correspondences:
            raise ValueError(
                f"Sampler was reset for {self.num_correspondences} correspondences, "
                f"got {len(correspondences)}"
            )
        return [correspondences[k] for k in self.sample_indices()]
