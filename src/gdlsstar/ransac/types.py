# Andy Zhao

"""
Shared typed primitives for the generalized pose-and-scale RANSAC.

Defines:
- Typed NumPy aliases for geometry
    - 3D points and directions are (3,) float arrays
    - Pixels are (2,) float arrays
    - Rotations are 3x3 orthonormal matrices
- Collaborator protocols (camera model, minimal solver)
- Data records passed between sampler, solver, scorer and estimator
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, TypeAlias

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# float64 everywhere: rotations and reprojection errors are compared against
# small thresholds, so keep full precision.

FloatArray: TypeAlias = npt.NDArray[np.float64]

# A single 3D point / translation / ray direction.
Vec3: TypeAlias = FloatArray          # shape: (3,)

# A single pixel observation.
Pixel: TypeAlias = FloatArray         # shape: (2,)

# Stacked 3D points / rays, one per row.
Points3D: TypeAlias = FloatArray      # shape: (N, 3)

# Rotation matrix (orthonormal, det = +1).
Mat3x3: TypeAlias = FloatArray        # shape: (3, 3)


# ---------- Collaborator protocols ----------
class CameraModel(Protocol):
    """
    A camera of the generalized rig.

    All quantities live in the rig (generalized camera) frame.
    """

    @property
    def position(self) -> Vec3:
        """Camera centre in the rig frame."""
        ...

    def project(self, point: Vec3) -> Optional[Pixel]:
        """
        Project a rig-frame point to a pixel.
        Return None if the point cannot be projected (behind the camera, degenerate).
        """
        ...

    def pixel_to_unit_ray(self, pixel: Pixel) -> Vec3:
        """Unit-norm viewing direction of a pixel, expressed in the rig frame."""
        ...


class MinimalSolver(Protocol):
    """
    Interface of the minimal solver used by the robust estimator.

    Takes the input datum built from exactly one minimal sample and returns
    one or more similarity hypotheses, or None when the sample is degenerate.
    """

    def estimate(self, datum: SolverInput) -> Optional[Solution]:
        ...


# ---------- Data records ----------
@dataclass(frozen=True, eq=False)
class Correspondence:
    """
    A 2D-3D correspondence observed by one camera of the rig.

    point:       3D point in the body / world frame
    observation: pixel where the camera observed it
    camera:      capturing camera (projection model + pose within the rig)
    """
    point: Vec3
    observation: Pixel
    camera: CameraModel

    def __post_init__(self) -> None:
        point = np.asarray(self.point, dtype=np.float64).reshape(-1)
        observation = np.asarray(self.observation, dtype=np.float64).reshape(-1)
        if point.shape != (3,):
            raise ValueError(f"Correspondence.point must have 3 entries, got {point.shape}")
        if observation.shape != (2,):
            raise ValueError(f"Correspondence.observation must have 2 entries, got {observation.shape}")

        # Frozen dataclass: store the float64 copies through object.__setattr__
        object.__setattr__(self, "point", point)
        object.__setattr__(self, "observation", observation)


@dataclass(frozen=True)
class Priors:
    """
    Auxiliary constraints for the minimal solver.

    The estimator never reads these; they are forwarded as-is.
    A weight of 0 disables the corresponding prior.
    """
    scale_prior: float = 1.0
    scale_prior_weight: float = 0.0
    world_down: Optional[Vec3] = None
    rig_down: Optional[Vec3] = None
    gravity_prior_weight: float = 0.0


@dataclass(frozen=True, eq=False)
class SolverInput:
    """
    Minimal-solver input: one ray and one world point per sampled correspondence.
    """
    ray_origins: Points3D       # (K,3) camera centres in the rig frame
    ray_directions: Points3D    # (K,3) unit-norm rays in the rig frame
    world_points: Points3D      # (K,3)
    priors: Priors = field(default_factory=Priors)


@dataclass(eq=False)
class Solution:
    """
    One or more similarity hypotheses stored as parallel lists.

    Hypothesis i maps a world point X into the rig frame as
        (rotations[i] @ X + translations[i]) / scales[i]
    """
    rotations: List[Mat3x3] = field(default_factory=list)
    translations: List[Vec3] = field(default_factory=list)
    scales: List[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        n = len(self.rotations)
        if len(self.translations) != n or len(self.scales) != n:
            raise ValueError(
                "Solution lists must have equal length, got "
                f"{n} rotations, {len(self.translations)} translations, {len(self.scales)} scales"
            )

    def __len__(self) -> int:
        return len(self.rotations)

    @classmethod
    def identity(cls) -> "Solution":
        """Single-hypothesis identity transform: R = I, t = 0, s = 1."""
        return cls(
            rotations=[np.eye(3, dtype=np.float64)],
            translations=[np.zeros(3, dtype=np.float64)],
            scales=[1.0],
        )


# ---------- RANSAC output container ----------
# Mutable on purpose: the estimator fills it in while it runs.
@dataclass
class RansacSummary:
    num_iterations: int = 0         # iterations of the hypothesize-and-test loop
    num_hypotheses: int = 0         # hypotheses returned by the minimal solver
    inliers: List[int] = field(default_factory=list)   # indices under the best solution
    confidence: float = 0.0         # probability that an all-inlier sample was drawn


CorrespondenceSeq: TypeAlias = Sequence[Correspondence]
