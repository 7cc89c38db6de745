"""
pytest fixtures: a two-camera rig, a synthetic scene with a known similarity
transform, and minimal-solver test doubles.
"""

from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np
import pytest

from gdlsstar.ransac import (
    Correspondence, PinholeCamera, Solution, SolverInput,
)


def rotation_from_rvec(rvec) -> np.ndarray:
    R, _ = cv2.Rodrigues(np.asarray(rvec, dtype=np.float64).reshape(3, 1))
    return R


@dataclass
class Scene:
    correspondences: List[Correspondence]
    inlier_ids: List[int]
    rotation: np.ndarray
    translation: np.ndarray
    scale: float


def make_rig() -> List[PinholeCamera]:
    cam0 = PinholeCamera.from_intrinsics(500.0, 500.0, 320.0, 240.0)
    cam1 = PinholeCamera.from_intrinsics(
        500.0, 500.0, 320.0, 240.0,
        rotation=rotation_from_rvec([0.0, 0.1, 0.0]),
        position=np.array([0.5, 0.0, 0.0]),
    )
    return [cam0, cam1]


def make_scene(num_inliers: int = 40, num_outliers: int = 10, seed: int = 7) -> Scene:
    """
    Inliers: rig-frame points in front of the rig, observed with <= 0.5 px
    noise per axis. Outliers: same kind of points with random pixels.
    """
    rng = np.random.default_rng(seed)
    cameras = make_rig()

    rotation = rotation_from_rvec([0.1, -0.2, 0.05])
    translation = np.array([0.3, -0.1, 2.0])
    scale = 1.5

    correspondences = []
    inlier_ids = []
    for k in range(num_inliers + num_outliers):
        camera = cameras[k % len(cameras)]
        p_rig = rng.uniform([-2.0, -1.5, 4.0], [2.0, 1.5, 8.0])
        # Invert (R X + t) / s = p_rig
        world = rotation.T @ (scale * p_rig - translation)

        if k < num_inliers:
            pixel = camera.project(p_rig) + rng.uniform(-0.5, 0.5, size=2)
            inlier_ids.append(k)
        else:
            pixel = rng.uniform([0.0, 0.0], [640.0, 480.0])
        correspondences.append(Correspondence(point=world, observation=pixel, camera=camera))

    return Scene(correspondences, inlier_ids, rotation, translation, scale)


class OracleSolver:
    """
    Minimal-solver double.

    Knows the true transform. If every sampled ray agrees with it, returns
    [decoy, truth]; otherwise returns a decoy or reports failure.
    """

    def __init__(self, scene: Scene, seed: int = 0, max_ray_angle: float = 1e-2) -> None:
        self.scene = scene
        self.max_ray_angle = max_ray_angle
        self.calls = 0
        self._rng = np.random.default_rng(seed)

    def _decoy(self):
        rotation = rotation_from_rvec(self._rng.normal(size=3))
        translation = self._rng.normal(size=3) * 5.0
        scale = float(self._rng.uniform(0.5, 2.0))
        return rotation, translation, scale

    def _is_clean(self, datum: SolverInput) -> bool:
        s = self.scene
        for origin, direction, world in zip(datum.ray_origins, datum.ray_directions, datum.world_points):
            p_rig = (s.rotation @ world + s.translation) / s.scale
            ray = p_rig - origin
            ray = ray / np.linalg.norm(ray)
            angle = np.arccos(np.clip(ray @ direction, -1.0, 1.0))
            if angle > self.max_ray_angle:
                return False
        return True

    def estimate(self, datum: SolverInput) -> Optional[Solution]:
        self.calls += 1
        R_d, t_d, s_d = self._decoy()
        if self._is_clean(datum):
            s = self.scene
            return Solution(
                rotations=[R_d, s.rotation.copy()],
                translations=[t_d, s.translation.copy()],
                scales=[s_d, s.scale],
            )
        if self._rng.uniform() < 0.3:
            return None
        return Solution(rotations=[R_d], translations=[t_d], scales=[s_d])


class BehindRigSolver:
    """Every hypothesis pushes all points behind the cameras."""

    def estimate(self, datum: SolverInput) -> Optional[Solution]:
        return Solution(
            rotations=[np.eye(3)],
            translations=[np.array([0.0, 0.0, -1000.0])],
            scales=[1.0],
        )


class FailingSolver:
    """Every sample is degenerate."""

    def estimate(self, datum: SolverInput) -> Optional[Solution]:
        return None


@pytest.fixture
def rig():
    return make_rig()


@pytest.fixture
def scene():
    return make_scene()


@pytest.fixture
def outlier_scene():
    return make_scene(num_inliers=0, num_outliers=50, seed=11)
