# Andy Zhao
"""
Pinhole camera of a generalized (multi-camera) rig.

Each camera has:
  - an intrinsic matrix K
  - a rotation mapping rig-frame directions into the camera frame
  - a position (camera centre) in the rig frame

A rig-frame point X maps into the camera frame as

    X_cam = rotation @ (X - position)

and projects to the pixel K @ X_cam / z_cam when z_cam > 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import cv2
import numpy as np

from .types import Mat3x3, Pixel, Vec3


@dataclass(frozen=True, eq=False)
class PinholeCamera:
    """
    Pinhole projection model (no lens distortion).

    K:
      - 3x3 intrinsic matrix [[fx, 0, cx], [0, fy, cy], [0, 0, 1]]

    rotation:
      - rig -> camera rotation

    position:
      - camera centre in the rig frame

    min_depth:
      - points with camera-frame depth <= min_depth are not projected
    """
    K: Mat3x3
    rotation: Mat3x3 = field(default_factory=lambda: np.eye(3, dtype=np.float64))
    position: Vec3 = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    min_depth: float = 0.0

    def __post_init__(self) -> None:
        K = np.asarray(self.K, dtype=np.float64)
        if K.shape != (3, 3) or not np.isfinite(K).all():
            raise ValueError(f"PinholeCamera.K must be a finite 3x3 matrix, got shape {K.shape}")
        if K[0, 0] == 0.0 or K[1, 1] == 0.0:
            raise ValueError("PinholeCamera.K must have non-zero focal lengths")

        R = np.asarray(self.rotation, dtype=np.float64)
        if R.shape != (3, 3):
            raise ValueError(f"PinholeCamera.rotation must be 3x3, got {R.shape}")

        c = np.asarray(self.position, dtype=np.float64).reshape(-1)
        if c.shape != (3,):
            raise ValueError(f"PinholeCamera.position must have 3 entries, got {c.shape}")

        # Frozen dataclass: normalize dtypes through object.__setattr__
        object.__setattr__(self, "K", K)
        object.__setattr__(self, "rotation", R)
        object.__setattr__(self, "position", c)

        # OpenCV expects the extrinsics as (rvec, tvec) with X_cam = R X + t
        rvec, _ = cv2.Rodrigues(R)
        object.__setattr__(self, "_rvec", rvec.reshape(3, 1))
        object.__setattr__(self, "_tvec", (-R @ c).reshape(3, 1))

    @classmethod
    def from_intrinsics(
        cls,
        fx: float,
        fy: float,
        cx: float,
        cy: float,
        *,
        rotation: Optional[Mat3x3] = None,
        position: Optional[Vec3] = None,
    ) -> "PinholeCamera":
        K = np.array(
            [
                [fx, 0.0, cx],
                [0.0, fy, cy],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )
        kwargs = {}
        if rotation is not None:
            kwargs["rotation"] = rotation
        if position is not None:
            kwargs["position"] = position
        return cls(K=K, **kwargs)

    def depth(self, point: Vec3) -> float:
        """
        z coordinate of a rig-frame point in the camera frame.
        """
        return float(self.rotation[2] @ (np.asarray(point, dtype=np.float64) - self.position))

    def project(self, point: Vec3) -> Optional[Pixel]:
        """
        Project a rig-frame point to a pixel.

        Returns:
          - (2,) float64 pixel, or None if the point is behind the camera
            or not finite.
        """
        point = np.asarray(point, dtype=np.float64).reshape(3)
        if not np.isfinite(point).all():
            return None

        if self.depth(point) <= self.min_depth:
            return None

        # cv2.projectPoints takes (N,3) object points, returns (N,1,2)
        img_pts, _ = cv2.projectPoints(
            point.reshape(1, 3),
            self._rvec,
            self._tvec,
            self.K,
            None,
        )
        return img_pts.reshape(2).astype(np.float64)

    def pixel_to_unit_ray(self, pixel: Pixel) -> Vec3:
        """
        Back-project a pixel to a unit viewing direction in the rig frame.

        1) undistortPoints with no distortion gives normalized coordinates (x, y)
        2) camera-frame ray is [x, y, 1]
        3) rotate back into the rig frame with rotation^T
        """
        px = np.asarray(pixel, dtype=np.float64).reshape(1, 1, 2)
        normalized = cv2.undistortPoints(px, self.K, None).reshape(2)

        ray_cam = np.array([normalized[0], normalized[1], 1.0], dtype=np.float64)
        ray_rig = self.rotation.T @ ray_cam
        return ray_rig / np.linalg.norm(ray_rig)
