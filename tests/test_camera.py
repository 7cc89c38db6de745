"""
PinholeCamera tests.
"""

import numpy as np
import pytest

from gdlsstar.ransac import PinholeCamera
from conftest import rotation_from_rvec


class TestPinholeCamera:

    def setup_method(self):
        self.camera = PinholeCamera.from_intrinsics(500.0, 400.0, 320.0, 240.0)

    def test_principal_point(self):
        pixel = self.camera.project(np.array([0.0, 0.0, 3.0]))
        assert np.allclose(pixel, [320.0, 240.0])

    def test_projection_matches_intrinsics(self):
        pixel = self.camera.project(np.array([1.0, -0.5, 2.0]))
        assert np.allclose(pixel, [320.0 + 500.0 * 0.5, 240.0 - 400.0 * 0.25])

    @pytest.mark.parametrize("z", [0.0, -1.0, -100.0])
    def test_behind_camera_is_none(self, z):
        assert self.camera.project(np.array([0.1, 0.2, z])) is None

    def test_non_finite_point_is_none(self):
        assert self.camera.project(np.array([np.nan, 0.0, 1.0])) is None

    def test_offset_camera_uses_rig_pose(self):
        camera = PinholeCamera.from_intrinsics(
            500.0, 500.0, 320.0, 240.0,
            rotation=rotation_from_rvec([0.0, np.pi, 0.0]),
            position=np.array([1.0, 0.0, 0.0]),
        )
        # Looks down -z of the rig from x = 1
        assert camera.project(np.array([1.0, 0.0, 2.0])) is None
        assert np.allclose(camera.project(np.array([1.0, 0.0, -2.0])), [320.0, 240.0])
        assert camera.depth(np.array([1.0, 0.0, -2.0])) == pytest.approx(2.0)

    def test_ray_points_back_at_pixel(self, rig):
        camera = rig[1]
        pixel = np.array([100.0, 400.0])
        ray = camera.pixel_to_unit_ray(pixel)

        assert np.linalg.norm(ray) == pytest.approx(1.0)
        assert np.allclose(camera.project(camera.position + 3.0 * ray), pixel, atol=1e-6)

    def test_bad_intrinsics_raise(self):
        with pytest.raises(ValueError):
            PinholeCamera(K=np.eye(2))
        with pytest.raises(ValueError):
            PinholeCamera(K=np.full((3, 3), np.nan))
        with pytest.raises(ValueError):
            PinholeCamera(K=np.diag([0.0, 1.0, 1.0]))

    def test_bad_extrinsics_raise(self):
        with pytest.raises(ValueError):
            PinholeCamera(K=np.eye(3), position=np.zeros(2))
        with pytest.raises(ValueError):
            PinholeCamera(K=np.eye(3), rotation=np.eye(4))
