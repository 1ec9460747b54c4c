"""
AngularRateDifferentiator 단위 테스트
"""

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from pose_odom.estimation.angular_rate import AngularRateDifferentiator
from pose_odom.measurement.pose_types import Quaternion
from pose_odom.measurement.orientation import to_rotation_matrix


class TestDifferentiation:
    """각속도 계산 테스트"""

    def test_identity_gives_zero_rate(self):
        diff = AngularRateDifferentiator()
        for _ in range(5):
            w = diff.step(Quaternion.identity(), 0.05)
            np.testing.assert_array_equal(w, [0.0, 0.0, 0.0])

    def test_constant_yaw_rate(self):
        """z축 등각속도 회전: wz = sin(w*dt)/dt"""
        diff = AngularRateDifferentiator()
        rate, dt = 0.5, 0.01

        for k in range(50):
            q = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), rate * k * dt)
            w = diff.step(q, dt)

        np.testing.assert_allclose(w, [0.0, 0.0, np.sin(rate * dt) / dt], atol=1e-9)
        assert w[2] == pytest.approx(rate, rel=1e-4)

    @pytest.mark.parametrize("axis, index", [
        ([1.0, 0.0, 0.0], 0),
        ([0.0, 1.0, 0.0], 1),
        ([0.0, 0.0, 1.0], 2),
    ])
    def test_axis_extraction(self, axis, index):
        diff = AngularRateDifferentiator()
        dt = 0.001
        diff.step(Quaternion.identity(), dt)
        w = diff.step(Quaternion.from_axis_angle(np.array(axis), 0.2 * dt), dt)

        expected = np.zeros(3)
        expected[index] = 0.2
        np.testing.assert_allclose(w, expected, atol=1e-6)


class TestDegenerateTiming:
    """dt가 floor 이하인 경우"""

    def test_zero_dt_twice_returns_zero(self):
        diff = AngularRateDifferentiator()
        q = Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), 0.3)

        w1 = diff.step(q, 0.0)
        w2 = diff.step(q, 0.0)

        np.testing.assert_array_equal(w1, np.zeros(3))
        np.testing.assert_array_equal(w2, np.zeros(3))

    def test_holds_previous_rate(self):
        diff = AngularRateDifferentiator()
        z = np.array([0.0, 0.0, 1.0])
        diff.step(Quaternion.identity(), 0.01)
        w = diff.step(Quaternion.from_axis_angle(z, 0.01), 0.01)

        held = diff.step(Quaternion.from_axis_angle(z, 0.5), 1e-9)
        np.testing.assert_array_equal(held, w)

    def test_history_updated_even_when_held(self):
        diff = AngularRateDifferentiator()
        q = Quaternion.from_axis_angle(np.array([1.0, 0.0, 0.0]), 0.4)

        diff.step(q, 0.0)

        np.testing.assert_allclose(diff.rotation_history, to_rotation_matrix(q))

    def test_negative_dt_holds(self):
        diff = AngularRateDifferentiator()
        w = diff.step(Quaternion.from_axis_angle(np.array([0.0, 1.0, 0.0]), 0.1), -0.5)
        np.testing.assert_array_equal(w, np.zeros(3))

    def test_reset(self):
        diff = AngularRateDifferentiator()
        diff.step(Quaternion.identity(), 0.01)
        diff.step(Quaternion.from_axis_angle(np.array([0.0, 0.0, 1.0]), 0.01), 0.01)
        diff.reset()

        np.testing.assert_array_equal(diff.rotation_history, np.eye(3))
        np.testing.assert_array_equal(diff.last_rate, np.zeros(3))

    def test_invalid_floor(self):
        with pytest.raises(ValueError):
            AngularRateDifferentiator(dt_floor=-1.0)


class TestOrientationFormats:
    """회전 표현 추상화 테스트"""

    def test_equivalent_representations(self):
        rot = Rotation.from_rotvec([0.1, -0.2, 0.3])
        x, y, z, w = rot.as_quat()
        expected = rot.as_matrix()

        for orientation in (
            rot,
            Quaternion(x=x, y=y, z=z, w=w),
            np.array([x, y, z, w]),
            expected.copy(),
        ):
            np.testing.assert_allclose(to_rotation_matrix(orientation), expected, atol=1e-12)

    def test_object_with_to_rotation_matrix(self):
        class Attitude:
            def to_rotation_matrix(self):
                return np.eye(3)

        np.testing.assert_array_equal(to_rotation_matrix(Attitude()), np.eye(3))

    def test_same_rate_for_rotation_and_quaternion(self):
        a = AngularRateDifferentiator()
        b = AngularRateDifferentiator()
        rots = [Rotation.from_rotvec([0.0, 0.0, 0.05 * k]) for k in range(5)]

        for rot in rots:
            wa = a.step(rot, 0.02)
            x, y, z, w = rot.as_quat()
            wb = b.step(Quaternion(x=x, y=y, z=z, w=w), 0.02)

        np.testing.assert_allclose(wa, wb, atol=1e-12)

    def test_invalid_shape(self):
        with pytest.raises(ValueError):
            to_rotation_matrix(np.eye(2))

    def test_zero_quaternion(self):
        with pytest.raises(ValueError):
            to_rotation_matrix(Quaternion(x=0.0, y=0.0, z=0.0, w=0.0))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
