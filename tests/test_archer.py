"""
AimEstimator: 关键点 -> 弓的位置和角度
"""
import numpy as np
import pytest

from game.archer import AimEstimator, AimState
from game.config import BowConfig


class TestAimMapping:

    def test_center_pointer_maps_to_origin(self, landmarks):
        """食指在画面中心时弓在世界原点"""
        aim = AimEstimator().update(landmarks((0.5, 0.5), (0.6, 0.4)))
        assert aim.position == pytest.approx((0.0, 0.0))
        assert aim.angle == pytest.approx(np.arctan2(-0.1, 0.1) - np.pi / 2)

    def test_vertical_axis_is_flipped(self, landmarks):
        """图像上方（y 小）对应世界上方（y 大）"""
        aim = AimEstimator().update(landmarks((0.7, 0.2), (0.7, 0.1)))
        assert aim.position == pytest.approx((2.0, 3.0))

    def test_reference_straight_right_gives_minus_quarter_turn(self, landmarks):
        aim = AimEstimator().update(landmarks((0.5, 0.5), (0.8, 0.5)))
        assert aim.angle == pytest.approx(-np.pi / 2)

    def test_custom_scale(self, landmarks):
        aim = AimEstimator(BowConfig(scale=4.0)).update(landmarks((1.0, 0.0), (0.5, 0.5)))
        assert aim.position == pytest.approx((2.0, 2.0))


class TestHoldLastValue:

    def test_initial_state_is_origin(self):
        assert AimEstimator().update(None) == AimState()

    def test_missing_hand_keeps_previous_state(self, landmarks):
        """丢失手部后不回到原点"""
        estimator = AimEstimator()
        seen = estimator.update(landmarks((0.2, 0.3), (0.4, 0.1)))
        for _ in range(5):
            assert estimator.update(None) == seen
        assert estimator.state == seen

    def test_new_reading_replaces_held_state(self, landmarks):
        estimator = AimEstimator()
        estimator.update(landmarks((0.2, 0.3), (0.4, 0.1)))
        estimator.update(None)
        aim = estimator.update(landmarks((0.5, 0.5), (0.5, 0.4)))
        assert aim.position == pytest.approx((0.0, 0.0))
        assert aim.angle == pytest.approx(-np.pi)


class TestLandmarkContract:

    @pytest.mark.parametrize("count", [0, 5, 20, 22])
    def test_wrong_point_count_raises(self, landmarks, count):
        points = np.full((count, 3), 0.5)
        with pytest.raises(ValueError):
            AimEstimator().update(points)

    def test_failed_update_leaves_state_untouched(self, landmarks):
        estimator = AimEstimator()
        seen = estimator.update(landmarks((0.2, 0.3), (0.4, 0.1)))
        with pytest.raises(ValueError):
            estimator.update([(0.1, 0.1, 0.0)] * 3)
        assert estimator.state == seen

    def test_plain_tuples_are_accepted(self):
        points = [(0.5, 0.5, 0.0)] * 21
        points[8] = (0.6, 0.5, 0.0)
        aim = AimEstimator().update(points)
        assert aim.position == pytest.approx((1.0, 0.0))
