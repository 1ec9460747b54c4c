"""
angular_rate.py - 연속 자세 샘플로부터 각속도 추정 (단일 스텝 미분)

    R_dot = (R - R_prev) / dt
    w_hat = R_dot * R^T        (반대칭 행렬)
    w     = [w_hat(2,1), w_hat(0,2), w_hat(1,0)]

1차 차분이므로 노이즈가 증폭되며, 평활화는 하지 않습니다.
dt가 dt_floor 이하이면 나눗셈 대신 직전 출력을 유지합니다.

Author: FurSys AI Team
"""

import numpy as np
from typing import Any
import logging

from ..measurement.orientation import to_rotation_matrix

logger = logging.getLogger(__name__)

DEFAULT_DT_FLOOR = 1e-6  # 초


class AngularRateDifferentiator:
    """
    회전 행렬 차분 기반 각속도 추정기

    Example:
        >>> diff = AngularRateDifferentiator()
        >>> w = diff.step(Quaternion.identity(), 0.05)
    """

    def __init__(self, dt_floor: float = DEFAULT_DT_FLOOR):
        if dt_floor < 0 or not np.isfinite(dt_floor):
            raise ValueError(f"dt_floor must be finite and non-negative, got {dt_floor}")
        self.dt_floor = dt_floor
        self._R_prev = np.eye(3)
        self._last_rate = np.zeros(3)

    def step(self, orientation: Any, dt: float) -> np.ndarray:
        """
        각속도 한 스텝 계산

        Args:
            orientation: 현재 자세 (to_rotation_matrix가 지원하는 형식)
            dt: 직전 샘플 이후 경과 시간 (초)

        Returns:
            [wx, wy, wz] rad/s
        """
        R = to_rotation_matrix(orientation)

        if dt > self.dt_floor:
            R_dot = (R - self._R_prev) / dt
            w_hat = R_dot @ R.T
            self._last_rate = np.array([w_hat[2, 1], w_hat[0, 2], w_hat[1, 0]])
        else:
            logger.debug(f"dt={dt} <= floor {self.dt_floor}, holding angular rate")

        # 계산 여부와 관계없이 항상 최신 자세로 갱신
        self._R_prev = R.copy()
        return self._last_rate.copy()

    def reset(self):
        self._R_prev = np.eye(3)
        self._last_rate = np.zeros(3)

    @property
    def rotation_history(self) -> np.ndarray:
        return self._R_prev.copy()

    @property
    def last_rate(self) -> np.ndarray:
        return self._last_rate.copy()
