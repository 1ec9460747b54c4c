"""
linear_kalman.py - 등속(Constant Velocity) 모델 기반 선형 Kalman Filter

상태 벡터: [x, y, z, vx, vy, vz] (6차원)
측정 벡터: [x, y, z] (3차원, 위치만 관측)

예측: P' = F P F^T + Q
  F = [[I, dt*I],
       [0,    I]]
보정: Joseph form (filterpy KalmanFilter.update)
  P = (I - KH) P (I - KH)^T + K R K^T
이후 P = (P + P^T) / 2 로 대칭성을 유지합니다.

Version: 1.0
Author: FurSys AI Team
"""

import numpy as np
from filterpy.kalman import KalmanFilter
from typing import Tuple
import logging

from ..exceptions import NumericalSingularityError

logger = logging.getLogger(__name__)

STATE_DIM = 6
MEAS_DIM = 3

# S의 조건수가 이 값을 넘으면 특이 행렬로 간주
MAX_INNOVATION_CONDITION = 1.0 / np.finfo(np.float64).eps


def process_noise_from_accel(max_accel: float, dt: float) -> np.ndarray:
    """
    최대 가속도와 공칭 샘플 간격으로 프로세스 노이즈 대각 성분 계산

    위치: (0.5 * a * dt^2)^2
    속도: (a * dt)^2

    Args:
        max_accel: 최대 예상 가속도 (m/s^2)
        dt: 공칭 샘플 간격 (초)

    Returns:
        길이 6의 대각 성분
    """
    if max_accel < 0 or not np.isfinite(max_accel):
        raise ValueError(f"max_accel must be finite and non-negative, got {max_accel}")
    if dt <= 0 or not np.isfinite(dt):
        raise ValueError(f"Nominal dt must be positive, got {dt}")

    pos_std = 0.5 * max_accel * dt * dt
    vel_std = max_accel * dt
    diag = np.array([pos_std] * 3 + [vel_std] * 3, dtype=np.float64)
    return diag ** 2


def measurement_noise_from_std(std: float) -> np.ndarray:
    """축별 위치 측정 표준편차 -> 분산 대각 성분 (길이 3)"""
    if std < 0 or not np.isfinite(std):
        raise ValueError(f"Measurement noise std must be finite and non-negative, got {std}")
    return np.full(MEAS_DIM, std ** 2, dtype=np.float64)


class LinearKalmanFilter:
    """
    위치 관측으로 위치/속도를 추정하는 6-상태 Kalman Filter

    가변 샘플 간격을 지원하기 위해 predict() 호출마다
    상태 전이 행렬 F의 dt 성분을 갱신합니다.

    Example:
        >>> kf = LinearKalmanFilter()
        >>> kf.initialize(np.array([1.0, 2.0, 3.0, 0, 0, 0]), 1.0,
        ...               process_noise_from_accel(5.0, 0.05),
        ...               measurement_noise_from_std(0.01))
        >>> kf.predict(0.05)
        >>> kf.correct(np.array([1.01, 2.0, 3.0]), 0.05)
        >>> print(kf.velocity)
    """

    def __init__(self):
        self.kf = KalmanFilter(dim_x=STATE_DIM, dim_z=MEAS_DIM)

        # 측정 행렬 H (위치만 측정)
        self.kf.H = np.zeros((MEAS_DIM, STATE_DIM))
        self.kf.H[0, 0] = 1  # x
        self.kf.H[1, 1] = 1  # y
        self.kf.H[2, 2] = 1  # z

        self._initialized = False
        self.last_measurement_dt = 0.0

    def initialize(
        self,
        initial_state: np.ndarray,
        initial_covariance_scale: float,
        process_noise_diag: np.ndarray,
        measurement_noise_diag: np.ndarray
    ):
        """
        필터 초기화 (한 번만 허용)

        Args:
            initial_state: [x, y, z, vx, vy, vz] - 속도는 보통 0
            initial_covariance_scale: 초기 공분산 = scale * I
            process_noise_diag: Q 대각 성분 (6)
            measurement_noise_diag: R 대각 성분 (3)

        Raises:
            RuntimeError: 이미 초기화된 경우
            ValueError: 입력 형식/값이 잘못된 경우
        """
        if self._initialized:
            raise RuntimeError("LinearKalmanFilter already initialized")

        x0 = np.asarray(initial_state, dtype=np.float64).reshape(-1)
        if x0.shape != (STATE_DIM,):
            raise ValueError(f"initial_state must have {STATE_DIM} components, got {x0.shape}")
        if not np.all(np.isfinite(x0)):
            raise ValueError(f"initial_state contains non-finite values: {x0}")

        if not np.isfinite(initial_covariance_scale) or initial_covariance_scale <= 0:
            raise ValueError(
                f"initial_covariance_scale must be positive, got {initial_covariance_scale}"
            )

        q = self._check_diag(process_noise_diag, STATE_DIM, 'process_noise_diag')
        r = self._check_diag(measurement_noise_diag, MEAS_DIM, 'measurement_noise_diag')

        self.kf.x = x0.copy()
        self.kf.P = np.eye(STATE_DIM) * float(initial_covariance_scale)
        self.kf.Q = np.diag(q)
        self.kf.R = np.diag(r)
        self.kf.F = np.eye(STATE_DIM)

        self._initialized = True
        logger.info(
            f"LinearKalmanFilter initialized: position={x0[:3]}, "
            f"P0 scale={initial_covariance_scale}, Q={q}, R={r}"
        )

    @staticmethod
    def _check_diag(diag: np.ndarray, size: int, name: str) -> np.ndarray:
        arr = np.asarray(diag, dtype=np.float64).reshape(-1)
        if arr.shape != (size,):
            raise ValueError(f"{name} must have {size} components, got {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise ValueError(f"{name} contains non-finite values: {arr}")
        if np.any(arr < 0):
            raise ValueError(f"{name} must be non-negative, got {arr}")
        return arr

    def _require_initialized(self):
        if not self._initialized:
            raise RuntimeError("Filter not initialized. Call initialize() first.")

    def _symmetrize(self):
        self.kf.P = 0.5 * (self.kf.P + self.kf.P.T)

    def predict(self, dt: float):
        """
        예측 단계 (등속 모델)

        Args:
            dt: 경과 시간 (초), 0 이상

        Raises:
            ValueError: dt가 음수이거나 유한하지 않은 경우
        """
        self._require_initialized()
        if not np.isfinite(dt):
            raise ValueError(f"dt must be finite, got {dt}")
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")

        # 위치 += 속도 * dt
        self.kf.F[0, 3] = dt
        self.kf.F[1, 4] = dt
        self.kf.F[2, 5] = dt

        self.kf.predict()
        self._symmetrize()

    def innovation(self, measurement: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        혁신(잔차)과 혁신 공분산 계산 (상태 변경 없음)

        Returns:
            (y, S): y = z - Hx, S = HPH^T + R
        """
        self._require_initialized()
        z = self._check_measurement(measurement)
        H = self.kf.H
        y = z - H @ self.kf.x
        S = H @ self.kf.P @ H.T + self.kf.R
        return y, S

    def mahalanobis_squared(self, measurement: np.ndarray) -> float:
        """
        보정 전 Mahalanobis 거리 제곱 y^T S^-1 y

        측정값 채택/기각 판단에 사용하는 통계량
        """
        y, S = self.innovation(measurement)
        self._check_innovation_covariance(S)
        return float(y @ np.linalg.solve(S, y))

    @staticmethod
    def _check_measurement(measurement: np.ndarray) -> np.ndarray:
        z = np.asarray(measurement, dtype=np.float64).reshape(-1)
        if z.shape != (MEAS_DIM,):
            raise ValueError(f"Measurement must have {MEAS_DIM} components, got {z.shape}")
        if not np.all(np.isfinite(z)):
            raise ValueError(f"Measurement contains non-finite values: {z}")
        return z

    @staticmethod
    def _check_innovation_covariance(S: np.ndarray):
        cond = np.linalg.cond(S)
        if not np.isfinite(cond) or cond > MAX_INNOVATION_CONDITION:
            raise NumericalSingularityError(
                f"Innovation covariance is singular (cond={cond:.3e}); "
                f"measurement noise and position covariance are both ~0"
            )

    def correct(self, measurement: np.ndarray, dt: float):
        """
        보정 단계 (위치 관측)

        Args:
            measurement: 측정 위치 [x, y, z]
            dt: 직전 측정 이후 경과 시간 (초), 0 이상

        Raises:
            NumericalSingularityError: S가 특이 행렬인 경우 (상태는 변경되지 않음)
            ValueError: 측정값/dt가 잘못된 경우
        """
        self._require_initialized()
        if not np.isfinite(dt) or dt < 0:
            raise ValueError(f"Measurement dt must be finite and non-negative, got {dt}")

        z = self._check_measurement(measurement)
        _, S = self.innovation(z)
        self._check_innovation_covariance(S)

        x_prior = self.kf.x.copy()
        P_prior = self.kf.P.copy()
        try:
            self.kf.update(z)
        except np.linalg.LinAlgError as e:
            self.kf.x, self.kf.P = x_prior, P_prior
            raise NumericalSingularityError(f"Innovation covariance inversion failed: {e}") from e

        if not (np.all(np.isfinite(self.kf.x)) and np.all(np.isfinite(self.kf.P))):
            self.kf.x, self.kf.P = x_prior, P_prior
            raise NumericalSingularityError("Correction produced non-finite state or covariance")

        self._symmetrize()
        self.last_measurement_dt = float(dt)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def state(self) -> np.ndarray:
        """현재 상태 벡터 (복사본)"""
        return self.kf.x.flatten().copy()

    @property
    def covariance(self) -> np.ndarray:
        """현재 공분산 행렬 (복사본)"""
        return self.kf.P.copy()

    @property
    def position(self) -> np.ndarray:
        return self.kf.x.flatten()[0:3].copy()

    @property
    def velocity(self) -> np.ndarray:
        return self.kf.x.flatten()[3:6].copy()

    @property
    def position_covariance(self) -> np.ndarray:
        return self.kf.P[0:3, 0:3].copy()

    @property
    def velocity_covariance(self) -> np.ndarray:
        return self.kf.P[3:6, 3:6].copy()

    @property
    def process_noise(self) -> np.ndarray:
        return self.kf.Q.copy()

    @property
    def measurement_noise(self) -> np.ndarray:
        return self.kf.R.copy()
