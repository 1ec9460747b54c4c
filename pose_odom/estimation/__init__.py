"""
estimation 모듈 - 상태 추정

- LinearKalmanFilter: 등속 모델 6-상태 Kalman Filter (위치/속도)
- AngularRateDifferentiator: 회전 행렬 차분 각속도
- 측정값 게이트 (accept_all, ChiSquareGate)
"""

from .linear_kalman import (
    LinearKalmanFilter,
    process_noise_from_accel,
    measurement_noise_from_std
)
from .angular_rate import AngularRateDifferentiator
from .gating import MeasurementGate, accept_all, ChiSquareGate

__all__ = [
    'LinearKalmanFilter',
    'process_noise_from_accel',
    'measurement_noise_from_std',
    'AngularRateDifferentiator',
    'MeasurementGate',
    'accept_all',
    'ChiSquareGate',
]
