"""
pose_odom - Pose 관측 기반 Odometry 추정

주요 특징:
- 등속 모델 6-상태 선형 Kalman Filter (위치/속도)
- Joseph form 공분산 보정 (대칭/PSD 유지)
- 회전 행렬 차분 기반 각속도
- 첫 관측 기준 local odometry, mocap 패킷, tf 변환 출력

Version: 1.0
Author: FurSys AI Team
"""

__version__ = "1.0.0"
__author__ = "FurSys AI Team"

from .exceptions import ConfigurationError, NumericalSingularityError

from .measurement.pose_types import (
    Quaternion,
    PoseSample,
    OdometryEstimate,
    MocapPose,
    FrameTransform,
    OdometryOutput
)

from .estimation.linear_kalman import (
    LinearKalmanFilter,
    process_noise_from_accel,
    measurement_noise_from_std
)
from .estimation.angular_rate import AngularRateDifferentiator
from .estimation.gating import accept_all, ChiSquareGate

from .odometry.fusion_driver import PoseOdometry

__all__ = [
    # Errors
    'ConfigurationError',
    'NumericalSingularityError',
    # Types
    'Quaternion',
    'PoseSample',
    'OdometryEstimate',
    'MocapPose',
    'FrameTransform',
    'OdometryOutput',
    # Estimation
    'LinearKalmanFilter',
    'process_noise_from_accel',
    'measurement_noise_from_std',
    'AngularRateDifferentiator',
    'accept_all',
    'ChiSquareGate',
    # Driver
    'PoseOdometry',
]
