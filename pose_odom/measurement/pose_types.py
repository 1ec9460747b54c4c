"""
pose_types.py - 입력/출력 자세 데이터 타입

입력:
- PoseSample: 타임스탬프 + 위치 + 쿼터니언 (외부 pose 소스)

출력:
- OdometryEstimate: 융합된 위치/속도 + 공분산 블록 + 각속도
- MocapPose: 원본 자세를 프레임 ID만 바꿔 전달 (pose-only 소비자용)
- FrameTransform: 부모 프레임 -> child_frame_id 변환
- OdometryOutput: 샘플 하나당 생성되는 출력 묶음

Version: 1.0
Author: FurSys AI Team
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass
class Quaternion:
    """
    쿼터니언 (x, y, z, w) - scipy/ROS 형식

    표현: q = w + xi + yj + zk
    """
    x: float
    y: float
    z: float
    w: float

    def to_array(self) -> np.ndarray:
        """[x, y, z, w] 형식 (scipy 표준)"""
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)

    @property
    def norm(self) -> float:
        """쿼터니언 크기"""
        return float(np.linalg.norm(self.to_array()))

    @property
    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.to_array())))

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y, 'z': self.z, 'w': self.w}

    def __repr__(self) -> str:
        return f"Quaternion(x={self.x:.4f}, y={self.y:.4f}, z={self.z:.4f}, w={self.w:.4f})"

    @classmethod
    def identity(cls) -> 'Quaternion':
        """단위 쿼터니언 (회전 없음)"""
        return cls(x=0.0, y=0.0, z=0.0, w=1.0)

    @classmethod
    def from_axis_angle(cls, axis: np.ndarray, angle_rad: float) -> 'Quaternion':
        """축-각도(라디안)에서 생성"""
        axis = np.asarray(axis, dtype=np.float64)
        axis = axis / np.linalg.norm(axis)
        half = angle_rad / 2
        sin_a = np.sin(half)
        return cls(
            x=float(axis[0] * sin_a),
            y=float(axis[1] * sin_a),
            z=float(axis[2] * sin_a),
            w=float(np.cos(half))
        )


@dataclass
class PoseSample:
    """
    타임스탬프가 붙은 자세 관측

    Attributes:
        timestamp: 초 단위 시각
        position: [x, y, z] 미터
        orientation: 단위 쿼터니언
        frame_id: 관측 기준 좌표계
    """
    timestamp: float
    position: np.ndarray
    orientation: Quaternion
    frame_id: str = "world"

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64).reshape(-1)

    def validate(self):
        """
        샘플 유효성 검사

        Raises:
            ValueError: 타임스탬프/위치/쿼터니언이 유한하지 않거나 형식이 잘못된 경우
        """
        if not np.isfinite(self.timestamp):
            raise ValueError(f"Non-finite timestamp: {self.timestamp}")
        if self.position.shape != (3,):
            raise ValueError(f"Expected 3D position, got shape {self.position.shape}")
        if not np.all(np.isfinite(self.position)):
            raise ValueError(f"Non-finite position at t={self.timestamp}: {self.position}")
        if not self.orientation.is_finite:
            raise ValueError(f"Non-finite orientation at t={self.timestamp}: {self.orientation}")
        if self.orientation.norm < 1e-10:
            raise ValueError(f"Zero-norm orientation at t={self.timestamp}")


@dataclass
class OdometryEstimate:
    """
    융합된 오도메트리 추정값

    Attributes:
        timestamp: 샘플 시각
        frame_id: 헤더 좌표계 (입력 샘플의 frame_id)
        child_frame_id: 자식 좌표계
        position: [x, y, z] 미터
        velocity: [vx, vy, vz] m/s
        position_covariance: 3x3
        velocity_covariance: 3x3
        orientation: 입력 쿼터니언 (필터링 없이 전달)
        angular_velocity: [wx, wy, wz] rad/s
        measurement_accepted: 이번 샘플이 보정에 사용되었는지
        statistic: 보정 전 Mahalanobis 거리 제곱
    """
    timestamp: float
    frame_id: str
    child_frame_id: str
    position: np.ndarray
    velocity: np.ndarray
    position_covariance: np.ndarray
    velocity_covariance: np.ndarray
    orientation: Quaternion
    angular_velocity: np.ndarray
    measurement_accepted: bool = True
    statistic: float = 0.0

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def shifted(self, origin: np.ndarray) -> 'OdometryEstimate':
        """origin 기준 상대 위치로 이동한 복사본 (나머지 필드는 공유)"""
        return replace(self, position=self.position - origin)

    def to_dict(self) -> Dict[str, Any]:
        """평탄화된 딕셔너리 (DataFrame 행)"""
        row = {
            'timestamp': self.timestamp,
            'frame_id': self.frame_id,
            'child_frame_id': self.child_frame_id,
            'x': self.position[0], 'y': self.position[1], 'z': self.position[2],
            'vx': self.velocity[0], 'vy': self.velocity[1], 'vz': self.velocity[2],
            'qx': self.orientation.x, 'qy': self.orientation.y,
            'qz': self.orientation.z, 'qw': self.orientation.w,
            'wx': self.angular_velocity[0],
            'wy': self.angular_velocity[1],
            'wz': self.angular_velocity[2],
            'speed': self.speed,
            'measurement_accepted': self.measurement_accepted,
            'statistic': self.statistic,
        }
        for i in range(3):
            for j in range(3):
                row[f'pose_cov_{i}{j}'] = self.position_covariance[i, j]
                row[f'twist_cov_{i}{j}'] = self.velocity_covariance[i, j]
        return row


@dataclass
class MocapPose:
    """프레임 ID가 재지정된 원본 자세 (pose-only 소비자용)"""
    timestamp: float
    frame_id: str
    position: np.ndarray
    orientation: Quaternion

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'frame_id': self.frame_id,
            'x': self.position[0], 'y': self.position[1], 'z': self.position[2],
            'qx': self.orientation.x, 'qy': self.orientation.y,
            'qz': self.orientation.z, 'qw': self.orientation.w,
        }


@dataclass
class FrameTransform:
    """부모 좌표계 -> child_frame_id 변환"""
    timestamp: float
    frame_id: str
    child_frame_id: str
    translation: np.ndarray
    rotation: Quaternion

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'frame_id': self.frame_id,
            'child_frame_id': self.child_frame_id,
            'translation': self.translation.tolist(),
            'rotation': self.rotation.to_dict(),
        }


@dataclass
class OdometryOutput:
    """샘플 하나에 대한 출력 묶음"""
    odom: OdometryEstimate
    local_odom: OdometryEstimate
    mocap: MocapPose
    transform: Optional[FrameTransform] = None
    sample_idx: int = 0
