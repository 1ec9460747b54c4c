"""
measurement 모듈 - 자세 데이터 타입 및 회전 변환

주요 기능:
- PoseSample / OdometryEstimate 등 입출력 데이터 타입
- 회전 표현(쿼터니언, scipy Rotation, 행렬) -> 회전 행렬 변환
"""

from .pose_types import (
    Quaternion,
    PoseSample,
    OdometryEstimate,
    MocapPose,
    FrameTransform,
    OdometryOutput
)

from .orientation import (
    to_rotation_matrix,
    quaternion_to_rotation_matrix
)

__all__ = [
    'Quaternion',
    'PoseSample',
    'OdometryEstimate',
    'MocapPose',
    'FrameTransform',
    'OdometryOutput',
    'to_rotation_matrix',
    'quaternion_to_rotation_matrix',
]
