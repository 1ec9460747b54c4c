"""
orientation.py - 회전 표현 -> 회전 행렬 변환

각속도 계산은 3x3 회전 행렬(곱셈/전치)만 필요하므로,
구체적인 회전 표현에 의존하지 않도록 여기서 한 번에 변환합니다.

지원 형식:
- Quaternion (pose_types)
- scipy.spatial.transform.Rotation
- 3x3 numpy 배열 (회전 행렬)
- 길이 4 시퀀스 [x, y, z, w]
- as_matrix() 또는 to_rotation_matrix()를 제공하는 임의 객체

Author: FurSys AI Team
"""

import numpy as np
from scipy.spatial.transform import Rotation
from typing import Any

from .pose_types import Quaternion


def quaternion_to_rotation_matrix(quat: Quaternion) -> np.ndarray:
    """쿼터니언에서 회전 행렬로 변환 (scipy가 정규화 수행)"""
    return Rotation.from_quat(quat.to_array()).as_matrix()


def to_rotation_matrix(orientation: Any) -> np.ndarray:
    """
    임의의 회전 표현을 3x3 회전 행렬로 변환

    Args:
        orientation: 지원 형식 중 하나

    Returns:
        3x3 회전 행렬 (float64)

    Raises:
        ValueError: 형식을 해석할 수 없거나 값이 유한하지 않은 경우
    """
    if isinstance(orientation, Quaternion):
        if not orientation.is_finite or orientation.norm < 1e-10:
            raise ValueError(f"Invalid quaternion: {orientation}")
        return quaternion_to_rotation_matrix(orientation)

    if isinstance(orientation, Rotation):
        return orientation.as_matrix()

    if hasattr(orientation, 'to_rotation_matrix'):
        R = np.asarray(orientation.to_rotation_matrix(), dtype=np.float64)
    elif hasattr(orientation, 'as_matrix'):
        R = np.asarray(orientation.as_matrix(), dtype=np.float64)
    else:
        arr = np.asarray(orientation, dtype=np.float64)
        if arr.shape == (4,):
            if not np.all(np.isfinite(arr)) or np.linalg.norm(arr) < 1e-10:
                raise ValueError(f"Invalid quaternion array: {arr}")
            return Rotation.from_quat(arr).as_matrix()
        R = arr

    if R.shape != (3, 3):
        raise ValueError(f"Expected 3x3 rotation matrix, got shape {R.shape}")
    if not np.all(np.isfinite(R)):
        raise ValueError("Rotation matrix contains non-finite values")
    return R
