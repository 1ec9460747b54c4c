"""
input 모듈 - pose 로그 입력
"""

from .pose_loader import PoseSampleLoader, REQUIRED_COLUMNS

__all__ = ['PoseSampleLoader', 'REQUIRED_COLUMNS']
