"""
odometry 모듈 - Pose 스트림 융합 드라이버
"""

from .fusion_driver import PoseOdometry, OdometrySink

__all__ = ['PoseOdometry', 'OdometrySink']
