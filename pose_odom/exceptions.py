"""
exceptions.py - pose_odom 예외 정의

Author: FurSys AI Team
"""


class ConfigurationError(ValueError):
    """잘못된 설정 (시작 시점에 치명적)"""


class NumericalSingularityError(RuntimeError):
    """혁신 공분산 S가 역행렬을 가지지 않음 (보정 단계에서 치명적)"""
