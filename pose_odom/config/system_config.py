"""
system_config.py - 시스템 설정 관리

pose_odom의 모든 설정을 통합 관리합니다.

Version: 1.0
Author: FurSys AI Team
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional
import logging

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class FilterConfig:
    """Kalman Filter 설정"""
    # 최대 예상 가속도 (m/s^2) - 프로세스 노이즈 크기
    max_accel: float = 5.0

    # 공칭 pose 수신 주기 (Hz) - 프로세스 노이즈 스케일용 dt = 1/gps_fps
    gps_fps: float = 20.0

    # 초기 공분산 = scale * I
    initial_covariance_scale: float = 1.0

    # 축별 위치 측정 표준편차 (m)
    measurement_noise_std: float = 1e-2

    # 각속도 미분 최소 dt (초)
    dt_floor: float = 1e-6

    @property
    def nominal_dt(self) -> float:
        return 1.0 / self.gps_fps


@dataclass
class GatingConfig:
    """측정값 게이트 설정"""
    enabled: bool = False
    confidence: float = 0.99


@dataclass
class OutputConfig:
    """출력 설정"""
    # 변환(tf) 출력
    publish_tf: bool = True
    child_frame_id: str = "base_link"

    # mocap 패킷 프레임 ID
    mocap_frame_id: str = "fcu"

    # 저장 옵션
    output_dir: str = "output"
    output_format: str = "csv"  # "csv" or "json"


@dataclass
class SystemConfig:
    """pose_odom 시스템 전체 설정"""
    filter: FilterConfig = field(default_factory=FilterConfig)
    gating: GatingConfig = field(default_factory=GatingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    log_level: str = "INFO"

    def validate(self):
        """
        설정 검증

        Raises:
            ConfigurationError: 값이 유효하지 않은 경우
        """
        f = self.filter
        if f.gps_fps <= 0:
            raise ConfigurationError(f"filter.gps_fps must be positive, got {f.gps_fps}")
        if f.max_accel < 0:
            raise ConfigurationError(f"filter.max_accel must be non-negative, got {f.max_accel}")
        if f.initial_covariance_scale <= 0:
            raise ConfigurationError(
                f"filter.initial_covariance_scale must be positive, got {f.initial_covariance_scale}"
            )
        if f.measurement_noise_std < 0:
            raise ConfigurationError(
                f"filter.measurement_noise_std must be non-negative, got {f.measurement_noise_std}"
            )
        if f.dt_floor < 0:
            raise ConfigurationError(f"filter.dt_floor must be non-negative, got {f.dt_floor}")

        if self.gating.enabled and not 0.0 < self.gating.confidence < 1.0:
            raise ConfigurationError(
                f"gating.confidence must be in (0, 1), got {self.gating.confidence}"
            )

        if self.output.publish_tf and not self.output.child_frame_id:
            raise ConfigurationError("output.child_frame_id required for publishing tf")
        if self.output.output_format not in ('csv', 'json'):
            raise ConfigurationError(
                f"output.output_format must be 'csv' or 'json', got {self.output.output_format}"
            )

    def save(self, filepath: str):
        """설정을 YAML 파일로 저장"""
        with open(filepath, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False)

        logger.info(f"Config saved to {filepath}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SystemConfig':
        """딕셔너리에서 설정 생성"""
        try:
            return cls(
                filter=FilterConfig(**(d.get('filter') or {})),
                gating=GatingConfig(**(d.get('gating') or {})),
                output=OutputConfig(**(d.get('output') or {})),
                log_level=d.get('log_level', 'INFO')
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid config: {e}") from e


def load_config(filepath: str) -> SystemConfig:
    """
    YAML 파일에서 설정 로드

    Args:
        filepath: 설정 파일 경로

    Returns:
        SystemConfig: 로드된 설정 (파일이 없으면 기본값)

    Raises:
        ConfigurationError: 값이 유효하지 않은 경우
    """
    path = Path(filepath)

    if not path.exists():
        logger.warning(f"Config file not found: {filepath}, using defaults")
        return SystemConfig()

    with open(path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return SystemConfig()

    config = SystemConfig.from_dict(config_dict)
    config.validate()
    return config


def create_default_config(save_path: Optional[str] = None) -> SystemConfig:
    """
    기본 설정 생성

    Args:
        save_path: 저장 경로 (None이면 저장 안함)
    """
    config = SystemConfig()

    if save_path:
        config.save(save_path)

    return config
