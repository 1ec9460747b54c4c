"""
fusion_driver.py - Pose 샘플 -> Odometry 융합 드라이버

샘플 하나당 처리 순서:
1. dt_process 계산 후 predict
2. 위치 측정값 추출
3. 보정 전 통계량(d^2) 계산 및 게이트 판정
4. dt_meas 계산 후 correct (채택된 경우)
5. 각속도 미분 (dt_process 사용)
6. 절대 좌표계 odometry 구성
7. 첫 관측 위치 기준 local odometry 구성
8. mocap 패킷 (원본 자세, 프레임 ID 재지정)
9. tf 변환 (publish_tf인 경우)

첫 샘플은 초기 상태를 정의하고, dt = 0으로 동일한 사이클을 거칩니다.

Version: 1.0
Author: FurSys AI Team
"""

import numpy as np
from typing import Iterable, Iterator, Optional, Protocol
import logging

from ..config.system_config import SystemConfig
from ..exceptions import ConfigurationError
from ..estimation.linear_kalman import (
    LinearKalmanFilter,
    process_noise_from_accel,
    measurement_noise_from_std
)
from ..estimation.angular_rate import AngularRateDifferentiator, DEFAULT_DT_FLOOR
from ..estimation.gating import MeasurementGate, accept_all, ChiSquareGate
from ..measurement.pose_types import (
    PoseSample,
    OdometryEstimate,
    MocapPose,
    FrameTransform,
    OdometryOutput
)

logger = logging.getLogger(__name__)


class OdometrySink(Protocol):
    """출력 소비자 (블로킹 emit 한 번)"""

    def emit(self, output: OdometryOutput) -> None:
        ...


class PoseOdometry:
    """
    Pose 스트림으로부터 위치/속도/각속도를 추정하는 융합 드라이버

    시간 추적 변수와 회전 이력은 모두 인스턴스 필드이므로
    여러 인스턴스(다중 객체 추적, 테스트)가 서로 간섭하지 않습니다.

    Example:
        >>> odom = PoseOdometry.from_config(SystemConfig())
        >>> for sample in PoseSampleLoader("poses.csv"):
        ...     out = odom.process(sample)
        ...     print(out.odom.velocity)
    """

    def __init__(
        self,
        max_accel: float = 5.0,
        gps_fps: float = 20.0,
        initial_covariance_scale: float = 1.0,
        measurement_noise_std: float = 1e-2,
        dt_floor: float = DEFAULT_DT_FLOOR,
        publish_tf: bool = True,
        child_frame_id: str = "base_link",
        mocap_frame_id: str = "fcu",
        gate: Optional[MeasurementGate] = None,
        sink: Optional[OdometrySink] = None
    ):
        """
        Args:
            max_accel: 최대 예상 가속도 (m/s^2)
            gps_fps: 공칭 샘플 주기 (Hz), 0보다 커야 함
            initial_covariance_scale: 초기 공분산 스케일, 0보다 커야 함
            measurement_noise_std: 위치 측정 표준편차 (m)
            dt_floor: 각속도 미분 최소 dt (초)
            publish_tf: tf 변환 생성 여부
            child_frame_id: tf 자식 좌표계
            mocap_frame_id: mocap 패킷 프레임 ID
            gate: 측정값 게이트 (None이면 accept_all)
            sink: 출력 소비자 (None이면 반환만)
        """
        if gps_fps <= 0:
            raise ConfigurationError(f"gps_fps must be positive, got {gps_fps}")
        if not np.isfinite(initial_covariance_scale) or initial_covariance_scale <= 0:
            raise ConfigurationError(
                f"initial_covariance_scale must be positive, got {initial_covariance_scale}"
            )
        if publish_tf and not child_frame_id:
            raise ConfigurationError("child_frame_id required for publishing tf")

        nominal_dt = 1.0 / gps_fps
        self.process_noise_diag = process_noise_from_accel(max_accel, nominal_dt)
        self.measurement_noise_diag = measurement_noise_from_std(measurement_noise_std)
        self.initial_covariance_scale = initial_covariance_scale

        self.publish_tf = publish_tf
        self.child_frame_id = child_frame_id
        self.mocap_frame_id = mocap_frame_id

        self.gate = gate or accept_all
        self.sink = sink

        self.estimator = LinearKalmanFilter()
        self.differentiator = AngularRateDifferentiator(dt_floor=dt_floor)

        self._origin: Optional[np.ndarray] = None
        self._last_process_time: Optional[float] = None
        self._last_measurement_time: Optional[float] = None
        self._sample_count = 0

        logger.info(
            f"PoseOdometry created: max_accel={max_accel}, gps_fps={gps_fps}, "
            f"publish_tf={publish_tf}, child_frame_id={child_frame_id}"
        )

    @classmethod
    def from_config(
        cls,
        config: SystemConfig,
        sink: Optional[OdometrySink] = None,
        gate: Optional[MeasurementGate] = None
    ) -> 'PoseOdometry':
        """
        설정에서 생성

        gate를 지정하지 않고 gating.enabled이면 ChiSquareGate를 사용합니다.

        Raises:
            ConfigurationError: 설정이 유효하지 않은 경우
        """
        config.validate()

        if gate is None and config.gating.enabled:
            gate = ChiSquareGate(confidence=config.gating.confidence)

        f = config.filter
        return cls(
            max_accel=f.max_accel,
            gps_fps=f.gps_fps,
            initial_covariance_scale=f.initial_covariance_scale,
            measurement_noise_std=f.measurement_noise_std,
            dt_floor=f.dt_floor,
            publish_tf=config.output.publish_tf,
            child_frame_id=config.output.child_frame_id,
            mocap_frame_id=config.output.mocap_frame_id,
            gate=gate,
            sink=sink
        )

    def _bootstrap(self, sample: PoseSample):
        """첫 샘플로 초기 상태 정의 (초기화 성공 후에만 기준점/시간 설정)"""
        initial_state = np.concatenate([sample.position, np.zeros(3)])
        self.estimator.initialize(
            initial_state,
            self.initial_covariance_scale,
            self.process_noise_diag,
            self.measurement_noise_diag
        )
        self._origin = sample.position.copy()
        self._last_process_time = sample.timestamp
        self._last_measurement_time = sample.timestamp
        logger.info(
            f"Initial position: {sample.position[0]:.4f}\t"
            f"{sample.position[1]:.4f}\t{sample.position[2]:.4f}"
        )

    def process(self, sample: PoseSample) -> OdometryOutput:
        """
        샘플 하나 처리

        Args:
            sample: 타임스탬프 자세 관측

        Returns:
            OdometryOutput (odom, local_odom, mocap, transform)

        Raises:
            ValueError: 샘플이 잘못되었거나 타임스탬프가 역행하는 경우
            NumericalSingularityError: 보정 중 S가 특이 행렬인 경우
        """
        sample.validate()

        if self._origin is None:
            self._bootstrap(sample)
        elif sample.timestamp < self._last_process_time:
            raise ValueError(
                f"Out-of-order sample: t={sample.timestamp} < last={self._last_process_time}"
            )

        # 1. 예측
        dt = sample.timestamp - self._last_process_time
        self._last_process_time = sample.timestamp
        self.estimator.predict(dt)

        # 2. 측정값
        measurement = sample.position.copy()

        # 3. 보정 전 통계량 및 게이트
        prior_state = self.estimator.state
        prior_cov = self.estimator.covariance
        statistic = self.estimator.mahalanobis_squared(measurement)
        accepted = bool(self.gate(measurement, prior_state, prior_cov, statistic))

        # 4. 보정
        if accepted:
            meas_dt = sample.timestamp - self._last_measurement_time
            self._last_measurement_time = sample.timestamp
            self.estimator.correct(measurement, meas_dt)
        else:
            logger.debug(f"Skipping correction at t={sample.timestamp:.4f} (d^2={statistic:.3f})")

        # 5. 각속도
        angular_velocity = self.differentiator.step(sample.orientation, dt)

        # 6. 절대 좌표계 odometry
        state = self.estimator.state
        odom = OdometryEstimate(
            timestamp=sample.timestamp,
            frame_id=sample.frame_id,
            child_frame_id=sample.frame_id,
            position=state[0:3],
            velocity=state[3:6],
            position_covariance=self.estimator.position_covariance,
            velocity_covariance=self.estimator.velocity_covariance,
            orientation=sample.orientation,
            angular_velocity=angular_velocity,
            measurement_accepted=accepted,
            statistic=statistic
        )

        # 7. 첫 관측 위치 기준 local odometry
        local_odom = odom.shifted(self._origin)

        # 8. mocap 패킷
        mocap = MocapPose(
            timestamp=sample.timestamp,
            frame_id=self.mocap_frame_id,
            position=sample.position.copy(),
            orientation=sample.orientation
        )

        # 9. tf
        transform = None
        if self.publish_tf:
            transform = FrameTransform(
                timestamp=sample.timestamp,
                frame_id=sample.frame_id,
                child_frame_id=self.child_frame_id,
                translation=odom.position.copy(),
                rotation=odom.orientation
            )

        output = OdometryOutput(
            odom=odom,
            local_odom=local_odom,
            mocap=mocap,
            transform=transform,
            sample_idx=self._sample_count
        )
        self._sample_count += 1

        logger.debug(
            f"t={sample.timestamp:.4f} dt={dt:.4f} pos={odom.position} "
            f"vel={odom.velocity} w={angular_velocity}"
        )

        if self.sink is not None:
            self.sink.emit(output)

        return output

    def run(self, samples: Iterable[PoseSample]) -> Iterator[OdometryOutput]:
        """샘플 스트림을 순서대로 처리"""
        for sample in samples:
            yield self.process(sample)

    @property
    def origin(self) -> Optional[np.ndarray]:
        """첫 관측 위치 (local odometry 기준점)"""
        return None if self._origin is None else self._origin.copy()

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def last_process_time(self) -> Optional[float]:
        return self._last_process_time

    @property
    def last_measurement_time(self) -> Optional[float]:
        return self._last_measurement_time
