"""
gating.py - 측정값 채택/기각 판정

보정 전 상태와 공분산으로 계산한 Mahalanobis 거리 제곱(d^2)을
받아 측정값을 보정에 사용할지 결정합니다.

게이트 시그니처:
    gate(measurement, state, covariance, statistic) -> bool

기본값은 accept_all (모든 측정값 채택).

Author: FurSys AI Team
"""

import numpy as np
from scipy.stats import chi2
from typing import Callable
import logging

logger = logging.getLogger(__name__)

MeasurementGate = Callable[[np.ndarray, np.ndarray, np.ndarray, float], bool]


def accept_all(
    measurement: np.ndarray,
    state: np.ndarray,
    covariance: np.ndarray,
    statistic: float
) -> bool:
    """모든 측정값 채택"""
    return True


class ChiSquareGate:
    """
    카이제곱 검정 게이트

    위치 측정(3 자유도)의 d^2가 chi2.ppf(confidence, 3) 이하이면 채택합니다.

    Example:
        >>> gate = ChiSquareGate(confidence=0.99)
        >>> gate.threshold
        11.344...
    """

    def __init__(self, confidence: float = 0.99, dof: int = 3):
        if not 0.0 < confidence < 1.0:
            raise ValueError(f"confidence must be in (0, 1), got {confidence}")
        self.confidence = confidence
        self.dof = dof
        self.threshold = float(chi2.ppf(confidence, dof))
        self.rejected_count = 0

        logger.info(f"ChiSquareGate: confidence={confidence}, threshold={self.threshold:.3f}")

    def __call__(
        self,
        measurement: np.ndarray,
        state: np.ndarray,
        covariance: np.ndarray,
        statistic: float
    ) -> bool:
        accepted = statistic <= self.threshold
        if not accepted:
            self.rejected_count += 1
            logger.warning(
                f"Measurement rejected: d^2={statistic:.3f} > {self.threshold:.3f}, "
                f"z={measurement}, predicted={state[:3]}"
            )
        return accepted
