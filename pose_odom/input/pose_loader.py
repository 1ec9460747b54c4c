"""
pose_loader.py - 기록된 pose 로그(CSV) 로더

CSV 컬럼:
    timestamp, x, y, z, qx, qy, qz, qw [, frame_id]

입력 순서를 그대로 유지합니다 (정렬하지 않음).

Version: 1.0
Author: FurSys AI Team
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Iterator, List
import logging

from ..measurement.pose_types import PoseSample, Quaternion

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['timestamp', 'x', 'y', 'z', 'qx', 'qy', 'qz', 'qw']


class PoseSampleLoader:
    """
    CSV pose 로그 로더

    Example:
        >>> loader = PoseSampleLoader("poses.csv")
        >>> for sample in loader:
        ...     odom.process(sample)
    """

    def __init__(self, csv_path: str, default_frame_id: str = "world"):
        self.csv_path = Path(csv_path)
        self.default_frame_id = default_frame_id

        if not self.csv_path.exists():
            raise FileNotFoundError(f"Pose log not found: {csv_path}")

        self.df = pd.read_csv(self.csv_path)

        missing = [c for c in REQUIRED_COLUMNS if c not in self.df.columns]
        if missing:
            raise ValueError(f"Pose log {csv_path} missing columns: {missing}")

        logger.info(f"PoseSampleLoader: {len(self.df)} samples from {self.csv_path}")

    def __len__(self) -> int:
        return len(self.df)

    def load_sample(self, idx: int) -> PoseSample:
        """인덱스로 샘플 하나 로드"""
        row = self.df.iloc[idx]
        frame_id = self.default_frame_id
        if 'frame_id' in self.df.columns and isinstance(row['frame_id'], str):
            frame_id = row['frame_id']

        return PoseSample(
            timestamp=float(row['timestamp']),
            position=np.array([row['x'], row['y'], row['z']], dtype=np.float64),
            orientation=Quaternion(
                x=float(row['qx']),
                y=float(row['qy']),
                z=float(row['qz']),
                w=float(row['qw'])
            ),
            frame_id=frame_id
        )

    def __iter__(self) -> Iterator[PoseSample]:
        for idx in range(len(self)):
            yield self.load_sample(idx)

    def load_all(self) -> List[PoseSample]:
        return list(self)
