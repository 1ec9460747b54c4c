"""
sinks.py - Odometry 출력 소비자

- MemorySink: 메모리에 누적 (테스트/후처리용)
- ResultExporter: odom / local_odom / mocap 결과를 CSV 또는 JSON으로 저장

Version: 1.0
Author: FurSys AI Team
"""

import json
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List
import logging

from ..measurement.pose_types import OdometryOutput

logger = logging.getLogger(__name__)


class MemorySink:
    """출력을 리스트에 누적"""

    def __init__(self):
        self.outputs: List[OdometryOutput] = []

    def emit(self, output: OdometryOutput):
        self.outputs.append(output)

    def __len__(self) -> int:
        return len(self.outputs)


class ResultExporter:
    """
    결과 파일 저장

    저장 파일:
    - odom.csv / local_odom.csv / mocap.csv  (output_format='csv')
    - odometry.json                          (output_format='json')

    Example:
        >>> exporter = ResultExporter("output")
        >>> odom = PoseOdometry.from_config(config, sink=exporter)
        >>> ...
        >>> exporter.save()
    """

    def __init__(self, output_dir: str, output_format: str = 'csv'):
        if output_format not in ('csv', 'json'):
            raise ValueError(f"Unsupported output format: {output_format}")
        self.output_dir = Path(output_dir)
        self.output_format = output_format
        self.results: List[OdometryOutput] = []

    def emit(self, output: OdometryOutput):
        self.add_result(output)

    def add_result(self, output: OdometryOutput):
        self.results.append(output)

    def to_dataframes(self) -> Dict[str, pd.DataFrame]:
        """odom / local_odom / mocap DataFrame"""
        return {
            'odom': pd.DataFrame([r.odom.to_dict() for r in self.results]),
            'local_odom': pd.DataFrame([r.local_odom.to_dict() for r in self.results]),
            'mocap': pd.DataFrame([r.mocap.to_dict() for r in self.results]),
        }

    def save(self) -> Path:
        """
        결과 저장

        Returns:
            CSV면 출력 디렉토리, JSON이면 파일 경로
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        if self.output_format == 'csv':
            for name, df in self.to_dataframes().items():
                df.to_csv(self.output_dir / f"{name}.csv", index=False)
            logger.info(f"Saved {len(self.results)} results to {self.output_dir}")
            return self.output_dir

        filepath = self.output_dir / 'odometry.json'
        records = []
        for r in self.results:
            records.append({
                'sample_idx': r.sample_idx,
                'odom': r.odom.to_dict(),
                'local_odom': r.local_odom.to_dict(),
                'mocap': r.mocap.to_dict(),
                'transform': r.transform.to_dict() if r.transform is not None else None,
            })
        with open(filepath, 'w') as f:
            json.dump(records, f, indent=2, default=_json_default)
        logger.info(f"Saved {len(self.results)} results to {filepath}")
        return filepath

    def get_summary(self) -> Dict[str, Any]:
        """요약 통계"""
        if not self.results:
            return {'num_samples': 0}

        speeds = np.array([r.odom.speed for r in self.results])
        rates = np.array([np.linalg.norm(r.odom.angular_velocity) for r in self.results])
        rejected = sum(1 for r in self.results if not r.odom.measurement_accepted)
        duration = self.results[-1].odom.timestamp - self.results[0].odom.timestamp

        return {
            'num_samples': len(self.results),
            'duration': float(duration),
            'rejected_measurements': rejected,
            'mean_speed': float(np.mean(speeds)),
            'max_speed': float(np.max(speeds)),
            'mean_angular_rate': float(np.mean(rates)),
            'final_local_position': self.results[-1].local_odom.position.tolist(),
        }


def _json_default(obj):
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
