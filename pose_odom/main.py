"""
main.py - pose_odom 실행 진입점

기록된 pose 로그(CSV)를 Kalman Filter 융합 드라이버로 재생하고
odom / local_odom / mocap 결과를 저장합니다.

사용법:
    pose_odom --poses poses.csv --config config/pose_odom.yaml --output_dir output

Version: 1.0
Author: FurSys AI Team
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config.system_config import SystemConfig, load_config
from .exceptions import ConfigurationError, NumericalSingularityError
from .input.pose_loader import PoseSampleLoader
from .odometry.fusion_driver import PoseOdometry
from .output.sinks import ResultExporter

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Run pose_odom Kalman Filter odometry')

    parser.add_argument(
        '--poses',
        type=str,
        required=True,
        help='pose 로그 CSV (timestamp,x,y,z,qx,qy,qz,qw[,frame_id])'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='설정 파일 경로'
    )
    parser.add_argument(
        '--output_dir',
        type=str,
        default=None,
        help='출력 디렉토리 (설정값 덮어쓰기)'
    )
    parser.add_argument(
        '--format',
        type=str,
        choices=['csv', 'json'],
        default=None,
        help='출력 형식 (설정값 덮어쓰기)'
    )
    parser.add_argument(
        '--max_samples',
        type=int,
        default=None,
        help='최대 처리 샘플 수'
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else SystemConfig()
        if args.output_dir:
            config.output.output_dir = args.output_dir
        if args.format:
            config.output.output_format = args.format
        config.validate()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Configuration error: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info(f"Loading poses from {args.poses}")
    try:
        loader = PoseSampleLoader(args.poses)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load pose log: {e}")
        return 1

    exporter = ResultExporter(config.output.output_dir, config.output.output_format)
    odom = PoseOdometry.from_config(config, sink=exporter)

    max_samples = len(loader) if args.max_samples is None else args.max_samples
    max_samples = min(max_samples, len(loader))

    logger.info(f"Processing {max_samples} samples...")

    i = 0
    try:
        for i in range(max_samples):
            result = odom.process(loader.load_sample(i))

            if i % 100 == 0 or i == max_samples - 1:
                p = result.local_odom.position
                logger.info(
                    f"Sample {i}: "
                    f"local_pos=[{p[0]:.3f}, {p[1]:.3f}, {p[2]:.3f}], "
                    f"speed={result.odom.speed:.3f} m/s"
                )
    except NumericalSingularityError as e:
        logger.error(f"Numerical failure at sample {i}: {e}")
        exporter.save()
        return 1
    except ValueError as e:
        logger.error(f"Invalid pose sample {i}: {e}")
        exporter.save()
        return 1

    filepath = exporter.save()
    logger.info(f"Results saved to {filepath}")

    summary = exporter.get_summary()
    for key, value in summary.items():
        logger.info(f"  {key}: {value}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
