"""
output 모듈 - 결과 출력
"""

from .sinks import MemorySink, ResultExporter

__all__ = ['MemorySink', 'ResultExporter']
