"""
核心评测模块
"""

from .estimation import (
    SourceFeatures, FrameEvaluation, extract_source_features,
    evaluate_frame, perform_estimation, perform_comparison
)
from .benchmark_runner import BenchmarkRunner, MODES

__all__ = [
    'SourceFeatures',
    'FrameEvaluation',
    'extract_source_features',
    'evaluate_frame',
    'perform_estimation',
    'perform_comparison',
    'BenchmarkRunner',
    'MODES'
]
