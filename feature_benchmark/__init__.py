"""
Feature Benchmark: keypoint detector / descriptor / matcher robustness evaluation

Sweeps synthetic image transformations (blur, rotation, scaling, brightness)
with known ground-truth homographies and scores how well each OpenCV
feature pipeline recovers them.
"""

from .version import __version__
from .core.benchmark_runner import BenchmarkRunner
from .utils.config_manager import ConfigManager

__all__ = [
    '__version__',
    'BenchmarkRunner',
    'ConfigManager'
]

# Package metadata
__author__ = "LMGS Team"
__email__ = "team@lmgs.ai"
