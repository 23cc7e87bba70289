"""
Feature algorithm modules
"""

from .algorithm_base import FeatureAlgorithm
from .opencv_algorithm import OpenCVFeatureAlgorithm, create_algorithm, create_algorithms

__all__ = [
    'FeatureAlgorithm',
    'OpenCVFeatureAlgorithm',
    'create_algorithm',
    'create_algorithms'
]
