"""
Evaluation modules
"""

from .match_filter import ratio_test, ratio_test_false_level, DEFAULT_MAX_RATIO
from .homography_classifier import HomographyClassifier, HomographyResult, ReprojectionError

__all__ = [
    'ratio_test',
    'ratio_test_false_level',
    'DEFAULT_MAX_RATIO',
    'HomographyClassifier',
    'HomographyResult',
    'ReprojectionError'
]
