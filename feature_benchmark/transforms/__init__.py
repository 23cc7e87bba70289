"""
Transformation modules
"""

from .transformation_base import ImageTransformation, discretize_range
from .image_transforms import (
    GaussianBlurTransform,
    BrightnessImageTransform,
    ImageRotationTransformation,
    ImageScalingTransformation,
    create_transformation,
    create_transformations
)

__all__ = [
    'ImageTransformation',
    'discretize_range',
    'GaussianBlurTransform',
    'BrightnessImageTransform',
    'ImageRotationTransformation',
    'ImageScalingTransformation',
    'create_transformation',
    'create_transformations'
]
