#!/usr/bin/env python3
"""
图像变换单元测试
测试参数离散化、变换结果和真值单应
"""

import pytest
import numpy as np
import cv2
from feature_benchmark.transforms import (
    discretize_range,
    ImageTransformation,
    GaussianBlurTransform,
    BrightnessImageTransform,
    ImageRotationTransformation,
    ImageScalingTransformation,
    create_transformation,
    create_transformations
)

def _intensity_centroid(image):
    """亮度加权质心 (x, y)"""
    weights = image.astype(np.float64)
    ys, xs = np.indices(weights.shape)
    total = weights.sum()
    return (xs * weights).sum() / total, (ys * weights).sum() / total

def _blob_image(shape, center, sigma=3.0):
    """以center为中心的高斯亮斑，float32"""
    ys, xs = np.indices(shape)
    dist2 = (xs - center[0]) ** 2 + (ys - center[1]) ** 2
    return np.exp(-dist2 / (2.0 * sigma ** 2)).astype(np.float32)

def _mapped_point(homography, point):
    src = np.array([[point]], dtype=np.float64)
    return cv2.perspectiveTransform(src, homography)[0, 0]

class TestDiscretizeRange:
    """discretize_range测试类"""

    def test_inclusive_maximum(self):
        assert discretize_range(0, 360, 10)[-1] == 360.0
        assert len(discretize_range(0, 360, 10)) == 37

    def test_floating_step(self):
        """浮点步长在容差内包含上界"""
        values = discretize_range(0.25, 2.0, 0.05)
        assert len(values) == 36
        assert values[-1] == pytest.approx(2.0)

    def test_single_value(self):
        assert discretize_range(1.0, 1.0, 0.5) == [1.0]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            discretize_range(0, 10, 0)
        with pytest.raises(ValueError):
            discretize_range(10, 0, 1)

class TestRotation:
    """ImageRotationTransformation测试类"""

    def setup_method(self):
        self.transform = ImageRotationTransformation(0, 360, 10)

    def test_parameter_values(self):
        values = self.transform.parameter_values()
        assert values[0] == 0.0
        assert values[-1] == 360.0

    def test_zero_rotation_is_identity(self, textured_image):
        rotated = self.transform.transform(0.0, textured_image)
        homography = self.transform.ground_truth_homography(0.0, textured_image)

        assert rotated.shape == textured_image.shape
        assert np.abs(rotated.astype(int) - textured_image.astype(int)).max() <= 1
        assert homography.dtype == np.float64
        assert np.allclose(homography, np.eye(3))

    def test_homography_maps_center_to_itself(self, textured_image):
        h, w = textured_image.shape
        homography = self.transform.ground_truth_homography(90.0, textured_image)
        center = np.array([[[w * 0.5, h * 0.5]]], dtype=np.float64)

        mapped = cv2.perspectiveTransform(center, homography)

        assert np.allclose(mapped, center)
        assert np.allclose(homography[2], [0.0, 0.0, 1.0])

    def test_custom_rotation_center(self, textured_image):
        transform = ImageRotationTransformation(0, 90, 90, rotation_center=(0.0, 0.0))
        homography = transform.ground_truth_homography(90.0, textured_image)
        origin = np.array([[[0.0, 0.0]]], dtype=np.float64)

        assert np.allclose(cv2.perspectiveTransform(origin, homography), origin)

    @pytest.mark.parametrize("angle", [30.0, 90.0, 215.0])
    def test_off_center_feature_follows_homography(self, angle):
        """偏离旋转中心的亮斑落在单应预测的位置"""
        image = _blob_image((120, 160), (50.0, 40.0))

        rotated = self.transform.transform(angle, image)
        homography = self.transform.ground_truth_homography(angle, image)

        expected = _mapped_point(homography, (50.0, 40.0))
        assert np.allclose(_intensity_centroid(rotated), expected, atol=0.05)
        # 确认确实偏离了原位置
        assert np.linalg.norm(expected - np.array([50.0, 40.0])) > 5.0

class TestScaling:
    """ImageScalingTransformation测试类"""

    def test_output_size_and_homography(self, textured_image):
        transform = ImageScalingTransformation(0.5, 2.0, 0.5)
        h, w = textured_image.shape

        scaled = transform.transform(0.5, textured_image)
        homography = transform.ground_truth_homography(0.5, textured_image)

        assert scaled.shape == (h // 2, w // 2)
        assert np.allclose(homography, [[0.5, 0.0, -0.25],
                                        [0.0, 0.5, -0.25],
                                        [0.0, 0.0, 1.0]])

    def test_single_pixel_centroid(self):
        """放大2倍后单个亮像素的质心与单应预测一致"""
        image = np.zeros((100, 100), dtype=np.uint8)
        image[40, 40] = 255
        transform = ImageScalingTransformation()

        scaled = transform.transform(2.0, image)
        homography = transform.ground_truth_homography(2.0, image)

        assert np.allclose(_mapped_point(homography, (40.0, 40.0)), [80.5, 80.5])
        assert np.allclose(_intensity_centroid(scaled), [80.5, 80.5], atol=0.05)

    @pytest.mark.parametrize("scale", [0.5, 0.75, 1.5])
    def test_off_center_feature_follows_homography(self, scale):
        image = _blob_image((120, 160), (50.0, 40.0))
        transform = ImageScalingTransformation()

        scaled = transform.transform(scale, image)
        homography = transform.ground_truth_homography(scale, image)

        expected = _mapped_point(homography, (50.0, 40.0))
        assert np.allclose(_intensity_centroid(scaled), expected, atol=0.05)

    def test_homography_uses_actual_ratio(self):
        """取整后的实际比例"""
        image = np.zeros((101, 99), dtype=np.uint8)
        transform = ImageScalingTransformation()

        scaled = transform.transform(0.5, image)
        homography = transform.ground_truth_homography(0.5, image)

        assert homography[0, 0] == pytest.approx(scaled.shape[1] / 99)
        assert homography[1, 1] == pytest.approx(scaled.shape[0] / 101)

class TestBlurAndBrightness:
    """模糊和亮度变换测试类"""

    def test_blur_values_and_identity_homography(self, textured_image):
        transform = GaussianBlurTransform(max_kernel_size=4)

        assert transform.parameter_values() == [1.0, 2.0, 3.0, 4.0]
        blurred = transform.transform(2.0, textured_image)
        assert blurred.shape == textured_image.shape
        assert np.array_equal(transform.ground_truth_homography(2.0, textured_image), np.eye(3))

    def test_brightness_saturates(self):
        image = np.array([[0, 100, 250]], dtype=np.uint8)
        transform = BrightnessImageTransform(-100, 100, 50)

        brighter = transform.transform(10, image)
        darker = transform.transform(-110, image)

        assert brighter.tolist() == [[10, 110, 255]]
        assert darker.tolist() == [[0, 0, 140]]

    def test_brightness_color_image(self):
        image = np.full((4, 4, 3), 200, dtype=np.uint8)
        transform = BrightnessImageTransform()

        assert transform.transform(100, image).max() == 255
        assert transform.transform(-50, image).max() == 150

class TestFactory:
    """变换工厂测试类"""

    def test_create_transformations(self):
        transformations = create_transformations([
            {'type': 'blur', 'max_kernel_size': 3},
            {'type': 'rotation', 'start_angle': 0, 'end_angle': 90, 'step': 45},
            {'type': 'scaling', 'min_scale': 0.5, 'max_scale': 1.0, 'step': 0.25},
            {'type': 'brightness', 'min_shift': -10, 'max_shift': 10, 'step': 10},
        ])

        assert [type(t) for t in transformations] == [
            GaussianBlurTransform, ImageRotationTransformation,
            ImageScalingTransformation, BrightnessImageTransform
        ]
        assert all(isinstance(t, ImageTransformation) for t in transformations)
        assert transformations[1].parameter_values() == [0.0, 45.0, 90.0]

    def test_config_not_mutated(self):
        config = {'type': 'blur', 'max_kernel_size': 3}
        create_transformation(config)
        assert config['type'] == 'blur'

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            create_transformation({'type': 'shear'})
