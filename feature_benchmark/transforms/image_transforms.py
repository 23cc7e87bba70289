"""
具体图像变换实现
高斯模糊、亮度、旋转、缩放四类参数化变换
"""

from typing import Dict, Any, List, Tuple
import cv2
import numpy as np

from .transformation_base import ImageTransformation, discretize_range

class GaussianBlurTransform(ImageTransformation):
    """高斯模糊变换，参数为核半径"""

    def __init__(self, max_kernel_size: int = 9):
        super().__init__("Gaussian blur")
        self.max_kernel_size = int(max_kernel_size)

    def parameter_values(self) -> List[float]:
        return [float(i) for i in range(1, self.max_kernel_size + 1)]

    def transform(self, value: float, image: np.ndarray) -> np.ndarray:
        kernel_size = int(value) * 2 + 1
        return cv2.GaussianBlur(image, (kernel_size, kernel_size), 0)

class BrightnessImageTransform(ImageTransformation):
    """亮度变换，参数为加到每个像素上的偏移量（饱和运算）"""

    def __init__(self, min_shift: float = -127, max_shift: float = 127, step: float = 10):
        super().__init__("Brightness change")
        self.min_shift = min_shift
        self.max_shift = max_shift
        self.step = step

    def parameter_values(self) -> List[float]:
        return discretize_range(self.min_shift, self.max_shift, self.step)

    def transform(self, value: float, image: np.ndarray) -> np.ndarray:
        channels = 1 if image.ndim == 2 else image.shape[2]
        # cv2.add 对uint8做饱和截断
        return cv2.add(image, (float(value),) * channels + (0.0,) * (4 - channels))

class ImageRotationTransformation(ImageTransformation):
    """旋转变换，参数为角度（度）"""

    def __init__(self, start_angle: float = 0, end_angle: float = 360, step: float = 10,
                 rotation_center: Tuple[float, float] = (0.5, 0.5)):
        """
        初始化旋转变换

        Args:
            start_angle: 起始角度
            end_angle: 终止角度
            step: 角度步长
            rotation_center: 单位图像坐标下的旋转中心
        """
        super().__init__("Rotation")
        self.start_angle = start_angle
        self.end_angle = end_angle
        self.step = step
        self.rotation_center = tuple(rotation_center)

    def parameter_values(self) -> List[float]:
        return discretize_range(self.start_angle, self.end_angle, self.step)

    def _rotation_matrix(self, value: float, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        center = (w * self.rotation_center[0], h * self.rotation_center[1])
        return cv2.getRotationMatrix2D(center, float(value), 1.0)

    def transform(self, value: float, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        return cv2.warpAffine(image, self._rotation_matrix(value, image), (w, h))

    def ground_truth_homography(self, value: float, image: np.ndarray) -> np.ndarray:
        rot_mat = self._rotation_matrix(value, image)
        return np.vstack([rot_mat, [0.0, 0.0, 1.0]]).astype(np.float64)

class ImageScalingTransformation(ImageTransformation):
    """缩放变换，参数为缩放系数"""

    def __init__(self, min_scale: float = 0.25, max_scale: float = 2.0, step: float = 0.1):
        super().__init__("Scaling")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.step = step

    def parameter_values(self) -> List[float]:
        return discretize_range(self.min_scale, self.max_scale, self.step)

    @staticmethod
    def _target_size(value: float, image: np.ndarray) -> Tuple[int, int]:
        h, w = image.shape[:2]
        return max(1, int(round(w * value))), max(1, int(round(h * value)))

    def transform(self, value: float, image: np.ndarray) -> np.ndarray:
        return cv2.resize(image, self._target_size(value, image))

    def ground_truth_homography(self, value: float, image: np.ndarray) -> np.ndarray:
        # 取整后的实际缩放比例，cv2.resize按像素中心对齐: x' = sx*x + 0.5*(sx-1)
        h, w = image.shape[:2]
        new_w, new_h = self._target_size(value, image)
        sx, sy = new_w / w, new_h / h
        return np.array([
            [sx, 0.0, 0.5 * (sx - 1.0)],
            [0.0, sy, 0.5 * (sy - 1.0)],
            [0.0, 0.0, 1.0]
        ], dtype=np.float64)

TRANSFORMATION_TYPES = {
    'blur': GaussianBlurTransform,
    'brightness': BrightnessImageTransform,
    'rotation': ImageRotationTransformation,
    'scaling': ImageScalingTransformation,
}

def create_transformation(config: Dict[str, Any]) -> ImageTransformation:
    """根据配置项创建单个变换"""
    params = dict(config)
    transform_type = params.pop('type', None)
    if transform_type not in TRANSFORMATION_TYPES:
        raise ValueError(f"Unknown transformation type: {transform_type}")
    return TRANSFORMATION_TYPES[transform_type](**params)

def create_transformations(config_list: List[Dict[str, Any]]) -> List[ImageTransformation]:
    """根据配置列表创建变换"""
    return [create_transformation(item) for item in config_list]
