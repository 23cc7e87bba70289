"""
图像数据转换工具
处理图像读取和灰度转换
"""

from pathlib import Path
from typing import Optional, Union
import cv2
import numpy as np

class ImageProcessor:
    """图像读取和格式转换"""

    @staticmethod
    def load_image(image_path: Union[str, Path]) -> Optional[np.ndarray]:
        """读取图像，解码失败时返回None"""
        image = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
        if image is None or image.size == 0:
            return None
        return image

    @staticmethod
    def to_grayscale(image: np.ndarray) -> np.ndarray:
        """BGR/BGRA/灰度图统一转为单通道灰度图"""
        if image.ndim == 2:
            return image
        if image.ndim == 3 and image.shape[2] == 1:
            return image[:, :, 0]
        if image.ndim == 3 and image.shape[2] == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        if image.ndim == 3 and image.shape[2] == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        raise ValueError(f"Unsupported image shape: {image.shape}")

    @staticmethod
    def to_uint8(image: np.ndarray) -> np.ndarray:
        """将16位或浮点图像缩放到uint8"""
        if image.dtype == np.uint8:
            return image
        if np.issubdtype(image.dtype, np.floating):
            # 浮点图像约定取值范围[0, 1]
            return (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)
        return cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    @staticmethod
    def image_id(image_path: Union[str, Path]) -> str:
        """报告中使用的图像标识"""
        return Path(image_path).stem
