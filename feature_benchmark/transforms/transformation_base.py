"""
图像变换基类
定义合成变换模型的通用接口
"""

from abc import ABC, abstractmethod
from typing import List
import numpy as np

def discretize_range(min_value: float, max_value: float, step: float) -> List[float]:
    """
    按固定步长离散化[min, max]区间

    Args:
        min_value: 区间下界
        max_value: 区间上界（在浮点容差内包含）
        step: 步长，必须为正

    Returns:
        values: 有序参数序列
    """
    if step <= 0:
        raise ValueError(f"Step must be positive, got {step}")
    if max_value < min_value:
        raise ValueError(f"Invalid range: [{min_value}, {max_value}]")

    # 用整数计数避免浮点累加误差
    count = int(np.floor((max_value - min_value) / step + 1e-6)) + 1
    return [float(min_value + i * step) for i in range(count)]

class ImageTransformation(ABC):
    """图像变换基类"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def parameter_values(self) -> List[float]:
        """返回离散化后的参数序列"""
        pass

    @abstractmethod
    def transform(self, value: float, image: np.ndarray) -> np.ndarray:
        """
        对源图像应用参数为value的变换

        Args:
            value: 变换参数
            image: 源图像

        Returns:
            transformed: 变换后的图像
        """
        pass

    def ground_truth_homography(self, value: float, image: np.ndarray) -> np.ndarray:
        """源图像坐标到变换图像坐标的真值单应矩阵，默认单位阵"""
        return np.eye(3, dtype=np.float64)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
