"""
特征算法基类
定义检测器/描述子/匹配器组合的通用接口
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Sequence, Tuple
import cv2
import numpy as np

Keypoints = List[cv2.KeyPoint]
Matches = List[cv2.DMatch]

class FeatureAlgorithm(ABC):
    """特征算法基类"""

    def __init__(self, name: str, knn_match_supported: bool = False,
                 config: Optional[Dict[str, Any]] = None):
        self.name = name
        self.knn_match_supported = knn_match_supported
        self.config = config or {}

    @abstractmethod
    def extract_features(self, image: np.ndarray) -> Tuple[Keypoints, Optional[np.ndarray]]:
        """
        提取关键点和描述子

        Args:
            image: 灰度图像

        Returns:
            keypoints: 关键点列表，未检测到时为空列表
            descriptors: 描述子矩阵 [N, D]，未检测到时为None
        """
        pass

    @abstractmethod
    def match_features(self, train_descriptors: np.ndarray,
                       query_descriptors: np.ndarray) -> Matches:
        """最佳匹配，trainIdx指向源图像，queryIdx指向变换图像"""
        pass

    @abstractmethod
    def knn_match_features(self, train_descriptors: np.ndarray,
                           query_descriptors: np.ndarray, k: int = 2) -> List[Sequence[cv2.DMatch]]:
        """k近邻匹配，每个查询描述子返回按距离升序排列的候选"""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, knn={self.knn_match_supported})"
