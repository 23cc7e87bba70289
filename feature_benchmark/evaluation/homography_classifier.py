"""
匹配正确性分类器
基于鲁棒单应估计区分几何正确匹配与误匹配
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Sequence, List, Tuple
import cv2
import numpy as np

logger = logging.getLogger('FeatureBenchmark')

@dataclass
class ReprojectionError:
    """重投影误差统计"""
    mean: float
    std: float
    max: float
    min: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.mean, self.std, self.max, self.min)

@dataclass
class HomographyResult:
    """单应估计结果数据结构"""
    success: bool                                   # 是否找到单应
    homography: Optional[np.ndarray]                # 源图像 -> 变换图像 [3, 3]
    correct_matches: List[cv2.DMatch] = field(default_factory=list)  # 内点匹配
    inlier_mask: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=bool))

    @property
    def num_inliers(self) -> int:
        return len(self.correct_matches)

    def is_reliable(self, min_inliers: int = 4) -> bool:
        """内点数不少于min_inliers时认为估计可用"""
        return self.success and self.num_inliers >= min_inliers

def keypoint_coordinates(keypoints: Sequence, indices: Sequence[int]) -> np.ndarray:
    """按索引取关键点坐标 [N, 2]"""
    if len(indices) == 0:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([keypoints[i].pt for i in indices], dtype=np.float64)

class HomographyClassifier:
    """基于RANSAC单应估计的匹配分类器"""

    METHODS = {
        'RANSAC': cv2.RANSAC,
        'LMEDS': cv2.LMEDS,
        'RHO': cv2.RHO,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.config = config
        self.ransac_threshold = config.get('ransac_threshold', 3.0)
        self.min_matches = max(4, config.get('min_matches', 8))
        self.min_inliers = max(4, config.get('min_inliers', 4))
        self.max_iterations = config.get('ransac_max_iterations', 2000)
        self.confidence = config.get('ransac_confidence', 0.995)
        self.max_homography_error = config.get('max_homography_error', 1.0)

        self.ransac_method = config.get('ransac_method', 'RANSAC')
        if self.ransac_method not in self.METHODS:
            raise ValueError(f"Unknown homography estimation method: {self.ransac_method}")

    def find_homography(self, source_keypoints: Sequence, query_keypoints: Sequence,
                        matches: Sequence[cv2.DMatch]) -> HomographyResult:
        """
        从匹配中鲁棒估计单应并划分内点

        Args:
            source_keypoints: 源图像关键点（trainIdx）
            query_keypoints: 变换图像关键点（queryIdx）
            matches: 过滤后的匹配

        Returns:
            result: HomographyResult，失败时success=False
        """
        if len(matches) < self.min_matches:
            return HomographyResult(success=False, homography=None)

        src_points = keypoint_coordinates(source_keypoints, [m.trainIdx for m in matches])
        dst_points = keypoint_coordinates(query_keypoints, [m.queryIdx for m in matches])

        try:
            homography, mask = cv2.findHomography(
                src_points, dst_points,
                method=self.METHODS[self.ransac_method],
                ransacReprojThreshold=self.ransac_threshold,
                maxIters=self.max_iterations,
                confidence=self.confidence
            )
        except cv2.error as e:
            logger.debug(f"Homography estimation failed: {e}")
            return HomographyResult(success=False, homography=None)

        if homography is None or mask is None:
            return HomographyResult(success=False, homography=None)

        inlier_mask = mask.ravel().astype(bool)
        correct_matches = [m for m, inlier in zip(matches, inlier_mask) if inlier]

        result = HomographyResult(
            success=True,
            homography=homography.astype(np.float64),
            correct_matches=correct_matches,
            inlier_mask=inlier_mask
        )
        if not result.is_reliable(self.min_inliers):
            return HomographyResult(success=False, homography=None, inlier_mask=inlier_mask)

        return result

    def compute_reprojection_error(self, source_keypoints: Sequence, query_keypoints: Sequence,
                                   correct_matches: Sequence[cv2.DMatch],
                                   homography: np.ndarray) -> Optional[ReprojectionError]:
        """
        计算重投影误差

        变换图像中的点经单应逆矩阵映射回源图像，与对应源点求欧氏距离。
        匹配为空时返回None。
        """
        if len(correct_matches) == 0:
            return None

        src_points = keypoint_coordinates(source_keypoints, [m.trainIdx for m in correct_matches])
        dst_points = keypoint_coordinates(query_keypoints, [m.queryIdx for m in correct_matches])

        back_projected = cv2.perspectiveTransform(
            dst_points.reshape(-1, 1, 2), np.linalg.inv(homography)
        ).reshape(-1, 2)

        distances = np.linalg.norm(src_points - back_projected, axis=1)
        return ReprojectionError(
            mean=float(np.mean(distances)),
            std=float(np.std(distances)),
            max=float(np.max(distances)),
            min=float(np.min(distances))
        )

    def compute_homography_error(self, expected: np.ndarray, estimated: np.ndarray) -> float:
        """
        单应偏差: max|I - expected * estimated^-1|，截断到max_homography_error
        """
        try:
            r = np.asarray(expected, dtype=np.float64) @ np.linalg.inv(estimated)
        except np.linalg.LinAlgError:
            return float(self.max_homography_error)

        error = float(np.max(np.abs(np.eye(3) - r)))
        if not np.isfinite(error):
            return float(self.max_homography_error)
        return min(error, float(self.max_homography_error))

    @staticmethod
    def compute_distance_statistics(matches: Sequence[cv2.DMatch]) -> Optional[Tuple[float, float]]:
        """匹配描述子距离的均值和标准差"""
        if len(matches) == 0:
            return None
        distances = np.array([m.distance for m in matches], dtype=np.float64)
        return float(np.mean(distances)), float(np.std(distances))
