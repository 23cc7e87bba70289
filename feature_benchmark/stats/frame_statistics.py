"""
单次运行统计数据结构
每个(算法, 图像, 参数)评估结果及其序列
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Iterator, Tuple

class StatisticsElement(Enum):
    """可聚合的统计项"""
    POINTS_COUNT = 'points_count'
    PERCENT_OF_CORRECT_MATCHES = 'percent_of_correct_matches'
    PERCENT_OF_MATCHES = 'percent_of_matches'
    MEAN_DISTANCE = 'mean_distance'
    HOMOGRAPHY_ERROR = 'homography_error'
    MATCHING_RATIO = 'matching_ratio'
    PATTERN_LOCALIZATION = 'pattern_localization'
    RATIO_TEST_FALSE_LEVEL = 'ratio_test_false_level'
    CONSUMED_TIME = 'consumed_time'

@dataclass
class FrameMatchingStatistics:
    """单个(算法, 图像, 参数)的评估结果"""
    is_valid: bool = False
    argument_value: float = 0.0
    consumed_time_ms: Optional[float] = None
    total_keypoints: int = 0
    matches_count: int = 0
    percent_of_matches: Optional[float] = None
    correct_matches_count: int = 0
    correct_matches_percent: Optional[float] = None
    ratio_test_false_level: Optional[float] = None   # 仅knn算法
    mean_distance: Optional[float] = None
    std_dev_distance: Optional[float] = None
    reprojection_error: Optional[Tuple[float, float, float, float]] = None  # (mean, std, max, min)
    homography_error: Optional[float] = None

    @classmethod
    def invalid(cls, argument_value: float) -> 'FrameMatchingStatistics':
        """无效运行只记录参数值"""
        return cls(is_valid=False, argument_value=float(argument_value))

    @property
    def matching_ratio(self) -> Optional[float]:
        """正确匹配率 * 匹配率 * 100"""
        if self.correct_matches_percent is None or self.percent_of_matches is None:
            return None
        return self.correct_matches_percent * self.percent_of_matches * 100.0

    @property
    def pattern_localization(self) -> Optional[float]:
        """平均重投影误差"""
        if self.reprojection_error is None:
            return None
        return self.reprojection_error[0]

    def get(self, element: StatisticsElement) -> Optional[float]:
        """
        读取统计项

        无效记录对任何统计项都返回None
        """
        if not self.is_valid:
            return None

        if element is StatisticsElement.POINTS_COUNT:
            return float(self.total_keypoints)
        if element is StatisticsElement.PERCENT_OF_CORRECT_MATCHES:
            return self.correct_matches_percent
        if element is StatisticsElement.PERCENT_OF_MATCHES:
            return self.percent_of_matches
        if element is StatisticsElement.MEAN_DISTANCE:
            return self.mean_distance
        if element is StatisticsElement.HOMOGRAPHY_ERROR:
            return self.homography_error
        if element is StatisticsElement.MATCHING_RATIO:
            return self.matching_ratio
        if element is StatisticsElement.PATTERN_LOCALIZATION:
            return self.pattern_localization
        if element is StatisticsElement.RATIO_TEST_FALSE_LEVEL:
            return self.ratio_test_false_level
        if element is StatisticsElement.CONSUMED_TIME:
            return self.consumed_time_ms
        raise ValueError(f"Unsupported statistics element: {element}")

@dataclass
class SingleRunStatistics:
    """单个(算法, 图像)的统计序列，下标即参数下标"""
    entries: List[Optional[FrameMatchingStatistics]] = field(default_factory=list)

    @classmethod
    def sized(cls, count: int) -> 'SingleRunStatistics':
        """预分配count个槽位，供并行扫描按下标写入"""
        return cls(entries=[None] * count)

    def append(self, stat: FrameMatchingStatistics):
        self.entries.append(stat)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> Optional[FrameMatchingStatistics]:
        return self.entries[index]

    def __setitem__(self, index: int, stat: FrameMatchingStatistics):
        if self.entries[index] is not None:
            raise ValueError(f"Statistics slot {index} is already filled")
        self.entries[index] = stat

    def __iter__(self) -> Iterator[Optional[FrameMatchingStatistics]]:
        return iter(self.entries)

    def valid_entries(self) -> List[FrameMatchingStatistics]:
        return [s for s in self.entries if s is not None and s.is_valid]

    def argument_values(self) -> List[Optional[float]]:
        return [s.argument_value if s is not None else None for s in self.entries]
