"""
跨运行统计聚合
算法 -> 图像 -> SingleRunStatistics 的显式键容器

同一容器内的所有序列共用一个变换模型，因此同一算法下不同图像的
序列按参数下标对齐。
"""

from typing import Dict, List, Optional, Iterator, Tuple
import numpy as np

from .frame_statistics import SingleRunStatistics, StatisticsElement

def _mean_or_none(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return float(np.mean(values))

class CollectedStatistics:
    """全部(算法, 图像)运行的统计集合"""

    def __init__(self, name: str = ''):
        self.name = name
        self._runs: Dict[str, Dict[str, SingleRunStatistics]] = {}

    def record_run(self, algorithm_name: str, image_id: str, run: SingleRunStatistics):
        """记录一个(算法, 图像)的完整序列，键必须唯一"""
        images = self._runs.setdefault(algorithm_name, {})
        if image_id in images:
            raise KeyError(f"Statistics for ({algorithm_name}, {image_id}) already recorded")
        images[image_id] = run

    def get_statistics(self, algorithm_name: str, image_id: str) -> SingleRunStatistics:
        """获取序列，不存在时创建空序列"""
        images = self._runs.setdefault(algorithm_name, {})
        return images.setdefault(image_id, SingleRunStatistics())

    def has_statistics(self, algorithm_name: str, image_id: str) -> bool:
        return image_id in self._runs.get(algorithm_name, {})

    @property
    def algorithm_names(self) -> List[str]:
        return list(self._runs.keys())

    def image_ids(self, algorithm_name: str) -> List[str]:
        return list(self._runs.get(algorithm_name, {}).keys())

    def __iter__(self) -> Iterator[Tuple[str, str, SingleRunStatistics]]:
        for algorithm_name, images in self._runs.items():
            for image_id, run in images.items():
                yield algorithm_name, image_id, run

    def __len__(self) -> int:
        return sum(len(images) for images in self._runs.values())

    def is_empty(self) -> bool:
        return len(self) == 0

    def argument_values(self) -> List[Optional[float]]:
        """参数列，取自第一个记录的序列"""
        for _, _, run in self:
            return run.argument_values()
        return []

    def average_across_images(self, element: StatisticsElement) -> Dict[str, List[Optional[float]]]:
        """
        按参数下标对各图像求平均

        Args:
            element: 统计项

        Returns:
            series: 算法名 -> 每个参数下标的平均值，无有效数据时为None
        """
        result = {}
        for algorithm_name, images in self._runs.items():
            length = max((len(run) for run in images.values()), default=0)
            series = []
            for index in range(length):
                values = []
                for run in images.values():
                    if index >= len(run) or run[index] is None:
                        continue
                    value = run[index].get(element)
                    # 无效记录和无数据项直接跳过，不按0计入
                    if value is not None:
                        values.append(value)
                series.append(_mean_or_none(values))
            result[algorithm_name] = series
        return result

    def average_per_algorithm(self, element: StatisticsElement) -> Dict[str, Optional[float]]:
        """每个算法在所有图像、所有参数上的平均值"""
        result = {}
        for algorithm_name, images in self._runs.items():
            values = []
            for run in images.values():
                for stat in run.valid_entries():
                    value = stat.get(element)
                    if value is not None:
                        values.append(value)
            result[algorithm_name] = _mean_or_none(values)
        return result

    def average_performance(self) -> Dict[str, Optional[float]]:
        """每个算法的平均耗时(ms)"""
        return self.average_per_algorithm(StatisticsElement.CONSUMED_TIME)

    def valid_run_ratio(self) -> Dict[str, Optional[float]]:
        """每个算法有效记录占比"""
        result = {}
        for algorithm_name, images in self._runs.items():
            total = sum(len(run) for run in images.values())
            valid = sum(len(run.valid_entries()) for run in images.values())
            result[algorithm_name] = valid / total if total > 0 else None
        return result
